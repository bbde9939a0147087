"""
HTTP surface of Commerce Bridge.

Only the webhook receiver lives here; tools are served over MCP stdio.
"""

from .webhooks import create_webhook_app, router

__all__ = [
    'create_webhook_app',
    'router',
]
