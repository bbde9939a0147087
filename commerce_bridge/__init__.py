"""
Commerce Bridge - MCP tool server for WooCommerce and WordPress.

This package exposes a store's REST APIs as callable tools, signing every
request, retrying transient failures and caching reads.
"""

__version__ = "1.0.0"
