"""
Tool modules.

Each service groups the tools of one upstream resource family and runs them
through the validate, cache, retry and invalidate pipeline of ResourceService.
"""

from .base import ResourceService, ToolSpec, tool
from .registry import ServiceContext, ToolGroupRegistry, default_registry

__all__ = [
    'ResourceService',
    'ToolSpec',
    'tool',
    'ServiceContext',
    'ToolGroupRegistry',
    'default_registry',
]
