"""
Interfaces package for Commerce Bridge.

Abstract bases shared by the upstream API clients and the cache stores.
"""

from .cache import CacheBackend, CacheLevel
from .connector import APIConnector, ApiResponse, AuthType, HttpMethod

__all__ = [
    # Connector interface
    'APIConnector',
    'ApiResponse',
    'AuthType',
    'HttpMethod',

    # Cache interface
    'CacheBackend',
    'CacheLevel',
]
