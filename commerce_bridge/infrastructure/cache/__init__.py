"""Caching implementations for Commerce Bridge."""

from commerce_bridge.infrastructure.cache.cache_aside import CacheAside
from commerce_bridge.infrastructure.cache.factory import create_cache_backend
from commerce_bridge.infrastructure.cache.memory_cache import MemoryCache
from commerce_bridge.infrastructure.cache.redis_cache import RedisCache

__all__ = ["CacheAside", "MemoryCache", "RedisCache", "create_cache_backend"]
