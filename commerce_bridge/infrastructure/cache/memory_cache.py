import copy
import re
import time
from typing import Any, Callable, Dict, List, Optional

from commerce_bridge.adapters.interfaces.cache import CacheBackend, CacheLevel
from commerce_bridge.core.logging import get_logger

logger = get_logger(__name__)


class CacheItem:
    """Class representing a cached item with expiration."""

    def __init__(self, value: Any, expires_at: Optional[float] = None):
        """
        Initialize a cache item.

        Args:
            value: Cached value
            expires_at: Expiration timestamp on the cache clock
        """
        self.value = value
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        """
        Check if the item has expired.

        Returns:
            True if expired
        """
        if self.expires_at is None:
            return False
        return now >= self.expires_at


class MemoryCache(CacheBackend):
    """
    In-process implementation of the CacheBackend interface.

    Expiry is checked lazily on read. All access happens on the event loop
    thread, so no locking is needed.
    """

    level = CacheLevel.MEMORY

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        """
        Initialize the in-memory cache.

        Args:
            clock: Monotonic time source in seconds, replaceable in tests
        """
        self.clock = clock or time.monotonic
        self._cache: Dict[str, CacheItem] = {}
        logger.info("In-memory cache initialized")

    async def get(self, key: str) -> Any:
        """
        Get item from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found or expired
        """
        item = self._cache.get(key)

        if item is None:
            logger.debug(f"Cache miss for key: {key}")
            return None

        if item.is_expired(self.clock()):
            del self._cache[key]
            logger.debug(f"Cache miss (expired) for key: {key}")
            return None

        # Return deep copy of value to prevent mutations
        logger.debug(f"Cache hit for key: {key}")
        return copy.deepcopy(item.value)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """
        Set item in cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl: TTL in seconds, 0 or less means no expiry
        """
        expires_at = self.clock() + ttl if ttl > 0 else None
        self._cache[key] = CacheItem(value=copy.deepcopy(value), expires_at=expires_at)
        logger.debug(f"Set cache key {key} with TTL {ttl}s")

    async def delete(self, key: str) -> int:
        if self._cache.pop(key, None) is not None:
            logger.debug(f"Deleted cache key: {key}")
            return 1
        return 0

    async def delete_pattern(self, pattern: str) -> int:
        """
        Remove every key matching a pattern.

        Args:
            pattern: Key pattern, a trailing "*" acts as a prefix match

        Returns:
            Number of keys removed
        """
        keys = self.get_keys(pattern)
        for key in keys:
            del self._cache[key]

        logger.debug(f"Deleted {len(keys)} cache keys matching {pattern}")
        return len(keys)

    def get_keys(self, pattern: str = "*") -> List[str]:
        """
        List stored keys matching a pattern, expired entries included.

        "*" is the only wildcard, "?" and brackets match literally.
        """
        prefix = pattern[:-1]
        if pattern.endswith("*") and "*" not in prefix:
            return [key for key in self._cache if key.startswith(prefix)]
        matcher = re.compile(".*".join(re.escape(part) for part in pattern.split("*")), re.DOTALL)
        return [key for key in self._cache if matcher.fullmatch(key)]

    async def close(self) -> None:
        self._cache.clear()
