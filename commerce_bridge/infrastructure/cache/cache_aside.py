import json
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

from commerce_bridge.adapters.interfaces.cache import CacheBackend
from commerce_bridge.core.exceptions import CacheError
from commerce_bridge.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# TTLs in seconds per kind of read
LIST_TTL = 60
DETAIL_TTL = 60
REPORT_TTL = 300
SETTINGS_TTL = 3600


class CacheAside:
    """
    Cache-aside layer shared by all tool modules.

    Backend failures never fail a call: a failed read is treated as a miss,
    failed writes and invalidations are logged and dropped. A dropped
    invalidation leaves the old entry in place until its TTL runs out.
    """

    def __init__(self, backend: CacheBackend, default_ttl: int = 300, enabled: bool = True):
        """
        Initialize the cache-aside layer.

        Args:
            backend: Store shared by the whole process
            default_ttl: TTL used when set() is called without one
            enabled: When False every read misses and nothing is stored
        """
        self.backend = backend
        self.default_ttl = default_ttl
        self.enabled = enabled

    async def open(self) -> None:
        """
        Connect the backend.

        An unreachable store is logged and tolerated: reads then miss and
        writes are dropped until it comes back.
        """
        try:
            await self.backend.open()
        except CacheError as e:
            logger.warning(
                f"Cache backend unavailable at startup, continuing without it: {e.message}",
                extra={"data": {"level": self.backend.level.value}}
            )

    async def close(self) -> None:
        await self.backend.close()

    @staticmethod
    def build_key(namespace: str, *parts: Any, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Derive a deterministic cache key.

        Args:
            namespace: Operation family, e.g. "products:list"
            *parts: Identifiers appended in order
            params: Query parameters, serialized with sorted keys

        Returns:
            Key such as "products:item:42" or 'products:list:{"page":1}'
        """
        segments = [namespace, *(str(part) for part in parts)]
        if params is not None:
            cleaned = {k: v for k, v in params.items() if v is not None}
            segments.append(json.dumps(cleaned, sort_keys=True, separators=(",", ":"), default=str))
        return ":".join(segments)

    async def get(self, key: str) -> Optional[Any]:
        if not self.enabled:
            return None

        try:
            return await self.backend.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed for {key}, treating as miss: {str(e)}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        if not self.enabled:
            return

        try:
            await self.backend.set(key, value, ttl if ttl is not None else self.default_ttl)
        except Exception as e:
            logger.warning(f"Cache write failed for {key}: {str(e)}")

    async def invalidate(self, key_or_pattern: str) -> None:
        """
        Remove one key, or every key matching a pattern when it contains "*".

        Args:
            key_or_pattern: Exact key or glob pattern
        """
        try:
            if "*" in key_or_pattern:
                removed = await self.backend.delete_pattern(key_or_pattern)
            else:
                removed = await self.backend.delete(key_or_pattern)
            logger.debug(f"Invalidated {removed} cache entries for {key_or_pattern}")
        except Exception as e:
            logger.warning(f"Cache invalidation failed for {key_or_pattern}: {str(e)}")

    async def invalidate_many(self, *keys_or_patterns: str) -> None:
        for key_or_pattern in keys_or_patterns:
            await self.invalidate(key_or_pattern)

    async def get_or_fetch(
        self,
        key: str,
        fetch: Callable[[], Awaitable[T]],
        ttl: Optional[int] = None
    ) -> T:
        """
        Return the cached value for key, or fetch, store and return it.

        Args:
            key: Cache key
            fetch: Coroutine function producing the value on a miss
            ttl: TTL in seconds for the stored value

        Returns:
            The cached or freshly fetched value
        """
        cached = await self.get(key)
        if cached is not None:
            return cached

        value = await fetch()
        if value is not None:
            await self.set(key, value, ttl)
        return value
