import json
import re
from typing import Any, List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from commerce_bridge.adapters.interfaces.cache import CacheBackend, CacheLevel
from commerce_bridge.core.exceptions import CacheError
from commerce_bridge.core.logging import get_logger

logger = get_logger(__name__)

SCAN_COUNT = 500
DELETE_BATCH_SIZE = 500

_GLOB_SPECIALS = re.compile(r"([\\\[\]?*])")


def scan_pattern(pattern: str) -> str:
    """Escape glob metacharacters other than "*" for SCAN MATCH."""
    return "*".join(_GLOB_SPECIALS.sub(r"\\\1", part) for part in pattern.split("*"))


class RedisCache(CacheBackend):
    """Redis-based implementation of the CacheBackend interface."""

    level = CacheLevel.REDIS

    def __init__(
        self,
        url: str = "redis://localhost:6379",
        prefix: str = "commerce_bridge",
        client: Optional[Any] = None,
        **kwargs
    ):
        """
        Initialize the Redis cache.

        Args:
            url: Redis connection URL
            prefix: Key prefix for namespacing
            client: Pre-built asyncio Redis client, used instead of url when given
            **kwargs: Additional Redis connection options
        """
        self.url = url
        self.prefix = prefix
        self.client = client if client is not None else redis.Redis.from_url(url, decode_responses=True, **kwargs)

    def _build_key(self, key: str) -> str:
        """
        Build a prefixed cache key.

        Args:
            key: Original key

        Returns:
            Prefixed key
        """
        return f"{self.prefix}:{key}" if self.prefix else key

    async def open(self) -> None:
        """
        Check connectivity.

        Raises:
            CacheError: If Redis cannot be reached
        """
        try:
            await self.client.ping()
            logger.info("Successfully connected to Redis")
        except RedisError as e:
            logger.error(f"Redis connection error: {str(e)}")
            raise CacheError(f"Failed to connect to Redis: {str(e)}")

    async def close(self) -> None:
        try:
            await self.client.aclose()
            logger.info("Redis connection closed")
        except RedisError as e:
            logger.warning(f"Error closing Redis connection: {str(e)}")

    async def get(self, key: str) -> Any:
        """
        Get item from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found

        Raises:
            CacheError: If there is a Redis error
        """
        prefixed_key = self._build_key(key)

        try:
            value = await self.client.get(prefixed_key)
        except RedisError as e:
            logger.error(f"Redis error getting key {prefixed_key}: {str(e)}")
            raise CacheError(f"Redis error getting key {key}: {str(e)}")

        if value is None:
            logger.debug(f"Cache miss for key: {prefixed_key}")
            return None

        try:
            result = json.loads(value)
        except ValueError as e:
            logger.error(f"Error deserializing cached value for key {prefixed_key}: {str(e)}")
            return None

        logger.debug(f"Cache hit for key: {prefixed_key}")
        return result

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """
        Set item in cache with TTL.

        Args:
            key: Cache key
            value: JSON-compatible value
            ttl: TTL in seconds

        Raises:
            CacheError: If the value cannot be serialized or Redis fails
        """
        prefixed_key = self._build_key(key)

        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise CacheError(f"Value for key {key} is not JSON serializable: {str(e)}")

        try:
            if ttl > 0:
                await self.client.setex(prefixed_key, ttl, serialized)
            else:
                await self.client.set(prefixed_key, serialized)
            logger.debug(f"Set cache key {prefixed_key} with TTL {ttl}s")
        except RedisError as e:
            logger.error(f"Redis error setting key {prefixed_key}: {str(e)}")
            raise CacheError(f"Redis error setting key {key}: {str(e)}")

    async def delete(self, key: str) -> int:
        prefixed_key = self._build_key(key)

        try:
            return int(await self.client.delete(prefixed_key))
        except RedisError as e:
            logger.error(f"Redis error deleting key {prefixed_key}: {str(e)}")
            raise CacheError(f"Redis error deleting key {key}: {str(e)}")

    async def delete_pattern(self, pattern: str) -> int:
        """
        Remove every key matching a pattern.

        Iterates with SCAN so the whole keyspace is never loaded at once, and
        deletes in batches.

        Args:
            pattern: Key pattern relative to the key prefix, "*" is the only wildcard

        Returns:
            Number of keys removed

        Raises:
            CacheError: If there is a Redis error
        """
        prefixed_pattern = scan_pattern(self._build_key(pattern))
        deleted = 0
        batch: List[str] = []

        try:
            async for key in self.client.scan_iter(match=prefixed_pattern, count=SCAN_COUNT):
                batch.append(key)
                if len(batch) >= DELETE_BATCH_SIZE:
                    deleted += int(await self.client.delete(*batch))
                    batch = []

            if batch:
                deleted += int(await self.client.delete(*batch))
        except RedisError as e:
            logger.error(f"Redis error invalidating pattern {prefixed_pattern}: {str(e)}")
            raise CacheError(f"Redis error invalidating pattern {pattern}: {str(e)}")

        logger.debug(f"Deleted {deleted} cache keys matching {prefixed_pattern}")
        return deleted
