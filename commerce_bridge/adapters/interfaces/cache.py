from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional


class CacheLevel(str, Enum):
    """Enum defining cache storage levels."""
    MEMORY = "memory"
    REDIS = "redis"


class CacheBackend(ABC):
    """
    Abstract base interface for cache stores.

    Backends store JSON-compatible values with an absolute expiry. Errors
    are raised as CacheError; the cache-aside layer decides how to recover.
    """

    level: CacheLevel

    async def open(self) -> None:
        """Acquire connections. Called once by the entry point."""

    async def close(self) -> None:
        """Release connections. Called once on shutdown."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Retrieves a cached value by key.

        Args:
            key: The key of the item to retrieve

        Returns:
            Optional[Any]: The cached value if present and not expired, None otherwise
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int) -> None:
        """
        Stores a value.

        Args:
            key: The key to store the value under
            value: JSON-compatible value
            ttl: Time-to-live in seconds
        """

    @abstractmethod
    async def delete(self, key: str) -> int:
        """
        Removes a single key.

        Returns:
            int: Number of keys removed
        """

    @abstractmethod
    async def delete_pattern(self, pattern: str) -> int:
        """
        Removes every key matching a pattern, e.g. "products:list:*".

        Args:
            pattern: Key pattern. "*" matches any run of characters, every
                other character matches itself

        Returns:
            int: Number of keys removed
        """
