from commerce_bridge.adapters.interfaces.cache import CacheBackend
from commerce_bridge.core.config import Settings
from commerce_bridge.core.logging import get_logger
from commerce_bridge.infrastructure.cache.memory_cache import MemoryCache
from commerce_bridge.infrastructure.cache.redis_cache import RedisCache

logger = get_logger(__name__)


def create_cache_backend(settings: Settings) -> CacheBackend:
    """
    Create the process-wide cache store.

    The returned backend is not yet opened; the entry point owns its
    open/close lifecycle.

    Args:
        settings: Application settings

    Returns:
        RedisCache when USE_REDIS is enabled, MemoryCache otherwise
    """
    if settings.USE_REDIS:
        logger.info(f"Using Redis cache at {settings.REDIS_URL}")
        return RedisCache(url=settings.REDIS_URL, prefix=settings.CACHE_PREFIX)

    logger.info("Using in-process memory cache")
    return MemoryCache()
