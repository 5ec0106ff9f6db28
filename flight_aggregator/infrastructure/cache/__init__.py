"""Response cache backends."""

from flight_aggregator.adapters.interfaces.cache import ResponseCache
from flight_aggregator.core.config import CacheBackend, Settings
from flight_aggregator.core.logging import get_logger
from flight_aggregator.infrastructure.cache.memory_cache import MemoryCache
from flight_aggregator.infrastructure.cache.null_cache import NullCache
from flight_aggregator.infrastructure.cache.redis_cache import RedisCache

logger = get_logger(__name__)


def create_cache(settings: Settings) -> ResponseCache:
    """
    Pick the cache backend once, at startup.

    Args:
        settings: Application settings

    Returns:
        ResponseCache: NullCache when caching is disabled, otherwise the
                       configured backend
    """
    if not settings.CACHE_ENABLED:
        logger.info("Response caching disabled")
        return NullCache()

    if settings.CACHE_BACKEND == CacheBackend.MEMORY:
        return MemoryCache(default_ttl=settings.CACHE_TTL)

    return RedisCache.from_settings(settings)


__all__ = ["RedisCache", "MemoryCache", "NullCache", "create_cache"]
