from typing import Optional

import redis.asyncio as redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from flight_aggregator.adapters.interfaces.cache import CacheLevel, ResponseCache
from flight_aggregator.core.config import Settings
from flight_aggregator.core.logging import get_logger
from flight_aggregator.domain.models import RankedResult

logger = get_logger(__name__)


class RedisCache(ResponseCache):
    """Redis-based implementation of the ResponseCache interface."""

    level = CacheLevel.REDIS

    def __init__(
        self,
        client: redis.Redis,
        prefix: str = "flight-aggregator",
        default_ttl: int = 30,
    ):
        """
        Initialize the Redis cache.

        Args:
            client: Async Redis client
            prefix: Key prefix for namespacing
            default_ttl: Default TTL in seconds
        """
        self.client = client
        self.prefix = prefix
        self.default_ttl = default_ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisCache":
        """
        Build a cache with a connection pool configured from settings.

        The connection is opened lazily on first use.
        """
        connection_kwargs = {
            "host": settings.REDIS_HOST,
            "port": settings.REDIS_PORT,
            "db": settings.REDIS_DB,
        }

        # Add password if provided
        if settings.REDIS_PASSWORD:
            connection_kwargs["password"] = settings.REDIS_PASSWORD

        logger.info(f"Using Redis cache at {settings.REDIS_HOST}:{settings.REDIS_PORT}/{settings.REDIS_DB}")
        return cls(
            redis.Redis(**connection_kwargs),
            prefix=settings.REDIS_PREFIX,
            default_ttl=settings.CACHE_TTL,
        )

    def _build_key(self, key: str) -> str:
        """
        Build a prefixed cache key.

        Args:
            key: Original key

        Returns:
            Prefixed key
        """
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Optional[RankedResult]:
        """
        Get a ranking from the cache.

        Store errors and undecodable entries are logged and reported as a miss.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        prefixed_key = self._build_key(key)

        try:
            value = await self.client.get(prefixed_key)
        except RedisError as e:
            logger.error(f"Redis error getting key {key}: {str(e)}")
            return None

        if value is None:
            logger.debug(f"Cache miss for key: {prefixed_key}")
            return None

        try:
            result = RankedResult.from_json(value)
        except ValidationError as e:
            logger.error(f"Error deserializing cached value for key {prefixed_key}: {str(e)}")
            return None

        logger.debug(f"Cache hit for key: {prefixed_key}")
        return result

    async def set(self, key: str, value: RankedResult, ttl: Optional[int] = None) -> bool:
        """
        Set a ranking in the cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl: TTL in seconds

        Returns:
            True if successful, False if the store rejected the write
        """
        prefixed_key = self._build_key(key)
        effective_ttl = ttl if ttl is not None else self.default_ttl

        try:
            await self.client.setex(prefixed_key, effective_ttl, value.to_json())
        except RedisError as e:
            logger.error(f"Redis error setting key {key}: {str(e)}")
            return False

        logger.debug(f"Set cache key {prefixed_key} with TTL {effective_ttl}s")
        return True

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {str(e)}")
            return False

    async def close(self) -> None:
        await self.client.aclose()
