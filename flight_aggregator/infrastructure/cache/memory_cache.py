import time
import threading
from typing import Dict, Optional

from pydantic import ValidationError

from flight_aggregator.adapters.interfaces.cache import CacheLevel, ResponseCache
from flight_aggregator.core.logging import get_logger
from flight_aggregator.domain.models import RankedResult

logger = get_logger(__name__)


class CacheItem:
    """Class representing a cached item with expiration."""

    def __init__(self, value: str, expires_at: Optional[float] = None):
        """
        Initialize a cache item.

        Args:
            value: JSON-encoded ranking
            expires_at: Expiration timestamp
        """
        self.value = value
        self.expires_at = expires_at

    def is_expired(self) -> bool:
        """
        Check if the item has expired.

        Returns:
            True if expired
        """
        if self.expires_at is None:
            return False
        return time.time() >= self.expires_at


class MemoryCache(ResponseCache):
    """
    In-memory implementation of the ResponseCache interface.

    Values are kept in the same JSON wire format the Redis cache uses, so
    every hit decodes a fresh copy. Expired items are dropped on read, and
    every write sweeps the expired items of other keys.
    """

    level = CacheLevel.MEMORY

    def __init__(self, default_ttl: int = 30):
        """
        Initialize the in-memory cache.

        Args:
            default_ttl: Default TTL in seconds
        """
        self.default_ttl = default_ttl

        # Dict to store cache items
        self._cache: Dict[str, CacheItem] = {}

        # Lock for thread safety
        self._lock = threading.RLock()

        logger.info("In-memory cache initialized")

    async def get(self, key: str) -> Optional[RankedResult]:
        """
        Get a ranking from the cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found or expired
        """
        with self._lock:
            item = self._cache.get(key)
            if item is None:
                logger.debug(f"Cache miss for key: {key}")
                return None

            if item.is_expired():
                del self._cache[key]
                logger.debug(f"Cache item expired for key: {key}")
                return None

            value = item.value

        try:
            result = RankedResult.from_json(value)
        except ValidationError as e:
            logger.error(f"Error deserializing cached value for key {key}: {str(e)}")
            return None

        logger.debug(f"Cache hit for key: {key}")
        return result

    async def set(self, key: str, value: RankedResult, ttl: Optional[int] = None) -> bool:
        """
        Set a ranking in the cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl: TTL in seconds

        Returns:
            True if successful
        """
        effective_ttl = ttl if ttl is not None else self.default_ttl
        expires_at = time.time() + effective_ttl

        with self._lock:
            self._cleanup_expired()
            self._cache[key] = CacheItem(value.to_json(), expires_at)

        logger.debug(f"Set cache key {key} with TTL {effective_ttl}s")
        return True

    def _cleanup_expired(self) -> None:
        """Clean up expired cache items. Callers hold the lock."""
        keys_to_delete = [key for key, item in self._cache.items() if item.is_expired()]

        for key in keys_to_delete:
            del self._cache[key]

        if keys_to_delete:
            logger.debug(f"Cleaned up {len(keys_to_delete)} expired cache items")

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
