from abc import ABC, abstractmethod
from typing import Optional
from enum import Enum
import logging

from flight_aggregator.domain.models import RankedResult

logger = logging.getLogger(__name__)


class CacheLevel(str, Enum):
    """Enum defining cache storage levels."""
    NONE = "none"
    MEMORY = "memory"
    REDIS = "redis"


class ResponseCache(ABC):
    """
    Abstract base interface for the ranked response cache.

    Implementations never raise on store failures: a failed read is a miss
    and a failed write returns False.
    """

    level: CacheLevel = CacheLevel.NONE

    @abstractmethod
    async def get(self, key: str) -> Optional[RankedResult]:
        """
        Retrieves a cached ranking by key.

        Args:
            key: The key of the item to retrieve

        Returns:
            Optional[RankedResult]: A fresh copy of the cached value if
                                    found and not expired, None otherwise
        """

    @abstractmethod
    async def set(self, key: str, value: RankedResult, ttl: Optional[int] = None) -> bool:
        """
        Stores a ranking in the cache.

        Args:
            key: The key to store the value under
            value: The value to store
            ttl: Optional time-to-live in seconds

        Returns:
            bool: True if successfully cached, False otherwise
        """

    async def ping(self) -> bool:
        """Returns True when the backing store is reachable."""
        return True

    async def close(self) -> None:
        """Releases store connections."""
        return None
