from typing import Optional

from flight_aggregator.adapters.interfaces.cache import CacheLevel, ResponseCache
from flight_aggregator.domain.models import RankedResult


class NullCache(ResponseCache):
    """Cache used when caching is disabled: every read misses."""

    level = CacheLevel.NONE

    async def get(self, key: str) -> Optional[RankedResult]:
        return None

    async def set(self, key: str, value: RankedResult, ttl: Optional[int] = None) -> bool:
        return True
