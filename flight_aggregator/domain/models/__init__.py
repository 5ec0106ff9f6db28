"""
Domain models package for the Flight Aggregator.

Models are immutable pydantic models so they can be shared across concurrent
pipelines and round-tripped through the response cache as JSON.
"""

from flight_aggregator.domain.models.offer import CanonicalOffer, Location, Money, RankedResult
from flight_aggregator.domain.models.search import SearchRequest

__all__ = [
    "CanonicalOffer",
    "Location",
    "Money",
    "RankedResult",
    "SearchRequest",
]
