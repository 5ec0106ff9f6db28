"""
Services package for the flight aggregator.

This package contains the service classes that orchestrate vendor pipelines,
ranking and caching into the search use case.
"""

from flight_aggregator.services.aggregation_service import FlightAggregationService
from flight_aggregator.services.ranking import build_ranking

__all__ = ["FlightAggregationService", "build_ranking"]
