from typing import Optional

from fastapi import Query, status
from fastapi.requests import HTTPConnection

from flight_aggregator.core.exceptions import APIException
from flight_aggregator.core.logging import get_logger
from flight_aggregator.domain.models import SearchRequest
from flight_aggregator.services.aggregation_service import FlightAggregationService

# Initialize logger
logger = get_logger(__name__)


async def get_aggregation_service(connection: HTTPConnection) -> FlightAggregationService:
    """
    Dependency for providing the aggregation service built at startup.

    Works for both HTTP and WebSocket routes.

    Returns:
        FlightAggregationService: The application's service instance

    Raises:
        APIException: If the application has not finished starting
    """
    service = getattr(connection.app.state, "aggregation_service", None)
    if service is None:
        logger.error("Aggregation service requested before startup completed")
        raise APIException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Flight search is not available yet",
            code="service_unavailable"
        )
    return service


async def get_search_request(
    origin: Optional[str] = Query(None, description="Origin airport code, e.g. SYD"),
    destination: Optional[str] = Query(None, description="Destination airport code, e.g. BKK"),
    date: Optional[str] = Query(None, description="Departure date, YYYY-MM-DD"),
    adults: Optional[str] = Query(None, description="Number of adult passengers"),
) -> SearchRequest:
    """
    Build a search request from query parameters.

    Parameters arrive as plain strings so every problem is reported as an
    ``invalid_search_request`` error.

    Raises:
        InvalidSearchRequestError: If any parameter is missing or invalid
    """
    return SearchRequest.create(origin, destination, date, adults)
