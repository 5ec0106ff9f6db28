from fastapi import APIRouter, Depends, WebSocket, status
from starlette.websockets import WebSocketState

from flight_aggregator.api.dependencies import get_aggregation_service, get_search_request
from flight_aggregator.core.exceptions import InvalidSearchRequestError
from flight_aggregator.core.logging import get_logger, set_correlation_id
from flight_aggregator.domain.models import RankedResult, SearchRequest
from flight_aggregator.services.aggregation_service import FlightAggregationService

# Initialize router and logger
flights_router = APIRouter()
logger = get_logger(__name__)


@flights_router.get(
    "/search",
    response_model=RankedResult,
    status_code=status.HTTP_200_OK,
    summary="Best flight offers",
    description="Returns the offers of every vendor ranked cheapest-first and fastest-first."
)
async def search_flights(
    search: SearchRequest = Depends(get_search_request),
    service: FlightAggregationService = Depends(get_aggregation_service),
) -> RankedResult:
    """
    Search every vendor for a one-way route.

    Args:
        search: Validated search criteria
        service: Aggregation service

    Returns:
        RankedResult: Cheapest and fastest views of the same offers
    """
    logger.info(f"Flight search {search.origin}->{search.destination} on {search.date}")
    return await service.aggregate(search)


@flights_router.websocket("/subscribe")
async def subscribe_flights(
    websocket: WebSocket,
    service: FlightAggregationService = Depends(get_aggregation_service),
) -> None:
    """
    Push a fresh ranking for the queried route at a fixed interval.

    Takes the same query parameters as ``/search``. An invalid search is
    answered with one error payload and a policy-violation close.
    """
    set_correlation_id(websocket.headers.get("X-Correlation-ID"))
    await websocket.accept()

    params = websocket.query_params
    try:
        search = SearchRequest.create(
            params.get("origin"),
            params.get("destination"),
            params.get("date"),
            params.get("adults"),
        )
    except InvalidSearchRequestError as e:
        logger.warning(f"Rejected live update subscription: {e.detail}")
        await websocket.send_json(e.to_dict())
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    logger.info(f"Live updates for {search.origin}->{search.destination} on {search.date}")
    await service.watch(search, websocket.send_json)

    if (
        websocket.application_state == WebSocketState.CONNECTED
        and websocket.client_state == WebSocketState.CONNECTED
    ):
        await websocket.close()
