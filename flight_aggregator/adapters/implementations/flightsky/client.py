from typing import Dict, Optional

import httpx

from flight_aggregator.adapters.implementations.flightsky.models import FlightSkyResponse
from flight_aggregator.adapters.interfaces.connector import AuthType, HttpMethod, RequestConfig
from flight_aggregator.adapters.interfaces.vendor import VendorClient
from flight_aggregator.core.exceptions import VendorTransportError
from flight_aggregator.core.logging import get_logger
from flight_aggregator.domain.models import SearchRequest
from flight_aggregator.infrastructure.auth import RapidAPIKeyHandler

logger = get_logger(__name__)

VENDOR_NAME = "flightsky"


class FlightSkyClient(VendorClient[FlightSkyResponse]):
    """Flights Sky (RapidAPI) one-way search client."""

    auth_type = AuthType.API_KEY

    SEARCH_PATH = "flights/search-one-way"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        http_client: httpx.AsyncClient,
        config: Optional[RequestConfig] = None,
    ):
        super().__init__(VENDOR_NAME, base_url, http_client, config)
        self.api_key_handler = RapidAPIKeyHandler(VENDOR_NAME, api_key, base_url)

    async def authenticate(self) -> Dict[str, str]:
        return self.api_key_handler.generate_headers()

    async def fetch(self, request: SearchRequest) -> FlightSkyResponse:
        params = {
            "fromEntityId": request.origin,
            "toEntityId": request.destination,
            "departDate": request.date.isoformat(),
            "adults": str(request.passenger_count),
            "currency": "USD",
            "stops": "direct",
        }
        payload = await self.request(HttpMethod.GET, self.SEARCH_PATH, params=params)
        response = self.decode(FlightSkyResponse, payload)

        if response.status is False:
            logger.error(f"{VENDOR_NAME} rejected the search: {response.message}")
            raise VendorTransportError(VENDOR_NAME, f"search failed: {response.message}")

        return response
