from typing import Any, Dict, Iterable, List, Optional

import httpx

from flight_aggregator.adapters.implementations.amadeus.models import (
    AmadeusAirlinesResponse,
    AmadeusFlightOffer,
    AmadeusOffersResponse,
    AmadeusSearchResult,
)
from flight_aggregator.adapters.interfaces.connector import AuthType, HttpMethod, RequestConfig
from flight_aggregator.adapters.interfaces.normalizer import NormalizationContext
from flight_aggregator.adapters.interfaces.vendor import VendorClient
from flight_aggregator.core.exceptions import VendorTransportError
from flight_aggregator.core.logging import get_logger
from flight_aggregator.domain.models import SearchRequest
from flight_aggregator.infrastructure.auth import OAuthHandler

logger = get_logger(__name__)

VENDOR_NAME = "amadeus"


class AmadeusClient(VendorClient[AmadeusSearchResult]):
    """
    Amadeus Self-Service flight offers client.

    Authenticates with an OAuth2 client-credentials token and resolves the
    validating airline names with a second reference-data call, so the
    aggregation never sees more than one fetch per vendor.
    """

    auth_type = AuthType.OAUTH2

    TOKEN_PATH = "v1/security/oauth2/token"
    OFFERS_PATH = "v2/shopping/flight-offers"
    AIRLINES_PATH = "v1/reference-data/airlines"

    def __init__(
        self,
        base_url: str,
        client_id: str,
        client_secret: str,
        http_client: httpx.AsyncClient,
        config: Optional[RequestConfig] = None,
    ):
        super().__init__(VENDOR_NAME, base_url, http_client, config)
        self.oauth = OAuthHandler(
            VENDOR_NAME,
            client_id,
            client_secret,
            self.build_url(self.TOKEN_PATH),
            http_client,
            timeout=self.config.timeout,
        )

    async def authenticate(self) -> Dict[str, str]:
        return await self.oauth.get_auth_header()

    async def request(
        self,
        method: HttpMethod,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        skip_auth: bool = False,
    ) -> Dict[str, Any]:
        """Drops the cached token when Amadeus rejects it, then re-raises."""
        try:
            return await super().request(method, path, params, data, headers, skip_auth)
        except VendorTransportError as e:
            if e.upstream_status == 401 and not skip_auth:
                logger.warning("Amadeus rejected the access token, a new one will be requested")
                self.oauth.invalidate()
            raise

    async def fetch(self, request: SearchRequest) -> AmadeusSearchResult:
        """
        Retrieves direct offers and the names of their validating airlines.

        Raises:
            VendorTransportError: If either call fails
            VendorDecodeError: If either response has an unexpected shape
        """
        params = {
            "originLocationCode": request.origin,
            "destinationLocationCode": request.destination,
            "departureDate": request.date.isoformat(),
            "adults": str(request.passenger_count),
            "nonStop": "true",
            # Amadeus defaults to EUR
            "currencyCode": "USD",
        }
        payload = await self.request(HttpMethod.GET, self.OFFERS_PATH, params=params)
        offers = self.decode(AmadeusOffersResponse, payload).data or []

        airlines = await self.retrieve_airlines(self.airline_codes(offers))
        return AmadeusSearchResult(offers=offers, airlines=airlines)

    async def retrieve_airlines(self, codes: List[str]) -> Dict[str, str]:
        """
        Resolves carrier codes to display names.

        Args:
            codes: IATA carrier codes; no call is made when empty

        Returns:
            Dict[str, str]: Code to ``businessName``, or ``commonName`` when
                            the business name is blank
        """
        if not codes:
            return {}

        payload = await self.request(
            HttpMethod.GET, self.AIRLINES_PATH, params={"airlineCodes": ",".join(codes)}
        )
        airlines = self.decode(AmadeusAirlinesResponse, payload).data or []
        return {a.iata_code: a.display_name for a in airlines if a.iata_code}

    @staticmethod
    def airline_codes(offers: Iterable[AmadeusFlightOffer]) -> List[str]:
        """Distinct validating airline codes in first-seen order."""
        seen: Dict[str, None] = {}
        for offer in offers:
            for code in offer.validating_airline_codes or []:
                if code:
                    seen.setdefault(code, None)
        return list(seen)

    def context_for(self, raw: AmadeusSearchResult) -> NormalizationContext:
        return NormalizationContext(airline_names=raw.airlines)
