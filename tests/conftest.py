"""
Shared fixtures for the flight aggregator tests.

Provides settings with dummy credentials, a future travel date, canonical
offer builders and stub vendor pipelines.
"""

import asyncio
import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Optional

import pytest

from flight_aggregator.core.config import Settings
from flight_aggregator.core.logging import vendor_name
from flight_aggregator.domain.models import CanonicalOffer, Location, Money, SearchRequest


@pytest.fixture
def anyio_backend():
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    """Settings with dummy vendor credentials and an in-memory cache."""
    return Settings(
        AMADEUS_CLIENT_ID="amadeus-id",
        AMADEUS_CLIENT_SECRET="amadeus-secret",
        FLIGHTSKY_API_KEY="sky-key",
        GOOGLE_FLIGHTS_API_KEY="google-key",
        CACHE_BACKEND="memory",
        _env_file=None,
    )


@pytest.fixture
def travel_date() -> dt.date:
    """A departure date safely in the future."""
    return dt.date.today() + dt.timedelta(days=30)


@pytest.fixture
def search_request(travel_date) -> SearchRequest:
    """SYD -> BKK for one adult."""
    return SearchRequest.create("SYD", "BKK", travel_date.isoformat(), "1")


@pytest.fixture
def make_offer(travel_date):
    """Factory for canonical offers departing SYD at 08:00 on the travel date."""

    def _make(
        duration: float = 600,
        price: Any = "800",
        airline: str = "Qantas",
        flight_number: str = "QF1",
        currency: str = "USD",
    ) -> CanonicalOffer:
        departure = dt.datetime.combine(travel_date, dt.time(8, 0))
        return CanonicalOffer(
            airline_name=airline,
            flight_number=flight_number,
            departure=Location(airport_code="SYD", timestamp=departure),
            arrival=Location(airport_code="BKK", timestamp=departure + dt.timedelta(minutes=duration)),
            duration_minutes=duration,
            stop_count=0,
            price=Money(amount=Decimal(str(price)), currency=currency),
        )

    return _make


class StubVendor:
    """Vendor pipeline double returning fixed offers or raising."""

    def __init__(
        self,
        name: str,
        offers: Optional[List[CanonicalOffer]] = None,
        error: Optional[BaseException] = None,
        delay: float = 0,
    ):
        self.name = name
        self.offers = offers or []
        self.error = error
        self.delay = delay
        self.calls = 0
        self.cancelled = False
        self.seen_vendor_context: Optional[str] = None

    async def fetch_and_normalize(self, request: SearchRequest) -> List[CanonicalOffer]:
        self.calls += 1
        self.seen_vendor_context = vendor_name.get()
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return list(self.offers)

    def describe(self) -> Dict[str, Any]:
        return {"name": self.name, "auth_type": "none"}


@pytest.fixture
def make_vendor():
    """Factory for stub vendor pipelines."""
    return StubVendor
