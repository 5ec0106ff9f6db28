from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Generic, List, Mapping, Optional, TypeVar
import logging
import re

from flight_aggregator.core.exceptions import OfferNormalizationError
from flight_aggregator.domain.models import CanonicalOffer, Location, Money

logger = logging.getLogger(__name__)

# Type variable for the vendor's raw response model
T = TypeVar('T')

ISO_DURATION_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


def parse_iso_duration_minutes(value: Optional[str]) -> Optional[float]:
    """
    Convert an ISO 8601 duration such as ``PT2H30M`` to minutes.

    Returns None for empty or unrecognised input.

    Examples:
        >>> parse_iso_duration_minutes("PT2H30M")
        150.0
        >>> parse_iso_duration_minutes("P1DT1H")
        1500.0
    """
    if not value:
        return None
    match = ISO_DURATION_PATTERN.match(value.strip())
    if not match or not any(match.groupdict().values()):
        return None
    parts = {k: int(v) if v else 0 for k, v in match.groupdict().items()}
    return float(parts["days"] * 1440 + parts["hours"] * 60 + parts["minutes"] + parts["seconds"] / 60)


def minutes_between(departure: datetime, arrival: datetime) -> float:
    """Elapsed minutes from departure to arrival."""
    return (arrival - departure).total_seconds() / 60


@dataclass(frozen=True)
class NormalizationContext:
    """
    Side information a normalizer needs besides the raw payload.

    Attributes:
        currency: Currency every vendor is queried in
        airline_names: Carrier code to display name, for vendors that
                       resolve airline names in a separate call
    """
    currency: str = "USD"
    airline_names: Mapping[str, str] = field(default_factory=dict)

    def airline_name(self, code: Optional[str]) -> str:
        """Resolved display name for a carrier code, empty when unknown."""
        if not code:
            return ""
        return self.airline_names.get(code, "")


class OfferNormalizer(Generic[T], ABC):
    """
    Base class for vendor offer normalizers.

    A normalizer is a pure mapping from one vendor's raw response model to
    canonical offers. Malformed itineraries are dropped; an unparseable
    price is a hard error for the whole vendor.

    Type Parameters:
        T: The vendor's raw response model
    """

    vendor_name: str = ""

    @abstractmethod
    def normalize(self, raw: T, ctx: NormalizationContext) -> List[CanonicalOffer]:
        """
        Maps a raw vendor response into canonical offers.

        Args:
            raw: Decoded vendor response
            ctx: Normalization context supplied by the vendor client

        Returns:
            List[CanonicalOffer]: Offers in the order the vendor listed them

        Raises:
            OfferNormalizationError: If a price cannot be parsed
        """

    def parse_amount(self, value: Any) -> Decimal:
        """
        Parse a vendor price into a non-negative fixed-point amount.

        Raises:
            OfferNormalizationError: If the value is not a finite,
                                     non-negative number
        """
        if isinstance(value, bool):
            raise OfferNormalizationError(self.vendor_name, f"invalid price {value!r}")
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise OfferNormalizationError(
                self.vendor_name, f"unable to parse price {value!r}", original_exception=e
            )
        if not amount.is_finite() or amount < 0:
            raise OfferNormalizationError(self.vendor_name, f"invalid price {value!r}")
        return amount

    def skip(self, reason: str) -> None:
        """Record a dropped itinerary."""
        logger.debug(f"{self.vendor_name}: skipping malformed itinerary: {reason}")

    def build_offer(
        self,
        *,
        airline_name: str,
        flight_number: str,
        departure_code: str,
        departure_time: datetime,
        arrival_code: str,
        arrival_time: datetime,
        duration_minutes: Optional[float],
        stop_count: int,
        price: Any,
        ctx: NormalizationContext,
    ) -> Optional[CanonicalOffer]:
        """
        Assemble a canonical offer, falling back to the elapsed time when
        the vendor gives no duration.

        Returns None when the itinerary turns out to be malformed.
        """
        amount = self.parse_amount(price)

        if duration_minutes is None:
            duration_minutes = minutes_between(departure_time, arrival_time)
        if duration_minutes < 0:
            self.skip(f"negative duration {duration_minutes}")
            return None

        return CanonicalOffer(
            airline_name=airline_name or "",
            flight_number=flight_number or "",
            departure=Location(airport_code=departure_code, timestamp=departure_time),
            arrival=Location(airport_code=arrival_code, timestamp=arrival_time),
            duration_minutes=float(duration_minutes),
            stop_count=max(stop_count, 0),
            price=Money(amount=amount, currency=ctx.currency),
        )
