from datetime import datetime
from decimal import Decimal
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DomainModel(BaseModel):
    """Immutable base model with camelCase JSON aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Location(DomainModel):
    """An airport and the local time a flight is there."""

    airport_code: str
    timestamp: datetime


class Money(DomainModel):
    """Fixed-point amount in a 3-letter currency."""

    amount: Decimal = Field(ge=0)
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")


class CanonicalOffer(DomainModel):
    """
    Vendor-independent flight offer.

    Created by a normalizer from exactly one raw vendor itinerary. Offers
    carry no identity beyond their field values.
    """

    airline_name: str = ""
    flight_number: str = ""
    departure: Location
    arrival: Location
    duration_minutes: float = Field(ge=0)
    stop_count: int = Field(ge=0)
    price: Money


class RankedResult(DomainModel):
    """The same offers ordered cheapest-first and fastest-first."""

    cheapest: Tuple[CanonicalOffer, ...] = ()
    fastest: Tuple[CanonicalOffer, ...] = ()

    def to_json(self) -> str:
        """Cache wire format."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data) -> "RankedResult":
        return cls.model_validate_json(data)
