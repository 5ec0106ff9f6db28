import datetime as dt
from typing import Any, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from flight_aggregator.core.exceptions import InvalidSearchRequestError


class SearchRequest(BaseModel):
    """
    One-way flight search criteria.

    Built once at the system boundary and shared read-only by every vendor
    pipeline. Use ``create`` to get domain errors instead of pydantic ones.
    """

    model_config = ConfigDict(frozen=True)

    origin: str = Field(min_length=3, max_length=4)
    destination: str = Field(min_length=3, max_length=4)
    date: dt.date
    passenger_count: int = Field(ge=1)

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def _normalize_code(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("origin", "destination")
    @classmethod
    def _alpha_code(cls, v: str) -> str:
        if not v.isalpha():
            raise ValueError("airport code must contain letters only")
        return v

    @field_validator("date")
    @classmethod
    def _not_in_past(cls, v: dt.date) -> dt.date:
        if v < dt.date.today():
            raise ValueError("date must be today or in the future")
        return v

    @classmethod
    def create(
        cls,
        origin: Optional[str],
        destination: Optional[str],
        date: Any,
        passenger_count: Any,
    ) -> "SearchRequest":
        """
        Validate raw user input into a request.

        Raises:
            InvalidSearchRequestError: On the first invalid field
        """
        for field, value in (
            ("origin", origin),
            ("destination", destination),
            ("date", date),
            ("passenger_count", passenger_count),
        ):
            if value is None or (isinstance(value, str) and not value.strip()):
                raise InvalidSearchRequestError(f"{field} should not be empty", field=field)

        try:
            return cls(
                origin=origin,
                destination=destination,
                date=date,
                passenger_count=passenger_count,
            )
        except ValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error.get("loc") else None
            raise InvalidSearchRequestError(f"{field}: {error['msg']}", field=field) from e

    def cache_key(self, namespace: str = "flights:best") -> str:
        """
        Deterministic cache key, independent of field order.

        Example: ``flights:best:date=2025-05-09&destination=BKK&origin=SYD&passengers=1``
        """
        params = {
            "origin": self.origin,
            "destination": self.destination,
            "date": self.date.isoformat(),
            "passengers": str(self.passenger_count),
        }
        return f"{namespace}:{urlencode(sorted(params.items()))}"
