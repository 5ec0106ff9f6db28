from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from flight_aggregator.adapters.interfaces.vendor import RawVendorModel


class FlightSkyModel(RawVendorModel):
    model_config = ConfigDict(alias_generator=to_camel)


class FlightSkyPlace(FlightSkyModel):
    id: Optional[str] = None
    flight_place_id: Optional[str] = None
    display_code: Optional[str] = None
    name: Optional[str] = None

    @property
    def code(self) -> Optional[str]:
        return self.display_code or self.flight_place_id or self.id


class FlightSkyCarrier(FlightSkyModel):
    id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    alternate_id: Optional[str] = None
    display_code: Optional[str] = None


class FlightSkySegment(FlightSkyModel):
    id: Optional[str] = None
    origin: Optional[FlightSkyPlace] = None
    destination: Optional[FlightSkyPlace] = None
    departure: Optional[datetime] = None
    arrival: Optional[datetime] = None
    duration_in_minutes: Optional[float] = None
    flight_number: Optional[str] = None
    marketing_carrier: Optional[FlightSkyCarrier] = None


class FlightSkyLeg(FlightSkyModel):
    id: Optional[str] = None
    origin: Optional[FlightSkyPlace] = None
    destination: Optional[FlightSkyPlace] = None
    duration_in_minutes: Optional[float] = None
    stop_count: Optional[int] = None
    departure: Optional[datetime] = None
    arrival: Optional[datetime] = None
    segments: Optional[List[FlightSkySegment]] = None


class FlightSkyPrice(FlightSkyModel):
    raw: Optional[Union[float, str]] = None
    formatted: Optional[str] = None


class FlightSkyItinerary(FlightSkyModel):
    id: Optional[str] = None
    price: Optional[FlightSkyPrice] = None
    legs: Optional[List[FlightSkyLeg]] = None


class FlightSkyData(FlightSkyModel):
    itineraries: Optional[List[FlightSkyItinerary]] = None


class FlightSkyResponse(FlightSkyModel):
    """``{status, message, data}`` envelope of ``GET flights/search-one-way``."""
    status: Optional[bool] = None
    message: Optional[Any] = None
    data: Optional[FlightSkyData] = None
