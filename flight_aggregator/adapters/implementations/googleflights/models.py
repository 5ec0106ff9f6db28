from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import Field

from flight_aggregator.adapters.interfaces.vendor import RawVendorModel


class GoogleAirport(RawVendorModel):
    airport_name: Optional[str] = None
    airport_code: Optional[str] = None
    time: Optional[datetime] = None


class GoogleDuration(RawVendorModel):
    # minutes, e.g. 1H23M is 83
    raw: Optional[float] = None
    text: Optional[str] = None


class GoogleFlight(RawVendorModel):
    departure_airport: Optional[GoogleAirport] = None
    arrival_airport: Optional[GoogleAirport] = None
    duration: Optional[GoogleDuration] = None
    airline: Optional[str] = None
    flight_number: Optional[str] = None
    aircraft: Optional[str] = None


class GoogleItinerary(RawVendorModel):
    duration: Optional[GoogleDuration] = None
    flights: Optional[List[GoogleFlight]] = None
    layovers: Optional[List[Any]] = None
    price: Optional[Union[float, str]] = None
    stops: Optional[int] = None
    booking_token: Optional[str] = None


class GoogleItineraries(RawVendorModel):
    top_flights: Optional[List[GoogleItinerary]] = Field(default=None, alias="topFlights")
    other_flights: Optional[List[GoogleItinerary]] = Field(default=None, alias="otherFlights")

    def all(self) -> List[GoogleItinerary]:
        """Top flights first, then the rest, as the vendor lists them."""
        return list(self.top_flights or []) + list(self.other_flights or [])


class GoogleFlightsData(RawVendorModel):
    itineraries: Optional[GoogleItineraries] = None


class GoogleFlightsResponse(RawVendorModel):
    """``{status, message, timestamp, data}`` envelope of ``GET api/v1/searchFlights``."""
    status: Optional[bool] = None
    message: Optional[Any] = None
    timestamp: Optional[Any] = None
    data: Optional[GoogleFlightsData] = None
