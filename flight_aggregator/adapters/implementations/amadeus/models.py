from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from flight_aggregator.adapters.interfaces.vendor import RawVendorModel


class AmadeusModel(RawVendorModel):
    model_config = ConfigDict(alias_generator=to_camel)


class AmadeusEndpoint(AmadeusModel):
    iata_code: Optional[str] = None
    terminal: Optional[str] = None
    at: Optional[datetime] = None


class AmadeusSegment(AmadeusModel):
    departure: Optional[AmadeusEndpoint] = None
    arrival: Optional[AmadeusEndpoint] = None
    carrier_code: Optional[str] = None
    number: Optional[str] = None
    duration: Optional[str] = None
    number_of_stops: Optional[int] = None


class AmadeusItinerary(AmadeusModel):
    duration: Optional[str] = None
    segments: Optional[List[AmadeusSegment]] = None


class AmadeusPrice(AmadeusModel):
    currency: Optional[str] = None
    total: Optional[Union[str, float]] = None
    base: Optional[Union[str, float]] = None
    grand_total: Optional[Union[str, float]] = None


class AmadeusFlightOffer(AmadeusModel):
    id: Optional[str] = None
    one_way: Optional[bool] = None
    itineraries: Optional[List[AmadeusItinerary]] = None
    price: Optional[AmadeusPrice] = None
    validating_airline_codes: Optional[List[str]] = None


class AmadeusOffersResponse(AmadeusModel):
    """Envelope of ``GET v2/shopping/flight-offers``."""
    data: Optional[List[AmadeusFlightOffer]] = None


class AmadeusAirline(AmadeusModel):
    type: Optional[str] = None
    iata_code: Optional[str] = None
    icao_code: Optional[str] = None
    business_name: Optional[str] = None
    common_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.business_name or self.common_name or ""


class AmadeusAirlinesResponse(AmadeusModel):
    """Envelope of ``GET v1/reference-data/airlines``."""
    data: Optional[List[AmadeusAirline]] = None


class AmadeusSearchResult(AmadeusModel):
    """
    Raw result of one Amadeus search: the offers plus the airline names
    resolved for their validating carriers.
    """
    offers: List[AmadeusFlightOffer] = Field(default_factory=list)
    airlines: Dict[str, str] = Field(default_factory=dict)
