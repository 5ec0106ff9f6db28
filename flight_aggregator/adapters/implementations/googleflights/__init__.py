"""Google Flights (RapidAPI) integration."""

from flight_aggregator.adapters.implementations.googleflights.client import GoogleFlightsClient, VENDOR_NAME
from flight_aggregator.adapters.implementations.googleflights.models import GoogleFlightsResponse
from flight_aggregator.adapters.implementations.googleflights.normalizer import GoogleFlightsNormalizer

__all__ = ["GoogleFlightsClient", "GoogleFlightsNormalizer", "GoogleFlightsResponse", "VENDOR_NAME"]
