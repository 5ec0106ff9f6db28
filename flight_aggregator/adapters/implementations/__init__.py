"""
Vendor implementations package.

Each subpackage holds one flight vendor's raw models, client and normalizer.
"""

from flight_aggregator.adapters.implementations import amadeus, flightsky, googleflights
from flight_aggregator.adapters.implementations.amadeus import AmadeusClient, AmadeusNormalizer
from flight_aggregator.adapters.implementations.flightsky import FlightSkyClient, FlightSkyNormalizer
from flight_aggregator.adapters.implementations.googleflights import (
    GoogleFlightsClient,
    GoogleFlightsNormalizer,
)
from flight_aggregator.adapters.registry import VendorRegistration

VENDOR_AMADEUS = amadeus.VENDOR_NAME
VENDOR_FLIGHTSKY = flightsky.VENDOR_NAME
VENDOR_GOOGLE_FLIGHTS = googleflights.VENDOR_NAME

# Registration order is the order vendor results are merged in
VENDOR_IMPLEMENTATIONS = [
    VendorRegistration(
        name=VENDOR_AMADEUS,
        client_class=AmadeusClient,
        normalizer_class=AmadeusNormalizer,
        client_options=lambda s: {
            "base_url": s.AMADEUS_BASE_URL,
            "client_id": s.AMADEUS_CLIENT_ID,
            "client_secret": s.AMADEUS_CLIENT_SECRET,
        },
    ),
    VendorRegistration(
        name=VENDOR_FLIGHTSKY,
        client_class=FlightSkyClient,
        normalizer_class=FlightSkyNormalizer,
        client_options=lambda s: {
            "base_url": s.FLIGHTSKY_BASE_URL,
            "api_key": s.FLIGHTSKY_API_KEY,
        },
    ),
    VendorRegistration(
        name=VENDOR_GOOGLE_FLIGHTS,
        client_class=GoogleFlightsClient,
        normalizer_class=GoogleFlightsNormalizer,
        client_options=lambda s: {
            "base_url": s.GOOGLE_FLIGHTS_BASE_URL,
            "api_key": s.GOOGLE_FLIGHTS_API_KEY,
        },
    ),
]

__all__ = [
    # Client and normalizer classes
    "AmadeusClient",
    "AmadeusNormalizer",
    "FlightSkyClient",
    "FlightSkyNormalizer",
    "GoogleFlightsClient",
    "GoogleFlightsNormalizer",

    # Vendor identifiers
    "VENDOR_AMADEUS",
    "VENDOR_FLIGHTSKY",
    "VENDOR_GOOGLE_FLIGHTS",

    # Registrations
    "VENDOR_IMPLEMENTATIONS",
]
