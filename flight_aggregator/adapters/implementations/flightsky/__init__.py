"""Flights Sky (RapidAPI) integration."""

from flight_aggregator.adapters.implementations.flightsky.client import FlightSkyClient, VENDOR_NAME
from flight_aggregator.adapters.implementations.flightsky.models import FlightSkyResponse
from flight_aggregator.adapters.implementations.flightsky.normalizer import FlightSkyNormalizer

__all__ = ["FlightSkyClient", "FlightSkyNormalizer", "FlightSkyResponse", "VENDOR_NAME"]
