"""Amadeus Self-Service flight offers integration."""

from flight_aggregator.adapters.implementations.amadeus.client import AmadeusClient, VENDOR_NAME
from flight_aggregator.adapters.implementations.amadeus.models import AmadeusSearchResult
from flight_aggregator.adapters.implementations.amadeus.normalizer import AmadeusNormalizer

__all__ = ["AmadeusClient", "AmadeusNormalizer", "AmadeusSearchResult", "VENDOR_NAME"]
