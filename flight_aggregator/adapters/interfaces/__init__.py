"""
Interfaces package for the flight aggregator.

This package contains the abstract base interfaces used to standardize how
flight vendors are called, normalized and cached.
"""

from .connector import APIConnector, AuthType, HttpMethod, RequestConfig
from .normalizer import (
    NormalizationContext,
    OfferNormalizer,
    minutes_between,
    parse_iso_duration_minutes,
)
from .vendor import FlightVendor, RawVendorModel, VendorClient
from .cache import CacheLevel, ResponseCache

__all__ = [
    # Connector interface
    'APIConnector',
    'AuthType',
    'HttpMethod',
    'RequestConfig',

    # Normalizer interface
    'NormalizationContext',
    'OfferNormalizer',
    'minutes_between',
    'parse_iso_duration_minutes',

    # Vendor interface
    'VendorClient',
    'FlightVendor',
    'RawVendorModel',

    # Cache interface
    'ResponseCache',
    'CacheLevel',
]
