"""
Adapters package for the flight aggregator.

This package contains components for integrating with flight vendors, including:
- Abstract interfaces that define the contracts for vendor clients and normalizers
- Concrete implementations for each vendor
- Factory and registry for building vendor pipelines
"""

from . import interfaces

from .factory import VendorFactory, build_vendor_pipelines
from .registry import VendorRegistration, VendorRegistry

__all__ = [
    'interfaces',
    'VendorFactory',
    'VendorRegistration',
    'VendorRegistry',
    'build_vendor_pipelines',
]
