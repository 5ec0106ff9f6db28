import logging
from typing import List, Optional

import httpx

from flight_aggregator.adapters.interfaces.connector import RequestConfig
from flight_aggregator.adapters.interfaces.vendor import FlightVendor
from flight_aggregator.adapters.registry import VendorRegistry
from flight_aggregator.core.config import Settings
from flight_aggregator.core.exceptions import APIException

logger = logging.getLogger(__name__)


class VendorNotFoundError(APIException):
    """Raised when a vendor name has no registration."""

    def __init__(self, name: str):
        super().__init__(detail=f"Vendor '{name}' not found in registry", code="vendor_not_found")


def create_default_registry() -> VendorRegistry:
    """Registry holding every built-in vendor."""
    from flight_aggregator.adapters.implementations import VENDOR_IMPLEMENTATIONS

    registry = VendorRegistry()
    for registration in VENDOR_IMPLEMENTATIONS:
        registry.register(registration)
    return registry


class VendorFactory:
    """
    Factory for creating vendor pipelines.
    Uses a registry to instantiate the client and normalizer for a vendor.
    """

    def __init__(self, registry: Optional[VendorRegistry] = None):
        """
        Initialize the vendor factory with an optional registry.

        Args:
            registry: Optional registry of available vendors
        """
        self.registry = registry or create_default_registry()
        logger.info("Initialized VendorFactory")

    def create_vendor(self, name: str, settings: Settings, http_client: httpx.AsyncClient) -> FlightVendor:
        """
        Create a vendor pipeline with clients configured from settings.

        Args:
            name: Vendor to create
            settings: Application settings
            http_client: Shared HTTP client

        Returns:
            The vendor pipeline

        Raises:
            VendorNotFoundError: If the vendor is not registered
        """
        registration = self.registry.get(name)
        if not registration:
            logger.error(f"Vendor '{name}' not found in registry")
            raise VendorNotFoundError(name)

        client = registration.client_class(
            http_client=http_client,
            config=RequestConfig(timeout=settings.VENDOR_TIMEOUT),
            **registration.client_options(settings),
        )
        logger.info(f"Created {name} vendor pipeline")
        return FlightVendor(client, registration.normalizer_class())

    def create_all(self, settings: Settings, http_client: httpx.AsyncClient) -> List[FlightVendor]:
        """Create every registered vendor in registration order."""
        return [self.create_vendor(name, settings, http_client) for name in self.registry.list()]


def build_vendor_pipelines(
    settings: Settings,
    http_client: httpx.AsyncClient,
    registry: Optional[VendorRegistry] = None,
) -> List[FlightVendor]:
    """
    Build the vendor pipelines the aggregation service fans out to.

    Args:
        settings: Application settings
        http_client: HTTP client shared by every vendor
        registry: Optional registry, defaults to the built-in vendors

    Returns:
        List[FlightVendor]: Pipelines in registration order
    """
    return VendorFactory(registry).create_all(settings, http_client)
