import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from flight_aggregator.adapters.interfaces.normalizer import OfferNormalizer
from flight_aggregator.adapters.interfaces.vendor import VendorClient
from flight_aggregator.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VendorRegistration:
    """
    How to build one vendor pipeline.

    Attributes:
        name: Vendor identifier
        client_class: VendorClient subclass
        normalizer_class: Matching OfferNormalizer subclass
        client_options: Extracts the client's constructor arguments
                        (base URL, credentials) from settings
    """
    name: str
    client_class: Type[VendorClient]
    normalizer_class: Type[OfferNormalizer]
    client_options: Callable[[Settings], Dict[str, Any]]


class VendorRegistry:
    """
    Registry of available vendor implementations.

    Maps vendor names to their registrations, in registration order. That
    order is the order vendor results are concatenated in.
    """

    def __init__(self):
        """
        Initialize an empty vendor registry.
        """
        self._vendors: Dict[str, VendorRegistration] = {}
        logger.debug("Initialized VendorRegistry")

    def register(self, registration: VendorRegistration) -> None:
        """
        Register a vendor implementation.

        Args:
            registration: The vendor's client, normalizer and settings mapping

        Raises:
            ValueError: If the name is invalid or already registered
        """
        if not registration.name or not isinstance(registration.name, str):
            raise ValueError("Vendor name must be a non-empty string")

        if not issubclass(registration.client_class, VendorClient):
            raise ValueError("Client class must be a subclass of VendorClient")

        if not issubclass(registration.normalizer_class, OfferNormalizer):
            raise ValueError("Normalizer class must be a subclass of OfferNormalizer")

        if registration.name in self._vendors:
            raise ValueError(f"Vendor '{registration.name}' is already registered")

        self._vendors[registration.name] = registration
        logger.info(f"Registered vendor: {registration.name}")

    def get(self, name: str) -> Optional[VendorRegistration]:
        """
        Retrieve a vendor registration by name.

        Args:
            name: Vendor identifier

        Returns:
            The registration if found, None otherwise
        """
        return self._vendors.get(name)

    def list(self) -> List[str]:
        """
        List all registered vendor names.

        Returns:
            List of registered vendor names
        """
        return list(self._vendors.keys())

    def is_registered(self, name: str) -> bool:
        return name in self._vendors

    def clear(self) -> None:
        """
        Clear all registered vendors.
        Primarily used for testing purposes.
        """
        self._vendors.clear()
        logger.debug("Cleared all registered vendors")
