from typing import Dict, Optional
from urllib.parse import urlparse

from flight_aggregator.core.exceptions import VendorAuthenticationError
from flight_aggregator.core.logging import get_logger

logger = get_logger(__name__)


class RapidAPIKeyHandler:
    """Handles RapidAPI key authentication for external APIs."""

    def __init__(self, vendor_name: str, api_key: Optional[str], base_url: str):
        """
        Initialize the RapidAPI key handler.

        Args:
            vendor_name: Vendor the key belongs to, used in errors
            api_key: RapidAPI key
            base_url: Vendor base URL, used to derive the host header
        """
        self.vendor_name = vendor_name
        self.api_key = api_key
        self.host = self.host_from_url(base_url)

    def generate_headers(self) -> Dict[str, str]:
        """
        Generate the RapidAPI authentication headers.

        Returns:
            Header dict with ``x-rapidapi-key`` and ``x-rapidapi-host``

        Raises:
            VendorAuthenticationError: If the key is missing
        """
        if not self.api_key:
            logger.error(f"Missing RapidAPI key for {self.vendor_name}")
            raise VendorAuthenticationError(self.vendor_name, "RapidAPI key is required")

        return {
            "x-rapidapi-key": self.api_key,
            "x-rapidapi-host": self.host,
        }

    @staticmethod
    def host_from_url(base_url: str) -> str:
        """
        Strip the scheme from a base URL; RapidAPI expects the plain domain.

        Examples:
            >>> RapidAPIKeyHandler.host_from_url("https://flights-sky.p.rapidapi.com")
            'flights-sky.p.rapidapi.com'
        """
        parsed = urlparse(base_url)
        if parsed.netloc:
            return parsed.netloc
        return base_url.strip("/")
