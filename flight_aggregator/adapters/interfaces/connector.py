from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from enum import Enum
import logging

import httpx

from flight_aggregator.core.exceptions import (
    VendorDecodeError,
    VendorTimeoutError,
    VendorTransportError,
)

logger = logging.getLogger(__name__)

# Truncate upstream bodies carried in error context
MAX_ERROR_BODY_LENGTH = 500

VALID_STATUS_CODES = frozenset({200, 201, 202, 204})


class AuthType(str, Enum):
    """Enum defining supported authentication types."""
    NONE = "none"
    API_KEY = "api_key"
    OAUTH2 = "oauth2"


class HttpMethod(str, Enum):
    """Enum defining supported HTTP methods."""
    GET = "GET"
    POST = "POST"


class RequestConfig:
    """Per-vendor request settings. Vendor calls are never retried."""

    def __init__(self, timeout: float = 60.0, verify_ssl: bool = True):
        """
        Initialize RequestConfig.

        Args:
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
        """
        self.timeout = timeout
        self.verify_ssl = verify_ssl


class APIConnector(ABC):
    """
    Base class for vendor HTTP connectors.

    Handles URL building, authentication headers, a single bounded-timeout
    call through a shared ``httpx.AsyncClient`` and status/JSON validation.
    Subclasses only decide how a request is authenticated.
    """

    auth_type: AuthType = AuthType.NONE

    def __init__(
        self,
        vendor_name: str,
        base_url: str,
        http_client: httpx.AsyncClient,
        config: Optional[RequestConfig] = None,
    ):
        self.vendor_name = vendor_name
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client
        self.config = config or RequestConfig()

    @abstractmethod
    async def authenticate(self) -> Dict[str, str]:
        """
        Returns the headers that authorize a request to this vendor.

        Raises:
            VendorAuthenticationError: If credentials cannot be obtained.
        """

    def build_url(self, path: str, version: Optional[str] = None) -> str:
        """
        Builds a complete URL from components.

        Args:
            path: The path to the specific resource
            version: Optional API version string

        Returns:
            str: The complete URL
        """
        url = self.base_url
        if version:
            url += f"/{version.strip('/')}"
        url += f"/{path.lstrip('/')}"
        return url

    async def request(
        self,
        method: HttpMethod,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        skip_auth: bool = False,
    ) -> Dict[str, Any]:
        """
        Makes one HTTP request and returns the decoded JSON body.

        Args:
            method: HTTP method to use
            path: Resource path relative to the base URL
            params: Optional query parameters
            data: Optional form-encoded body
            headers: Optional extra headers
            skip_auth: Do not attach authentication headers

        Returns:
            Dict[str, Any]: Decoded response body, empty for 204/empty bodies

        Raises:
            VendorTimeoutError: If the call exceeds the configured timeout
            VendorTransportError: On network errors or non-success status
            VendorDecodeError: If the body is not a JSON object
        """
        url = self.build_url(path)
        request_headers = {"Accept": "application/json"}
        if not skip_auth:
            request_headers.update(await self.authenticate())
        if headers:
            request_headers.update(headers)

        logger.debug(f"{self.vendor_name}: {method.value} {url} params={params}")

        try:
            response = await self.http_client.request(
                method.value,
                url,
                params=params,
                data=data,
                headers=request_headers,
                timeout=self.config.timeout,
            )
        except httpx.TimeoutException as e:
            logger.error(f"{self.vendor_name}: request to {url} timed out")
            raise VendorTimeoutError(self.vendor_name, self.config.timeout, original_exception=e)
        except httpx.RequestError as e:
            logger.error(f"{self.vendor_name}: request to {url} failed: {str(e)}")
            raise VendorTransportError(
                self.vendor_name,
                f"failed to execute request: {str(e)}",
                original_exception=e,
            )

        return self.handle_errors(response)

    def handle_errors(self, response: httpx.Response) -> Dict[str, Any]:
        """
        Validates the status code and decodes the JSON body.

        Args:
            response: The raw vendor response

        Returns:
            Dict[str, Any]: Decoded body

        Raises:
            VendorTransportError: If the status is not 200/201/202/204
            VendorDecodeError: If the body cannot be decoded
        """
        if response.status_code not in VALID_STATUS_CODES:
            body = response.text[:MAX_ERROR_BODY_LENGTH]
            logger.error(
                f"{self.vendor_name}: invalid status code {response.status_code} with body {body}"
            )
            raise VendorTransportError(
                self.vendor_name,
                f"invalid status code received, expected 200/204/201/202, got {response.status_code}",
                upstream_status=response.status_code,
                body=body,
            )

        if response.status_code == 204 or not response.content:
            return {}

        try:
            payload = response.json()
        except ValueError as e:
            raise VendorDecodeError(
                self.vendor_name, "unable to decode response body", original_exception=e
            )

        if not isinstance(payload, dict):
            raise VendorDecodeError(
                self.vendor_name, f"expected a JSON object, got {type(payload).__name__}"
            )
        return payload
