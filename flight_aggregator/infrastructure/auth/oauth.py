import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import httpx
from pydantic import BaseModel, ValidationError

from flight_aggregator.core.exceptions import VendorAuthenticationError, VendorTimeoutError
from flight_aggregator.core.logging import get_logger

logger = get_logger(__name__)

# Refresh this many seconds before the vendor-reported expiry
EXPIRY_LEEWAY_SECONDS = 30


class OAuthToken(BaseModel):
    """Model representing an OAuth token."""
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 1799
    expires_at: Optional[datetime] = None
    scope: Optional[str] = None

    def is_expired(self) -> bool:
        """Check if the token is expired."""
        if not self.expires_at:
            return False
        return datetime.now(timezone.utc) >= self.expires_at - timedelta(seconds=EXPIRY_LEEWAY_SECONDS)

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"


class OAuthHandler:
    """
    Handles the OAuth2 client-credentials exchange for a vendor.

    The token is cached until it expires. Concurrent callers share one
    exchange through an ``asyncio.Lock``.
    """

    def __init__(
        self,
        vendor_name: str,
        client_id: str,
        client_secret: str,
        token_url: str,
        http_client: httpx.AsyncClient,
        timeout: float = 60.0,
        scope: Optional[str] = None
    ):
        """
        Initialize the OAuth handler.

        Args:
            vendor_name: Vendor the credentials belong to, used in errors
            client_id: OAuth client ID
            client_secret: OAuth client secret
            token_url: URL to obtain tokens
            http_client: Shared HTTP client for requests
            timeout: Token request timeout in seconds
            scope: OAuth scope(s)
        """
        self.vendor_name = vendor_name
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = token_url
        self.http_client = http_client
        self.timeout = timeout
        self.scope = scope

        self._token: Optional[OAuthToken] = None
        self._lock = asyncio.Lock()

    async def get_token(self, grant_type: str = "client_credentials") -> OAuthToken:
        """
        Obtain an OAuth token, reusing the cached one while it is valid.

        Args:
            grant_type: OAuth grant type

        Returns:
            OAuth token

        Raises:
            VendorAuthenticationError: If token acquisition fails
            VendorTimeoutError: If the token endpoint does not answer in time
        """
        async with self._lock:
            if self._token and not self._token.is_expired():
                logger.debug(f"Using cached token for {self.vendor_name}")
                return self._token

            self._token = await self._request_token(grant_type)
            return self._token

    async def _request_token(self, grant_type: str) -> OAuthToken:
        data = {
            "grant_type": grant_type,
            "client_id": self.client_id,
            "client_secret": self.client_secret
        }
        if self.scope:
            data["scope"] = self.scope

        try:
            response = await self.http_client.post(
                self.token_url,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            logger.error(f"Token request to {self.vendor_name} timed out")
            raise VendorTimeoutError(self.vendor_name, self.timeout, original_exception=e)
        except httpx.RequestError as e:
            logger.error(f"Request error during token acquisition: {str(e)}")
            raise VendorAuthenticationError(
                self.vendor_name,
                f"failed to connect to token endpoint: {str(e)}",
                original_exception=e
            )

        if response.status_code != 200:
            logger.error(f"{self.vendor_name} token endpoint returned {response.status_code}")
            raise VendorAuthenticationError(
                self.vendor_name,
                f"token endpoint returned {response.status_code}",
                upstream_status=response.status_code,
                body=response.text[:500]
            )

        try:
            token_data = response.json()
            expires_in = int(token_data.get("expires_in", 1799))
            token_data["expires_at"] = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
            token = OAuthToken(**token_data)
        except (ValueError, TypeError, AttributeError, ValidationError) as e:
            logger.error(f"Unable to decode {self.vendor_name} token response: {str(e)}")
            raise VendorAuthenticationError(
                self.vendor_name,
                "unable to decode token response",
                original_exception=e
            )

        logger.info(f"Successfully obtained OAuth token for {self.vendor_name}")
        return token

    async def get_auth_header(self) -> Dict[str, str]:
        """
        Generate an Authorization header from the current token.

        Returns:
            Authorization header dict
        """
        token = await self.get_token()
        return {"Authorization": token.authorization}

    def invalidate(self) -> None:
        """Forget the cached token so the next call exchanges a new one."""
        self._token = None
