"""Authentication mechanisms for flight vendor integrations."""

from flight_aggregator.infrastructure.auth.oauth import OAuthHandler, OAuthToken
from flight_aggregator.infrastructure.auth.api_key import RapidAPIKeyHandler

__all__ = ["OAuthHandler", "OAuthToken", "RapidAPIKeyHandler"]
