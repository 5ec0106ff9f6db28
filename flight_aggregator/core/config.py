from enum import Enum
from functools import lru_cache
from typing import Optional
from urllib.parse import urlparse
import os

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class VendorFailurePolicy(str, Enum):
    """How the aggregation reacts when a vendor pipeline fails."""
    REQUIRE_ALL = "require_all"  # any vendor error fails the whole search
    BEST_EFFORT = "best_effort"  # rank whatever the healthy vendors returned


class CacheBackend(str, Enum):
    """Storage backends for the ranked response cache."""
    REDIS = "redis"
    MEMORY = "memory"


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Flight Aggregator"
    DEBUG: bool = False

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    # Amadeus (OAuth2 client credentials)
    AMADEUS_BASE_URL: str = "https://test.api.amadeus.com"
    AMADEUS_CLIENT_ID: str
    AMADEUS_CLIENT_SECRET: str

    # FlightSky (RapidAPI)
    FLIGHTSKY_BASE_URL: str = "https://flights-sky.p.rapidapi.com"
    FLIGHTSKY_API_KEY: str

    # Google Flights (RapidAPI)
    GOOGLE_FLIGHTS_BASE_URL: str = "https://google-flights2.p.rapidapi.com"
    GOOGLE_FLIGHTS_API_KEY: str

    # Vendor call settings
    VENDOR_TIMEOUT: float = 60.0  # seconds
    VENDOR_FAILURE_POLICY: VendorFailurePolicy = VendorFailurePolicy.REQUIRE_ALL

    # Cache settings
    CACHE_ENABLED: bool = True
    CACHE_BACKEND: CacheBackend = CacheBackend.REDIS
    CACHE_TTL: int = 30  # seconds
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None
    REDIS_PREFIX: str = "flight-aggregator"

    # Live updates
    LIVE_UPDATE_INTERVAL: float = 30.0  # seconds

    @field_validator(
        "AMADEUS_CLIENT_ID",
        "AMADEUS_CLIENT_SECRET",
        "FLIGHTSKY_API_KEY",
        "GOOGLE_FLIGHTS_API_KEY",
    )
    @classmethod
    def _credential_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("vendor credentials must be non-empty strings")
        return v.strip()

    @field_validator("AMADEUS_BASE_URL", "FLIGHTSKY_BASE_URL", "GOOGLE_FLIGHTS_BASE_URL")
    @classmethod
    def _base_url_valid(cls, v: str) -> str:
        """Require an absolute URL and drop any trailing slash."""
        parsed = urlparse(v)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"'{v}' is not an absolute URL")
        return v.rstrip("/")

    @field_validator("VENDOR_TIMEOUT", "CACHE_TTL", "LIVE_UPDATE_INTERVAL")
    @classmethod
    def _positive(cls, v):
        if v <= 0:
            raise ValueError("must be greater than 0")
        return v


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Missing vendor credentials raise a pydantic ``ValidationError`` here,
    which stops the application from starting.

    Returns:
        Settings: Application settings instance
    """
    return Settings()  # type: ignore[call-arg]
