"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from flight_aggregator.core.config import CacheBackend, Settings, VendorFailurePolicy, get_settings

CREDENTIALS = {
    "AMADEUS_CLIENT_ID": "amadeus-id",
    "AMADEUS_CLIENT_SECRET": "amadeus-secret",
    "FLIGHTSKY_API_KEY": "sky-key",
    "GOOGLE_FLIGHTS_API_KEY": "google-key",
}


@pytest.fixture
def env(monkeypatch):
    for key, value in CREDENTIALS.items():
        monkeypatch.setenv(key, value)
    return monkeypatch


def test_loads_from_environment(env):
    settings = Settings(_env_file=None)

    assert settings.AMADEUS_CLIENT_ID == "amadeus-id"
    assert settings.GOOGLE_FLIGHTS_API_KEY == "google-key"


def test_defaults(env):
    for key in ("VENDOR_TIMEOUT", "CACHE_TTL", "VENDOR_FAILURE_POLICY", "CACHE_BACKEND", "AMADEUS_BASE_URL"):
        env.delenv(key, raising=False)

    settings = Settings(_env_file=None)

    assert settings.VENDOR_TIMEOUT == 60.0
    assert settings.CACHE_TTL == 30
    assert settings.VENDOR_FAILURE_POLICY == VendorFailurePolicy.REQUIRE_ALL
    assert settings.CACHE_BACKEND == CacheBackend.REDIS
    assert settings.AMADEUS_BASE_URL == "https://test.api.amadeus.com"


def test_policy_and_backend_from_environment(env):
    env.setenv("VENDOR_FAILURE_POLICY", "best_effort")
    env.setenv("CACHE_BACKEND", "memory")

    settings = Settings(_env_file=None)

    assert settings.VENDOR_FAILURE_POLICY == VendorFailurePolicy.BEST_EFFORT
    assert settings.CACHE_BACKEND == CacheBackend.MEMORY


@pytest.mark.parametrize("missing", sorted(CREDENTIALS))
def test_missing_credential_is_fatal(env, missing):
    env.delenv(missing)

    with pytest.raises(ValidationError) as exc_info:
        Settings(_env_file=None)

    assert missing in str(exc_info.value)


def test_blank_credential_is_fatal(env):
    env.setenv("FLIGHTSKY_API_KEY", "   ")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_base_url_trailing_slash_is_dropped(env):
    env.setenv("FLIGHTSKY_BASE_URL", "https://flights-sky.p.rapidapi.com/")

    assert Settings(_env_file=None).FLIGHTSKY_BASE_URL == "https://flights-sky.p.rapidapi.com"


def test_relative_base_url_is_rejected(env):
    env.setenv("AMADEUS_BASE_URL", "test.api.amadeus.com")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.parametrize("key", ["VENDOR_TIMEOUT", "CACHE_TTL", "LIVE_UPDATE_INTERVAL"])
def test_non_positive_durations_rejected(env, key):
    env.setenv(key, "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_settings_is_cached(env):
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
