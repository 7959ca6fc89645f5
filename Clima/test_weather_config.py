"""Tests for configuration loading."""
from unittest.mock import patch

import pytest

from weather_config import DEFAULT_BASE_URL, WeatherConfig, load_config

ENV_VARS = (
    "WEATHER_API_KEY",
    "WEATHER_UNITS",
    "WEATHER_BASE_URL",
    "WEATHER_TIMEOUT",
    "WEATHER_LAT",
    "WEATHER_LON",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from the real environment and any .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    with patch("weather_config.load_dotenv"):
        yield monkeypatch


def test_endpoint_carries_key_and_units():
    config = WeatherConfig(api_key="abc123", units="metric")
    assert config.endpoint == f"{DEFAULT_BASE_URL}?appid=abc123&units=metric"


def test_defaults(clean_env):
    clean_env.setenv("WEATHER_API_KEY", "abc123")

    config = load_config()

    assert config.api_key == "abc123"
    assert config.units == "imperial"
    assert config.base_url == DEFAULT_BASE_URL
    assert config.timeout is None
    assert config.has_coordinates is False


def test_environment_values(clean_env):
    clean_env.setenv("WEATHER_API_KEY", "abc123")
    clean_env.setenv("WEATHER_UNITS", "metric")
    clean_env.setenv("WEATHER_TIMEOUT", "7.5")
    clean_env.setenv("WEATHER_LAT", "33.44")
    clean_env.setenv("WEATHER_LON", "-94.04")

    config = load_config()

    assert config.units == "metric"
    assert config.timeout == 7.5
    assert (config.latitude, config.longitude) == (33.44, -94.04)
    assert config.has_coordinates is True


def test_arguments_override_environment(clean_env):
    clean_env.setenv("WEATHER_API_KEY", "abc123")
    clean_env.setenv("WEATHER_UNITS", "metric")
    clean_env.setenv("WEATHER_TIMEOUT", "7.5")

    config = load_config(units="standard", timeout=3)

    assert config.units == "standard"
    assert config.timeout == 3


def test_missing_api_key():
    with pytest.raises(SystemExit) as exc_info:
        load_config()
    assert "WEATHER_API_KEY" in str(exc_info.value)


def test_invalid_units(clean_env):
    clean_env.setenv("WEATHER_API_KEY", "abc123")
    clean_env.setenv("WEATHER_UNITS", "kelvinish")

    with pytest.raises(SystemExit):
        load_config()


def test_invalid_coordinates(clean_env):
    clean_env.setenv("WEATHER_API_KEY", "abc123")
    clean_env.setenv("WEATHER_LAT", "north")
    clean_env.setenv("WEATHER_LON", "1.0")

    with pytest.raises(SystemExit) as exc_info:
        load_config()
    assert "WEATHER_LAT" in str(exc_info.value)


def test_half_configured_coordinates(clean_env):
    clean_env.setenv("WEATHER_API_KEY", "abc123")
    clean_env.setenv("WEATHER_LAT", "1.0")

    with pytest.raises(SystemExit):
        load_config()
