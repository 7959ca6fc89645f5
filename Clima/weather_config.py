"""Static configuration for the weather client, loaded from the environment."""
import logging
import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5/weather"
DEFAULT_UNITS = "imperial"
UNITS_CHOICES = ("metric", "imperial", "standard")


@dataclass(frozen=True)
class WeatherConfig:
    """Process-wide provider settings, fixed for the lifetime of the app."""
    api_key: str
    units: str = DEFAULT_UNITS
    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = None  # None leaves the HTTP client default
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def endpoint(self) -> str:
        """Base endpoint carrying the API key and unit system."""
        return f"{self.base_url}?{urlencode({'appid': self.api_key, 'units': self.units})}"

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise SystemExit(f"Invalid {name}: {exc}") from exc


def load_config(units: Optional[str] = None, timeout: Optional[float] = None) -> WeatherConfig:
    """
    Build the configuration from a .env file and the process environment.

    Args:
        units: Unit system override (takes precedence over WEATHER_UNITS)
        timeout: HTTP timeout override in seconds (takes precedence over WEATHER_TIMEOUT)

    Returns:
        WeatherConfig: The loaded configuration

    Raises:
        SystemExit: If the API key is missing or a value is invalid
    """
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    if not api_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")

    units = units or os.getenv("WEATHER_UNITS", DEFAULT_UNITS)
    if units not in UNITS_CHOICES:
        raise SystemExit(f"Invalid WEATHER_UNITS: {units!r} (expected one of {', '.join(UNITS_CHOICES)})")

    if timeout is None:
        timeout = _optional_float("WEATHER_TIMEOUT")

    latitude = _optional_float("WEATHER_LAT")
    longitude = _optional_float("WEATHER_LON")
    if (latitude is None) != (longitude is None):
        raise SystemExit("WEATHER_LAT and WEATHER_LON must be set together")

    config = WeatherConfig(
        api_key=api_key,
        units=units,
        base_url=os.getenv("WEATHER_BASE_URL", DEFAULT_BASE_URL),
        timeout=timeout,
        latitude=latitude,
        longitude=longitude,
    )
    logging.info(
        "Configuration loaded: units=%s timeout=%s lat=%s lon=%s",
        config.units,
        config.timeout,
        config.latitude,
        config.longitude,
    )
    return config
