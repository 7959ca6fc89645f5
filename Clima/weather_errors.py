"""Error taxonomy for the weather client - every failure a request can end in."""
from typing import Optional


class WeatherError(Exception):
    """Base class for all weather client errors."""
    pass


class InputValidationError(WeatherError):
    """Raised when the search field is submitted without a city name."""
    pass


class TransportError(WeatherError):
    """Raised when the HTTP request never produced a response."""
    pass


class ParseError(WeatherError):
    """Raised when a response body does not match the provider schema."""
    pass


class ProviderResponseError(ParseError):
    """Raised when the provider answers with a non-success HTTP status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"OpenWeather API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class LocationError(WeatherError):
    """Raised when the current location is denied or unavailable."""
    pass


class MalformedURLError(WeatherError):
    """Raised when a request URL cannot be constructed."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url
