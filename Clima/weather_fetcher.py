"""OpenWeather current-weather client that reports results to a delegate."""
import json
import logging
import math
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Optional, Union
from urllib.parse import quote, urlsplit

import requests

from weather_config import WeatherConfig
from weather_errors import (
    MalformedURLError,
    ParseError,
    ProviderResponseError,
    TransportError,
    WeatherError,
)
from weather_model import WeatherModel


def format_coordinate(value: float) -> str:
    """
    Format a coordinate as a plain decimal number.

    Matches str() for ordinary values but never uses exponent notation,
    e.g. 51.5074 -> "51.5074", 1e-05 -> "0.00001".

    Raises:
        MalformedURLError: If the value is not a finite number
    """
    value = float(value)
    if not math.isfinite(value):
        raise MalformedURLError(f"Coordinate is not a finite number: {value}")
    text = repr(value)
    if "e" in text or "E" in text:
        text = f"{value:.20f}".rstrip("0")
        if text.endswith("."):
            text += "0"
    return text


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_json(body: Union[bytes, str]) -> WeatherModel:
    """
    Parse a current-weather response body into a WeatherModel.

    Args:
        body: Raw response body

    Returns:
        WeatherModel: The parsed reading

    Raises:
        ParseError: If the body is not JSON or does not match the provider schema
    """
    try:
        data = json.loads(body)
    except (ValueError, TypeError, RecursionError) as e:
        raise ParseError(f"Response body is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("Response is not a JSON object")

    weather_array = data.get("weather")
    if not isinstance(weather_array, list) or not weather_array:
        raise ParseError("Response missing 'weather' array")
    condition = weather_array[0]
    condition_id = condition.get("id") if isinstance(condition, dict) else None
    if not isinstance(condition_id, int) or isinstance(condition_id, bool):
        raise ParseError("Weather condition missing integer 'id'")

    main_data = data.get("main")
    if not isinstance(main_data, dict):
        raise ParseError("Response missing 'main' block")
    temp = main_data.get("temp")
    if not _is_number(temp):
        raise ParseError("Response missing numeric 'main.temp'")
    try:
        temp = float(temp)
    except OverflowError as e:
        raise ParseError(f"Temperature out of range: {e}") from e
    if not math.isfinite(temp):
        raise ParseError("Response missing numeric 'main.temp'")

    name = data.get("name")
    if not isinstance(name, str):
        raise ParseError("Response missing 'name'")

    return WeatherModel(condition_id=condition_id, city_name=name, temperature=temp)


class WeatherFetcher:
    """
    Fetches current weather by city name or coordinates.

    Requests run on a background executor and return immediately. Each issued
    request ends in exactly one delegate notification:
    on_weather_updated(weather) or on_weather_failed(error). Overlapping
    requests are independent; nothing is de-duplicated or cancelled.
    """

    def __init__(self, config: WeatherConfig, executor: Optional[Executor] = None):
        """
        Initialize the fetcher.

        Args:
            config: Provider configuration (endpoint, API key, units, timeout)
            executor: Executor for network calls; a thread pool is created if omitted
        """
        self.config = config
        self.delegate = None
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="weather-fetch")

    def build_city_url(self, city_name: str) -> str:
        """Base endpoint plus a percent-encoded q= parameter."""
        try:
            encoded = quote(city_name, safe="")
        except (TypeError, UnicodeEncodeError) as e:
            raise MalformedURLError(f"Cannot encode city name {city_name!r}: {e}") from e
        return f"{self.config.endpoint}&q={encoded}"

    def build_coordinates_url(self, latitude: float, longitude: float) -> str:
        """Base endpoint plus lat= and lon= parameters."""
        return f"{self.config.endpoint}&lat={format_coordinate(latitude)}&lon={format_coordinate(longitude)}"

    def fetch_by_city(self, city_name: str) -> Optional[Future]:
        """Fetch weather for a city name. Returns None if no request was issued."""
        try:
            url = self.build_city_url(city_name)
        except MalformedURLError as e:
            logging.warning(f"Dropping city request: {e}")
            return None
        return self.perform_request(url)

    def fetch_by_coordinates(self, latitude: float, longitude: float) -> Optional[Future]:
        """Fetch weather for a coordinate pair. Returns None if no request was issued."""
        try:
            url = self.build_coordinates_url(latitude, longitude)
        except (MalformedURLError, TypeError, ValueError, OverflowError) as e:
            logging.warning(f"Dropping coordinate request: {e}")
            return None
        return self.perform_request(url)

    def perform_request(self, url: str) -> Optional[Future]:
        """
        Issue an asynchronous GET for the given URL.

        A malformed URL is dropped without notifying the delegate.

        Args:
            url: Fully built request URL

        Returns:
            Future of the background request, or None if the URL was malformed
        """
        try:
            self._validate_url(url)
        except MalformedURLError as e:
            logging.warning(f"Dropping request with malformed URL: {e}")
            return None
        return self._executor.submit(self._run_request, url)

    def close(self) -> None:
        """Shut down the executor if this fetcher created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    @staticmethod
    def _validate_url(url: str) -> None:
        try:
            requests.models.PreparedRequest().prepare_url(url, None)
            parts = urlsplit(url)
        except (requests.exceptions.RequestException, ValueError, TypeError) as e:
            raise MalformedURLError(str(e), url) from e
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise MalformedURLError(f"Not an http(s) URL: {url}", url)

    def _masked(self, url: str) -> str:
        return url.replace(self.config.api_key, "***") if self.config.api_key else url

    def _run_request(self, url: str) -> None:
        """Worker body: fetch, parse and notify exactly once."""
        try:
            weather = self._fetch(url)
        except WeatherError as e:
            logging.error(f"Weather request failed: {e}")
            self._notify_failed(e)
            return
        logging.info(f"Weather updated: {weather.city_name} {weather.temperature_string} ({weather.condition_icon_name})")
        self._notify_updated(weather)

    def _fetch(self, url: str) -> WeatherModel:
        logging.info(f"Making OpenWeather API request: {self._masked(url)}")
        try:
            response = requests.get(url, timeout=self.config.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Network error: {e}") from e

        logging.info(f"API response status: {response.status_code}")
        if not response.ok:
            raise self._error_from_response(response)

        logging.debug(f"API response (truncated): {response.text[:500]}")
        return parse_json(response.content)

    @staticmethod
    def _error_from_response(response: requests.Response) -> ProviderResponseError:
        """Build the error for an OpenWeather error response."""
        try:
            error_data = response.json()
        except ValueError:
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            return ProviderResponseError(response.status_code, response.text[:200] or response.reason or "Unknown error")
        logging.error(f"OpenWeather API error response: {error_data}")
        if not isinstance(error_data, dict):
            return ProviderResponseError(response.status_code, str(error_data)[:200])
        return ProviderResponseError(response.status_code, str(error_data.get("message", "Unknown error")))

    def _notify_updated(self, weather: WeatherModel) -> None:
        if self.delegate is None:
            logging.debug("No weather delegate registered; dropping update")
            return
        self.delegate.on_weather_updated(weather)

    def _notify_failed(self, error: WeatherError) -> None:
        if self.delegate is None:
            logging.debug("No weather delegate registered; dropping failure")
            return
        self.delegate.on_weather_failed(error)
