"""Location provider abstraction - single-shot sources of the device's coordinates."""
import logging
import math
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional, Tuple

import requests

from weather_errors import LocationError


class LocationProviderBase(ABC):
    """
    Abstract base class for location providers.

    Each call to request_location() delivers exactly one of
    delegate.on_location_updated(latitude, longitude) or
    delegate.on_location_failed(error) from a background thread.
    Pending requests are never cancelled by a newer one.
    """

    def __init__(self, executor: Optional[Executor] = None):
        self.delegate = None
        self.authorized = False
        self.updating = False
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="location")

    @abstractmethod
    def request_permission(self) -> bool:
        """
        Ask for permission to read the current location.

        Returns:
            bool: True if location requests are allowed
        """
        pass

    @abstractmethod
    def locate(self) -> Tuple[float, float]:
        """
        Resolve the current coordinates (runs on a background thread).

        Returns:
            Tuple of (latitude, longitude)

        Raises:
            LocationError: If the location is unavailable
        """
        pass

    def request_location(self) -> Future:
        """Start a single-shot location request and return immediately."""
        self.updating = True
        return self._executor.submit(self._run_request)

    def stop_updating_location(self) -> None:
        """
        End the current update session until location is requested again.

        Only clears the informational `updating` flag; requests already in
        flight still deliver their single result.
        """
        if self.updating:
            logging.debug("Location updates stopped")
        self.updating = False

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _run_request(self) -> None:
        try:
            if not self.authorized:
                raise LocationError("Location permission denied")
            latitude, longitude = self.locate()
        except LocationError as e:
            logging.error(f"Location request failed: {e}")
            if self.delegate is not None:
                self.delegate.on_location_failed(e)
            return
        logging.info("Location resolved: lat=%s lon=%s", latitude, longitude)
        if self.delegate is not None:
            self.delegate.on_location_updated(latitude, longitude)


class StaticLocationProvider(LocationProviderBase):
    """Location provider that always reports the configured coordinates."""

    def __init__(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        executor: Optional[Executor] = None
    ):
        super().__init__(executor)
        self.latitude = latitude
        self.longitude = longitude

    def request_permission(self) -> bool:
        self.authorized = self.latitude is not None and self.longitude is not None
        if not self.authorized:
            logging.warning("No static coordinates configured (WEATHER_LAT/WEATHER_LON)")
        return self.authorized

    def locate(self) -> Tuple[float, float]:
        if self.latitude is None or self.longitude is None:
            raise LocationError("No static coordinates configured")
        return self.latitude, self.longitude


class IPLocationProvider(LocationProviderBase):
    """
    Location provider that geolocates the device by its public IP address.

    Uses the ipapi.co JSON endpoint: https://ipapi.co/api/
    """

    DEFAULT_URL = "https://ipapi.co/json/"

    def __init__(
        self,
        url: str = DEFAULT_URL,
        timeout: Optional[float] = 10,
        allowed: bool = True,
        executor: Optional[Executor] = None
    ):
        """
        Initialize IP geolocation provider.

        Args:
            url: Geolocation endpoint returning latitude/longitude JSON
            timeout: HTTP request timeout in seconds
            allowed: Whether the user allows location lookups at all
            executor: Executor for lookups; a thread pool is created if omitted
        """
        super().__init__(executor)
        self.url = url
        self.timeout = timeout
        self.allowed = allowed

    def request_permission(self) -> bool:
        self.authorized = self.allowed
        return self.authorized

    def locate(self) -> Tuple[float, float]:
        try:
            logging.info(f"Making IP geolocation request: {self.url}")
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise LocationError(f"Location lookup failed: {e}") from e
        except ValueError as e:
            raise LocationError(f"Location lookup returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise LocationError("Location lookup returned unexpected payload")
        if data.get("error"):
            raise LocationError(f"Location unavailable: {data.get('reason', 'unknown reason')}")

        try:
            latitude = float(data["latitude"])
            longitude = float(data["longitude"])
        except (KeyError, TypeError, ValueError) as e:
            raise LocationError(f"Location lookup missing coordinates: {e}") from e
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise LocationError("Location lookup returned non-finite coordinates")
        return latitude, longitude
