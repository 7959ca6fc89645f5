"""Controller wiring user input and location updates to the weather fetcher and display."""
import logging

from location_provider import LocationProviderBase
from ui_dispatcher import UIDispatcher
from weather_display import WeatherDisplay
from weather_errors import InputValidationError, LocationError, WeatherError
from weather_fetcher import WeatherFetcher
from weather_model import WeatherModel

SEARCH_HINT = "Type something"


class AppController:
    """
    Mediates between the display, the weather fetcher and the location provider.

    Acts as delegate of both the fetcher and the location provider. Holds no
    state between requests: every fetch is fire-and-forget and whichever
    response completes last is what the display shows.
    """

    def __init__(
        self,
        display: WeatherDisplay,
        fetcher: WeatherFetcher,
        location_provider: LocationProviderBase,
        dispatcher: UIDispatcher
    ):
        self.display = display
        self.fetcher = fetcher
        self.location_provider = location_provider
        self.dispatcher = dispatcher

    def start(self) -> None:
        """Register as delegate and fetch weather for the current location once."""
        self.fetcher.delegate = self
        self.location_provider.delegate = self
        if self.location_provider.request_permission():
            self.location_provider.request_location()
        else:
            self.on_location_failed(LocationError("Location permission denied"))

    # Search field

    def search_pressed(self) -> bool:
        return self.submit_search()

    def text_field_should_return(self) -> bool:
        self.submit_search()
        return True

    def submit_search(self) -> bool:
        """
        End editing of the search field.

        Returns:
            bool: False if the edit was rejected because the field was empty
        """
        text = self.display.get_search_text()
        try:
            city = self._validate_search_text(text)
        except InputValidationError as e:
            logging.debug(f"Search rejected: {e}")
            self.display.show_search_hint(SEARCH_HINT)
            return False
        self.fetcher.fetch_by_city(city)
        self.display.set_search_text("")
        return True

    @staticmethod
    def _validate_search_text(text: str) -> str:
        city = (text or "").strip()
        if not city:
            raise InputValidationError("Search text is empty")
        return city

    # Location

    def location_pressed(self) -> None:
        self.location_provider.request_location()

    def on_location_updated(self, latitude: float, longitude: float) -> None:
        self.location_provider.stop_updating_location()
        self.fetcher.fetch_by_coordinates(latitude, longitude)

    def on_location_failed(self, error: LocationError) -> None:
        logging.error(f"Location failed: {error}")

    # Weather

    def on_weather_updated(self, weather: WeatherModel) -> None:
        self.dispatcher.post(self._show_weather, weather)

    def on_weather_failed(self, error: WeatherError) -> None:
        logging.error(f"Weather fetch failed: {error}")

    def _show_weather(self, weather: WeatherModel) -> None:
        self.display.set_temperature(weather.temperature_string)
        self.display.set_city(weather.city_name)
        self.display.set_condition_icon(weather.condition_icon_name)
        self.display.refresh()
