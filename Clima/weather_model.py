"""Weather domain model - the normalized reading shown on the display."""
from dataclasses import dataclass


@dataclass(frozen=True)
class WeatherModel:
    """A single current-weather reading parsed from a provider response."""
    condition_id: int  # provider condition code, e.g. 800 for clear sky
    city_name: str
    temperature: float  # in the configured unit system

    @property
    def temperature_string(self) -> str:
        """Temperature rounded to a whole degree, e.g. "72°"."""
        return f"{round(self.temperature):d}°"

    @property
    def condition_icon_name(self) -> str:
        """
        Map the condition code to a symbolic icon identifier.

        Codes follow the OpenWeather condition groups:
        https://openweathermap.org/weather-conditions
        """
        cid = self.condition_id
        if 200 <= cid <= 232:
            return "cloud.bolt"
        elif 300 <= cid <= 321:
            return "cloud.drizzle"
        elif 500 <= cid <= 531:
            return "cloud.rain"
        elif 600 <= cid <= 622:
            return "cloud.snow"
        elif 701 <= cid <= 781:
            return "cloud.fog"
        elif cid == 800:
            return "sun.max"
        else:
            # 801-804 (clouds) and anything unknown
            return "cloud"
