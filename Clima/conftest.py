"""Shared fixtures for the weather client tests."""
import json
from concurrent.futures import Executor, Future
from unittest.mock import Mock

import pytest

from weather_config import WeatherConfig


class ManualExecutor(Executor):
    """Executor that queues work until the test runs it, in any order."""

    def __init__(self):
        self.tasks = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.tasks.append((future, fn, args, kwargs))
        return future

    def run(self, index: int = 0):
        future, fn, args, kwargs = self.tasks.pop(index)
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future

    def run_all(self):
        while self.tasks:
            self.run(0)


class RecordingDelegate:
    """Weather delegate that remembers every notification."""

    def __init__(self):
        self.updated = []
        self.failed = []

    def on_weather_updated(self, weather):
        self.updated.append(weather)

    def on_weather_failed(self, error):
        self.failed.append(error)


def make_response(payload=None, status_code=200, text=None):
    """Build a mock requests.Response carrying a JSON payload (or raw text)."""
    body = text if text is not None else json.dumps(payload)
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.reason = "OK" if response.ok else "Error"
    response.text = body
    response.content = body.encode("utf-8")
    response.json.side_effect = lambda: json.loads(body)
    return response


@pytest.fixture
def config():
    return WeatherConfig(api_key="test_key", units="imperial")


@pytest.fixture
def manual_executor():
    return ManualExecutor()


@pytest.fixture
def location_executor():
    return ManualExecutor()


@pytest.fixture
def delegate():
    return RecordingDelegate()


@pytest.fixture
def sample_openweather_response():
    """Sample OpenWeather current weather response."""
    return {
        "coord": {"lon": -0.1257, "lat": 51.5085},
        "weather": [
            {
                "id": 800,
                "main": "Clear",
                "description": "clear sky",
                "icon": "01d"
            }
        ],
        "base": "stations",
        "main": {
            "temp": 72.3,
            "feels_like": 71.6,
            "pressure": 1014,
            "humidity": 48
        },
        "visibility": 10000,
        "wind": {"speed": 6.91, "deg": 240},
        "dt": 1684929490,
        "timezone": 3600,
        "name": "London",
        "cod": 200
    }
