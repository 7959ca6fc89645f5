"""Interactive weather client: search a city or use the current location."""
import argparse
import logging
import os
import signal
import sys
import threading
from typing import Optional

from app_controller import AppController
from location_provider import IPLocationProvider, LocationProviderBase, StaticLocationProvider
from ui_dispatcher import UIDispatcher
from weather_config import UNITS_CHOICES, WeatherConfig, load_config
from weather_display import ConsoleWeatherDisplay, ImageWeatherDisplay, MemoryWeatherDisplay
from weather_fetcher import WeatherFetcher

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_LOG_FILE = os.path.join(BASE_DIR, "clima.log")

LOCATION_COMMAND = "/location"
QUIT_COMMAND = "/quit"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("clima", description="Current weather for a city or your location")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE)
    parser.add_argument("--units", choices=UNITS_CHOICES, default=None)
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    parser.add_argument("--location", choices=["ip", "static", "none"], default="ip",
                        help="Where the current location comes from")
    parser.add_argument("--snapshot", default=None, help="Also render the weather card to this PNG file")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: str, verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file)
        ]
    )


def build_location_provider(mode: str, config: WeatherConfig) -> LocationProviderBase:
    if mode == "static":
        return StaticLocationProvider(config.latitude, config.longitude)
    return IPLocationProvider(timeout=config.timeout, allowed=(mode == "ip"))


class _SnapshotConsoleDisplay(ConsoleWeatherDisplay):
    """Console display that also writes the card to a PNG on every refresh."""

    def __init__(self, filename: str):
        super().__init__()
        self._image = ImageWeatherDisplay(filename)

    def refresh(self) -> None:
        super().refresh()
        self._image.set_temperature(self.temperature)
        self._image.set_city(self.city)
        self._image.set_condition_icon(self.condition_icon)
        self._image.refresh()


def build_display(snapshot: Optional[str]) -> MemoryWeatherDisplay:
    if snapshot:
        return _SnapshotConsoleDisplay(snapshot)
    return ConsoleWeatherDisplay()


def handle_input_line(line: str, controller: AppController, dispatcher: UIDispatcher) -> None:
    """Apply one line of user input on the UI thread."""
    command = line.strip()
    if command == QUIT_COMMAND:
        dispatcher.stop()
    elif command == LOCATION_COMMAND:
        controller.location_pressed()
    else:
        controller.display.set_search_text(line)
        controller.text_field_should_return()


def read_input(controller: AppController, dispatcher: UIDispatcher, stream=None) -> None:
    """Read lines from stdin and post them to the UI thread until EOF."""
    stream = stream or sys.stdin
    for line in stream:
        dispatcher.post(handle_input_line, line.rstrip("\n"), controller, dispatcher)
    dispatcher.post(dispatcher.stop)


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    config = load_config(units=args.units, timeout=args.timeout)

    dispatcher = UIDispatcher()
    display = build_display(args.snapshot)
    fetcher = WeatherFetcher(config)
    location_provider = build_location_provider(args.location, config)
    controller = AppController(display, fetcher, location_provider, dispatcher)

    def signal_handler(signum, frame):
        logging.info("Received signal %s, shutting down", signum)
        dispatcher.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    print(f"Type a city name, {LOCATION_COMMAND} for the current location, {QUIT_COMMAND} to exit.")
    controller.start()
    threading.Thread(target=read_input, args=(controller, dispatcher), name="stdin", daemon=True).start()

    try:
        dispatcher.run_forever()
    finally:
        fetcher.close()
        location_provider.close()
        logging.info("Stopped")


if __name__ == "__main__":
    main()
