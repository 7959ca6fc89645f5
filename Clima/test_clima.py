"""Tests for the command-line entry point helpers."""
import io
import sys
from unittest.mock import Mock, patch

from app_controller import AppController
from clima import (
    LOCATION_COMMAND,
    QUIT_COMMAND,
    build_display,
    build_location_provider,
    handle_input_line,
    parse_args,
    read_input,
    setup_logging,
)
from location_provider import IPLocationProvider, StaticLocationProvider
from ui_dispatcher import UIDispatcher
from weather_config import WeatherConfig
from weather_display import ConsoleWeatherDisplay, MemoryWeatherDisplay


def test_parse_args_defaults():
    args = parse_args([])

    assert args.units is None
    assert args.timeout is None
    assert args.location == "ip"
    assert args.snapshot is None
    assert args.verbose is False


def test_parse_args_options():
    args = parse_args(["--units", "metric", "--timeout", "4", "--location", "static", "--verbose"])

    assert args.units == "metric"
    assert args.timeout == 4.0
    assert args.location == "static"
    assert args.verbose is True


def test_build_location_provider():
    config = WeatherConfig(api_key="k", latitude=1.0, longitude=2.0, timeout=3)

    static = build_location_provider("static", config)
    ip = build_location_provider("ip", config)
    none = build_location_provider("none", config)

    assert isinstance(static, StaticLocationProvider)
    assert (static.latitude, static.longitude) == (1.0, 2.0)
    assert isinstance(ip, IPLocationProvider)
    assert ip.timeout == 3
    assert none.request_permission() is False
    for provider in (static, ip, none):
        provider.close()


def test_build_display(tmp_path):
    assert type(build_display(None)) is ConsoleWeatherDisplay
    assert isinstance(build_display(str(tmp_path / "card.png")), ConsoleWeatherDisplay)


def _controller():
    controller = Mock(spec=AppController)
    controller.display = MemoryWeatherDisplay()
    return controller


def test_handle_input_line_search():
    controller = _controller()
    dispatcher = UIDispatcher()

    handle_input_line("Berlin", controller, dispatcher)

    assert controller.display.get_search_text() == "Berlin"
    controller.text_field_should_return.assert_called_once()


def test_handle_input_line_location():
    controller = _controller()

    handle_input_line(LOCATION_COMMAND, controller, UIDispatcher())

    controller.location_pressed.assert_called_once()
    controller.text_field_should_return.assert_not_called()


def test_handle_input_line_quit():
    controller = _controller()
    dispatcher = UIDispatcher()

    handle_input_line(QUIT_COMMAND, controller, dispatcher)
    dispatcher.run_forever(poll_interval=0.01)

    controller.text_field_should_return.assert_not_called()


def test_read_input_posts_lines_then_stops():
    controller = _controller()
    dispatcher = UIDispatcher()

    read_input(controller, dispatcher, io.StringIO("Berlin\n/location\n"))
    dispatcher.run_forever(poll_interval=0.01)

    controller.text_field_should_return.assert_called_once()
    controller.location_pressed.assert_called_once()


def test_setup_logging_keeps_stdout_for_the_card(tmp_path):
    """Log records go to stderr and the log file, never stdout."""
    with patch("clima.logging.basicConfig") as mock_config:
        setup_logging(str(tmp_path / "clima.log"), verbose=True)

    handlers = mock_config.call_args.kwargs["handlers"]
    try:
        assert handlers[0].stream is sys.stderr
        assert all(getattr(h, "stream", None) is not sys.stdout for h in handlers)
        assert mock_config.call_args.kwargs["level"] == 10
    finally:
        for handler in handlers:
            handler.close()
