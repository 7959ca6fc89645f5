"""Display surface abstraction - allows swapping the real UI with test backends."""
import logging
import sys
import threading
from abc import ABC, abstractmethod
from typing import List, Optional, TextIO, Tuple

from PIL import Image, ImageDraw, ImageFont

from layout import calculate_layout, get_icon_label


class WeatherDisplay(ABC):
    """Abstract UI surface: weather labels, condition icon and the search field."""

    @abstractmethod
    def set_temperature(self, text: str) -> None:
        pass

    @abstractmethod
    def set_city(self, text: str) -> None:
        pass

    @abstractmethod
    def set_condition_icon(self, identifier: str) -> None:
        """
        Show the condition icon.

        Args:
            identifier: Symbolic icon identifier (e.g., "sun.max")
        """
        pass

    @abstractmethod
    def get_search_text(self) -> str:
        """Get the current contents of the search field."""
        pass

    @abstractmethod
    def set_search_text(self, text: str) -> None:
        pass

    @abstractmethod
    def show_search_hint(self, text: str) -> None:
        """Show a placeholder/hint in the search field after a rejected edit."""
        pass

    def refresh(self) -> None:
        """Called once after a batch of label updates."""
        pass


class MemoryWeatherDisplay(WeatherDisplay):
    """
    Display implementation that keeps its state in memory.

    Every mutation is recorded together with the thread it ran on, which
    makes it useful for tests and headless runs.
    """

    def __init__(self):
        self.temperature = ""
        self.city = ""
        self.condition_icon = ""
        self.search_text = ""
        self.search_hint = ""
        self.refresh_count = 0
        self.mutations: List[Tuple[str, str, int]] = []  # (field, value, thread ident)

    def _record(self, field: str, value: str) -> None:
        self.mutations.append((field, value, threading.get_ident()))

    def set_temperature(self, text: str) -> None:
        self._record("temperature", text)
        self.temperature = text

    def set_city(self, text: str) -> None:
        self._record("city", text)
        self.city = text

    def set_condition_icon(self, identifier: str) -> None:
        self._record("condition_icon", identifier)
        self.condition_icon = identifier

    def get_search_text(self) -> str:
        return self.search_text

    def set_search_text(self, text: str) -> None:
        self.search_text = text

    def show_search_hint(self, text: str) -> None:
        self.search_hint = text

    def refresh(self) -> None:
        self.refresh_count += 1

    def weather_mutation_threads(self) -> set:
        """Get the set of thread idents that mutated the weather labels."""
        return {ident for _, _, ident in self.mutations}


class ConsoleWeatherDisplay(MemoryWeatherDisplay):
    """Display implementation that prints the weather card to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__()
        self._stream = stream or sys.stdout

    def format_card(self) -> str:
        """Render the current state as a single line."""
        label = get_icon_label(self.condition_icon)
        return f"{self.city}: {self.temperature} {label} [{self.condition_icon}]"

    def show_search_hint(self, text: str) -> None:
        super().show_search_hint(text)
        print(f"  ({text})", file=self._stream, flush=True)

    def refresh(self) -> None:
        super().refresh()
        print(self.format_card(), file=self._stream, flush=True)


class ImageWeatherDisplay(MemoryWeatherDisplay):
    """
    Pillow-based display that renders the weather card to a PNG image.

    Useful for previewing the card or feeding a kiosk screen.
    """

    def __init__(self, filename: Optional[str] = None, width: int = 320, height: int = 160, scale: int = 1):
        """
        Initialize image display.

        Args:
            filename: PNG written on every refresh (None to only render in memory)
            width: Card width in pixels
            height: Card height in pixels
            scale: Scale factor for the saved image
        """
        super().__init__()
        self.filename = filename
        self._width = width
        self._height = height
        self._scale = scale
        self._image = Image.new("RGB", (width, height), (0, 0, 0))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def render(self) -> "Image.Image":
        """Draw the current state onto a fresh image and return it."""
        self._image = Image.new("RGB", (self._width, self._height), (0, 0, 0))
        draw = ImageDraw.Draw(self._image)
        ops = calculate_layout(self.temperature, self.city, self.condition_icon, self._width, self._height)
        for op in ops:
            if op.op_type == "text":
                draw.text(
                    (op.kwargs["x"], op.kwargs["y"]),
                    op.kwargs["text"],
                    fill=(op.kwargs["r"], op.kwargs["g"], op.kwargs["b"]),
                    font=self._load_font(op.kwargs["size"]),
                )
        return self._image

    def get_image(self) -> "Image.Image":
        """Get the last rendered PIL Image."""
        return self._image

    def save(self, filename: str) -> None:
        """
        Save the last rendered card to a PNG file (scaled if requested).

        Args:
            filename: Output filename (e.g., "weather.png")
        """
        if self._scale > 1:
            scaled = self._image.resize(
                (self._width * self._scale, self._height * self._scale),
                Image.Resampling.NEAREST
            )
            scaled.save(filename)
        else:
            self._image.save(filename)

    def refresh(self) -> None:
        super().refresh()
        self.render()
        if self.filename:
            self.save(self.filename)
            logging.debug("Weather card saved to %s", self.filename)

    @staticmethod
    def _load_font(size: int):
        try:
            return ImageFont.truetype("DejaVuSans.ttf", size)
        except OSError:
            return ImageFont.load_default()
