"""Layout logic for the weather card - pure functions for testability."""
from typing import List, Tuple


class DrawOp:
    """Represents a drawing operation (for testing/layout calculation)."""
    def __init__(self, op_type: str, **kwargs):
        self.op_type = op_type
        self.kwargs = kwargs


ICON_LABELS = {
    "cloud.bolt": "Storm",
    "cloud.drizzle": "Drizzle",
    "cloud.rain": "Rain",
    "cloud.snow": "Snow",
    "cloud.fog": "Fog",
    "sun.max": "Clear",
    "cloud": "Cloudy",
}

ICON_COLORS = {
    "cloud.bolt": (255, 215, 0),
    "cloud.drizzle": (120, 170, 255),
    "cloud.rain": (0, 113, 255),
    "cloud.snow": (240, 240, 255),
    "cloud.fog": (160, 160, 160),
    "sun.max": (255, 165, 0),
    "cloud": (200, 200, 200),
}

TEXT_COLOR = (220, 220, 220)


def get_icon_label(identifier: str) -> str:
    """
    Get short text representation of a condition icon.

    Args:
        identifier: Icon identifier (e.g., "sun.max", "cloud.rain")

    Returns:
        Short condition string (e.g., "Clear", "Rain"); unknown identifiers are returned as-is
    """
    return ICON_LABELS.get(identifier, identifier or "")


def get_icon_color(identifier: str) -> Tuple[int, int, int]:
    return ICON_COLORS.get(identifier, TEXT_COLOR)


def calculate_layout(
    temperature: str,
    city: str,
    icon: str,
    width: int = 320,
    height: int = 160,
    char_width: int = 8
) -> List[DrawOp]:
    """
    Calculate layout operations for the weather card.

    Condition label top-left, temperature top-right, city bottom-right.
    Empty fields are skipped, so a card with nothing loaded yet has no ops.

    Args:
        temperature: Formatted temperature text (e.g., "72°")
        city: City name
        icon: Condition icon identifier
        width: Card width
        height: Card height
        char_width: Estimated width of one character in pixels

    Returns:
        List of DrawOp objects representing what to draw
    """
    ops = []
    margin = 8

    if icon:
        r, g, b = get_icon_color(icon)
        ops.append(DrawOp("text", text=get_icon_label(icon), x=margin, y=margin, r=r, g=g, b=b, size=16))

    if temperature:
        temp_width = len(temperature) * char_width * 3
        ops.append(DrawOp(
            "text",
            text=temperature,
            x=max(margin, width - margin - temp_width),
            y=margin,
            r=TEXT_COLOR[0],
            g=TEXT_COLOR[1],
            b=TEXT_COLOR[2],
            size=48
        ))

    if city:
        city_width = len(city) * char_width * 2
        ops.append(DrawOp(
            "text",
            text=city,
            x=max(margin, width - margin - city_width),
            y=max(margin, height - margin - 24),
            r=TEXT_COLOR[0],
            g=TEXT_COLOR[1],
            b=TEXT_COLOR[2],
            size=24
        ))

    return ops
