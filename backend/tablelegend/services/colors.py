"""Color parsing and formatting for ramp stops and legend payloads.

All colors travel through the package as RGBA u8 tuples: four ints in 0-255,
alpha included.
"""

from __future__ import annotations

import re
from typing import Sequence, Union

RGBA = tuple[int, int, int, int]
ColorInput = Union[str, Sequence[int]]

_RGB_RE = re.compile(r"rgb\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)")
_RGBA_RE = re.compile(r"rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d*\.?\d+)\s*\)")


def _channel(value: int) -> int:
    channel = int(value)
    if not 0 <= channel <= 255:
        raise ValueError(f"Color channel out of range: {value!r}")
    return channel


def hex_to_rgba_u8(hex_color: str, alpha: int = 255) -> RGBA:
    hex_str = hex_color.strip().lstrip("#")
    if len(hex_str) == 8:
        alpha = int(hex_str[6:8], 16)
        hex_str = hex_str[:6]
    if len(hex_str) != 6:
        raise ValueError(f"Invalid hex color: {hex_color}")
    r = int(hex_str[0:2], 16)
    g = int(hex_str[2:4], 16)
    b = int(hex_str[4:6], 16)
    a = int(alpha)
    return r, g, b, a


def parse_color(color: ColorInput) -> RGBA:
    """Normalize a CSS ``rgb()``/``rgba()`` string, hex string or int tuple.

    CSS alpha is a 0-1 float and is scaled to 0-255; tuple alpha is already 0-255.
    """
    if isinstance(color, str):
        text = color.strip().lower()
        if text.startswith("#"):
            try:
                return hex_to_rgba_u8(text)
            except ValueError:
                raise ValueError(f"Invalid hex color: {color!r}") from None
        match = _RGB_RE.fullmatch(text)
        if match:
            r, g, b = (_channel(v) for v in match.groups())
            return r, g, b, 255
        match = _RGBA_RE.fullmatch(text)
        if match:
            r, g, b = (_channel(v) for v in match.groups()[:3])
            alpha = float(match.group(4))
            if not 0.0 <= alpha <= 1.0:
                raise ValueError(f"Alpha out of range in {color!r}")
            return r, g, b, int(round(alpha * 255))
        raise ValueError(f"Unsupported color string: {color!r}")

    channels = tuple(color)
    if len(channels) == 3:
        r, g, b = (_channel(v) for v in channels)
        return r, g, b, 255
    if len(channels) == 4:
        r, g, b, a = (_channel(v) for v in channels)
        return r, g, b, a
    raise ValueError(f"Unsupported color format: {color!r}")


def to_rgb_string(color: RGBA) -> str:
    return f"rgb({color[0]},{color[1]},{color[2]})"


def to_rgba_string(color: RGBA) -> str:
    alpha = round(color[3] / 255, 4)
    return f"rgba({color[0]},{color[1]},{color[2]},{alpha:g})"


def to_unit_rgba(color: RGBA) -> tuple[float, float, float, float]:
    return tuple(channel / 255 for channel in color)  # type: ignore[return-value]
