from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence

from tablelegend.services.colors import RGBA, ColorInput, parse_color, to_rgb_string, to_rgba_string


@dataclass(frozen=True)
class ColorStop:
    offset: float
    color: RGBA

    def __post_init__(self) -> None:
        object.__setattr__(self, "offset", float(self.offset))
        object.__setattr__(self, "color", parse_color(self.color))


ColorStopInput = ColorStop | Mapping[str, Any] | tuple[float, ColorInput]


def normalize_color_stop(value: ColorStopInput) -> ColorStop:
    if isinstance(value, ColorStop):
        return value
    if isinstance(value, Mapping):
        return ColorStop(offset=value["offset"], color=value["color"])
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and len(value) == 2:
        offset, color = value
        return ColorStop(offset=offset, color=color)
    raise TypeError(f"Unsupported color stop type: {type(value)!r}")


def normalize_color_stops(values: Iterable[ColorStopInput]) -> tuple[ColorStop, ...]:
    return tuple(normalize_color_stop(value) for value in values)


@dataclass(frozen=True)
class Bin:
    upper_bound: float
    color: RGBA


@dataclass(frozen=True)
class LegendItem:
    color: Optional[RGBA] = None
    title: Optional[str] = None
    title_above: Optional[str] = None
    title_below: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.color is not None:
            payload["color"] = to_rgb_string(self.color)
        for key, value in (
            ("title", self.title),
            ("titleAbove", self.title_above),
            ("titleBelow", self.title_below),
        ):
            if value is not None:
                payload[key] = value
        return payload


@dataclass(frozen=True)
class LegendSpec:
    """Renderer-facing legend description; items are ordered top to bottom."""

    title: Optional[str]
    items: tuple[LegendItem, ...] = field(default_factory=tuple)
    item_spacing: Optional[int] = None
    bar_height_min: Optional[int] = None
    gradient_stops: tuple[ColorStop, ...] = field(default_factory=tuple)
    label_tick_color: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "gradient_stops", normalize_color_stops(self.gradient_stops))

    @property
    def is_gradient(self) -> bool:
        return bool(self.gradient_stops)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "items": [item.to_dict() for item in self.items],
        }
        if self.item_spacing is not None:
            payload["itemSpacing"] = self.item_spacing
        if self.bar_height_min is not None:
            payload["barHeightMin"] = self.bar_height_min
        if self.gradient_stops:
            payload["gradientColorMap"] = [
                [stop.offset, to_rgba_string(stop.color)] for stop in self.gradient_stops
            ]
        if self.label_tick_color is not None:
            payload["labelTickColor"] = self.label_tick_color
        return payload
