"""Color ramp -> fixed-resolution RGBA lookup table.

Entry ``k`` of a table with ``n`` entries holds the ramp color at fractional
position ``k / (n - 1)``. Channels (alpha included) are interpolated linearly on
the same scale the stop offsets are given in; no gamma correction.
"""

from __future__ import annotations

import math
import threading
from typing import Iterable

import numpy as np

from tablelegend.config.defaults import DEFAULT_GRADIENT_RESOLUTION
from tablelegend.errors import MissingInputError
from tablelegend.models.legend import ColorStop, ColorStopInput, normalize_color_stops
from tablelegend.services.colors import RGBA


def build_gradient_table(
    stops: Iterable[ColorStopInput],
    resolution: int = DEFAULT_GRADIENT_RESOLUTION,
) -> np.ndarray:
    """Interpolate ``stops`` into a read-only ``(resolution, 4)`` uint8 table.

    Positions outside the stop offsets take the nearest end stop. Where two stops
    share an offset the later one wins at that offset, giving a hard edge.
    """
    color_stops = normalize_color_stops(stops)
    if not color_stops:
        raise MissingInputError("color ramp must contain at least one stop")
    if resolution < 2:
        raise ValueError(f"resolution must be at least 2, got {resolution}")

    offsets = np.array([stop.offset for stop in color_stops], dtype=np.float64)
    colors = np.array([stop.color for stop in color_stops], dtype=np.float64)
    positions = np.linspace(0.0, 1.0, num=resolution, dtype=np.float64)

    if len(color_stops) == 1:
        table = np.repeat(colors, resolution, axis=0)
    else:
        lower = np.searchsorted(offsets, positions, side="right") - 1
        lower = np.clip(lower, 0, len(color_stops) - 2)
        lo = offsets[lower]
        width = offsets[lower + 1] - lo
        safe_width = np.where(width > 0.0, width, 1.0)
        t = np.where(width > 0.0, (positions - lo) / safe_width, 1.0)
        t = np.clip(t, 0.0, 1.0)
        table = colors[lower] + (colors[lower + 1] - colors[lower]) * t[:, np.newaxis]

    lut = np.clip(np.rint(table), 0, 255).astype(np.uint8)
    lut.setflags(write=False)
    return lut


def sample_gradient(table: np.ndarray, fraction: float) -> RGBA:
    last = len(table) - 1
    if fraction is None or math.isnan(fraction):
        fraction = 0.0
    if math.isinf(fraction):
        index = last if fraction > 0 else 0
    else:
        index = min(max(math.floor(fraction * last), 0), last)
    r, g, b, a = (int(channel) for channel in table[index])
    return r, g, b, a


def spaced_fractions(count: int) -> list[float]:
    """``i / (count - 1)`` for ``i`` in ``range(count)``; a lone item sits at 0."""
    if count <= 0:
        return []
    if count == 1:
        return [0.0]
    return [i / (count - 1) for i in range(count)]


class GradientSampler:
    """Owns the lookup table for one color ramp; the table is built on first use."""

    def __init__(
        self,
        stops: Iterable[ColorStopInput],
        resolution: int = DEFAULT_GRADIENT_RESOLUTION,
    ) -> None:
        self.stops: tuple[ColorStop, ...] = normalize_color_stops(stops)
        if not self.stops:
            raise MissingInputError("color ramp must contain at least one stop")
        if resolution < 2:
            raise ValueError(f"resolution must be at least 2, got {resolution}")
        self._resolution = resolution
        self._table: np.ndarray | None = None
        self._lock = threading.Lock()

    @property
    def table(self) -> np.ndarray:
        if self._table is None:
            with self._lock:
                if self._table is None:
                    self._table = build_gradient_table(self.stops, self._resolution)
        return self._table

    @property
    def resolution(self) -> int:
        return self._resolution

    def sample(self, fraction: float) -> RGBA:
        return sample_gradient(self.table, fraction)

    def evenly_spaced(self, count: int) -> list[RGBA]:
        return [self.sample(fraction) for fraction in spaced_fractions(count)]
