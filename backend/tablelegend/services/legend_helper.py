"""Per-column legend state: lazily built gradient, bins and legend.

A helper is built for one (column, style) pair and only read afterwards. The
gradient table, the bins and the legend are computed on first use under a lock
and kept for the helper's lifetime.
"""

from __future__ import annotations

import logging
import math
import numbers
import threading
from typing import Optional

from tablelegend.config.defaults import TRANSPARENT_COLOR
from tablelegend.config.settings import LegendSettings, load_settings
from tablelegend.models.column import ColumnSummary, TableStyle
from tablelegend.models.legend import Bin, LegendSpec
from tablelegend.services.binning import compute_bins, numeric_values
from tablelegend.services.colors import RGBA, to_unit_rgba
from tablelegend.services.gradient import GradientSampler
from tablelegend.services.legend_builder import build_legend, display_bounds

logger = logging.getLogger(__name__)

_UNSET = object()


class LegendHelper:
    def __init__(
        self,
        column: Optional[ColumnSummary],
        style: Optional[TableStyle] = None,
        *,
        settings: Optional[LegendSettings] = None,
    ) -> None:
        self.column = column
        self.style = style if style is not None else TableStyle()
        self.settings = settings if settings is not None else load_settings()
        self._lock = threading.Lock()
        self._sampler: Optional[GradientSampler] = None
        self._bins: list[Bin] = []
        self._prepared = False
        # None once built means "tried, no legend"; _UNSET means not tried yet.
        self._legend: object = _UNSET

    @property
    def has_input(self) -> bool:
        """True when the column holds at least one usable number."""
        return self.column is not None and bool(numeric_values(self.column.values))

    def _prepare(self) -> None:
        if self._prepared:
            return
        with self._lock:
            if self._prepared:
                return
            if self.style.color_stops:
                self._sampler = GradientSampler(
                    self.style.color_stops,
                    self.settings.gradient_resolution,
                )
            if self.has_input and self._sampler is not None:
                self._bins = self._build_bins(self._sampler)
            self._prepared = True

    def _build_bins(self, sampler: GradientSampler) -> list[Bin]:
        assert self.column is not None
        boundaries = compute_bins(
            self.column.values,
            self.style.bin_count,
            self.style.bin_method,
            quantile_threshold=self.settings.quantile_sample_threshold,
        )
        colors = sampler.evenly_spaced(len(boundaries))
        return [Bin(upper_bound=bound, color=color) for bound, color in zip(boundaries, colors)]

    @property
    def bins(self) -> tuple[Bin, ...]:
        self._prepare()
        return tuple(self._bins)

    def legend(self) -> LegendSpec | None:
        """Legend for the column, or None when there is nothing to show.

        The outcome is cached, including a None outcome, so a failed build is not
        retried.
        """
        if self._legend is _UNSET:
            self._prepare()
            with self._lock:
                if self._legend is _UNSET:
                    self._legend = self._generate_legend()
        return self._legend  # type: ignore[return-value]

    def _generate_legend(self) -> LegendSpec | None:
        if not self.has_input:
            logger.debug("No numeric column values; skipping legend")
            return None
        if self._sampler is None:
            logger.debug("Empty color ramp for %r; skipping legend", self.column.name)
            return None
        return build_legend(self.column, self.style, self.style.color_stops, self._bins)

    def color_for(self, value: Optional[float]) -> RGBA:
        if value is None or (isinstance(value, numbers.Real) and math.isnan(value)):
            return self.settings.missing_color
        self._prepare()
        if self._sampler is None:
            return self.settings.missing_color
        if not self._bins:
            return self._color_from_gradient(float(value))

        bins = self._bins
        i = 0
        while i < len(bins) - 1 and value > bins[i].upper_bound:
            i += 1
        if i >= len(bins):
            logger.warning("Bad bin %d for value %r (%d bins)", i, value, len(bins))
            return TRANSPARENT_COLOR
        return bins[i].color

    def color_for_unit(self, value: Optional[float]) -> tuple[float, float, float, float]:
        return to_unit_rgba(self.color_for(value))

    def _color_from_gradient(self, value: float) -> RGBA:
        assert self._sampler is not None
        if self.column is None or self.column.minimum_value is None:
            return self._sampler.sample(0.0)
        minimum, maximum = display_bounds(self.column, self.style)
        if maximum == minimum:
            return self._sampler.sample(0.0)
        fraction = (value - minimum) / (maximum - minimum)
        return self._sampler.sample(min(max(fraction, 0.0), 1.0))
