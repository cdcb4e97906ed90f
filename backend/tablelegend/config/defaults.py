"""Default ramp, colors and legend layout values.

Everything here is plain data. Callers pass these through ``TableStyle`` or
``LegendSettings`` explicitly; nothing reads them behind the caller's back.
"""

from __future__ import annotations

# Blue -> cyan -> green -> yellow -> red, as (offset, css color) pairs.
DEFAULT_COLOR_STOPS: tuple[tuple[float, str], ...] = (
    (0.0, "rgba(32,0,200,1.0)"),
    (0.25, "rgba(0,200,200,1.0)"),
    (0.5, "rgba(0,200,0,1.0)"),
    (0.75, "rgba(200,200,0,1.0)"),
    (1.0, "rgba(200,0,0,1.0)"),
)

# Used for missing/null values, and when no column is selected.
DEFAULT_MISSING_COLOR: tuple[int, int, int, int] = (32, 0, 200, 255)
TRANSPARENT_COLOR: tuple[int, int, int, int] = (0, 0, 0, 0)

DEFAULT_BIN_COUNT = 7
DEFAULT_BIN_METHOD = "auto"
DEFAULT_TICK_COUNT = 0
BIN_METHODS = ("auto", "quantile", "ckmeans", "none")

# 256 intervals: dyadic stop offsets (0.25, 0.5, ...) land exactly on an entry.
DEFAULT_GRADIENT_RESOLUTION = 257

# "auto" switches from ckmeans to quantiles above this many numeric values.
DEFAULT_QUANTILE_SAMPLE_THRESHOLD = 1000

GRADIENT_BAR_HEIGHT_MIN = 130
GRADIENT_LABEL_TICK_COLOR = "darkgray"
ENUM_ITEM_SPACING = 2
NUMERIC_ITEM_SPACING = 0
