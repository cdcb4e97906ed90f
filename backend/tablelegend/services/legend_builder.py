"""Bins + ramp -> renderer-facing legend description."""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from tablelegend.config.defaults import (
    ENUM_ITEM_SPACING,
    GRADIENT_BAR_HEIGHT_MIN,
    GRADIENT_LABEL_TICK_COLOR,
    NUMERIC_ITEM_SPACING,
)
from tablelegend.models.column import ColumnSummary, TableStyle
from tablelegend.models.legend import Bin, ColorStopInput, LegendItem, LegendSpec, normalize_color_stops


def format_legend_number(value: float) -> str:
    """Round to at most two decimals and print the shortest exact text.

    Halves round up toward +inf (0.125 -> 0.13, -0.005 -> 0). Negative zero
    prints as "0".
    """
    rounded = math.floor(float(value) * 100 + 0.5) / 100
    if rounded == 0:
        return "0"
    # Whole numbers print as plain digits below 1e21, exponent notation above.
    if rounded.is_integer() and abs(rounded) < 1e21:
        return str(int(rounded))
    return repr(rounded)


def display_bounds(column: ColumnSummary, style: TableStyle) -> tuple[float, float]:
    minimum = column.minimum_value
    maximum = column.maximum_value
    # A constant column keeps its own value; overrides would invent a range.
    if minimum != maximum:
        if style.max_display_value is not None:
            maximum = style.max_display_value
        if style.min_display_value is not None:
            minimum = style.min_display_value
    return float(minimum or 0.0), float(maximum or 0.0)


def gradient_label_items(minimum: float, maximum: float, tick_count: int) -> list[LegendItem]:
    segments = 2 + max(int(tick_count), 0)
    items = []
    for i in range(1, segments + 1):
        items.append(
            LegendItem(
                title_above=format_legend_number(minimum + (maximum - minimum) * (i / segments)),
                title_below=format_legend_number(minimum) if i == 1 else None,
            )
        )
    return items


def enum_items(bins: Sequence[Bin], enum_list: Sequence[str]) -> list[LegendItem]:
    return [
        LegendItem(
            color=b.color,
            title=enum_list[i] if i < len(enum_list) else None,
        )
        for i, b in enumerate(bins)
    ]


def numeric_items(bins: Sequence[Bin], minimum: float) -> list[LegendItem]:
    """Threshold labels between touching boxes, plus the minimum under the first.

    Only the last box can lose its upper label, when it repeats the one below it.
    """
    last = len(bins) - 1
    items = []
    for i, b in enumerate(bins):
        show_above = i == 0 or i < last or b.upper_bound > bins[i - 1].upper_bound
        show_below = i == 0 and b.upper_bound != minimum
        items.append(
            LegendItem(
                color=b.color,
                title_above=format_legend_number(b.upper_bound) if show_above else None,
                title_below=format_legend_number(minimum) if show_below else None,
            )
        )
    return items


def build_legend(
    column: ColumnSummary,
    style: TableStyle,
    color_stops: Iterable[ColorStopInput],
    bins: Optional[Sequence[Bin]],
) -> LegendSpec | None:
    """Legend for ``column``, or None when a legend would be meaningless.

    A single-stop ramp paints everything one color, so there is nothing to explain.
    """
    stops = normalize_color_stops(color_stops)
    if len(stops) == 1:
        return None

    minimum, maximum = display_bounds(column, style)

    if not bins:
        return LegendSpec(
            title=column.name,
            items=tuple(gradient_label_items(minimum, maximum, style.tick_count)),
            bar_height_min=GRADIENT_BAR_HEIGHT_MIN,
            gradient_stops=stops,
            label_tick_color=GRADIENT_LABEL_TICK_COLOR,
        )

    if column.is_categorical:
        return LegendSpec(
            title=column.name,
            items=tuple(enum_items(bins, column.enum_list)),
            item_spacing=ENUM_ITEM_SPACING,
        )

    return LegendSpec(
        title=column.name,
        items=tuple(numeric_items(bins, minimum)),
        item_spacing=NUMERIC_ITEM_SPACING,
    )
