from __future__ import annotations

import sys
from pathlib import Path

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from tablelegend.config.defaults import DEFAULT_COLOR_STOPS
from tablelegend.models.column import ColumnSummary, TableStyle
from tablelegend.models.legend import Bin
from tablelegend.services.legend_builder import build_legend, display_bounds, format_legend_number

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


def _numeric_column(minimum: float, maximum: float) -> ColumnSummary:
    return ColumnSummary(name="Population", values=(minimum, maximum), minimum_value=minimum, maximum_value=maximum)


def _bins(*bounds: float) -> list[Bin]:
    colors = [RED, GREEN, BLUE]
    return [Bin(upper_bound=bound, color=colors[i % 3]) for i, bound in enumerate(bounds)]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (3.0, "3"),
        (3, "3"),
        (3.14159, "3.14"),
        (3.10, "3.1"),
        (2.5, "2.5"),
        (-1.234, "-1.23"),
        (0.1 + 0.2, "0.3"),
        (1234567.0, "1234567"),
        (-0.005, "0"),
        (0.005, "0.01"),
        (-0.0, "0"),
        (0.125, "0.13"),
        (1e20, "100000000000000000000"),
        (-123456789012.0, "-123456789012"),
    ],
)
def test_format_legend_number(value: float, expected: str) -> None:
    assert format_legend_number(value) == expected


def test_single_stop_ramp_gives_no_legend() -> None:
    column = _numeric_column(0.0, 10.0)

    assert build_legend(column, TableStyle(), [(0.0, "#ff0000")], _bins(5.0, 10.0)) is None
    assert build_legend(column, TableStyle(), [(0.0, "#ff0000")], None) is None


def test_gradient_legend_without_ticks() -> None:
    legend = build_legend(_numeric_column(0.0, 10.0), TableStyle(), DEFAULT_COLOR_STOPS, [])

    assert legend is not None
    assert legend.is_gradient
    assert legend.title == "Population"
    assert legend.bar_height_min == 130
    assert legend.label_tick_color == "darkgray"
    assert len(legend.gradient_stops) == 5
    assert [(item.title_above, item.title_below) for item in legend.items] == [
        ("5", "0"),
        ("10", None),
    ]
    assert all(item.color is None for item in legend.items)


def test_gradient_legend_with_ticks() -> None:
    legend = build_legend(_numeric_column(0.0, 100.0), TableStyle(tick_count=2), DEFAULT_COLOR_STOPS, None)

    assert legend is not None
    assert [item.title_above for item in legend.items] == ["25", "50", "75", "100"]
    assert [item.title_below for item in legend.items] == ["0", None, None, None]


def test_display_overrides_apply_to_non_constant_column() -> None:
    style = TableStyle(min_display_value=-5.0, max_display_value=20.0)
    column = _numeric_column(0.0, 10.0)

    assert display_bounds(column, style) == (-5.0, 20.0)
    legend = build_legend(column, style, DEFAULT_COLOR_STOPS, [])
    assert legend is not None
    assert [(item.title_above, item.title_below) for item in legend.items] == [
        ("7.5", "-5"),
        ("20", None),
    ]


def test_display_overrides_ignored_for_constant_column() -> None:
    style = TableStyle(min_display_value=-5.0, max_display_value=20.0)

    assert display_bounds(_numeric_column(3.0, 3.0), style) == (3.0, 3.0)


def test_numeric_bins_show_every_label_until_the_last() -> None:
    legend = build_legend(_numeric_column(5.0, 30.0), TableStyle(), DEFAULT_COLOR_STOPS, _bins(10.0, 10.0, 30.0))

    assert legend is not None
    assert legend.item_spacing == 0
    assert [item.title_above for item in legend.items] == ["10", "10", "30"]
    assert [item.title_below for item in legend.items] == ["5", None, None]
    assert [item.color for item in legend.items] == [RED, GREEN, BLUE]


def test_numeric_bins_suppress_repeated_top_label() -> None:
    legend = build_legend(_numeric_column(5.0, 30.0), TableStyle(), DEFAULT_COLOR_STOPS, _bins(10.0, 30.0, 30.0))

    assert legend is not None
    assert [item.title_above for item in legend.items] == ["10", "30", None]


def test_numeric_bins_skip_minimum_label_when_first_bound_is_minimum() -> None:
    legend = build_legend(_numeric_column(5.0, 10.0), TableStyle(), DEFAULT_COLOR_STOPS, _bins(5.0, 10.0))

    assert legend is not None
    assert [item.title_below for item in legend.items] == [None, None]
    assert [item.title_above for item in legend.items] == ["5", "10"]


def test_single_numeric_bin_keeps_its_label() -> None:
    legend = build_legend(_numeric_column(1.0, 4.0), TableStyle(), DEFAULT_COLOR_STOPS, _bins(4.0))

    assert legend is not None
    assert [(item.title_above, item.title_below) for item in legend.items] == [("4", "1")]


def test_categorical_bins_use_enum_labels() -> None:
    column = ColumnSummary(
        name="Land use",
        values=(0, 1, 2),
        var_type="enum",
        minimum_value=0,
        maximum_value=2,
        enum_list=("farm", "forest"),
    )

    legend = build_legend(column, TableStyle(), DEFAULT_COLOR_STOPS, _bins(0.0, 1.0, 2.0))

    assert legend is not None
    assert legend.item_spacing == 2
    assert [item.title for item in legend.items] == ["farm", "forest", None]
    assert [item.color for item in legend.items] == [RED, GREEN, BLUE]
    assert all(item.title_above is None and item.title_below is None for item in legend.items)


def test_legend_payload() -> None:
    numeric = build_legend(_numeric_column(5.0, 30.0), TableStyle(), DEFAULT_COLOR_STOPS, _bins(10.0, 30.0))
    gradient = build_legend(_numeric_column(0.0, 10.0), TableStyle(), DEFAULT_COLOR_STOPS, [])

    assert numeric is not None and gradient is not None
    assert numeric.to_dict() == {
        "title": "Population",
        "itemSpacing": 0,
        "items": [
            {"color": "rgb(255,0,0)", "titleAbove": "10", "titleBelow": "5"},
            {"color": "rgb(0,255,0)", "titleAbove": "30"},
        ],
    }
    payload = gradient.to_dict()
    assert payload["barHeightMin"] == 130
    assert payload["labelTickColor"] == "darkgray"
    assert payload["gradientColorMap"][0] == [0.0, "rgba(32,0,200,1)"]
    assert payload["items"] == [{"titleAbove": "5", "titleBelow": "0"}, {"titleAbove": "10"}]
