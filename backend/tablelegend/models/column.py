from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence

from tablelegend.config.defaults import (
    BIN_METHODS,
    DEFAULT_BIN_COUNT,
    DEFAULT_BIN_METHOD,
    DEFAULT_COLOR_STOPS,
    DEFAULT_TICK_COUNT,
)
from tablelegend.models.legend import ColorStop, ColorStopInput, normalize_color_stops
from tablelegend.services.binning import numeric_values


class VarType(str, Enum):
    CONTINUOUS = "continuous"
    CATEGORICAL = "categorical"


def normalize_var_type(value: VarType | str | None) -> VarType:
    if isinstance(value, VarType):
        return value
    kind = str(value or "").strip().lower()
    if kind in {"categorical", "enum", "indexed", "discrete"}:
        return VarType.CATEGORICAL
    if kind in {"", "continuous", "scalar", "numeric"}:
        return VarType.CONTINUOUS
    raise ValueError(f"Unsupported column type: {value!r}")


@dataclass(frozen=True)
class ColumnSummary:
    """Values of one table column plus the summary stats the legend needs.

    For categorical columns ``values`` holds integer codes into ``enum_list``.
    """

    name: Optional[str]
    values: tuple[Any, ...] = field(default_factory=tuple)
    var_type: VarType = VarType.CONTINUOUS
    minimum_value: Optional[float] = None
    maximum_value: Optional[float] = None
    enum_list: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        object.__setattr__(self, "var_type", normalize_var_type(self.var_type))
        object.__setattr__(self, "enum_list", tuple(self.enum_list))

    @classmethod
    def from_values(
        cls,
        name: Optional[str],
        values: Iterable[Any],
        *,
        var_type: VarType | str | None = None,
        enum_list: Sequence[str] = (),
    ) -> "ColumnSummary":
        values = tuple(values)
        numbers = numeric_values(values)
        return cls(
            name=name,
            values=values,
            var_type=var_type,
            minimum_value=min(numbers) if numbers else None,
            maximum_value=max(numbers) if numbers else None,
            enum_list=tuple(enum_list),
        )

    @property
    def is_categorical(self) -> bool:
        return self.var_type is VarType.CATEGORICAL


def _default_color_stops() -> tuple[ColorStop, ...]:
    return normalize_color_stops(DEFAULT_COLOR_STOPS)


@dataclass(frozen=True)
class TableStyle:
    color_stops: tuple[ColorStopInput, ...] = field(default_factory=_default_color_stops)
    bin_count: int = DEFAULT_BIN_COUNT
    bin_method: str = DEFAULT_BIN_METHOD
    tick_count: int = DEFAULT_TICK_COUNT
    min_display_value: Optional[float] = None
    max_display_value: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "color_stops", normalize_color_stops(self.color_stops))
        method = str(self.bin_method or DEFAULT_BIN_METHOD).strip().lower()
        if method not in BIN_METHODS:
            raise ValueError(f"Unsupported bin method: {self.bin_method!r}")
        object.__setattr__(self, "bin_method", method)
        object.__setattr__(self, "bin_count", int(self.bin_count))
        object.__setattr__(self, "tick_count", int(self.tick_count))

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> "TableStyle":
        """Build a style from loose options, camelCase or snake_case.

        Unknown keys are ignored; missing or None values keep their defaults.
        """
        kwargs: dict[str, Any] = {}
        for field_name, aliases in _STYLE_ALIASES.items():
            for key in (field_name, *aliases):
                value = (options or {}).get(key)
                if value is not None:
                    kwargs[field_name] = value
                    break
        return cls(**kwargs)


_STYLE_ALIASES: dict[str, tuple[str, ...]] = {
    "color_stops": ("colorStops", "colorMap", "color_map"),
    "bin_count": ("binCount", "colorBins", "color_bins"),
    "bin_method": ("binMethod", "colorBinMethod", "color_bin_method"),
    "tick_count": ("tickCount", "legendTicks", "legend_ticks"),
    "min_display_value": ("minDisplayValue",),
    "max_display_value": ("maxDisplayValue",),
}
