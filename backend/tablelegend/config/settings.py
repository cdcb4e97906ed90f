"""Process-level legend settings, overridable from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from tablelegend.config.defaults import (
    DEFAULT_GRADIENT_RESOLUTION,
    DEFAULT_MISSING_COLOR,
    DEFAULT_QUANTILE_SAMPLE_THRESHOLD,
)
from tablelegend.services.colors import RGBA, parse_color

logger = logging.getLogger(__name__)

ENV_GRADIENT_RESOLUTION = "TABLELEGEND_GRADIENT_RESOLUTION"
ENV_QUANTILE_THRESHOLD = "TABLELEGEND_QUANTILE_THRESHOLD"
ENV_MISSING_COLOR = "TABLELEGEND_MISSING_COLOR"


@dataclass(frozen=True)
class LegendSettings:
    gradient_resolution: int = DEFAULT_GRADIENT_RESOLUTION
    quantile_sample_threshold: int = DEFAULT_QUANTILE_SAMPLE_THRESHOLD
    missing_color: RGBA = DEFAULT_MISSING_COLOR


def _int_from_env(env_name: str, fallback: int, *, min_value: int) -> int:
    raw = os.getenv(env_name, "").strip()
    if not raw:
        return fallback
    try:
        parsed = int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r; using fallback=%d", env_name, raw, fallback)
        return fallback
    if parsed < min_value:
        logger.warning("Out of range %s=%d (min %d); using fallback=%d", env_name, parsed, min_value, fallback)
        return fallback
    return parsed


def _color_from_env(env_name: str, fallback: RGBA) -> RGBA:
    raw = os.getenv(env_name, "").strip()
    if not raw:
        return fallback
    try:
        return parse_color(raw)
    except ValueError:
        logger.warning("Invalid %s=%r; using fallback=%s", env_name, raw, fallback)
        return fallback


def load_settings() -> LegendSettings:
    return LegendSettings(
        gradient_resolution=_int_from_env(
            ENV_GRADIENT_RESOLUTION,
            DEFAULT_GRADIENT_RESOLUTION,
            min_value=2,
        ),
        quantile_sample_threshold=_int_from_env(
            ENV_QUANTILE_THRESHOLD,
            DEFAULT_QUANTILE_SAMPLE_THRESHOLD,
            min_value=0,
        ),
        missing_color=_color_from_env(ENV_MISSING_COLOR, DEFAULT_MISSING_COLOR),
    )
