"""Chart payload derivation: validation, series mapping, colors and options."""

from sheetviz.chart.colors import PALETTE, ColorSet, colors_for
from sheetviz.chart.mapper import (
    build_chart_data,
    build_chart_options,
    build_chart_payload,
    try_build_chart_payload,
    validate_chart_config,
)

__all__ = [
    "PALETTE",
    "ColorSet",
    "build_chart_data",
    "build_chart_options",
    "build_chart_payload",
    "colors_for",
    "try_build_chart_payload",
    "validate_chart_config",
]
