"""Map a :class:`Table` and a :class:`ChartConfig` to a renderer-ready payload.

Everything here is a pure function of ``(table, config)``: callers re-run
:func:`build_chart_payload` on every configuration change and nothing is
cached or mutated. Non-numeric cells degrade to ``0`` instead of failing.
"""

from __future__ import annotations

import logging

from sheetviz.cells import coerce_number, format_cell
from sheetviz.chart.colors import ACCENT_BORDER_COLOR, ACCENT_COLOR, colors_for
from sheetviz.models.chart import (
    AxisOptions,
    AxisTitle,
    ChartConfig,
    ChartOptions,
    ChartPayload,
    ChartResult,
    ChartType,
    Dataset,
    PluginOptions,
    ScaleOptions,
    ScatterPoint,
    TitleOptions,
)
from sheetviz.models.errors import ConfigError
from sheetviz.models.table import Table

logger = logging.getLogger(__name__)

NO_HEADERS = "No data headers found. Please upload a valid Excel file with column headers."
NO_ROWS = "No data rows found. Please upload a file with data."


def _missing_column(axis: str, column: str, headers: list[str]) -> ConfigError:
    message = (
        f'Selected {axis}-axis column "{column}" not found in data. '
        f"Available columns: {', '.join(headers)}"
    )
    return ConfigError(message, column=column, available=headers)


def validate_chart_config(table: Table, config: ChartConfig) -> None:
    """Raise :class:`ConfigError` for the first problem found, in a fixed order."""

    if not table.headers:
        raise ConfigError(NO_HEADERS)
    if not table.rows:
        raise ConfigError(NO_ROWS)
    if config.x_axis not in table.headers:
        raise _missing_column("X", config.x_axis, table.headers)
    if config.y_axis not in table.headers:
        raise _missing_column("Y", config.y_axis, table.headers)


def build_chart_data(table: Table, config: ChartConfig) -> tuple[list[str] | None, list[Dataset]]:
    """Labels and datasets for ``config.type``; assumes a validated config."""

    # First match wins when headers repeat.
    x_index = table.headers.index(config.x_axis)
    y_index = table.headers.index(config.y_axis)
    row_indices = range(table.row_count)
    chart_type = ChartType(config.type)

    if chart_type == ChartType.SCATTER:
        points = [
            ScatterPoint(
                x=coerce_number(table.cell(i, x_index)),
                y=coerce_number(table.cell(i, y_index)),
            )
            for i in row_indices
        ]
        dataset = Dataset(
            label=f"{config.x_axis} vs {config.y_axis}",
            data=points,
            background_color=config.background_color or ACCENT_COLOR,
            border_color=config.border_color or ACCENT_BORDER_COLOR,
        )
        return None, [dataset]

    labels = [format_cell(table.cell(i, x_index)) for i in row_indices]
    values = [coerce_number(table.cell(i, y_index)) for i in row_indices]

    if chart_type == ChartType.LINE:
        dataset = Dataset(
            label=config.y_axis,
            data=values,
            fill=False,
            background_color=config.background_color or ACCENT_COLOR,
            border_color=config.border_color or ACCENT_COLOR,
            tension=0.1,
        )
        return labels, [dataset]

    colors = colors_for(len(values))
    if chart_type == ChartType.PIE:
        dataset = Dataset(
            data=values,
            background_color=list(colors.background),
            border_color=list(colors.border),
            border_width=2,
        )
    else:
        dataset = Dataset(
            label=config.y_axis,
            data=values,
            background_color=list(colors.background),
            border_color=list(colors.border),
            border_width=1,
        )
    return labels, [dataset]


def build_chart_options(config: ChartConfig) -> ChartOptions:
    """Title, legend and axis options; pie charts get no scales at all."""

    plugins = PluginOptions(title=TitleOptions(display=bool(config.title), text=config.title))
    chart_type = ChartType(config.type)

    scales: ScaleOptions | None
    if chart_type == ChartType.PIE:
        scales = None
    elif chart_type == ChartType.SCATTER:
        scales = ScaleOptions(
            x=AxisOptions(type="linear", position="bottom", title=AxisTitle(text=config.x_axis)),
            y=AxisOptions(title=AxisTitle(text=config.y_axis)),
        )
    else:
        scales = ScaleOptions(
            x=AxisOptions(title=AxisTitle(text=config.x_axis)),
            y=AxisOptions(title=AxisTitle(text=config.y_axis)),
        )

    return ChartOptions(plugins=plugins, scales=scales)


def build_chart_payload(table: Table, config: ChartConfig) -> ChartPayload:
    """Validate ``config`` against ``table`` and derive the chart payload."""

    validate_chart_config(table, config)
    labels, datasets = build_chart_data(table, config)
    return ChartPayload(
        type=config.type,
        labels=labels,
        datasets=datasets,
        options=build_chart_options(config),
    )


def try_build_chart_payload(table: Table, config: ChartConfig) -> ChartResult:
    """Like :func:`build_chart_payload` but reports configuration problems inline."""

    try:
        return ChartResult(payload=build_chart_payload(table, config))
    except ConfigError as exc:
        logger.debug("chart.config.invalid", extra={"chart_type": str(config.type), "reason": str(exc)})
        return ChartResult(error=str(exc))


__all__ = [
    "NO_HEADERS",
    "NO_ROWS",
    "build_chart_data",
    "build_chart_options",
    "build_chart_payload",
    "try_build_chart_payload",
    "validate_chart_config",
]
