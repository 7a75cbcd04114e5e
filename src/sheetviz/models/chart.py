"""Chart configuration and renderer-ready payload models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import ConfigDict, Field

from sheetviz.common.schema import BaseSchema
from sheetviz.models.table import Table
from sheetviz.settings import DEFAULT_CHART_TITLE


class ChartType(StrEnum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    SCATTER = "scatter"


# Display name and short description for each chart type, in menu order.
CHART_TYPE_INFO: dict[ChartType, tuple[str, str]] = {
    ChartType.BAR: ("Bar Chart", "Compare categories"),
    ChartType.LINE: ("Line Chart", "Show trends over time"),
    ChartType.PIE: ("Pie Chart", "Show proportions"),
    ChartType.SCATTER: ("Scatter Plot", "Show relationships"),
}


class ChartConfig(BaseSchema):
    """User-selected chart type, axis columns and title.

    Mutated in place as the user changes selections; axis names are not
    checked against any table until the mapper runs.
    """

    model_config = ConfigDict(validate_assignment=True)

    type: ChartType = ChartType.BAR
    x_axis: str = Field(default="", alias="xAxis")
    y_axis: str = Field(default="", alias="yAxis")
    title: str = DEFAULT_CHART_TITLE
    background_color: str | None = Field(default=None, alias="backgroundColor")
    border_color: str | None = Field(default=None, alias="borderColor")


def default_chart_config(table: Table, *, title: str = DEFAULT_CHART_TITLE) -> ChartConfig:
    """Initial configuration for a freshly loaded table."""

    headers = table.headers
    x_axis = headers[0] if headers else ""
    y_axis = headers[1] if len(headers) > 1 else x_axis
    return ChartConfig(type=ChartType.BAR, x_axis=x_axis, y_axis=y_axis, title=title)


class ScatterPoint(BaseSchema):
    x: float
    y: float


class Dataset(BaseSchema):
    label: str | None = None
    data: list[float] | list[ScatterPoint] = Field(default_factory=list)
    background_color: str | list[str] = Field(alias="backgroundColor")
    border_color: str | list[str] = Field(alias="borderColor")
    border_width: int | None = Field(default=None, alias="borderWidth")
    fill: bool | None = None
    tension: float | None = None


class FontOptions(BaseSchema):
    size: int = 16
    weight: str = "bold"


class TitleOptions(BaseSchema):
    display: bool
    text: str
    font: FontOptions = Field(default_factory=FontOptions)


class LegendOptions(BaseSchema):
    display: bool = True
    position: str = "top"


class PluginOptions(BaseSchema):
    title: TitleOptions
    legend: LegendOptions = Field(default_factory=LegendOptions)


class AxisTitle(BaseSchema):
    display: bool = True
    text: str


class AxisOptions(BaseSchema):
    type: str | None = None
    position: str | None = None
    title: AxisTitle


class ScaleOptions(BaseSchema):
    x: AxisOptions
    y: AxisOptions


class ChartOptions(BaseSchema):
    responsive: bool = True
    maintain_aspect_ratio: bool = Field(default=False, alias="maintainAspectRatio")
    plugins: PluginOptions
    scales: ScaleOptions | None = None


class ChartPayload(BaseSchema):
    """Renderer-ready chart data plus display options."""

    type: ChartType
    labels: list[str] | None = None
    datasets: list[Dataset]
    options: ChartOptions

    @property
    def series(self) -> list[float]:
        """Numeric series of a bar/line/pie payload (empty for scatter)."""

        if self.type == ChartType.SCATTER or not self.datasets:
            return []
        return [value for value in self.datasets[0].data if not isinstance(value, ScatterPoint)]

    @property
    def points(self) -> list[ScatterPoint]:
        if self.type != ChartType.SCATTER or not self.datasets:
            return []
        return [point for point in self.datasets[0].data if isinstance(point, ScatterPoint)]


class ChartResult(BaseSchema):
    """Either a payload or the message explaining why none could be built."""

    payload: ChartPayload | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


__all__ = [
    "AxisOptions",
    "AxisTitle",
    "CHART_TYPE_INFO",
    "ChartConfig",
    "ChartOptions",
    "ChartPayload",
    "ChartResult",
    "ChartType",
    "Dataset",
    "FontOptions",
    "LegendOptions",
    "PluginOptions",
    "ScaleOptions",
    "ScatterPoint",
    "TitleOptions",
    "default_chart_config",
]
