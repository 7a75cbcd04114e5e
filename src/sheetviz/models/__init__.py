"""Data models shared across the pipeline."""

from sheetviz.models.chart import (
    CHART_TYPE_INFO,
    ChartConfig,
    ChartOptions,
    ChartPayload,
    ChartResult,
    ChartType,
    Dataset,
    ScatterPoint,
    default_chart_config,
)
from sheetviz.models.errors import (
    ConfigError,
    FileValidationError,
    ParseError,
    SheetvizError,
    UploadInProgressError,
)
from sheetviz.models.table import CellValue, Table
from sheetviz.models.upload import FileCandidate, UploadedFile, ValidationResult

__all__ = [
    "CHART_TYPE_INFO",
    "CellValue",
    "ChartConfig",
    "ChartOptions",
    "ChartPayload",
    "ChartResult",
    "ChartType",
    "ConfigError",
    "Dataset",
    "FileCandidate",
    "FileValidationError",
    "ParseError",
    "ScatterPoint",
    "SheetvizError",
    "Table",
    "UploadInProgressError",
    "UploadedFile",
    "ValidationResult",
    "default_chart_config",
]
