from __future__ import annotations

from datetime import datetime

from pydantic import Field

from sheetviz.common.schema import BaseSchema
from sheetviz.models.chart import CHART_TYPE_INFO, ChartConfig, ChartType
from sheetviz.models.upload import UploadedFile


class UploadSummary(BaseSchema):
    """Upload response: file metadata plus the table's shape, without the rows."""

    id: str
    name: str
    size: int
    uploaded_at: datetime = Field(alias="uploadedAt")
    user_id: str = Field(alias="userId")
    sheet_name: str = Field(alias="sheetName")
    headers: list[str]
    row_count: int = Field(alias="rowCount")
    column_count: int = Field(alias="columnCount")

    @classmethod
    def from_upload(cls, uploaded: UploadedFile) -> "UploadSummary":
        table = uploaded.data
        return cls(
            id=uploaded.id,
            name=uploaded.name,
            size=uploaded.size,
            uploaded_at=uploaded.uploaded_at,
            user_id=uploaded.user_id,
            sheet_name=table.sheet_name,
            headers=list(table.headers),
            row_count=table.row_count,
            column_count=table.column_count,
        )


class ChartTypeOut(BaseSchema):
    value: ChartType
    label: str
    description: str


class ChartDefaults(BaseSchema):
    config: ChartConfig
    chart_types: list[ChartTypeOut] = Field(alias="chartTypes")

    @classmethod
    def for_config(cls, config: ChartConfig) -> "ChartDefaults":
        types = [
            ChartTypeOut(value=chart_type, label=label, description=description)
            for chart_type, (label, description) in CHART_TYPE_INFO.items()
        ]
        return cls(config=config, chart_types=types)


__all__ = ["ChartDefaults", "ChartTypeOut", "UploadSummary"]
