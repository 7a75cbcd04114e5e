from __future__ import annotations

from typing import TypeAlias

from pydantic import ConfigDict, Field

from sheetviz.common.schema import BaseSchema

CellValue: TypeAlias = str | int | float | bool | None


class Table(BaseSchema):
    """Normalized first-sheet contents: headers, data rows and the sheet name.

    Rows may be shorter than ``headers`` (sparse source data) and never
    contain a row whose cells are all blank.
    """

    model_config = ConfigDict(frozen=True)

    headers: list[str] = Field(default_factory=list)
    rows: list[list[CellValue]] = Field(default_factory=list)
    sheet_name: str = Field(default="", alias="sheetName")

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def column_index(self, name: str) -> int | None:
        """Position of the first header equal to ``name``, or ``None``."""

        try:
            return self.headers.index(name)
        except ValueError:
            return None

    def cell(self, row_index: int, column_index: int) -> CellValue:
        row = self.rows[row_index]
        if 0 <= column_index < len(row):
            return row[column_index]
        return None


__all__ = ["CellValue", "Table"]
