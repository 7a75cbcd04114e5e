"""Paged table preview for display."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

from pydantic import Field

from sheetviz.common.schema import BaseSchema
from sheetviz.models.table import CellValue, Table
from sheetviz.settings import DEFAULT_PAGE_SIZE

T = TypeVar("T")


def _check_page_size(page_size: int) -> None:
    if page_size < 1:
        raise ValueError("page_size must be >= 1")


def page_count(total: int, page_size: int) -> int:
    _check_page_size(page_size)
    return math.ceil(max(0, total) / page_size)


def page_rows(rows: Sequence[T], page_index: int, page_size: int) -> list[T]:
    """Rows on page ``page_index`` (0-based); bounds are clamped to the sequence."""

    _check_page_size(page_size)
    start = min(max(0, page_index) * page_size, len(rows))
    end = min(start + page_size, len(rows))
    return list(rows[start:end])


def clamp_page(page_index: int, total: int, page_size: int) -> int:
    pages = page_count(total, page_size)
    if pages == 0:
        return 0
    return min(max(0, page_index), pages - 1)


def next_page(page_index: int, total: int, page_size: int) -> int:
    return clamp_page(page_index + 1, total, page_size)


def previous_page(page_index: int, total: int, page_size: int) -> int:
    return clamp_page(page_index - 1, total, page_size)


class TablePreview(BaseSchema):
    """One display page of a table plus the counters shown around it."""

    sheet_name: str = Field(alias="sheetName")
    headers: list[str]
    rows: list[list[CellValue]]
    page_index: int = Field(alias="pageIndex")
    page_size: int = Field(alias="pageSize")
    page_count: int = Field(alias="pageCount")
    total_rows: int = Field(alias="totalRows")
    total_columns: int = Field(alias="totalColumns")
    start: int
    end: int


def build_preview(table: Table, page_index: int = 0, page_size: int = DEFAULT_PAGE_SIZE) -> TablePreview:
    """Page ``page_index`` of ``table``; out-of-range indices clamp to the nearest page.

    ``start``/``end`` are the 1-based inclusive row numbers on the page
    (``0``/``0`` for a table without rows).
    """

    total = table.row_count
    index = clamp_page(page_index, total, page_size)
    rows = page_rows(table.rows, index, page_size)
    start = index * page_size + 1 if rows else 0
    end = index * page_size + len(rows)
    return TablePreview(
        sheet_name=table.sheet_name,
        headers=list(table.headers),
        rows=rows,
        page_index=index,
        page_size=page_size,
        page_count=page_count(total, page_size),
        total_rows=total,
        total_columns=table.column_count,
        start=start,
        end=end,
    )


__all__ = [
    "TablePreview",
    "build_preview",
    "clamp_page",
    "next_page",
    "page_count",
    "page_rows",
    "previous_page",
]
