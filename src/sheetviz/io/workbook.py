"""Decode spreadsheet bytes into a normalized :class:`~sheetviz.models.Table`.

Only the first sheet (declaration order) is read. Modern ``.xlsx`` containers
are read with openpyxl, legacy ``.xls`` compound documents with xlrd; the
container is chosen by sniffing the leading bytes rather than trusting the
file name.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from contextlib import suppress
from datetime import date, datetime, time, timedelta
from io import BytesIO
from typing import Any

import openpyxl
import xlrd

from sheetviz.cells import format_cell, is_blank_cell, is_blank_row
from sheetviz.common.logging import log_context
from sheetviz.models.errors import ParseError
from sheetviz.models.table import CellValue, Table

logger = logging.getLogger(__name__)

ZIP_MAGIC = b"PK\x03\x04"
OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

BLANK_HEADER = "Column"
EMPTY_SPREADSHEET = "Empty spreadsheet"
PARSE_FAILURE_PREFIX = "Failed to parse Excel file: "


# ---------------------------------------------------------------------------
# Cell normalization
# ---------------------------------------------------------------------------


def normalize_cell(value: Any) -> CellValue:
    """Map a decoded cell to ``str | int | float | bool | None``.

    Dates and times become ISO-8601 text; the table never carries date types.
    """

    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else value
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value)
    return str(value)


def _trim_trailing_blanks(row: Sequence[CellValue]) -> list[CellValue]:
    end = len(row)
    while end > 0 and is_blank_cell(row[end - 1]):
        end -= 1
    return list(row[:end])


def _leading_blank_columns(rows: Sequence[Sequence[CellValue]]) -> int:
    offsets = [
        next(index for index, cell in enumerate(row) if not is_blank_cell(cell))
        for row in rows
        if not is_blank_row(row)
    ]
    return min(offsets, default=0)


def shape_rows(rows: Iterable[Sequence[Any]]) -> list[list[CellValue]]:
    """Turn raw sheet rows into the array-of-arrays form consumed by :func:`build_table`.

    Leading and trailing all-blank rows and leading all-blank columns (outside
    the used range) are removed.
    Data rows lose trailing blank cells; the header row is padded to the
    widest row so every data column has a header slot.
    """

    normalized = [[normalize_cell(cell) for cell in row] for row in rows]

    start = 0
    while start < len(normalized) and is_blank_row(normalized[start]):
        start += 1
    end = len(normalized)
    while end > start and is_blank_row(normalized[end - 1]):
        end -= 1
    used = normalized[start:end]
    if not used:
        return []

    offset = _leading_blank_columns(used)
    if offset:
        used = [row[offset:] for row in used]

    header = _trim_trailing_blanks(used[0])
    body = [_trim_trailing_blanks(row) for row in used[1:]]
    width = max([len(header), *(len(row) for row in body)])
    header.extend([None] * (width - len(header)))
    return [header, *body]


# ---------------------------------------------------------------------------
# Container readers
# ---------------------------------------------------------------------------


def _read_xlsx(data: bytes) -> tuple[str, list[list[CellValue]]]:
    workbook = openpyxl.load_workbook(BytesIO(data), read_only=True, data_only=True)
    try:
        if not workbook.worksheets:
            raise ParseError("Workbook contains no sheets")
        sheet = workbook.worksheets[0]
        rows = shape_rows(sheet.iter_rows(values_only=True))
        return sheet.title, rows
    finally:
        with suppress(Exception):
            workbook.close()


def _xls_cell_value(cell: xlrd.sheet.Cell, datemode: int) -> Any:
    ctype = cell.ctype
    if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
        except (xlrd.xldate.XLDateError, OverflowError, ValueError):
            return cell.value
    if ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value, "#ERR")
    return cell.value


def _read_xls(data: bytes) -> tuple[str, list[list[CellValue]]]:
    book = xlrd.open_workbook(file_contents=data, on_demand=True)
    try:
        if book.nsheets == 0:
            raise ParseError("Workbook contains no sheets")
        sheet = book.sheet_by_index(0)
        raw = (
            [_xls_cell_value(cell, book.datemode) for cell in sheet.row(index)]
            for index in range(sheet.nrows)
        )
        return sheet.name, shape_rows(raw)
    finally:
        with suppress(Exception):
            book.release_resources()


def read_first_sheet(data: bytes) -> tuple[str, list[list[CellValue]]]:
    """Decode ``data`` and return the first sheet's name and shaped rows.

    Raises :class:`ParseError` (without the user-facing prefix) on any failure.
    """

    if data.startswith(ZIP_MAGIC):
        reader = _read_xlsx
    elif data.startswith(OLE2_MAGIC):
        reader = _read_xls
    else:
        raise ParseError("Unsupported file format")

    try:
        return reader(data)
    except ParseError:
        raise
    except Exception as exc:
        reason = str(exc) or type(exc).__name__
        raise ParseError(reason) from exc


# ---------------------------------------------------------------------------
# Table construction
# ---------------------------------------------------------------------------


def header_text(value: CellValue) -> str:
    """Header label for a cell; only absent or empty cells fall back to ``"Column"``."""

    if is_blank_cell(value):
        return BLANK_HEADER
    return format_cell(value)


def drop_blank_rows(rows: Iterable[Sequence[CellValue]]) -> list[list[CellValue]]:
    """Rows with at least one non-blank cell, order preserved."""

    return [list(row) for row in rows if not is_blank_row(row)]


def build_table(raw_rows: Sequence[Sequence[CellValue]], sheet_name: str) -> Table:
    """Split shaped rows into headers and data rows.

    Row 0 is the header row; blank header cells become ``"Column"`` (duplicates
    are kept as-is). Entirely blank data rows are dropped.
    """

    if not raw_rows:
        raise ParseError(EMPTY_SPREADSHEET)

    headers = [header_text(cell) for cell in raw_rows[0]]
    rows = drop_blank_rows(raw_rows[1:])
    return Table(headers=headers, rows=rows, sheet_name=sheet_name)


def parse_spreadsheet_sync(data: bytes) -> Table:
    try:
        sheet_name, raw_rows = read_first_sheet(data)
        return build_table(raw_rows, sheet_name)
    except ParseError as exc:
        raise ParseError(f"{PARSE_FAILURE_PREFIX}{exc}") from exc


async def parse_spreadsheet(data: bytes, *, file_name: str | None = None) -> Table:
    """Decode a whole spreadsheet buffer off the event loop.

    Resolves to the first sheet's :class:`Table` or raises :class:`ParseError`.
    """

    try:
        table = await asyncio.to_thread(parse_spreadsheet_sync, data)
    except ParseError as exc:
        logger.warning("upload.parse.failed", extra=log_context(file_name=file_name, reason=str(exc)))
        raise

    logger.info(
        "upload.parse.success",
        extra=log_context(
            file_name=file_name,
            sheet_name=table.sheet_name,
            columns=table.column_count,
            rows=table.row_count,
        ),
    )
    return table


__all__ = [
    "BLANK_HEADER",
    "EMPTY_SPREADSHEET",
    "PARSE_FAILURE_PREFIX",
    "build_table",
    "drop_blank_rows",
    "header_text",
    "normalize_cell",
    "parse_spreadsheet",
    "parse_spreadsheet_sync",
    "read_first_sheet",
    "shape_rows",
]
