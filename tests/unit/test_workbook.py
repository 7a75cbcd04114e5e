from __future__ import annotations

import io
import zipfile
from datetime import date, datetime, time

import pytest
import xlrd
import xlwt
from openpyxl import Workbook

from sheetviz.io.workbook import (
    _xls_cell_value,
    build_table,
    drop_blank_rows,
    header_text,
    normalize_cell,
    parse_spreadsheet,
    parse_spreadsheet_sync,
    read_first_sheet,
    shape_rows,
)
from sheetviz.models.errors import ParseError


# ---------------------------------------------------------------------------
# build_table
# ---------------------------------------------------------------------------


def test_build_table_splits_header_and_rows() -> None:
    table = build_table([["Month", "Sales"], ["Jan", 100], ["Feb", None]], "Sheet1")

    assert table.headers == ["Month", "Sales"]
    assert table.rows == [["Jan", 100], ["Feb", None]]
    assert table.sheet_name == "Sheet1"


def test_blank_headers_collapse_to_column_literal() -> None:
    table = build_table([["A", "", None]], "Sheet1")

    assert table.headers == ["A", "Column", "Column"]
    assert table.rows == []


def test_non_string_headers_are_stringified_and_duplicates_kept() -> None:
    table = build_table([[2024, 1.5, True, "Name", "Name"]], "S")

    assert table.headers == ["2024", "1.5", "true", "Name", "Name"]


def test_blank_rows_are_dropped_but_sparse_rows_kept() -> None:
    raw = [
        ["a", "b"],
        [None, None],
        ["", None, ""],
        [],
        [None, 5],
        ["x"],
    ]

    table = build_table(raw, "S")

    assert table.rows == [[None, 5], ["x"]]


def test_empty_input_raises_empty_spreadsheet() -> None:
    with pytest.raises(ParseError, match="Empty spreadsheet"):
        build_table([], "S")


def test_drop_blank_rows_is_idempotent() -> None:
    rows = [["a"], [None], ["", ""], [0], [None, "b"]]

    once = drop_blank_rows(rows)

    assert once == [["a"], [0], [None, "b"]]
    assert drop_blank_rows(once) == once


# ---------------------------------------------------------------------------
# shape_rows / normalize_cell
# ---------------------------------------------------------------------------


def test_shape_rows_trims_outer_blank_rows_and_trailing_cells() -> None:
    raw = [
        (None, None, None),
        ("Name", "Score", None),
        ("Ann", 3, None),
        ("Bob", None, None),
        (None, None, None),
    ]

    assert shape_rows(raw) == [["Name", "Score"], ["Ann", 3], ["Bob"]]


def test_shape_rows_pads_header_to_widest_row() -> None:
    raw = [("Name", None, None), ("Ann", 3, "x")]

    assert shape_rows(raw) == [["Name", None, None], ["Ann", 3, "x"]]


def test_shape_rows_of_blank_sheet_is_empty() -> None:
    assert shape_rows([(None,)]) == []
    assert shape_rows([]) == []


def test_shape_rows_drops_leading_blank_columns() -> None:
    raw = [
        (None, None, None, None),
        (None, None, "Month", "Sales"),
        (None, None, "Jan", 100),
        (None, None, None, None),
        (None, None, None, 7),
    ]

    assert shape_rows(raw) == [["Month", "Sales"], ["Jan", 100], [], [None, 7]]


def test_shape_rows_keeps_columns_used_by_any_row() -> None:
    raw = [(None, "Name", "Score"), ("note", "Ann", 3)]

    assert shape_rows(raw) == [[None, "Name", "Score"], ["note", "Ann", 3]]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (3.0, 3),
        (2.5, 2.5),
        (True, True),
        ("text", "text"),
        (None, None),
        (datetime(2024, 1, 31), "2024-01-31"),
        (datetime(2024, 1, 31, 8, 30), "2024-01-31T08:30:00"),
        (date(2024, 2, 1), "2024-02-01"),
        (time(12, 15), "12:15:00"),
    ],
)
def test_normalize_cell(value, expected) -> None:
    assert normalize_cell(value) == expected


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def test_read_first_sheet_uses_declaration_order(make_xlsx) -> None:
    data = make_xlsx([["h"], [1]], title="First", extra_sheets={"Second": [["other"], [2]]})

    sheet_name, rows = read_first_sheet(data)

    assert sheet_name == "First"
    assert rows == [["h"], [1]]


def test_parse_keeps_native_cell_types(make_xlsx) -> None:
    data = make_xlsx(
        [
            ["Label", "Int", "Float", "Flag", "When"],
            ["a", 1, 2.5, True, datetime(2024, 3, 1)],
        ]
    )

    table = parse_spreadsheet_sync(data)

    assert table.rows == [["a", 1, 2.5, True, "2024-03-01"]]


def test_parse_empty_sheet_raises(make_xlsx) -> None:
    with pytest.raises(ParseError, match="Empty spreadsheet"):
        parse_spreadsheet_sync(make_xlsx([]))


def test_parse_header_only_sheet_has_no_rows(make_xlsx) -> None:
    table = parse_spreadsheet_sync(make_xlsx([["A", "B"]]))

    assert table.headers == ["A", "B"]
    assert table.rows == []


def test_parse_blank_header_cells_over_data(make_xlsx) -> None:
    table = parse_spreadsheet_sync(make_xlsx([["A", None, None], [1, 2, 3]]))

    assert table.headers == ["A", "Column", "Column"]
    assert table.rows == [[1, 2, 3]]


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"hello, world",
        b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64,
    ],
    ids=["empty", "text", "truncated-ole2"],
)
def test_corrupt_bytes_raise_parse_error(data: bytes) -> None:
    with pytest.raises(ParseError, match="^Failed to parse Excel file: "):
        parse_spreadsheet_sync(data)


def test_zip_that_is_not_a_workbook_raises_parse_error() -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("readme.txt", "not a spreadsheet")

    with pytest.raises(ParseError):
        parse_spreadsheet_sync(buffer.getvalue())


def test_workbook_without_worksheets_raises(monkeypatch) -> None:
    workbook = Workbook()
    buffer = io.BytesIO()
    workbook.save(buffer)

    class _EmptyBook:
        worksheets: list = []

        def close(self) -> None:
            pass

    monkeypatch.setattr("sheetviz.io.workbook.openpyxl.load_workbook", lambda *_a, **_k: _EmptyBook())

    with pytest.raises(ParseError, match="no sheets"):
        parse_spreadsheet_sync(buffer.getvalue())


@pytest.mark.asyncio
async def test_parse_spreadsheet_resolves_to_table(sales_xlsx: bytes) -> None:
    table = await parse_spreadsheet(sales_xlsx, file_name="sales.xlsx")

    assert table.sheet_name == "Sales"
    assert table.headers == ["Month", "Sales"]
    assert table.rows == [["Jan", 100], ["Feb"], ["Mar", "250"]]


@pytest.mark.asyncio
async def test_parse_spreadsheet_rejects_with_parse_error() -> None:
    with pytest.raises(ParseError):
        await parse_spreadsheet(b"garbage")


def test_header_text_keeps_whitespace_labels() -> None:
    assert header_text(" ") == " "
    assert header_text("") == "Column"
    assert header_text(None) == "Column"
    assert header_text(0) == "0"


def test_parse_sheet_starting_after_column_a(make_xlsx) -> None:
    data = make_xlsx([[None, "Month", "Sales"], [None, "Jan", 100], [None, "Feb", 80]])

    table = parse_spreadsheet_sync(data)

    assert table.headers == ["Month", "Sales"]
    assert table.rows == [["Jan", 100], ["Feb", 80]]


# ---------------------------------------------------------------------------
# Legacy .xls
# ---------------------------------------------------------------------------


def _build_xls(rows: list[list], *, title: str = "Legacy") -> bytes:
    workbook = xlwt.Workbook()
    sheet = workbook.add_sheet(title)
    date_style = xlwt.easyxf(num_format_str="YYYY-MM-DD")
    for row_index, row in enumerate(rows):
        for col_index, value in enumerate(row):
            if value is None:
                continue
            if isinstance(value, datetime):
                sheet.write(row_index, col_index, value, date_style)
            else:
                sheet.write(row_index, col_index, value)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def test_parse_legacy_workbook() -> None:
    data = _build_xls(
        [
            ["Month", "Sales"],
            ["Jan", 100],
            [None, None],
            ["Mar", 2.5],
        ]
    )

    table = parse_spreadsheet_sync(data)

    assert table.sheet_name == "Legacy"
    assert table.headers == ["Month", "Sales"]
    assert table.rows == [["Jan", 100], ["Mar", 2.5]]
    assert isinstance(table.rows[0][1], int)


def test_parse_legacy_dates_and_booleans() -> None:
    data = _build_xls(
        [
            ["When", "Flag", "Note"],
            [datetime(2024, 1, 31), True, "x"],
            [datetime(2024, 2, 1, 8, 30), False, None],
        ]
    )

    table = parse_spreadsheet_sync(data)

    assert table.rows == [
        ["2024-01-31", True, "x"],
        ["2024-02-01T08:30:00", False],
    ]


def test_parse_legacy_sheet_starting_after_column_a() -> None:
    data = _build_xls([[None, None], [None, "Month", "Sales"], [None, "Jan", 3]])

    table = parse_spreadsheet_sync(data)

    assert table.headers == ["Month", "Sales"]
    assert table.rows == [["Jan", 3]]


def test_legacy_error_cells_render_error_text() -> None:
    cell = xlrd.sheet.Cell(xlrd.XL_CELL_ERROR, 0x07)

    assert _xls_cell_value(cell, 0) == "#DIV/0!"
