from __future__ import annotations

from collections.abc import Callable, Sequence
from io import BytesIO
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from sheetviz.models.table import Table


def pytest_collection_modifyitems(config, items) -> None:
    for item in items:
        path_str = str(Path(str(item.fspath)))
        if "/tests/integration/" in path_str:
            item.add_marker(pytest.mark.integration)
        elif "/tests/unit/" in path_str:
            item.add_marker(pytest.mark.unit)


XlsxFactory = Callable[..., bytes]


def _build_xlsx(rows: Sequence[Sequence[Any]], *, title: str = "Sheet1", extra_sheets: dict[str, Sequence[Sequence[Any]]] | None = None) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = title
    for row in rows:
        sheet.append(list(row))
    for name, extra_rows in (extra_sheets or {}).items():
        extra = workbook.create_sheet(name)
        for row in extra_rows:
            extra.append(list(row))
    buffer = BytesIO()
    workbook.save(buffer)
    workbook.close()
    return buffer.getvalue()


@pytest.fixture()
def make_xlsx() -> XlsxFactory:
    """Build an in-memory .xlsx whose first sheet holds ``rows``."""

    return _build_xlsx


@pytest.fixture()
def sales_rows() -> list[list[Any]]:
    return [["Month", "Sales"], ["Jan", 100], ["Feb", None], ["Mar", "250"]]


@pytest.fixture()
def sales_table() -> Table:
    return Table(
        headers=["Month", "Sales"],
        rows=[["Jan", 100], ["Feb", None], ["Mar", "250"]],
        sheet_name="Sheet1",
    )


@pytest.fixture()
def sales_xlsx(make_xlsx: XlsxFactory, sales_rows: list[list[Any]]) -> bytes:
    return make_xlsx(sales_rows, title="Sales")
