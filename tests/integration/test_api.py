from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.datastructures import UploadFile

from sheetviz.api.app import create_app
from sheetviz.session import CURRENT_FILE_KEY, JsonFileSessionStore, MemorySessionStore
from sheetviz.settings import Settings

pytestmark = pytest.mark.asyncio

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture()
def app() -> FastAPI:
    return create_app(Settings(max_upload_bytes=64 * 1024), store=MemorySessionStore())


@pytest_asyncio.fixture()
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


async def _upload(client: AsyncClient, data: bytes, name: str = "sales.xlsx", content_type: str = XLSX_TYPE):
    return await client.post(
        "/api/uploads",
        files={"file": (name, data, content_type)},
        headers={"X-User-Id": "user-7"},
    )


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_upload_returns_summary(client: AsyncClient, sales_xlsx: bytes) -> None:
    response = await _upload(client, sales_xlsx)

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["name"] == "sales.xlsx"
    assert body["userId"] == "user-7"
    assert body["sheetName"] == "Sales"
    assert body["headers"] == ["Month", "Sales"]
    assert body["rowCount"] == 3
    assert "uploadedAt" in body


async def test_current_file_round_trips_table(client: AsyncClient, sales_xlsx: bytes) -> None:
    await _upload(client, sales_xlsx)

    response = await client.get("/api/uploads/current")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data == {"headers": ["Month", "Sales"], "rows": [["Jan", 100], ["Feb"], ["Mar", "250"]], "sheetName": "Sales"}


async def test_routes_require_an_upload(client: AsyncClient) -> None:
    assert (await client.get("/api/uploads/current")).status_code == 404
    assert (await client.get("/api/uploads/current/preview")).status_code == 404
    response = await client.post("/api/charts", json={"type": "bar", "xAxis": "a", "yAxis": "b"})
    assert response.status_code == 404


async def test_wrong_type_is_bad_request(client: AsyncClient) -> None:
    response = await _upload(client, b"a,b\n1,2\n", name="data.csv", content_type="text/csv")

    assert response.status_code == 400
    assert response.json()["detail"] == "Please upload a valid Excel file (.xlsx or .xls)"


async def test_oversized_file_is_rejected(client: AsyncClient) -> None:
    response = await _upload(client, b"PK\x03\x04" + b"\x00" * (64 * 1024))

    assert response.status_code == 413
    assert response.json()["detail"] == "File size must be less than 1MB"


async def test_oversized_file_is_rejected_before_reading(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    async def _unexpected_read(self, size: int = -1) -> bytes:
        raise AssertionError("oversized upload body was read")

    monkeypatch.setattr(UploadFile, "read", _unexpected_read)

    response = await _upload(client, b"PK\x03\x04" + b"\x00" * (128 * 1024))

    assert response.status_code == 413


async def test_corrupt_workbook_is_unprocessable(client: AsyncClient) -> None:
    response = await _upload(client, b"PK\x03\x04 definitely not a zip")

    assert response.status_code == 422
    assert response.json()["detail"].startswith("Failed to parse Excel file: ")


async def test_preview_pages(client: AsyncClient, make_xlsx) -> None:
    rows = [["n", "square"], *[[i, i * i] for i in range(1, 26)]]
    await _upload(client, make_xlsx(rows))

    first = (await client.get("/api/uploads/current/preview")).json()
    last = (await client.get("/api/uploads/current/preview", params={"page": 2, "pageSize": 10})).json()

    assert first["rows"][0] == [1, 1]
    assert first["pageCount"] == 3
    assert (first["start"], first["end"]) == (1, 10)
    assert last["rows"] == [[21, 441], [22, 484], [23, 529], [24, 576], [25, 625]]
    assert (last["start"], last["end"]) == (21, 25)


async def test_chart_defaults(client: AsyncClient, sales_xlsx: bytes) -> None:
    await _upload(client, sales_xlsx)

    body = (await client.get("/api/charts/defaults")).json()

    assert body["config"]["xAxis"] == "Month"
    assert body["config"]["yAxis"] == "Sales"
    assert body["config"]["type"] == "bar"
    assert [item["value"] for item in body["chartTypes"]] == ["bar", "line", "pie", "scatter"]


async def test_bar_chart_payload(client: AsyncClient, sales_xlsx: bytes) -> None:
    await _upload(client, sales_xlsx)

    response = await client.post("/api/charts", json={"type": "bar", "xAxis": "Month", "yAxis": "Sales", "title": "T"})

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["labels"] == ["Jan", "Feb", "Mar"]
    assert body["datasets"][0]["data"] == [100, 0, 250]
    assert body["options"]["plugins"]["title"]["text"] == "T"


async def test_pie_chart_payload_has_no_scales(client: AsyncClient, sales_xlsx: bytes) -> None:
    await _upload(client, sales_xlsx)

    body = (await client.post("/api/charts", json={"type": "pie", "xAxis": "Month", "yAxis": "Sales"})).json()

    assert "scales" not in body["options"]
    assert len(body["datasets"][0]["backgroundColor"]) == 3


async def test_scatter_chart_payload(client: AsyncClient, sales_xlsx: bytes) -> None:
    await _upload(client, sales_xlsx)

    body = (await client.post("/api/charts", json={"type": "scatter", "xAxis": "Month", "yAxis": "Sales"})).json()

    assert "labels" not in body
    assert body["datasets"][0]["data"] == [{"x": 0, "y": 100}, {"x": 0, "y": 0}, {"x": 0, "y": 250}]
    assert body["options"]["scales"]["x"]["type"] == "linear"


async def test_unknown_column_is_reported(client: AsyncClient, sales_xlsx: bytes) -> None:
    await _upload(client, sales_xlsx)

    response = await client.post("/api/charts", json={"type": "bar", "xAxis": "Revenue", "yAxis": "Sales"})

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert "Revenue" in detail
    assert "Month, Sales" in detail


async def test_unreadable_session_document_reads_as_no_upload(tmp_path) -> None:
    store = JsonFileSessionStore(tmp_path)
    (tmp_path / f"{CURRENT_FILE_KEY}.json").write_bytes(b"\xff\xfe{")
    app = create_app(Settings(), store=store)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        response = await client.get("/api/uploads/current")

    assert response.status_code == 404
