"""CLI entrypoint for :mod:`sheetviz`.

- `validate` - check a file's type and size.
- `preview`  - print one page of the first sheet.
- `chart`    - print the chart payload for a file and an axis selection.
- `serve`    - run the HTTP API.
- `version`  - print the package version.
"""

from __future__ import annotations

import asyncio
import json
import mimetypes
from pathlib import Path
from typing import NoReturn, Optional

import typer

from sheetviz import __version__
from sheetviz.chart.mapper import build_chart_payload
from sheetviz.common.logging import setup_logging
from sheetviz.io.validate import ensure_valid_file
from sheetviz.io.workbook import parse_spreadsheet
from sheetviz.models.chart import ChartType, default_chart_config
from sheetviz.models.errors import SheetvizError
from sheetviz.models.table import Table
from sheetviz.models.upload import FileCandidate
from sheetviz.preview import build_preview
from sheetviz.settings import Settings

app = typer.Typer(
    help=(
        "sheetviz - spreadsheet preview and chart payloads.\n\n"
        "```bash\n"
        "sheetviz preview sales.xlsx --page 0\n"
        "sheetviz chart sales.xlsx --type bar --x Month --y Sales\n"
        "```\n"
    ),
    no_args_is_help=True,
    rich_markup_mode="markdown",
)

INPUT_ARGUMENT = typer.Argument(
    ...,
    exists=True,
    file_okay=True,
    dir_okay=False,
    resolve_path=True,
    help="Spreadsheet file (.xlsx or .xls).",
)


def _load_settings(log_level: Optional[str]) -> Settings:
    overrides = {"log_level": log_level} if log_level else {}
    settings = Settings(**overrides)
    setup_logging(settings)
    return settings


def _candidate(path: Path) -> FileCandidate:
    content_type, _ = mimetypes.guess_type(path.name)
    return FileCandidate.from_path(path, content_type=content_type)


def _fail(exc: SheetvizError) -> NoReturn:
    typer.echo(str(exc), err=True)
    raise typer.Exit(code=1)


def _read_table(path: Path, settings: Settings) -> Table:
    candidate = _candidate(path)
    try:
        ensure_valid_file(candidate, settings)
        return asyncio.run(parse_spreadsheet(candidate.data or b"", file_name=candidate.name))
    except SheetvizError as exc:
        _fail(exc)


def _emit(document: dict, output: Optional[Path]) -> None:
    text = json.dumps(document, indent=2, ensure_ascii=False)
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")


@app.command("validate")
def validate_command(
    input_file: Path = INPUT_ARGUMENT,
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level name."),
) -> None:
    """Check type/extension and size without parsing."""

    settings = _load_settings(log_level)
    try:
        ensure_valid_file(_candidate(input_file), settings)
    except SheetvizError as exc:
        _fail(exc)
    typer.echo("ok")


@app.command("preview")
def preview_command(
    input_file: Path = INPUT_ARGUMENT,
    page: int = typer.Option(0, "--page", "-p", min=0, help="0-based page index."),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Rows per page."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level name."),
) -> None:
    """Print one page of the first sheet as JSON."""

    settings = _load_settings(log_level)
    table = _read_table(input_file, settings)
    preview = build_preview(table, page, page_size or settings.preview_page_size)
    _emit(preview.serializable_dict(exclude_none=False), None)


@app.command("chart")
def chart_command(
    input_file: Path = INPUT_ARGUMENT,
    chart_type: ChartType = typer.Option(ChartType.BAR, "--type", "-t", help="Chart type."),
    x_axis: Optional[str] = typer.Option(None, "--x", help="X-axis column (default: first header)."),
    y_axis: Optional[str] = typer.Option(None, "--y", help="Y-axis column (default: second header)."),
    title: Optional[str] = typer.Option(None, "--title", help="Chart title."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the payload here instead of stdout."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level name."),
) -> None:
    """Print the chart payload (data + options) as JSON."""

    settings = _load_settings(log_level)
    table = _read_table(input_file, settings)

    config = default_chart_config(table, title=settings.default_chart_title)
    config.type = chart_type
    if x_axis is not None:
        config.x_axis = x_axis
    if y_axis is not None:
        config.y_axis = y_axis
    if title is not None:
        config.title = title

    try:
        payload = build_chart_payload(table, config)
    except SheetvizError as exc:
        _fail(exc)
    _emit(payload.serializable_dict(), output)


@app.command("serve")
def serve_command(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
) -> None:
    """Run the HTTP API with uvicorn."""

    import uvicorn

    from sheetviz.api.app import create_app

    uvicorn.run(create_app(), host=host, port=port)


@app.command("version")
def version_command() -> None:
    """Print the package version."""
    typer.echo(__version__)


def main() -> None:
    """Entrypoint used by console scripts and `python -m sheetviz`."""
    app()


__all__ = ["app", "main"]
