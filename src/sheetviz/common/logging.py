"""Logging configuration and helpers for sheetviz.

Everything uses the standard :mod:`logging` library. Two formatters are
available, selected by ``settings.log_format``:

* ``text``: one human-readable line per record, including timestamp, level,
  logger name and any `extra` fields as ``key=value`` pairs.
* ``ndjson``: one JSON object per record.
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any

from sheetviz.settings import Settings

# Attributes that are already handled by logging and should not be copied into
# the extra key=value list.
_STANDARD_ATTRS: set[str] = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "asctime",
    "taskName",
    "color_message",
}

_CONFIGURED_FLAG = "_sheetviz_configured"


def _format_timestamp(created: float) -> str:
    return (
        datetime.fromtimestamp(created, tz=UTC)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


def _format_extra_value(value: Any) -> str:
    if value is None:
        return "null"
    return str(value)


class ConsoleLogFormatter(logging.Formatter):
    """Render log records as single-line console output.

    Example line:

        2026-01-12T09:15:00.302Z INFO  sheetviz.upload upload.parse.success rows=42 sheet_name=Sales
    """

    _time_format = "%Y-%m-%dT%H:%M:%S"

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s %(levelname)-5s %(name)s %(message)s", datefmt=self._time_format)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        dt = datetime.fromtimestamp(record.created, tz=UTC)
        base = dt.strftime(datefmt or self._time_format)
        return f"{base}.{int(record.msecs):03d}Z"

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - std signature
        base = super().format(record)
        extras = [f"{key}={_format_extra_value(value)}" for key, value in sorted(_extra_fields(record).items())]
        if extras:
            return f"{base} " + " ".join(extras)
        return base


class JsonFormatter(logging.Formatter):
    """Formatter that renders log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - matches logging.Formatter API
        payload: dict[str, Any] = {
            "ts": _format_timestamp(record.created),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = _extra_fields(record)
        if extras:
            payload["data"] = extras

        if record.exc_info:
            exc_type, exc, _ = record.exc_info
            payload["exc_type"] = getattr(exc_type, "__name__", None)
            payload["exc"] = str(exc)
            payload["traceback"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(settings: Settings) -> None:
    """Configure root logging for the process.

    Installs a single StreamHandler and sets the root level from
    ``settings.log_level`` (env: ``SHEETVIZ_LOG_LEVEL``). Subsequent calls only
    adjust the level and formatter.
    """
    root_logger = logging.getLogger()
    formatter: logging.Formatter = JsonFormatter() if settings.log_format == "ndjson" else ConsoleLogFormatter()

    if getattr(root_logger, _CONFIGURED_FLAG, False):
        root_logger.setLevel(settings.log_level)
        for handler in root_logger.handlers:
            if getattr(handler, _CONFIGURED_FLAG, False):
                handler.setFormatter(formatter)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    setattr(handler, _CONFIGURED_FLAG, True)

    # Replace any existing handlers to avoid duplicate logs.
    root_logger.handlers = [handler]
    root_logger.setLevel(settings.log_level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True

    setattr(root_logger, _CONFIGURED_FLAG, True)


def log_context(
    *,
    file_name: str | None = None,
    file_id: str | None = None,
    user_id: str | None = None,
    sheet_name: str | None = None,
    chart_type: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build a consistent `extra` payload for structured logs.

    Example:
        logger.info(
            "upload.parse.success",
            extra=log_context(file_name=name, sheet_name=table.sheet_name, rows=table.row_count),
        )
    """
    ctx: dict[str, Any] = {}

    if file_name is not None:
        ctx["file_name"] = file_name
    if file_id is not None:
        ctx["file_id"] = file_id
    if user_id is not None:
        ctx["user_id"] = user_id
    if sheet_name is not None:
        ctx["sheet_name"] = sheet_name
    if chart_type is not None:
        ctx["chart_type"] = chart_type

    for key, value in extra.items():
        ctx[key] = value

    return ctx


__all__ = [
    "ConsoleLogFormatter",
    "JsonFormatter",
    "log_context",
    "setup_logging",
]
