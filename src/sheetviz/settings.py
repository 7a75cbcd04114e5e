"""Settings for :mod:`sheetviz`.

Settings are defined in one place (this file) and loaded using `pydantic-settings`.

Supported sources (lowest -> highest precedence):
1) defaults
2) `.env` (current working directory)
3) environment variables (prefix: `SHEETVIZ_`)
4) explicit overrides (`Settings(...)` / CLI)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

ENV_PREFIX = "SHEETVIZ_"

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_CONTENT_TYPES = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",  # .xlsx
    "application/vnd.ms-excel",  # .xls
    "application/x-excel",
    "application/x-msexcel",
)
DEFAULT_EXTENSIONS = (".xlsx", ".xls")
DEFAULT_PAGE_SIZE = 10
DEFAULT_CHART_TITLE = "Data Visualization"


def _coerce_log_level(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("log_level must be an int or a log level name")

    if isinstance(value, int):
        return value

    text = str(value).strip()
    if not text:
        return logging.INFO

    if text.isdigit():
        return int(text)

    mapped = logging.getLevelNamesMapping().get(text.upper())
    if isinstance(mapped, int):
        return mapped

    raise ValueError(f"Invalid log_level: {value!r}")


def _coerce_string_tuple(value: Any, *, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()

    if isinstance(value, (list, tuple)):
        return tuple(str(v).strip() for v in value if str(v).strip())

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ()
        return tuple(part.strip() for part in text.split(",") if part.strip())

    raise TypeError(f"{field_name} must be a list/tuple of strings or a comma-separated string")


class Settings(BaseSettings):
    """Runtime settings for uploads, previews, charts and logging."""

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix=ENV_PREFIX,
        env_file=".env",
    )

    app_name: str = Field(default="sheetviz")
    api_prefix: str = Field(default="/api")

    # Upload policy
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, ge=1)
    allowed_content_types: Annotated[tuple[str, ...], NoDecode] = Field(default=DEFAULT_CONTENT_TYPES)
    allowed_extensions: Annotated[tuple[str, ...], NoDecode] = Field(default=DEFAULT_EXTENSIONS)

    # Preview / chart defaults
    preview_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    default_chart_title: str = Field(default=DEFAULT_CHART_TITLE)

    # Session-scoped storage of the current file
    session_dir: Path | None = Field(
        default=None,
        description="Directory for the JSON session store; in-memory storage is used when unset.",
    )

    # Logging
    log_format: Literal["text", "ndjson"] = Field(default="text")
    log_level: int = Field(default=logging.INFO)

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: Any) -> int:
        return _coerce_log_level(value)

    @field_validator("allowed_content_types", mode="before")
    @classmethod
    def _validate_content_types(cls, value: Any) -> tuple[str, ...]:
        coerced = _coerce_string_tuple(value, field_name="allowed_content_types")
        return tuple(item.lower() for item in coerced)

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def _validate_extensions(cls, value: Any) -> tuple[str, ...]:
        normalized: list[str] = []
        for ext in _coerce_string_tuple(value, field_name="allowed_extensions"):
            if not ext.startswith("."):
                ext = f".{ext.lstrip('*.')}"
            normalized.append(ext.lower())
        return tuple(normalized)

    @property
    def max_upload_megabytes(self) -> int:
        return max(1, self.max_upload_bytes // (1024 * 1024))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    get_settings.cache_clear()


__all__ = [
    "DEFAULT_CHART_TITLE",
    "DEFAULT_MAX_UPLOAD_BYTES",
    "DEFAULT_PAGE_SIZE",
    "ENV_PREFIX",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
