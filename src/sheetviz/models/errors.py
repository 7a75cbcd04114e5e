"""Error hierarchy for the upload -> parse -> chart pipeline."""

from __future__ import annotations


class SheetvizError(Exception):
    """Base class for pipeline-specific exceptions."""


class FileValidationError(SheetvizError):
    """Raised when a candidate file has the wrong type or is too large."""

    def __init__(self, message: str, *, too_large: bool = False) -> None:
        super().__init__(message)
        self.too_large = too_large


class ParseError(SheetvizError):
    """Raised when spreadsheet bytes cannot be decoded into a table."""


class ConfigError(SheetvizError):
    """Raised when a chart configuration does not fit the table."""

    def __init__(self, message: str, *, column: str | None = None, available: list[str] | None = None) -> None:
        super().__init__(message)
        self.column = column
        self.available = list(available or [])


class UploadInProgressError(SheetvizError):
    """Raised when a new upload is submitted before the previous one settles."""


__all__ = [
    "ConfigError",
    "FileValidationError",
    "ParseError",
    "SheetvizError",
    "UploadInProgressError",
]
