"""Pre-parse checks on a candidate upload (declared type, extension, size)."""

from __future__ import annotations

import logging
from pathlib import PurePath

from sheetviz.models.errors import FileValidationError
from sheetviz.models.upload import FileCandidate, ValidationResult
from sheetviz.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _has_allowed_type(candidate: FileCandidate, settings: Settings) -> bool:
    content_type = (candidate.content_type or "").split(";", 1)[0].strip().lower()
    if content_type and content_type in settings.allowed_content_types:
        return True
    # Declared media types are unreliable; fall back to the file name.
    suffix = PurePath(candidate.name or "").suffix.lower()
    return bool(suffix) and suffix in settings.allowed_extensions


def _type_error(settings: Settings) -> str:
    listed = " or ".join(settings.allowed_extensions)
    return f"Please upload a valid Excel file ({listed})"


def validate_file(candidate: FileCandidate, settings: Settings | None = None) -> ValidationResult:
    """Check the declared type/extension and size of ``candidate``.

    Never opens or reads the file contents.
    """

    settings = settings or get_settings()

    if not _has_allowed_type(candidate, settings):
        return ValidationResult(is_valid=False, error=_type_error(settings))

    if candidate.size > settings.max_upload_bytes:
        return ValidationResult(
            is_valid=False,
            error=f"File size must be less than {settings.max_upload_megabytes}MB",
        )

    return ValidationResult(is_valid=True)


def ensure_valid_file(candidate: FileCandidate, settings: Settings | None = None) -> None:
    """Raise :class:`FileValidationError` when ``candidate`` fails validation."""

    settings = settings or get_settings()
    result = validate_file(candidate, settings)
    if result.is_valid:
        return

    too_large = candidate.size > settings.max_upload_bytes and _has_allowed_type(candidate, settings)
    logger.info(
        "upload.validate.rejected",
        extra={"file_name": candidate.name, "size": candidate.size, "content_type": candidate.content_type},
    )
    raise FileValidationError(result.error or "Invalid file", too_large=too_large)


__all__ = ["ensure_valid_file", "validate_file"]
