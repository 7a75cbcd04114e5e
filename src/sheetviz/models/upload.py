from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from pydantic import Field

from sheetviz.common.schema import BaseSchema
from sheetviz.models.table import Table


@dataclass(frozen=True, slots=True)
class FileCandidate:
    """A file offered for upload: declared name, media type and size."""

    name: str
    content_type: str | None
    size: int
    data: bytes | None = None

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: str | None = None) -> "FileCandidate":
        return cls(name=name, content_type=content_type, size=len(data), data=data)

    @classmethod
    def from_path(cls, path: Path, content_type: str | None = None) -> "FileCandidate":
        data = path.read_bytes()
        return cls(name=path.name, content_type=content_type, size=len(data), data=data)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    is_valid: bool
    error: str | None = None


class UploadedFile(BaseSchema):
    """Metadata and parsed table of the most recently uploaded file."""

    id: str
    name: str
    size: int
    uploaded_at: datetime = Field(alias="uploadedAt")
    data: Table
    user_id: str = Field(default="", alias="userId")


__all__ = ["FileCandidate", "UploadedFile", "ValidationResult"]
