"""Session-scoped key/value storage for the current upload.

The pipeline only depends on :class:`SessionStore`; the in-memory and JSON
file implementations cover the CLI, the API and tests.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from sheetviz.models.upload import UploadedFile
from sheetviz.settings import Settings

logger = logging.getLogger(__name__)

CURRENT_FILE_KEY = "currentFile"

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class SessionStore(Protocol):
    def load(self, key: str) -> dict[str, Any] | None: ...

    def save(self, key: str, document: dict[str, Any]) -> None: ...

    def delete(self, key: str) -> None: ...


class MemorySessionStore:
    """Process-local store; documents are kept as JSON text so round trips match the file store."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def load(self, key: str) -> dict[str, Any] | None:
        raw = self._items.get(key)
        return None if raw is None else json.loads(raw)

    def save(self, key: str, document: dict[str, Any]) -> None:
        self._items[key] = json.dumps(document)

    def delete(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileSessionStore:
    """One ``<key>.json`` document per key under ``directory``."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid session key: {key!r}")
        return self._directory / f"{key}.json"

    def load(self, key: str) -> dict[str, Any] | None:
        path = self._path_for(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return json.loads(text)

    def save(self, key: str, document: dict[str, Any]) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write-then-rename so readers never see a half-written document.
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)


def create_session_store(settings: Settings) -> SessionStore:
    if settings.session_dir is not None:
        return JsonFileSessionStore(settings.session_dir)
    return MemorySessionStore()


def save_current_file(store: SessionStore, uploaded: UploadedFile) -> None:
    store.save(CURRENT_FILE_KEY, uploaded.serializable_dict(exclude_none=False))


def load_current_file(store: SessionStore) -> UploadedFile | None:
    """The stored current file, or ``None`` when absent or unreadable."""

    try:
        document = store.load(CURRENT_FILE_KEY)
    except ValueError:
        # Undecodable bytes or malformed JSON.
        logger.warning("session.current_file.corrupt", exc_info=True)
        return None
    if document is None:
        return None
    try:
        return UploadedFile.model_validate(document)
    except ValidationError:
        logger.warning("session.current_file.invalid", exc_info=True)
        return None


def clear_current_file(store: SessionStore) -> None:
    store.delete(CURRENT_FILE_KEY)


__all__ = [
    "CURRENT_FILE_KEY",
    "JsonFileSessionStore",
    "MemorySessionStore",
    "SessionStore",
    "clear_current_file",
    "create_session_store",
    "load_current_file",
    "save_current_file",
]
