"""Upload flow: validate -> parse -> store as the session's current file."""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime

from sheetviz.common.logging import log_context
from sheetviz.io.validate import ensure_valid_file
from sheetviz.io.workbook import parse_spreadsheet
from sheetviz.models.errors import FileValidationError, UploadInProgressError
from sheetviz.models.upload import FileCandidate, UploadedFile
from sheetviz.session import SessionStore, save_current_file
from sheetviz.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _new_file_id() -> str:
    return str(time.time_ns() // 1_000_000)


class UploadFlow:
    """Accepts one file at a time and publishes it as the current file.

    A submission made while another parse is still in flight is rejected with
    :class:`UploadInProgressError`; the flow re-arms once the running one
    settles, whether it succeeded or failed. Nothing is retried.
    """

    def __init__(self, store: SessionStore, settings: Settings | None = None) -> None:
        self._store = store
        self._settings = settings or get_settings()
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    async def submit(self, candidate: FileCandidate, *, user_id: str = "") -> UploadedFile:
        if self._busy:
            logger.info("upload.submit.rejected", extra=log_context(file_name=candidate.name, user_id=user_id))
            raise UploadInProgressError("Another upload is still being processed")

        self._busy = True
        try:
            return await self._process(candidate, user_id=user_id)
        finally:
            self._busy = False

    async def _process(self, candidate: FileCandidate, *, user_id: str) -> UploadedFile:
        ensure_valid_file(candidate, self._settings)
        if candidate.data is None:
            raise FileValidationError("File contents are missing")

        table = await parse_spreadsheet(candidate.data, file_name=candidate.name)
        uploaded = UploadedFile(
            id=_new_file_id(),
            name=candidate.name,
            size=candidate.size,
            uploaded_at=datetime.now(UTC),
            data=table,
            user_id=user_id,
        )
        save_current_file(self._store, uploaded)
        logger.info(
            "upload.stored",
            extra=log_context(file_name=uploaded.name, file_id=uploaded.id, user_id=user_id, rows=table.row_count),
        )
        return uploaded


__all__ = ["UploadFlow"]
