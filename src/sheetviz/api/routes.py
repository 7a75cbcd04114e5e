"""Upload, preview and chart endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, File, Header, HTTPException, Query, UploadFile, status

from sheetviz.api.deps import CurrentFileDep, SettingsDep, UploadFlowDep
from sheetviz.api.schemas import ChartDefaults, UploadSummary
from sheetviz.chart.mapper import build_chart_payload
from sheetviz.common.logging import log_context
from sheetviz.io.validate import ensure_valid_file
from sheetviz.models.chart import ChartConfig, ChartPayload, default_chart_config
from sheetviz.models.errors import ConfigError, FileValidationError, ParseError, UploadInProgressError
from sheetviz.models.upload import FileCandidate, UploadedFile
from sheetviz.preview import TablePreview, build_preview

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/uploads",
    response_model=UploadSummary,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a spreadsheet and make it the current file",
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "File type is not an accepted spreadsheet format."},
        status.HTTP_409_CONFLICT: {"description": "A previous upload is still being processed."},
        status.HTTP_413_CONTENT_TOO_LARGE: {"description": "Uploaded file exceeds the configured size limit."},
        status.HTTP_422_UNPROCESSABLE_CONTENT: {"description": "The spreadsheet could not be parsed."},
    },
)
async def upload_file(
    flow: UploadFlowDep,
    settings: SettingsDep,
    *,
    file: Annotated[UploadFile, File(...)],
    user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
) -> UploadSummary:
    name = file.filename or ""
    try:
        if file.size is not None:
            # Size is known once the multipart body is spooled; check it before reading into memory.
            ensure_valid_file(FileCandidate(name=name, content_type=file.content_type, size=file.size), settings)
        data = await file.read()
        uploaded = await flow.submit(FileCandidate.from_bytes(name, data, file.content_type), user_id=user_id or "")
    except FileValidationError as exc:
        code = status.HTTP_413_CONTENT_TOO_LARGE if exc.too_large else status.HTTP_400_BAD_REQUEST
        raise HTTPException(code, detail=str(exc)) from exc
    except UploadInProgressError as exc:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ParseError as exc:
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(exc)) from exc
    return UploadSummary.from_upload(uploaded)


@router.get("/uploads/current", response_model=UploadedFile, summary="Current file with its parsed table")
def get_current_file(current: CurrentFileDep) -> UploadedFile:
    return current


@router.get("/uploads/current/preview", response_model=TablePreview, summary="One page of the current table")
def preview_current_file(
    current: CurrentFileDep,
    settings: SettingsDep,
    page: Annotated[int, Query(ge=0)] = 0,
    page_size: Annotated[int | None, Query(alias="pageSize", ge=1, le=500)] = None,
) -> TablePreview:
    return build_preview(current.data, page, page_size or settings.preview_page_size)


@router.get("/charts/defaults", response_model=ChartDefaults, summary="Initial chart configuration")
def chart_defaults(current: CurrentFileDep, settings: SettingsDep) -> ChartDefaults:
    config = default_chart_config(current.data, title=settings.default_chart_title)
    return ChartDefaults.for_config(config)


@router.post(
    "/charts",
    response_model=ChartPayload,
    response_model_exclude_none=True,
    summary="Chart data and options for the current file",
    responses={
        status.HTTP_422_UNPROCESSABLE_CONTENT: {"description": "Configuration does not match the table."},
    },
)
def build_chart(config: ChartConfig, current: CurrentFileDep) -> ChartPayload:
    try:
        return build_chart_payload(current.data, config)
    except ConfigError as exc:
        logger.info(
            "chart.config.rejected",
            extra=log_context(file_id=current.id, chart_type=str(config.type), reason=str(exc)),
        )
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(exc)) from exc


__all__ = ["router"]
