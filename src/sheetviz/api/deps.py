from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from sheetviz.models.upload import UploadedFile
from sheetviz.session import SessionStore, load_current_file
from sheetviz.settings import Settings
from sheetviz.upload import UploadFlow


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_upload_flow(request: Request) -> UploadFlow:
    return request.app.state.upload_flow


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
UploadFlowDep = Annotated[UploadFlow, Depends(get_upload_flow)]


def require_current_file(store: SessionStoreDep) -> UploadedFile:
    uploaded = load_current_file(store)
    if uploaded is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="No file has been uploaded yet.")
    return uploaded


CurrentFileDep = Annotated[UploadedFile, Depends(require_current_file)]

__all__ = [
    "CurrentFileDep",
    "SessionStoreDep",
    "SettingsDep",
    "UploadFlowDep",
    "get_app_settings",
    "get_session_store",
    "get_upload_flow",
    "require_current_file",
]
