"""FastAPI application factory."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from sheetviz import __version__
from sheetviz.api.routes import router
from sheetviz.common.logging import setup_logging
from sheetviz.session import SessionStore, create_session_store
from sheetviz.settings import Settings, get_settings
from sheetviz.upload import UploadFlow

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, *, store: SessionStore | None = None) -> FastAPI:
    """Return a configured FastAPI application."""

    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title=settings.app_name, version=__version__)

    session_store = store or create_session_store(settings)
    app.state.settings = settings
    app.state.session_store = session_store
    app.state.upload_flow = UploadFlow(session_store, settings)

    app.include_router(router, prefix=settings.api_prefix)

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("api.startup", extra={"session_store": type(session_store).__name__})
    return app


__all__ = ["create_app"]
