"""HTTP surface over the upload, preview and chart pipeline."""

from sheetviz.api.app import create_app

__all__ = ["create_app"]
