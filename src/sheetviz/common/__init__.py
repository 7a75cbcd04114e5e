"""Shared helpers (logging, schema base classes)."""
