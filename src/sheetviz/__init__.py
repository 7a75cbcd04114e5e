"""Public API for :mod:`sheetviz`."""

from importlib import metadata
from pathlib import Path
from typing import TYPE_CHECKING
import tomllib

if TYPE_CHECKING:
    from sheetviz.chart.mapper import build_chart_payload
    from sheetviz.io.validate import validate_file
    from sheetviz.io.workbook import parse_spreadsheet
    from sheetviz.models import ChartConfig, ChartPayload, Table
    from sheetviz.settings import Settings


def _pyproject_version() -> str | None:
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    try:
        parsed = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        version = parsed.get("project", {}).get("version")
        if isinstance(version, str) and version:
            return version
    except (FileNotFoundError, OSError, tomllib.TOMLDecodeError):
        return None
    return None


def _resolve_version() -> str:
    # Prefer the local pyproject when running from a source checkout/editable install.
    version = _pyproject_version()
    if version is not None:
        return version

    try:
        return metadata.version("sheetviz")
    except metadata.PackageNotFoundError:  # pragma: no cover
        return "unknown"


__version__ = _resolve_version()

_EXPORTS = {
    "ChartConfig": ("sheetviz.models", "ChartConfig"),
    "ChartPayload": ("sheetviz.models", "ChartPayload"),
    "Settings": ("sheetviz.settings", "Settings"),
    "Table": ("sheetviz.models", "Table"),
    "build_chart_payload": ("sheetviz.chart.mapper", "build_chart_payload"),
    "parse_spreadsheet": ("sheetviz.io.workbook", "parse_spreadsheet"),
    "validate_file": ("sheetviz.io.validate", "validate_file"),
}


def __getattr__(name: str):
    target = _EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    module = __import__(module_name, fromlist=[attr_name])
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))


__all__ = [
    "ChartConfig",
    "ChartPayload",
    "Settings",
    "Table",
    "__version__",
    "build_chart_payload",
    "parse_spreadsheet",
    "validate_file",
]
