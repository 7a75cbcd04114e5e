"""Cell-level helpers: blank detection, display text and numeric coercion.

Cell values are ``str | int | float | bool | None``. Coercion to a number is
total: anything that does not read as a finite decimal becomes ``0.0``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from decimal import Decimal

from sheetviz.models.table import CellValue

# Longest leading decimal literal, the way a lenient float parser reads "12abc" or "3.5kg".
# ASCII digits only; callers strip leading whitespace first.
_LEADING_NUMBER = re.compile(r"^([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)


def is_blank_cell(value: CellValue) -> bool:
    return value is None or value == ""


def is_blank_row(row: Sequence[CellValue]) -> bool:
    """True when every cell is ``None`` or the empty string (or the row is empty)."""

    return all(is_blank_cell(cell) for cell in row)


def _float_text(value: float) -> str:
    """Shortest round-trip text, positional for exponents in [-6, 21) like JavaScript's ``String``."""

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    power = int(exponent)
    if -7 < power < 21:
        return format(Decimal(text), "f")
    sign = "+" if power > 0 else "-"
    return f"{mantissa}e{sign}{abs(power)}"


def format_cell(value: CellValue) -> str:
    """Display text for a cell; blanks render as the empty string."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return _float_text(value)
    return str(value)


def parse_leading_number(text: str) -> float | None:
    match = _LEADING_NUMBER.match(text.lstrip())
    if match is None:
        return None
    try:
        value = float(match.group(1))
    except (OverflowError, ValueError):
        return None
    return value if math.isfinite(value) else None


def coerce_number(value: object) -> float:
    """Best-effort conversion of a cell to a finite float, ``0.0`` on failure."""

    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
        return number if math.isfinite(number) else 0.0
    if isinstance(value, str):
        parsed = parse_leading_number(value)
        return parsed if parsed is not None else 0.0
    return 0.0


__all__ = [
    "coerce_number",
    "format_cell",
    "is_blank_cell",
    "is_blank_row",
    "parse_leading_number",
]
