from __future__ import annotations

from dataclasses import dataclass

PALETTE: tuple[str, ...] = (
    "#3B82F6",
    "#8B5CF6",
    "#10B981",
    "#F59E0B",
    "#EF4444",
    "#06B6D4",
    "#84CC16",
    "#F97316",
    "#EC4899",
    "#6366F1",
)

# Appended to a #RRGGBB color: 0x80 / 0xFF, roughly 50% opacity.
BACKGROUND_ALPHA = "80"

ACCENT_COLOR = "#3B82F6"
ACCENT_BORDER_COLOR = "#1D4ED8"


@dataclass(frozen=True, slots=True)
class ColorSet:
    background: tuple[str, ...]
    border: tuple[str, ...]


def with_alpha(color: str, alpha: str = BACKGROUND_ALPHA) -> str:
    """``#RRGGBB`` -> ``#RRGGBBAA``."""

    return f"{color}{alpha}"


def colors_for(count: int) -> ColorSet:
    """Palette colors for ``count`` items, cycling when the palette runs out."""

    border = tuple(PALETTE[index % len(PALETTE)] for index in range(max(0, count)))
    return ColorSet(background=tuple(with_alpha(color) for color in border), border=border)


__all__ = [
    "ACCENT_BORDER_COLOR",
    "ACCENT_COLOR",
    "BACKGROUND_ALPHA",
    "ColorSet",
    "PALETTE",
    "colors_for",
    "with_alpha",
]
