from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

Color = str


@dataclass(frozen=True)
class PaletteColor:
    code: Color
    name: str
    hex: str


# Generated levels draw their colors from this fixed set. Codes are single
# letters so a level survives a round-trip through the text format.
PALETTE: Tuple[PaletteColor, ...] = (
    PaletteColor("A", "Soft Indigo", "#5670ff"),
    PaletteColor("B", "Vibrant Coral", "#ff5733"),
    PaletteColor("C", "Emerald Green", "#2ecc71"),
    PaletteColor("D", "Pastel Purple", "#9763ee"),
    PaletteColor("E", "Bright Blue", "#3498db"),
    PaletteColor("F", "Warm Orange", "#f39c12"),
    PaletteColor("G", "Deep Red", "#e74c3c"),
    PaletteColor("H", "Turquoise", "#1abc9c"),
    PaletteColor("I", "Gray", "#7f8c8d"),
)

_BY_CODE: Dict[Color, PaletteColor] = {p.code: p for p in PALETTE}

# Used for letters outside the palette (hand-written level files).
_FALLBACK_HEX = [
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
]


def color_label(color: Color) -> str:
    """Human-readable name for a color id (the id itself if unknown)."""
    entry = _BY_CODE.get(color)
    return entry.name if entry is not None else color


def color_hex(color: Color) -> str:
    entry = _BY_CODE.get(color)
    if entry is not None:
        return entry.hex
    return _FALLBACK_HEX[sum(ord(ch) for ch in color) % len(_FALLBACK_HEX)]
