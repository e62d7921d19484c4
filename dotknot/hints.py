"""Next-move hints for a partially filled board.

Two tiers, tried in order:

1. Local extension: grow an unfinished color into an empty neighbor when the
   result still looks like a single open path (exactly two cells of that
   color with at most one same-colored neighbor). This is a cheap shape
   heuristic; it can miss real extensions and, rarely, suggest a cell that
   is fine locally but wrong globally.
2. Global solve: solve the level from scratch and suggest the first cell of
   the canonical solution that continues the player's partial path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .config import SearchLimits
from .grid import Color, Grid, Position, is_adjacent
from .level import Level
from .logger import get_logger
from .palette import color_label
from .solver.backtrack import solve_with_backtracking
from .validation import anchors_connected

LOGGER = get_logger(__name__)

# Up, down, left, right. Differs from the grid's enumeration order; it only
# decides which of several qualifying cells the local tier reports.
HINT_SCAN_ORDER: Tuple[Position, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(frozen=True)
class Hint:
    color: Color
    position: Position

    @property
    def label(self) -> str:
        return color_label(self.color)

    def to_dict(self) -> dict:
        return {"color": self.color, "label": self.label, "position": list(self.position)}


def find_hint(level: Level, grid: Grid, *, limits: Optional[SearchLimits] = None) -> Optional[Hint]:
    """Suggest one cell to color next, or ``None`` when no hint is available.

    ``grid`` is only read.
    """
    hint = local_extension_hint(level, grid)
    if hint is not None:
        LOGGER.debug("Local hint %s at %s", hint.color, hint.position)
        return hint
    hint = solution_hint(level, grid, limits=limits)
    if hint is not None:
        LOGGER.debug("Solver hint %s at %s", hint.color, hint.position)
    return hint


def local_extension_hint(level: Level, grid: Grid) -> Optional[Hint]:
    """First empty neighbor (cells row-major, then up, down, left, right) that
    keeps an unfinished color a single open path."""
    for color, (a, b) in level.anchors.items():
        if anchors_connected(grid, color, a, b):
            continue
        for r, c in grid.cells_of(color):
            for dr, dc in HINT_SCAN_ORDER:
                nb = (r + dr, c + dc)
                if not grid.in_bounds(nb) or not grid.is_empty(nb):
                    continue
                if _open_ends_after(grid, color, nb) == 2:
                    return Hint(color, nb)
    return None


def _open_ends_after(grid: Grid, color: Color, tentative: Position) -> int:
    """Cells of ``color`` with <= 1 same-colored neighbor, with ``tentative``
    counted as already holding ``color``."""

    def holds(pos: Position) -> bool:
        return pos == tentative or grid.color_at(pos) == color

    ends = 0
    for pos in grid.positions():
        if not holds(pos):
            continue
        same = sum(1 for nb in grid.neighbors(pos) if holds(nb))
        if same <= 1:
            ends += 1
    return ends


def solution_hint(level: Level, grid: Grid, *, limits: Optional[SearchLimits] = None) -> Optional[Hint]:
    solution = solve_with_backtracking(level, limits=limits)
    if solution is None:
        return None

    for color in level.colors():
        canonical = solution.paths[color]
        placed = set(grid.cells_of(color))
        if len(placed) >= len(canonical):
            continue
        for pos in canonical:
            if pos in placed or not grid.is_empty(pos):
                continue
            if any(is_adjacent(pos, mine) for mine in placed):
                return Hint(color, pos)
    return None
