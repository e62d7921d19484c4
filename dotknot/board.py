from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Sequence

from .config import SearchLimits
from .grid import Color, Grid, Position
from .hints import Hint, find_hint
from .level import Level
from .logger import get_logger
from .validation import has_path_overlap, is_valid_step, is_win, still_solvable, validate_path

LOGGER = get_logger(__name__)


class MoveOutcome(str, Enum):
    """Result of committing a drawn path."""

    APPLIED = "APPLIED"
    INVALID = "INVALID"
    OVERLAP = "OVERLAP"
    UNSOLVABLE = "UNSOLVABLE"


class Board:
    """Mutable play state for one level.

    This is the grid an interactive front end reads and draws from. Solvers
    and the hint engine never touch it directly; they get copies.
    """

    def __init__(self, level: Level, grid: Optional[Grid] = None) -> None:
        self.level = level
        self.grid = grid if grid is not None else Grid.from_level(level)
        self._paths: Dict[Color, List[Position]] = {}

    def in_bounds(self, pos: Position) -> bool:
        return self.grid.in_bounds(pos)

    def color_at(self, pos: Position) -> Optional[Color]:
        return self.grid.color_at(pos)

    def is_anchor(self, pos: Position) -> bool:
        return self.grid.is_anchor(pos)

    @property
    def committed_paths(self) -> Dict[Color, List[Position]]:
        return {c: list(p) for c, p in self._paths.items()}

    def can_extend(self, color: Color, path: Sequence[Position], nxt: Position) -> bool:
        """Would dragging ``path`` of ``color`` into ``nxt`` be a legal step?"""
        if not path:
            return False
        return is_valid_step(self.grid, path[-1], nxt, color, path)

    def commit_path(self, color: Color, path: Sequence[Position]) -> MoveOutcome:
        """Replace ``color``'s path with ``path`` if that keeps the level open.

        On ``OVERLAP``/``INVALID`` nothing changes. On ``UNSOLVABLE`` the path
        was written, judged by :func:`still_solvable`, and rolled back.
        """
        path = [tuple(p) for p in path]  # type: ignore[misc]
        if color not in self.level.anchors or not all(self.in_bounds(p) for p in path):
            return MoveOutcome.INVALID
        if has_path_overlap(self.grid, color, path):
            return MoveOutcome.OVERLAP
        if not validate_path(self.grid, self.level, color, path):
            return MoveOutcome.INVALID

        before = self.grid.snapshot()
        self.grid.remove_color(color)
        self.grid.place_path(color, path)

        if not still_solvable(self.grid, self.level, color):
            self.grid.restore(before)
            LOGGER.debug("Rejected path for %s: another color was cut off", color)
            return MoveOutcome.UNSOLVABLE

        self._paths[color] = list(path)  # type: ignore[arg-type]
        return MoveOutcome.APPLIED

    def remove_path(self, color: Color) -> None:
        self.grid.remove_color(color)
        self._paths.pop(color, None)

    def reset(self) -> None:
        for color in list(self.level.anchors):
            self.remove_path(color)

    def is_win(self) -> bool:
        return is_win(self.grid, self.level)

    def hint(self, *, limits: Optional[SearchLimits] = None) -> Optional[Hint]:
        return find_hint(self.level, self.grid.copy(), limits=limits)
