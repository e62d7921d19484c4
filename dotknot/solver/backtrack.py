from __future__ import annotations

import random
from typing import Dict, Iterable, Iterator, Optional, Set

from ..config import SearchLimits
from ..grid import Color, Grid
from ..level import Level
from ..logger import get_logger
from ..validation import can_connect
from .paths import candidate_paths, enumerate_paths
from .types import Path, Signature, Solution

LOGGER = get_logger(__name__)


def iter_solutions(
    level: Level,
    *,
    rng: Optional[random.Random] = None,
    shuffle_colors: bool = False,
    limits: Optional[SearchLimits] = None,
) -> Iterator[Solution]:
    """Yield full-coverage solutions in search order.

    Colors are placed one at a time in level order (shuffled with ``rng`` when
    ``shuffle_colors`` is set). For each color every candidate path over the
    current board is tried; a failed branch only clears the cells it wrote,
    anchors stay. A leaf is a solution only if no empty cell is left.

    The search owns a private grid; abandoning the iterator discards it.
    With ``rng`` the candidate list of every color is shuffled, without it the
    order is the enumerator's canonical one.
    """
    limits = limits or SearchLimits()
    grid = Grid.from_level(level)
    colors = level.colors()
    if shuffle_colors:
        if rng is None:
            raise ValueError("shuffle_colors requires an rng")
        rng.shuffle(colors)
    chosen: Dict[Color, Path] = {}

    def candidates(color: Color) -> Iterable[Path]:
        start, end = level.anchors[color]
        if rng is None:
            return candidate_paths(
                grid, color, start, end, max_paths=limits.max_paths, max_steps=limits.max_steps
            )
        paths = enumerate_paths(grid, color, start, end, max_paths=limits.max_paths, max_steps=limits.max_steps)
        rng.shuffle(paths)
        return paths

    def others_reachable(index: int) -> bool:
        for color in colors[index:]:
            a, b = level.anchors[color]
            if not can_connect(grid, a, b):
                return False
        return True

    def search(index: int) -> Iterator[Solution]:
        if index == len(colors):
            if grid.is_full():
                yield Solution.from_paths(level, chosen)
            return

        color = colors[index]
        last = index == len(colors) - 1
        empty = grid.empty_count()
        for path in candidates(color):
            # The last color has to soak up every remaining empty cell.
            if last and len(path) - 2 != empty:
                continue
            written = grid.place_path(color, path)
            chosen[color] = path
            if others_reachable(index + 1):
                yield from search(index + 1)
            grid.clear_cells(written)
            del chosen[color]

    yield from search(0)


def solve_with_backtracking(
    level: Level,
    *,
    rng: Optional[random.Random] = None,
    shuffle_colors: bool = False,
    limits: Optional[SearchLimits] = None,
) -> Optional[Solution]:
    """First full-coverage solution, or ``None`` if the level is unsolvable."""
    solution = next(iter_solutions(level, rng=rng, shuffle_colors=shuffle_colors, limits=limits), None)
    if solution is None:
        LOGGER.debug("No full-coverage solution for %dx%d level with %d colors", level.rows, level.cols, len(level.anchors))
    return solution


def count_solutions(
    level: Level,
    *,
    limit: Optional[int] = None,
    rng: Optional[random.Random] = None,
    limits: Optional[SearchLimits] = None,
) -> int:
    """Number of distinct solutions (by color -> cell set), stopping at ``limit``.

    Different routes through the same cells are the same solution.
    """
    seen: Set[Signature] = set()
    solutions = iter_solutions(level, rng=rng, limits=limits)
    try:
        for solution in solutions:
            seen.add(solution.signature())
            if limit is not None and len(seen) >= limit:
                break
    finally:
        solutions.close()
    return len(seen)


def is_unique(
    level: Level,
    *,
    rng: Optional[random.Random] = None,
    limits: Optional[SearchLimits] = None,
) -> bool:
    """True iff exactly one solution exists.

    The search stops the moment a second, different solution turns up.
    Expected to be called on a level already known to be solvable; an
    unsolvable level reports ``False``.
    """
    return count_solutions(level, limit=2, rng=rng, limits=limits) == 1
