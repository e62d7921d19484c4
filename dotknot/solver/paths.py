from __future__ import annotations

import heapq
from typing import Dict, Iterator, List, Optional

from ..grid import Color, Grid, Position, manhattan
from ..logger import get_logger

LOGGER = get_logger(__name__)


def _can_step(grid: Grid, pos: Position, end: Position) -> bool:
    return grid.is_empty(pos) or pos == end


def iter_simple_paths(
    grid: Grid,
    start: Position,
    end: Position,
    *,
    max_steps: Optional[int] = None,
    stats: Optional[Dict[str, int]] = None,
) -> Iterator[List[Position]]:
    """Yield every simple path from ``start`` to ``end`` over free cells.

    A step to X is legal when X is in bounds, not already on the path, and
    either empty or ``end``. Order is fixed by the grid's direction order.
    The DFS keeps its own stack of neighbor iterators, so depth is bounded by
    ``rows * cols`` without touching the interpreter's recursion limit.
    ``max_steps`` caps the number of DFS expansions; ``stats["steps"]`` and
    ``stats["exhausted"]`` report how the walk ended.
    """
    bound = grid.rows * grid.cols
    path: List[Position] = [start]
    on_path = {start}
    stack = [grid.neighbors(start)]
    steps = 0
    exhausted = False

    try:
        while stack:
            nxt = next(stack[-1], None)
            if nxt is None:
                stack.pop()
                on_path.discard(path.pop())
                continue
            if nxt in on_path or not _can_step(grid, nxt, end):
                continue
            if nxt == end:
                yield path + [end]
                continue
            if len(path) + 1 >= bound:
                continue
            steps += 1
            if max_steps is not None and steps > max_steps:
                exhausted = True
                return
            path.append(nxt)
            on_path.add(nxt)
            stack.append(grid.neighbors(nxt))
    finally:
        if stats is not None:
            stats["steps"] = steps
            stats["exhausted"] = int(exhausted)


def best_first_path(grid: Grid, start: Position, end: Position) -> Optional[List[Position]]:
    """Greedy best-first search keyed on Manhattan distance to ``end``.

    Returns at most one path; ties are broken by discovery order.
    """
    counter = 0
    parent: Dict[Position, Optional[Position]] = {start: None}
    queue = [(manhattan(start, end), counter, start)]
    while queue:
        _, _, pos = heapq.heappop(queue)
        if pos == end:
            out: List[Position] = []
            cur: Optional[Position] = pos
            while cur is not None:
                out.append(cur)
                cur = parent[cur]
            out.reverse()
            return out
        for nb in grid.neighbors(pos):
            if nb in parent or not _can_step(grid, nb, end):
                continue
            parent[nb] = pos
            counter += 1
            heapq.heappush(queue, (manhattan(nb, end), counter, nb))
    return None


def candidate_paths(
    grid: Grid,
    color: Color,
    start: Position,
    end: Position,
    *,
    max_paths: Optional[int] = None,
    max_steps: Optional[int] = None,
) -> Iterator[List[Position]]:
    """Lazily yield the paths :func:`enumerate_paths` would return.

    The grid may be modified between two ``next`` calls as long as it is
    restored before the generator is resumed (the backtracking solver relies
    on this).
    """
    found = 0
    stats: Dict[str, int] = {}
    walker = iter_simple_paths(grid, start, end, max_steps=max_steps, stats=stats)
    try:
        for path in walker:
            found += 1
            yield path
            if max_paths is not None and found >= max_paths:
                return
    finally:
        walker.close()

    if found:
        return
    if stats.get("exhausted"):
        LOGGER.warning("Path search for %r hit its step budget, trying best-first", color)
    fallback = best_first_path(grid, start, end)
    if fallback is not None:
        yield fallback


def enumerate_paths(
    grid: Grid,
    color: Color,
    start: Position,
    end: Position,
    *,
    max_paths: Optional[int] = None,
    max_steps: Optional[int] = None,
) -> List[List[Position]]:
    """All simple paths joining ``color``'s anchors on the current grid.

    Falls back to a single best-first path when the exhaustive walk produced
    nothing. The result is a fixed function of the inputs; callers shuffle.
    """
    return list(candidate_paths(grid, color, start, end, max_paths=max_paths, max_steps=max_steps))
