"""Move validation, win detection and the interactive solvability guard."""

from __future__ import annotations

from collections import deque
from typing import Optional, Sequence

from .grid import Color, Grid, Position, is_adjacent
from .level import Level


def is_valid_step(
    grid: Grid,
    last: Position,
    nxt: Position,
    color: Color,
    current_path: Sequence[Position],
) -> bool:
    """Can a path of ``color`` being drawn at ``last`` continue into ``nxt``?

    1) ``nxt`` is in bounds
    2) it is not already on the path
    3) it is orthogonally adjacent to ``last``
    4) it is empty, or an anchor of ``color``
    """
    if not grid.in_bounds(nxt):
        return False
    if nxt in current_path:
        return False
    if not is_adjacent(last, nxt):
        return False
    return is_cell_available(grid, nxt, color)


def is_cell_available(grid: Grid, pos: Position, color: Color) -> bool:
    current = grid.color_at(pos)
    return current is None or (grid.is_anchor(pos) and current == color)


def has_path_overlap(grid: Grid, color: Color, path: Sequence[Position]) -> bool:
    """True if ``path`` crosses a cell owned by another color."""
    for pos in path:
        current = grid.color_at(pos)
        if current is not None and current != color:
            return True
    return False


def validate_path(grid: Grid, level: Level, color: Color, path: Sequence[Position]) -> bool:
    """Full check of a proposed path for ``color`` before it is committed.

    The path must run from one of the color's anchors to the other (either
    direction), every step must be legal, and no cell may belong to another
    color. Cells already holding ``color`` (its previous path) count as free.
    """
    anchors = level.anchors.get(color)
    if anchors is None or len(path) < 2:
        return False
    if {path[0], path[-1]} != set(anchors) or path[0] == path[-1]:
        return False
    if any(not grid.in_bounds(p) for p in path):
        return False
    if len(set(path)) != len(path):
        return False
    for prev, cur in zip(path, path[1:]):
        if not is_adjacent(prev, cur):
            return False
    for pos in path[1:-1]:
        current = grid.color_at(pos)
        if grid.is_anchor(pos) or (current is not None and current != color):
            return False
    return not has_path_overlap(grid, color, path)


def anchors_connected(grid: Grid, color: Color, a: Position, b: Position) -> bool:
    """BFS from ``a`` to ``b`` through cells holding ``color``."""
    if grid.color_at(a) != color:
        return False
    queue = deque([a])
    visited = {a}
    while queue:
        cur = queue.popleft()
        if cur == b:
            return True
        for nb in grid.neighbors(cur):
            if nb not in visited and grid.color_at(nb) == color:
                visited.add(nb)
                queue.append(nb)
    return False


def can_connect(grid: Grid, start: Position, end: Position) -> bool:
    """Is there a route from ``start`` to ``end`` through empty cells only?"""
    queue = deque([start])
    visited = {start}
    while queue:
        cur = queue.popleft()
        if cur == end:
            return True
        for nb in grid.neighbors(cur):
            if nb in visited:
                continue
            if nb != end and not grid.is_empty(nb):
                continue
            visited.add(nb)
            queue.append(nb)
    return False


def still_solvable(grid: Grid, level: Level, just_committed: Optional[Color] = None) -> bool:
    """Fast guard run after a path for ``just_committed`` was written.

    Every other color whose anchors are not yet joined must still be able to
    reach its partner through empty cells. This ignores competition between
    open colors for the same cells: ``False`` is reliable, ``True`` is not a
    proof of solvability.
    """
    for color, (a, b) in level.anchors.items():
        if color == just_committed:
            continue
        if anchors_connected(grid, color, a, b):
            continue
        if not can_connect(grid, a, b):
            return False
    return True


def is_win(grid: Grid, level: Level) -> bool:
    for color, (a, b) in level.anchors.items():
        if not anchors_connected(grid, color, a, b):
            return False
    return grid.is_full()
