from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from .level import Level

Position = Tuple[int, int]
Color = str

# Canonical step order: up, right, down, left. Enumeration order (and hence
# deterministic solving) depends on it.
DIRECTIONS: Tuple[Position, ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))


def manhattan(a: Position, b: Position) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def is_adjacent(a: Position, b: Position) -> bool:
    return manhattan(a, b) == 1


class Grid:
    """A rows x cols board of optional colors plus a per-cell anchor flag.

    Anchor cells keep their color for the life of the grid; writing over or
    clearing one is a contract violation. Solvers work on their own copies
    (see :meth:`copy`), never on a grid a caller can see.
    """

    def __init__(self, rows: int, cols: int) -> None:
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid dimensions must be positive (rows={rows}, cols={cols})")
        self.rows = rows
        self.cols = cols
        self._cells: List[List[Optional[Color]]] = [[None] * cols for _ in range(rows)]
        self._anchor: List[List[bool]] = [[False] * cols for _ in range(rows)]

    @classmethod
    def from_level(cls, level: "Level") -> "Grid":
        grid = cls(level.rows, level.cols)
        for color, (a, b) in level.anchors.items():
            grid.set_anchor(a, color)
            grid.set_anchor(b, color)
        return grid

    @classmethod
    def from_token_rows(cls, level: "Level", token_rows: Sequence[Sequence[str]]) -> "Grid":
        """Load an in-progress board for ``level``.

        Uppercase letters are colored cells, anything else is empty. Every
        anchor must carry its own color.
        """
        if len(token_rows) != level.rows or any(len(r) != level.cols for r in token_rows):
            raise ValueError(f"Board state must be {level.rows}x{level.cols}")
        grid = cls.from_level(level)
        for r, row in enumerate(token_rows):
            for c, raw in enumerate(row):
                tok = str(raw)
                pos = (r, c)
                is_color = tok.isalpha() and tok.upper() == tok
                if grid.is_anchor(pos):
                    if tok != grid.color_at(pos):
                        raise ValueError(f"Anchor at {pos} must be {grid.color_at(pos)!r}, got {tok!r}")
                    continue
                if not is_color:
                    continue
                if tok not in level.anchors:
                    raise ValueError(f"Unknown color {tok!r} at {pos}")
                grid.set_color(pos, tok)
        return grid

    def copy(self) -> "Grid":
        clone = Grid(self.rows, self.cols)
        clone._cells = [row[:] for row in self._cells]
        clone._anchor = [row[:] for row in self._anchor]
        return clone

    def in_bounds(self, pos: Position) -> bool:
        r, c = pos
        return 0 <= r < self.rows and 0 <= c < self.cols

    def color_at(self, pos: Position) -> Optional[Color]:
        self._require_in_bounds(pos)
        return self._cells[pos[0]][pos[1]]

    def is_anchor(self, pos: Position) -> bool:
        self._require_in_bounds(pos)
        return self._anchor[pos[0]][pos[1]]

    def is_empty(self, pos: Position) -> bool:
        self._require_in_bounds(pos)
        return self._cells[pos[0]][pos[1]] is None

    def set_anchor(self, pos: Position, color: Color) -> None:
        self._require_in_bounds(pos)
        r, c = pos
        if self._anchor[r][c]:
            raise ValueError(f"Cell {pos} is already an anchor for {self._cells[r][c]!r}")
        self._cells[r][c] = color
        self._anchor[r][c] = True

    def set_color(self, pos: Position, color: Color) -> None:
        self._require_in_bounds(pos)
        r, c = pos
        if self._anchor[r][c]:
            if self._cells[r][c] != color:
                raise ValueError(f"Anchor {pos} belongs to {self._cells[r][c]!r}, not {color!r}")
            return
        self._cells[r][c] = color

    def clear(self, pos: Position) -> None:
        self._require_in_bounds(pos)
        r, c = pos
        if self._anchor[r][c]:
            raise ValueError(f"Cannot clear anchor cell {pos}")
        self._cells[r][c] = None

    def neighbors(self, pos: Position) -> Iterator[Position]:
        r, c = pos
        for dr, dc in DIRECTIONS:
            nr, nc = r + dr, c + dc
            if 0 <= nr < self.rows and 0 <= nc < self.cols:
                yield (nr, nc)

    def positions(self) -> Iterator[Position]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def cells_of(self, color: Color) -> List[Position]:
        return [p for p in self.positions() if self._cells[p[0]][p[1]] == color]

    def empty_count(self) -> int:
        return sum(row.count(None) for row in self._cells)

    def is_full(self) -> bool:
        return all(cell is not None for row in self._cells for cell in row)

    def place_path(self, color: Color, path: Iterable[Position]) -> List[Position]:
        """Write ``color`` along ``path``; return the cells that were empty."""
        written: List[Position] = []
        for pos in path:
            current = self.color_at(pos)
            if current is None:
                self._cells[pos[0]][pos[1]] = color
                written.append(pos)
            elif current != color:
                raise ValueError(f"Cell {pos} already holds {current!r}")
        return written

    def clear_cells(self, cells: Iterable[Position]) -> None:
        for pos in cells:
            self.clear(pos)

    def remove_color(self, color: Color) -> None:
        """Clear every non-anchor cell holding ``color``."""
        for r in range(self.rows):
            for c in range(self.cols):
                if self._cells[r][c] == color and not self._anchor[r][c]:
                    self._cells[r][c] = None

    def restore(self, snapshot: Sequence[Sequence[Optional[Color]]]) -> None:
        """Restore non-anchor cells from :meth:`snapshot` output."""
        for r in range(self.rows):
            for c in range(self.cols):
                if not self._anchor[r][c]:
                    self._cells[r][c] = snapshot[r][c]

    def snapshot(self) -> Tuple[Tuple[Optional[Color], ...], ...]:
        return tuple(tuple(row) for row in self._cells)

    def color_counts(self) -> Dict[Color, int]:
        counts: Dict[Color, int] = {}
        for row in self._cells:
            for cell in row:
                if cell is not None:
                    counts[cell] = counts.get(cell, 0) + 1
        return counts

    def to_token_rows(self) -> List[str]:
        sep = " " if any(cell is not None and len(cell) > 1 for row in self._cells for cell in row) else ""
        return [sep.join(cell if cell is not None else "." for cell in row) for row in self._cells]

    def _require_in_bounds(self, pos: Position) -> None:
        # Negative indices would silently wrap around.
        r, c = pos
        if not (0 <= r < self.rows and 0 <= c < self.cols):
            raise KeyError(f"Position out of bounds: {pos!r} for {self.rows}x{self.cols} grid")

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.cols}, empty={self.empty_count()})"
