from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Literal, Tuple

from ..grid import Color, Position, is_adjacent
from ..level import Level

SolverName = Literal["backtrack", "z3"]

Path = List[Position]
Signature = Tuple[Tuple[Color, FrozenSet[Position]], ...]


@dataclass
class Solution:
    paths: Dict[Color, Path]  # ordered cells from one anchor to the other
    cell_color: Dict[Position, Color]

    @classmethod
    def from_paths(cls, level: Level, paths: Dict[Color, Path]) -> "Solution":
        """Snapshot ``paths`` (in level color order) into a standalone solution."""
        ordered = {color: list(paths[color]) for color in level.colors()}
        cell_color: Dict[Position, Color] = {}
        for color, path in ordered.items():
            for pos in path:
                cell_color[pos] = color
        return cls(paths=ordered, cell_color=cell_color)

    def cells(self, color: Color) -> FrozenSet[Position]:
        return frozenset(self.paths[color])

    def signature(self) -> Signature:
        """Color -> cell set; two solutions with equal signatures are the same."""
        return tuple((color, frozenset(path)) for color, path in sorted(self.paths.items()))

    def check(self, level: Level) -> None:
        """Assert the full-coverage and path invariants against ``level``."""
        claimed: Dict[Position, Color] = {}
        for color, (a, b) in level.anchors.items():
            path = self.paths.get(color)
            if not path:
                raise AssertionError(f"Missing path for {color!r}")
            if {path[0], path[-1]} != {a, b}:
                raise AssertionError(f"Path for {color!r} does not join its anchors")
            if len(set(path)) != len(path):
                raise AssertionError(f"Path for {color!r} revisits a cell")
            for prev, cur in zip(path, path[1:]):
                if not is_adjacent(prev, cur):
                    raise AssertionError(f"Path for {color!r} jumps from {prev} to {cur}")
            for pos in path:
                if pos in claimed:
                    raise AssertionError(f"Cell {pos} claimed by {claimed[pos]!r} and {color!r}")
                claimed[pos] = color
        if len(claimed) != level.rows * level.cols:
            raise AssertionError("Solution does not cover the whole grid")
