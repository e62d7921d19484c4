from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..errors import SolverTimeoutError
from ..grid import Color, Position
from ..level import Level
from .types import Solution

Edge = Tuple[Position, Position]


def _import_z3():
    try:
        import z3  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("z3-solver is required. Install with: pip install z3-solver") from e
    return z3


def _grid_edges(level: Level) -> List[Edge]:
    edges: List[Edge] = []
    for r in range(level.rows):
        for c in range(level.cols):
            if c + 1 < level.cols:
                edges.append(((r, c), (r, c + 1)))
            if r + 1 < level.rows:
                edges.append(((r, c), (r + 1, c)))
    return edges


class _Encoding:
    """Full-coverage path puzzle as an SMT problem.

    - ``col[p]``: color index of every cell (every cell is used)
    - ``use[e]``: whether the solution path runs along grid edge ``e``
    - anchors have exactly one used edge, every other cell exactly two
    - a used edge joins cells of the same color
    - ``dist[p]`` counts steps back to the color's first anchor; every other
      cell needs a used edge to a cell one step closer, which rules out
      detached cycles

    Edges, not cell colors, carry the path, so a path may run alongside
    itself (the backtracking solver allows that too).
    """

    def __init__(self, level: Level, *, timeout_ms: Optional[int]) -> None:
        z3 = _import_z3()
        self.z3 = z3
        self.level = level
        self.colors = level.colors()
        self.cells = [(r, c) for r in range(level.rows) for c in range(level.cols)]
        self.edges = _grid_edges(level)

        self.col = {p: z3.Int(f"col_{p[0]}_{p[1]}") for p in self.cells}
        self.dist = {p: z3.Int(f"dist_{p[0]}_{p[1]}") for p in self.cells}
        self.use = {e: z3.Bool(f"use_{e[0][0]}_{e[0][1]}_{e[1][0]}_{e[1][1]}") for e in self.edges}

        incident: Dict[Position, List[Tuple[Any, Position]]] = {p: [] for p in self.cells}
        for e in self.edges:
            u, v = e
            incident[u].append((self.use[e], v))
            incident[v].append((self.use[e], u))

        s = z3.Solver()
        if timeout_ms is not None:
            s.set(timeout=timeout_ms)

        k = len(self.colors)
        for p in self.cells:
            s.add(z3.And(self.col[p] >= 0, self.col[p] < k))

        anchor_cells = level.anchor_cells()
        starts = set()
        for ci, color in enumerate(self.colors):
            a, b = level.anchors[color]
            s.add(self.col[a] == ci)
            s.add(self.col[b] == ci)
            s.add(self.dist[a] == 0)
            starts.add(a)

        for (u, v), used in self.use.items():
            s.add(z3.Implies(used, self.col[u] == self.col[v]))

        for p in self.cells:
            degree = z3.Sum([z3.If(used, 1, 0) for used, _ in incident[p]])
            s.add(degree == (1 if p in anchor_cells else 2))
            if p in starts:
                continue
            preds = [z3.And(used, self.dist[q] == self.dist[p] - 1) for used, q in incident[p]]
            s.add(self.dist[p] >= 1)
            s.add(z3.Or(preds))

        self.solver = s

    def check(self) -> bool:
        z3 = self.z3
        chk = self.solver.check()
        if chk == z3.unknown:
            raise SolverTimeoutError(f"Z3 returned UNKNOWN: {self.solver.reason_unknown()}")
        return chk == z3.sat

    def decode(self) -> Solution:
        z3 = self.z3
        model = self.solver.model()
        used_adj: Dict[Position, List[Position]] = {p: [] for p in self.cells}
        for (u, v), used in self.use.items():
            if z3.is_true(model.eval(used, model_completion=True)):
                used_adj[u].append(v)
                used_adj[v].append(u)

        paths: Dict[Color, List[Position]] = {}
        for color, (start, goal) in self.level.anchors.items():
            paths[color] = _walk_path(used_adj, start=start, goal=goal, color=color)
        return Solution.from_paths(self.level, paths)

    def block(self, solution: Solution) -> None:
        """Exclude every assignment with the same color -> cell mapping."""
        z3 = self.z3
        index = {color: i for i, color in enumerate(self.colors)}
        self.solver.add(z3.Or([self.col[p] != index[c] for p, c in solution.cell_color.items()]))


def _walk_path(
    used_adj: Dict[Position, List[Position]],
    *,
    start: Position,
    goal: Position,
    color: Color,
) -> List[Position]:
    path: List[Position] = [start]
    prev: Optional[Position] = None
    cur = start
    while cur != goal:
        nexts = [nb for nb in used_adj[cur] if nb != prev]
        if len(nexts) != 1:
            raise ValueError(
                f"Cannot uniquely reconstruct path for {color!r} at {cur!r} (candidates={nexts})."
            )
        prev, cur = cur, nexts[0]
        path.append(cur)
    return path


def solve_with_z3(level: Level, *, timeout_ms: Optional[int] = 30_000) -> Optional[Solution]:
    """Solve with Z3; ``None`` when the level has no full-coverage solution."""
    enc = _Encoding(level, timeout_ms=timeout_ms)
    if not enc.check():
        return None
    return enc.decode()


def count_solutions_with_z3(level: Level, *, limit: int = 2, timeout_ms: Optional[int] = 30_000) -> int:
    """Distinct color -> cell set solutions, up to ``limit``."""
    enc = _Encoding(level, timeout_ms=timeout_ms)
    found = 0
    while found < limit and enc.check():
        found += 1
        enc.block(enc.decode())
    return found
