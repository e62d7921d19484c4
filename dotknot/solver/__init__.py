import random
from typing import Optional

from ..config import SearchLimits
from ..level import Level
from .backtrack import count_solutions, is_unique, iter_solutions, solve_with_backtracking
from .paths import best_first_path, candidate_paths, enumerate_paths, iter_simple_paths
from .types import Solution, SolverName
from .z3_solver import count_solutions_with_z3, solve_with_z3

SOLVER_CHOICES: tuple[SolverName, ...] = ("backtrack", "z3")


def solve_level(
    level: Level,
    *,
    solver: SolverName = "backtrack",
    rng: Optional[random.Random] = None,
    limits: Optional[SearchLimits] = None,
    timeout_ms: Optional[int] = 30_000,
) -> Optional[Solution]:
    if solver == "backtrack":
        return solve_with_backtracking(level, rng=rng, limits=limits)
    if solver == "z3":
        return solve_with_z3(level, timeout_ms=timeout_ms)
    raise ValueError(f"Unknown solver {solver!r}. Choose one of: {', '.join(SOLVER_CHOICES)}")


__all__ = [
    "SOLVER_CHOICES",
    "Solution",
    "SolverName",
    "best_first_path",
    "candidate_paths",
    "count_solutions",
    "count_solutions_with_z3",
    "enumerate_paths",
    "is_unique",
    "iter_simple_paths",
    "iter_solutions",
    "solve_level",
    "solve_with_backtracking",
    "solve_with_z3",
]
