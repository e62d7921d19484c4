"""Connect-the-dots level generation and solving.

Public entry points:

- ``dotknot.generator.generate_level`` / ``LevelGenerator``: random levels
  that the backtracking solver can fill (optionally with a unique solution).
- ``dotknot.solver``: path enumeration, backtracking and z3 solvers,
  uniqueness checks.
- ``dotknot.hints.find_hint`` and ``dotknot.board.Board``: interactive play
  support (hints, guarded path commits, win detection).
"""

from .board import Board, MoveOutcome
from .config import GeneratorConfig, SearchLimits
from .errors import DotKnotError, GenerationFailure, GenerationInProgress, InvalidParameterError
from .generator import LevelGenerator, generate_level
from .grid import Grid
from .hints import Hint, find_hint
from .level import Level

__all__ = [
    "Board",
    "DotKnotError",
    "GenerationFailure",
    "GenerationInProgress",
    "GeneratorConfig",
    "Grid",
    "Hint",
    "InvalidParameterError",
    "Level",
    "LevelGenerator",
    "MoveOutcome",
    "SearchLimits",
    "find_hint",
    "generate_level",
]

__version__ = "0.1.0"
