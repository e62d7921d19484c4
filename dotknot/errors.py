"""Exception hierarchy for level generation and solving.

Unsolvable levels, missing hints and failed guard checks are *not* errors:
they are reported as ``None`` / ``False`` by the functions concerned.
"""

from __future__ import annotations

from typing import Optional


class DotKnotError(Exception):
    """Base exception for dotknot failures."""


class InvalidParameterError(DotKnotError, ValueError):
    """Raised when generation parameters can never produce a level."""


class GenerationFailure(DotKnotError):
    """Raised when the generator exhausts its attempt budget."""

    def __init__(self, message: str, *, attempts: Optional[int] = None) -> None:
        super().__init__(message)
        self.attempts = attempts


class GenerationInProgress(DotKnotError):
    """Raised when a generation is requested while another one is running."""


class SolverTimeoutError(DotKnotError):
    """Raised when a time-limited solver backend gives up without an answer."""
