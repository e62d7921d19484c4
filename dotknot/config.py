from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

DEFAULT_MAX_ATTEMPTS = 1000

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class SearchLimits:
    """Optional bounds on path enumeration.

    ``max_paths`` stops enumeration after that many paths per call;
    ``max_steps`` caps DFS expansions per call. ``None`` means unbounded,
    which keeps the solver and the uniqueness check exhaustive.
    """

    max_paths: Optional[int] = None
    max_steps: Optional[int] = None


@dataclass
class GeneratorConfig:
    rows: int = 5
    cols: int = 5
    pairs: int = 3
    require_unique: bool = False
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    seed: Optional[int] = None
    limits: SearchLimits = field(default_factory=SearchLimits)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GeneratorConfig":
        """Build a config from ``DOTKNOT_*`` variables.

        Missing or malformed values fall back to the dataclass defaults.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            rows=_positive_int(env.get("DOTKNOT_ROWS"), defaults.rows),
            cols=_positive_int(env.get("DOTKNOT_COLS"), defaults.cols),
            pairs=_positive_int(env.get("DOTKNOT_PAIRS"), defaults.pairs),
            require_unique=str(env.get("DOTKNOT_REQUIRE_UNIQUE", "")).lower() in _TRUE_VALUES,
            max_attempts=_positive_int(env.get("DOTKNOT_MAX_ATTEMPTS"), defaults.max_attempts),
            seed=_optional_int(env.get("DOTKNOT_SEED")),
            limits=SearchLimits(
                max_paths=_optional_positive_int(env.get("DOTKNOT_MAX_PATHS")),
                max_steps=_optional_positive_int(env.get("DOTKNOT_MAX_STEPS")),
            ),
        )


def _optional_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or not str(raw).strip():
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _optional_positive_int(raw: Optional[str]) -> Optional[int]:
    value = _optional_int(raw)
    if value is None or value <= 0:
        return None
    return value


def _positive_int(raw: Optional[str], default: int) -> int:
    value = _optional_positive_int(raw)
    return default if value is None else value
