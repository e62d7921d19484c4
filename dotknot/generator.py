"""Random level generation with solvability (and optional uniqueness) checks."""

from __future__ import annotations

import random
from typing import Dict, List, Optional

from .config import DEFAULT_MAX_ATTEMPTS, GeneratorConfig, SearchLimits
from .errors import GenerationFailure, InvalidParameterError
from .grid import Position
from .level import AnchorPair, Level
from .logger import get_logger
from .palette import PALETTE, Color
from .solver.backtrack import is_unique, solve_with_backtracking

LOGGER = get_logger(__name__)


def place_random_anchors(rows: int, cols: int, pair_count: int, rng: random.Random) -> Dict[Color, AnchorPair]:
    """Pick ``pair_count`` palette colors and two distinct free cells for each."""
    colors = rng.sample([p.code for p in PALETTE], pair_count)
    cells: List[Position] = [(r, c) for r in range(rows) for c in range(cols)]
    picked = rng.sample(cells, 2 * pair_count)
    return {color: (picked[2 * i], picked[2 * i + 1]) for i, color in enumerate(colors)}


class LevelGenerator:
    """Sample anchor layouts until one passes the solver.

    Every attempt draws a fresh layout; the solver (and, if requested, the
    uniqueness check) decides whether to keep it. After ``max_attempts``
    rejected layouts a :class:`GenerationFailure` is raised.
    """

    def __init__(self, config: GeneratorConfig, *, rng: Optional[random.Random] = None) -> None:
        self.config = config
        self.rng = rng if rng is not None else random.Random(config.seed)

    def validate(self) -> None:
        cfg = self.config
        if cfg.rows <= 0 or cfg.cols <= 0:
            raise InvalidParameterError(f"Board size must be positive (rows={cfg.rows}, cols={cfg.cols})")
        if cfg.pairs <= 0:
            raise InvalidParameterError(f"Pair count must be positive (got {cfg.pairs})")
        if cfg.pairs > len(PALETTE):
            raise InvalidParameterError(
                f"Too many color pairs requested: {cfg.pairs}, maximum is {len(PALETTE)}"
            )
        if 2 * cfg.pairs > cfg.rows * cfg.cols:
            raise InvalidParameterError(
                f"{cfg.pairs} pairs need {2 * cfg.pairs} anchor cells, board has {cfg.rows * cfg.cols}"
            )
        if cfg.max_attempts <= 0:
            raise InvalidParameterError(f"max_attempts must be positive (got {cfg.max_attempts})")

    def generate(self) -> Level:
        self.validate()
        cfg = self.config
        LOGGER.info(
            "Generating %dx%d level with %d pairs (unique=%s)", cfg.rows, cfg.cols, cfg.pairs, cfg.require_unique
        )

        for attempt in range(1, cfg.max_attempts + 1):
            anchors = place_random_anchors(cfg.rows, cfg.cols, cfg.pairs, self.rng)
            level = Level(rows=cfg.rows, cols=cfg.cols, anchors=anchors)

            solution = solve_with_backtracking(level, rng=self.rng, limits=cfg.limits)
            if solution is None:
                LOGGER.debug("Attempt %d: unsolvable", attempt)
                continue
            if cfg.require_unique and not is_unique(level, rng=self.rng, limits=cfg.limits):
                LOGGER.debug("Attempt %d: solvable but not unique", attempt)
                continue

            LOGGER.info("Generated level after %d attempt(s)", attempt)
            return Level(rows=cfg.rows, cols=cfg.cols, anchors=anchors, meta={"attempts": attempt})

        raise GenerationFailure(
            f"Failed to generate a valid level after {cfg.max_attempts} attempts", attempts=cfg.max_attempts
        )


def generate_level(
    rows: int,
    cols: int,
    pair_count: int,
    require_unique: bool = False,
    *,
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    limits: Optional[SearchLimits] = None,
) -> Level:
    config = GeneratorConfig(
        rows=rows,
        cols=cols,
        pairs=pair_count,
        require_unique=require_unique,
        max_attempts=max_attempts,
        limits=limits or SearchLimits(),
    )
    return LevelGenerator(config, rng=rng).generate()
