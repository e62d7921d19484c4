from __future__ import annotations

import argparse
import logging
import random
from pathlib import Path
from typing import Optional, Sequence

from .config import GeneratorConfig, SearchLimits
from .errors import DotKnotError
from .generator import LevelGenerator
from .grid import Grid
from .hints import find_hint
from .level import Level, parse_flow_text
from .logger import configure_logging
from .palette import color_label
from .solver import SOLVER_CHOICES, count_solutions, count_solutions_with_z3, solve_level
from .viz import write_plotly_html


def main(argv: Optional[Sequence[str]] = None) -> int:
    env = GeneratorConfig.from_env()

    parser = argparse.ArgumentParser(prog="dotknot", description="Connect-the-dots level generator + solver")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every generation attempt")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_gen = sub.add_parser("generate", help="Generate a random solvable level")
    p_gen.add_argument("--rows", type=int, default=env.rows)
    p_gen.add_argument("--cols", type=int, default=env.cols)
    p_gen.add_argument("--pairs", type=int, default=env.pairs, help="Number of color pairs")
    p_gen.add_argument("--unique", action="store_true", default=env.require_unique, help="Require a unique solution")
    p_gen.add_argument("--seed", type=int, default=env.seed)
    p_gen.add_argument("--max-attempts", type=int, default=env.max_attempts)
    p_gen.add_argument("--out", type=str, default=None, help="Write the level to this .flow file")
    p_gen.add_argument("--html", type=str, default=None, help="Write an HTML preview of the solved level")

    p_solve = sub.add_parser("solve", help="Solve a level and print its paths")
    p_solve.add_argument("level", type=str, help="Path to .flow or .json level file")
    p_solve.add_argument("--solver", choices=SOLVER_CHOICES, default="backtrack", help="Solver backend")
    p_solve.add_argument("--timeout-ms", type=int, default=30_000, help="Timeout for the z3 backend")
    p_solve.add_argument("--seed", type=int, default=None, help="Shuffle candidate paths with this seed")
    p_solve.add_argument("--out", type=str, default=None, help="Write an HTML preview of the solution")

    p_check = sub.add_parser("check", help="Report whether a level is solvable and unique")
    p_check.add_argument("level", type=str, help="Path to .flow or .json level file")
    p_check.add_argument("--solver", choices=SOLVER_CHOICES, default="backtrack", help="Solver backend")
    p_check.add_argument("--timeout-ms", type=int, default=30_000, help="Timeout for the z3 backend")

    p_hint = sub.add_parser("hint", help="Suggest the next move for a board in progress")
    p_hint.add_argument("level", type=str, help="Path to .flow or .json level file")
    p_hint.add_argument("state", type=str, help="Board state file (level grid with placed path letters)")

    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        return _dispatch(args, env.limits)
    except DotKnotError as e:
        print(f"error: {e}")
        return 1


def _dispatch(args: argparse.Namespace, limits: SearchLimits) -> int:
    if args.cmd == "generate":
        config = GeneratorConfig(
            rows=args.rows,
            cols=args.cols,
            pairs=args.pairs,
            require_unique=args.unique,
            max_attempts=args.max_attempts,
            seed=args.seed,
            limits=limits,
        )
        level = LevelGenerator(config).generate()
        text = level.to_flow_text()
        if args.out:
            out = Path(args.out)
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(text, encoding="utf-8")
            print(f"Wrote level: {out}")
        else:
            print(text, end="")
        if args.html:
            solution = solve_level(level, limits=limits)
            out = write_plotly_html(level, out_path=args.html, solution=solution, title="Generated level")
            print(f"Wrote preview: {out}")
        return 0

    level_path = Path(args.level)
    level = Level.from_file(level_path)

    if args.cmd == "solve":
        rng = random.Random(args.seed) if args.seed is not None else None
        solution = solve_level(level, solver=args.solver, rng=rng, limits=limits, timeout_ms=args.timeout_ms)
        if solution is None:
            print(f"{level_path.name}: no full-coverage solution")
            return 2
        print(f"Solved {level_path.name}: colors={len(level.anchors)}, cells={level.rows * level.cols}")
        for color, path in solution.paths.items():
            print(f"  {color} ({color_label(color)}): " + " ".join(f"{r},{c}" for r, c in path))
        if args.out:
            out = write_plotly_html(level, out_path=args.out, solution=solution, title=f"Solution: {level_path.name}")
            print(f"Wrote solution visualization: {out}")
        return 0

    if args.cmd == "check":
        if args.solver == "z3":
            found = count_solutions_with_z3(level, limit=2, timeout_ms=args.timeout_ms)
        else:
            found = count_solutions(level, limit=2, limits=limits)
        print(f"{level_path.name}: solvable={found > 0} unique={found == 1}")
        return 0 if found else 2

    if args.cmd == "hint":
        _, token_rows = parse_flow_text(Path(args.state).read_text(encoding="utf-8"))
        grid = Grid.from_token_rows(level, token_rows)
        hint = find_hint(level, grid, limits=limits)
        if hint is None:
            print("No hint available")
            return 0
        print(f"Hint: continue {hint.label} ({hint.color}) at row {hint.position[0]}, col {hint.position[1]}")
        return 0

    raise AssertionError("unreachable")
