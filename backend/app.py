from __future__ import annotations

import os
import random
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from dotknot.board import Board, MoveOutcome
from dotknot.config import GeneratorConfig
from dotknot.errors import DotKnotError, GenerationInProgress, InvalidParameterError
from dotknot.generator import LevelGenerator
from dotknot.grid import Grid
from dotknot.hints import find_hint
from dotknot.level import Level, parse_flow_text
from dotknot.palette import color_label
from dotknot.solver import count_solutions, count_solutions_with_z3, solve_level
from dotknot.solver.types import Solution
from dotknot.worker import GenerationWorker

MAX_TIMEOUT_MS = 1_000_000
MAX_SIDE = 12

ENV_CONFIG = GeneratorConfig.from_env()


def _parse_level(text: str, *, name: str) -> Level:
    return Level.from_flow_text(text, source_name=name)


def _parse_state(level: Level, state: Optional[List[str]]) -> Grid:
    if not state:
        return Grid.from_level(level)
    _meta, token_rows = parse_flow_text("\n".join(state))
    return Grid.from_token_rows(level, token_rows)


def _level_payload(level: Level) -> Dict[str, Any]:
    out = level.to_dict()
    out["text"] = level.to_flow_text()
    out["labels"] = {c: color_label(c) for c in level.anchors}
    return out


def _solution_payload(level: Level, solution: Solution) -> Dict[str, Any]:
    return {
        "paths": {c: [list(p) for p in path] for c, path in solution.paths.items()},
        "cell_color": [[solution.cell_color.get((r, c)) for c in range(level.cols)] for r in range(level.rows)],
    }


class LevelRequest(BaseModel):
    name: str = Field(default="level.flow")
    text: str


class SolveRequest(LevelRequest):
    solver: str = Field(default="backtrack")
    timeout_ms: Optional[int] = Field(default=30_000, ge=1, le=MAX_TIMEOUT_MS)
    seed: Optional[int] = None


class BoardRequest(LevelRequest):
    state: Optional[List[str]] = None


class CommitRequest(BoardRequest):
    color: str
    path: List[List[int]]


class GenerateRequest(BaseModel):
    rows: int = Field(default=ENV_CONFIG.rows, ge=1, le=MAX_SIDE)
    cols: int = Field(default=ENV_CONFIG.cols, ge=1, le=MAX_SIDE)
    pairs: int = Field(default=ENV_CONFIG.pairs, ge=1)
    require_unique: bool = ENV_CONFIG.require_unique
    max_attempts: int = Field(default=ENV_CONFIG.max_attempts, ge=1)
    seed: Optional[int] = ENV_CONFIG.seed
    wait: bool = True


app = FastAPI(title="dotknot API", version="0.1.0")
worker = GenerationWorker()

cors_raw = os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
cors_list = [c.strip() for c in cors_raw.split(",") if c.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_list or ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/generate")
def generate(req: GenerateRequest) -> Dict[str, Any]:
    config = GeneratorConfig(
        rows=req.rows,
        cols=req.cols,
        pairs=req.pairs,
        require_unique=req.require_unique,
        max_attempts=req.max_attempts,
        seed=req.seed,
        limits=ENV_CONFIG.limits,
    )
    try:
        LevelGenerator(config).validate()
    except InvalidParameterError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    try:
        job = worker.start(config, rng=random.Random(req.seed) if req.seed is not None else None)
    except GenerationInProgress as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    if not req.wait:
        return worker.status()
    try:
        level = job.result()
    except DotKnotError as e:
        return {"state": "failed", "error": str(e)}
    return {"state": "done", "level": _level_payload(level)}


@app.get("/generate/status")
def generation_status() -> Dict[str, Any]:
    out = worker.status()
    if out["state"] == "done":
        level = worker.result()
        if level is not None:
            out["level"] = _level_payload(level)
    return out


@app.post("/solve")
def solve(req: SolveRequest) -> Dict[str, Any]:
    try:
        level = _parse_level(req.text, name=req.name)
        rng = random.Random(req.seed) if req.seed is not None else None
        solution = solve_level(level, solver=req.solver, rng=rng, limits=ENV_CONFIG.limits, timeout_ms=req.timeout_ms)  # type: ignore[arg-type]
    except (ValueError, DotKnotError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if solution is None:
        return {"solved": False}
    return {"solved": True, **_solution_payload(level, solution)}


@app.post("/unique")
def unique(req: SolveRequest) -> Dict[str, Any]:
    try:
        level = _parse_level(req.text, name=req.name)
        if req.solver == "z3":
            found = count_solutions_with_z3(level, limit=2, timeout_ms=req.timeout_ms)
        elif req.solver == "backtrack":
            found = count_solutions(level, limit=2, limits=ENV_CONFIG.limits)
        else:
            raise ValueError(f"Unknown solver {req.solver!r}")
    except (ValueError, DotKnotError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return {"solvable": found > 0, "unique": found == 1}


@app.post("/hint")
def hint(req: BoardRequest) -> Dict[str, Any]:
    try:
        level = _parse_level(req.text, name=req.name)
        grid = _parse_state(level, req.state)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    found = find_hint(level, grid, limits=ENV_CONFIG.limits)
    return {"hint": found.to_dict() if found is not None else None}


@app.post("/validate")
def validate(req: CommitRequest) -> Dict[str, Any]:
    try:
        level = _parse_level(req.text, name=req.name)
        grid = _parse_state(level, req.state)
        path = [(int(p[0]), int(p[1])) for p in req.path]
    except (ValueError, IndexError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    board = Board(level, grid)
    outcome = board.commit_path(req.color, path)
    return {
        "outcome": outcome.value,
        "applied": outcome == MoveOutcome.APPLIED,
        "state": board.grid.to_token_rows(),
        "win": board.is_win(),
    }


if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    reload = os.environ.get("RELOAD", "1").lower() in {"1", "true", "yes", "y", "on"}
    uvicorn.run("backend.app:app", host=host, port=port, reload=reload)
