"""
Generation Worker
=================
Runs level generation in a background thread so the caller (a UI loop or a
request handler) stays responsive.

At most one generation is in flight: asking for another while one is running
raises :class:`GenerationInProgress`. There is no cancellation; a hopeless
parameter set runs until the generator's attempt budget is spent.
"""

from __future__ import annotations

import random
import threading
import time
from concurrent.futures import Future
from typing import Any, Dict, Optional

from .config import GeneratorConfig
from .errors import GenerationInProgress
from .generator import LevelGenerator
from .level import Level
from .logger import get_logger

LOGGER = get_logger(__name__)


class GenerationWorker:
    """
    Usage:
        worker = GenerationWorker()
        job = worker.start(GeneratorConfig(rows=5, cols=5, pairs=3))
        ...
        level = job.result()          # blocks, or
        if not worker.is_running():
            level = worker.result()   # polls the latest run
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._done.set()
        self._thread: Optional[threading.Thread] = None
        self._config: Optional[GeneratorConfig] = None
        self._result: Optional[Level] = None
        self._error: Optional[BaseException] = None
        self._started_at: Optional[float] = None
        self._elapsed: Optional[float] = None

    # ── Public API ─────────────────────────────────────────────

    def start(self, config: GeneratorConfig, *, rng: Optional[random.Random] = None) -> "Future[Level]":
        """Launch generation in a daemon thread.

        The returned future resolves to this run's level (or its error), even
        if another run has started by the time the caller looks.
        """
        with self._lock:
            if not self._done.is_set():
                raise GenerationInProgress("A level is already being generated")
            self._done.clear()
            self._config = config
            self._result = None
            self._error = None
            self._elapsed = None
            self._started_at = time.monotonic()
            generator = LevelGenerator(config, rng=rng)
            job: "Future[Level]" = Future()
            job.set_running_or_notify_cancel()
            self._thread = threading.Thread(
                target=self._run, args=(generator, job), name="dotknot-generate", daemon=True
            )
            self._thread.start()
            return job

    def is_running(self) -> bool:
        return not self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current generation finishes; False on timeout."""
        return self._done.wait(timeout)

    def result(self) -> Optional[Level]:
        """The last generated level; re-raises the generation error if any."""
        if self.is_running():
            return None
        if self._error is not None:
            raise self._error
        return self._result

    def status(self) -> Dict[str, Any]:
        with self._lock:
            if not self._done.is_set():
                state = "running"
            elif self._error is not None:
                state = "failed"
            elif self._result is not None:
                state = "done"
            else:
                state = "idle"
            out: Dict[str, Any] = {"state": state}
            if self._elapsed is not None:
                out["elapsed_s"] = round(self._elapsed, 3)
            if self._error is not None:
                out["error"] = str(self._error)
            return out

    # ── Internals ──────────────────────────────────────────────

    def _run(self, generator: LevelGenerator, job: "Future[Level]") -> None:
        level: Optional[Level] = None
        error: Optional[BaseException] = None
        try:
            level = generator.generate()
        except Exception as e:
            LOGGER.warning("Generation failed: %s", e)
            error = e
        with self._lock:
            self._result = level
            self._error = error
            if self._started_at is not None:
                self._elapsed = time.monotonic() - self._started_at
            self._done.set()
        if error is not None:
            job.set_exception(error)
        else:
            job.set_result(level)
