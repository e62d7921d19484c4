"""Local launcher for the dotknot HTTP API: ``python app.py``."""

from __future__ import annotations

import os

import uvicorn

from dotknot.logger import configure_logging, get_logger

LOGGER = get_logger("dotknot.server")


def run() -> None:
    configure_logging()
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    reload = os.environ.get("RELOAD", "1").lower() in {"1", "true", "yes", "y", "on"}
    LOGGER.info("Serving dotknot API on %s:%d (reload=%s)", host, port, reload)
    uvicorn.run("backend.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    run()
