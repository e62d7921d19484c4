"""Logging setup for dotknot entry points (CLI, HTTP launcher).

Library modules only call :func:`get_logger`; attempt-by-attempt generator
and solver chatter goes to DEBUG, outcomes to INFO.
"""

from __future__ import annotations

import logging
from typing import Optional, TextIO

_HANDLER_NAME = "dotknot-console"
_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def configure_logging(level: int = logging.INFO, *, stream: Optional[TextIO] = None) -> None:
    """Route log records to ``stream`` (stderr by default) at ``level``.

    Calling it again swaps the previous dotknot handler instead of stacking a
    second one; handlers installed by other code are left alone.
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "dotknot")
