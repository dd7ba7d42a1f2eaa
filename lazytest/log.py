"""Logging helpers that keep every logger under the ``lazytest`` namespace.

``setup_base_logger`` configures the base logger once per process and
``get_logger`` hands out namespaced children (``lazytest.watch`` and so on).
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

BASE_LOGGER_NAME = "lazytest"
LOG_FORMAT = "%(levelname)s: %(message)s"


def setup_base_logger(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Configure the base ``lazytest`` logger and return it.

    Repeated calls only adjust the level so tests and the CLI can both call
    this without stacking handlers.
    """
    base = logging.getLogger(BASE_LOGGER_NAME)
    if base.handlers:
        base.setLevel(level)
        return base

    base.setLevel(level)
    base.propagate = False
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    base.addHandler(handler)
    return base


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a namespaced logger under ``lazytest``."""
    if not name or name == BASE_LOGGER_NAME:
        return logging.getLogger(BASE_LOGGER_NAME)
    if name.startswith(BASE_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{BASE_LOGGER_NAME}.{name}")


def level_for_flags(verbose: bool, quiet: bool) -> int:
    """Map CLI verbosity flags to a logging level."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO
