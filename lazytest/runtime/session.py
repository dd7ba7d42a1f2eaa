"""Per-invocation context shared by the pipeline and the watch loop."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from ..errors import UsageError
from ..execution.engine import ExecutionEngine
from ..log import get_logger
from .config import Settings, load_exclusions, load_settings


def current_directory() -> Path:
    """Return the working directory, failing loudly when it is unavailable."""
    try:
        return Path(os.getcwd())
    except OSError as exc:
        raise UsageError(f"There was an error attempting to get the directory lazytest is running in: {exc}") from exc


@dataclass
class Session:
    """Everything one invocation needs, constructed once and passed around.

    ``exclusions`` is the in-memory copy of the project exclusion list; the
    file is only read here and written by the ``exclude``/``include``
    commands.
    """

    root: Path
    exclusions: list[str] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    logger: logging.Logger = field(default_factory=lambda: get_logger("session"))

    @classmethod
    def load(cls, root: Path | None = None, settings: Settings | None = None, stream: TextIO | None = None) -> Session:
        root = (root or current_directory()).resolve()
        if not root.is_dir():
            raise UsageError(f"Path not found: {root}")
        return cls(
            root=root,
            exclusions=load_exclusions(root),
            settings=settings if settings is not None else load_settings(),
            stream=stream if stream is not None else sys.stdout,
        )

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def engine(self) -> ExecutionEngine:
        return ExecutionEngine(
            self.root,
            self.settings.go_binary,
            self.stream,
            parallel=self.settings.parallel,
            max_workers=self.settings.max_workers,
        )
