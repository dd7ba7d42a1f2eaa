"""Run one external command inside one package directory."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..log import get_logger

logger = get_logger("process")


@dataclass(frozen=True)
class ProcessResult:
    """Merged stdout/stderr text plus exit status of one invocation.

    ``returncode`` is ``None`` when the process could not be started.
    """

    output: str
    returncode: int | None

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def run_command(directory: Path, program: str, args: Sequence[str] = ()) -> ProcessResult:
    """Run ``program args...`` with ``directory`` as working directory.

    Standard error is merged into standard output. A command that cannot be
    spawned is reported as a failed result carrying the OS error text rather
    than raising, so one broken package never stops the others.
    """
    argv = [program, *args]
    logger.debug("running %s in %s", " ".join(argv), directory)
    try:
        proc = subprocess.run(
            argv,
            cwd=directory,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        logger.debug("could not start %s: %s", program, exc)
        return ProcessResult(output=f"failed to run {program}: {exc}", returncode=None)
    return ProcessResult(output=proc.stdout or "", returncode=proc.returncode)
