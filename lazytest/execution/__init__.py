"""Process execution and the serial/parallel fan-out engine."""

from .engine import ExecutionEngine, PackageOutcome, RunReport
from .process import ProcessResult, run_command

__all__ = ["ExecutionEngine", "PackageOutcome", "ProcessResult", "RunReport", "run_command"]
