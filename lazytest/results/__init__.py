"""Output classification and run summaries."""

from .parser import COVERAGE_UNKNOWN, OutputParser, ResultEntry, RunResult, parse_output

__all__ = ["COVERAGE_UNKNOWN", "OutputParser", "ResultEntry", "RunResult", "parse_output"]
