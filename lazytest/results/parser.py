"""Line-oriented parser turning build-tool output into pass/fail/coverage records.

The first whitespace-delimited token of each line is looked up in a small
classification table. Pass lines are recorded immediately. Failure reports
span several lines: everything up to and including the line that names the
failing package is collected into one message. Lines the table does not know
are continuation text for whatever message is being collected.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

COVERAGE_UNKNOWN = -1.0
COVERAGE_MARKER = "coverage: "


class LineKind(enum.Enum):
    PASS = "pass"
    FAIL = "fail"
    CONTINUATION = "continuation"


class ParserState(enum.Enum):
    IDLE = "idle"
    ACCUMULATING_FAIL = "accumulating_fail"


# Token -> outcome. Extend this (or pass a custom table) for other tools.
RESPONSE_TYPES: Mapping[str, LineKind] = {
    "ok": LineKind.PASS,
    "FAIL": LineKind.FAIL,
}


@dataclass(frozen=True)
class ResultEntry:
    """One pass or failure message tagged with its package name."""

    package: str
    message: str


@dataclass(frozen=True)
class RunResult:
    """Finalized pass/fail/coverage records for one run."""

    passes: tuple[ResultEntry, ...] = ()
    failures: tuple[ResultEntry, ...] = ()
    coverage: dict[str, float] = field(default_factory=dict)

    @property
    def pass_messages(self) -> list[str]:
        return [entry.message for entry in self.passes]

    @property
    def fail_messages(self) -> list[str]:
        return [entry.message for entry in self.failures]


def first_token(line: str) -> str:
    fields = line.split()
    return fields[0] if fields else ""


def parse_coverage(line: str) -> float:
    """Extract ``coverage: NN.N%`` from ``line``.

    Returns ``COVERAGE_UNKNOWN`` when the marker is absent, the number is
    malformed, or the value falls outside ``[0, 100]``.
    """
    start = line.find(COVERAGE_MARKER)
    if start < 0:
        return COVERAGE_UNKNOWN
    start += len(COVERAGE_MARKER)
    end = line.find("%", start)
    if end <= start:
        return COVERAGE_UNKNOWN
    try:
        value = float(line[start:end].strip())
    except ValueError:
        return COVERAGE_UNKNOWN
    if not 0.0 <= value <= 100.0:
        return COVERAGE_UNKNOWN
    return value


class OutputParser:
    """Incremental classifier over an output line stream.

    Feed lines with ``feed``/``feed_text`` and call ``finish`` once all output
    has arrived; the returned ``RunResult`` is never mutated afterwards.
    """

    def __init__(self, response_types: Mapping[str, LineKind] | None = None) -> None:
        self._response_types = dict(RESPONSE_TYPES if response_types is None else response_types)
        self._fail_markers = {token for token, kind in self._response_types.items() if kind is LineKind.FAIL}
        self.state = ParserState.IDLE
        self._buffer: list[str] = []
        self._passes: list[ResultEntry] = []
        self._failures: list[ResultEntry] = []
        self._coverage: dict[str, float] = {}

    def classify(self, line: str) -> LineKind:
        return self._response_types.get(first_token(line), LineKind.CONTINUATION)

    def package_name(self, line: str) -> str:
        """Return the package named by a pass or failure summary line.

        Lines that start with a status token carry the package in their
        second token; a bare detail row (``pkg\\t[build failed]``) carries it
        in the first.
        """
        fields = line.split()
        if not fields:
            return ""
        if fields[0] in self._response_types:
            return fields[1] if len(fields) > 1 else ""
        return fields[0]

    def _is_bare_marker(self, line: str) -> bool:
        return line.strip() in self._fail_markers

    def _is_detail_row(self, line: str) -> bool:
        # Summary rows are tab-separated and start in column zero; indented
        # stack traces and "exit status" lines are neither.
        return bool(line) and not line[0].isspace() and "\t" in line

    def _record(self, package: str, line: str) -> None:
        if package:
            self._coverage[package] = parse_coverage(line)

    def _flush_failure(self, line: str) -> None:
        self._buffer.append(line)
        package = self.package_name(line)
        self._failures.append(ResultEntry(package=package, message="\n".join(self._buffer)))
        self._buffer = []
        self.state = ParserState.IDLE
        self._record(package, line)

    def feed(self, line: str) -> None:
        line = line.rstrip("\r\n")
        kind = self.classify(line)

        if kind is LineKind.PASS:
            package = self.package_name(line)
            self._passes.append(ResultEntry(package=package, message=line))
            self._record(package, line)
            return

        if kind is LineKind.FAIL:
            if self._is_bare_marker(line):
                self._buffer.append(line)
                self.state = ParserState.ACCUMULATING_FAIL
                return
            self._flush_failure(line)
            return

        if self.state is ParserState.ACCUMULATING_FAIL and self._is_detail_row(line):
            self._flush_failure(line)
            return
        self._buffer.append(line)

    def feed_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.feed(line)

    def feed_text(self, text: str) -> None:
        self.feed_lines(text.splitlines())

    def finish(self) -> RunResult:
        """Finalize and return the result.

        Text still buffered here never reached a failure summary line and is
        dropped; the engine keeps the raw output of any package that failed
        without one.
        """
        result = RunResult(
            passes=tuple(self._passes),
            failures=tuple(self._failures),
            coverage=dict(self._coverage),
        )
        self._buffer = []
        self.state = ParserState.IDLE
        return result


def parse_output(text: str, response_types: Mapping[str, LineKind] | None = None) -> RunResult:
    """Parse a complete multi-line output blob in one call."""
    parser = OutputParser(response_types)
    parser.feed_text(text)
    return parser.finish()


def merge_results(results: Sequence[RunResult]) -> RunResult:
    """Concatenate per-package results in the given order."""
    passes: list[ResultEntry] = []
    failures: list[ResultEntry] = []
    coverage: dict[str, float] = {}
    for result in results:
        passes.extend(result.passes)
        failures.extend(result.failures)
        coverage.update(result.coverage)
    return RunResult(
        passes=tuple(passes),
        failures=tuple(failures),
        coverage=coverage,
    )


__all__ = [
    "COVERAGE_MARKER",
    "COVERAGE_UNKNOWN",
    "LineKind",
    "OutputParser",
    "ParserState",
    "RESPONSE_TYPES",
    "ResultEntry",
    "RunResult",
    "merge_results",
    "parse_coverage",
    "parse_output",
]
