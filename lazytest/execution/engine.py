"""Fan a command out over packages and fan the results back in.

Serial mode runs packages one after another in package order. Parallel mode
submits one job per package to a bounded thread pool and joins on all of
them before anything is aggregated, so a report is never built from partial
results. Text semantics live in ``lazytest.results``; this module only owns
sequencing and concurrency.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from ..commands import CommandSpec
from ..discovery.packages import package_directory
from ..log import get_logger
from ..results.parser import ResultEntry, RunResult, merge_results, parse_output
from .process import ProcessResult, run_command
from .progress import ProgressCounter

logger = get_logger("engine")

DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class PackageOutcome:
    """What one package's invocation produced."""

    package: str
    output: str
    returncode: int | None
    failed: bool


@dataclass(frozen=True)
class RunReport:
    """Finalized outcome of running one command over a package selection."""

    command: CommandSpec
    outcomes: tuple[PackageOutcome, ...]
    result: RunResult

    @property
    def ran(self) -> int:
        return len(self.outcomes)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.failed)

    @property
    def succeeded(self) -> int:
        return self.ran - self.failed


def outcome_failed(command: CommandSpec, result: ProcessResult) -> bool:
    """A package fails on non-zero exit, or on any output for commands where
    output itself means trouble (``vet``)."""
    if not result.succeeded:
        return True
    return command.output_is_failure and bool(result.output.strip())


def aggregate_outcomes(command: CommandSpec, outcomes: Sequence[PackageOutcome]) -> RunResult:
    """Build the pass/fail/coverage record for ``outcomes`` in their given order.

    Failed packages whose output did not contain a recognizable failure
    report still get a failure entry carrying their raw output.
    """
    results: list[RunResult] = []
    for outcome in outcomes:
        raw_failure = outcome.output.strip() or f"{outcome.package}: exit status {outcome.returncode}"
        if not command.parse_output:
            if outcome.failed:
                results.append(RunResult(failures=(ResultEntry(outcome.package, raw_failure),)))
            else:
                results.append(RunResult(passes=(ResultEntry(outcome.package, outcome.package),)))
            continue

        parsed = parse_output(outcome.output)
        if outcome.failed and not parsed.failures:
            parsed = RunResult(
                passes=parsed.passes,
                failures=(ResultEntry(outcome.package, raw_failure),),
                coverage=parsed.coverage,
            )
        results.append(parsed)
    return merge_results(results)


class ExecutionEngine:
    """Run a ``CommandSpec`` against packages under ``root``."""

    def __init__(
        self,
        root: Path,
        program: str,
        stream: TextIO,
        *,
        parallel: bool = True,
        max_workers: int | None = DEFAULT_MAX_WORKERS,
        runner: Callable[[Path, str, Sequence[str]], ProcessResult] = run_command,
    ) -> None:
        self.root = root
        self.program = program
        self.parallel = parallel
        self.max_workers = max_workers
        self._stream = stream
        self._runner = runner

    def run_package(self, package: str, command: CommandSpec) -> PackageOutcome:
        directory = package_directory(self.root, package)
        result = self._runner(directory, self.program, command.args)
        return PackageOutcome(
            package=package,
            output=result.output,
            returncode=result.returncode,
            failed=outcome_failed(command, result),
        )

    def _crashed_outcome(self, package: str, exc: BaseException) -> PackageOutcome:
        return PackageOutcome(package=package, output=f"{package}: {exc}", returncode=None, failed=True)

    def _run_serial(self, packages: Sequence[str], command: CommandSpec, progress: ProgressCounter) -> list[PackageOutcome]:
        outcomes: list[PackageOutcome] = []
        for package in packages:
            try:
                outcome = self.run_package(package, command)
            except Exception as exc:
                logger.exception("running %s in %s crashed", command.name, package)
                outcome = self._crashed_outcome(package, exc)
            outcomes.append(outcome)
            progress.advance()
        return outcomes

    def _run_parallel(
        self, packages: Sequence[str], command: CommandSpec, progress: ProgressCounter
    ) -> list[PackageOutcome]:
        cap = len(packages) if self.max_workers is None else self.max_workers
        workers = max(1, min(cap, len(packages)))
        by_index: list[PackageOutcome | None] = [None] * len(packages)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="lazytest-worker") as executor:
            futures = {
                executor.submit(self.run_package, package, command): index
                for index, package in enumerate(packages)
            }
            # Arrival order is arbitrary; only the joined list is used below.
            for future in as_completed(futures):
                index = futures[future]
                try:
                    by_index[index] = future.result()
                except Exception as exc:
                    logger.exception("running %s in %s crashed", command.name, packages[index])
                    by_index[index] = self._crashed_outcome(packages[index], exc)
                progress.advance()
        return [outcome for outcome in by_index if outcome is not None]

    def run(self, packages: Sequence[str], command: CommandSpec) -> RunReport:
        """Run ``command`` in every package and return the finalized report."""
        progress = ProgressCounter(len(packages), self._stream)
        if not packages:
            outcomes: list[PackageOutcome] = []
        elif self.parallel and len(packages) > 1:
            outcomes = self._run_parallel(packages, command, progress)
        else:
            outcomes = self._run_serial(packages, command, progress)
        logger.debug("%s finished for %d package(s)", command.name, len(outcomes))
        return RunReport(
            command=command,
            outcomes=tuple(outcomes),
            result=aggregate_outcomes(command, outcomes),
        )


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "ExecutionEngine",
    "PackageOutcome",
    "RunReport",
    "aggregate_outcomes",
    "outcome_failed",
]
