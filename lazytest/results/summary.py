"""Human-readable summaries for finished runs."""

from __future__ import annotations

from collections.abc import Sequence

from ..commands import SUMMARY_COVERAGE, SUMMARY_RAW
from ..execution.engine import RunReport
from .parser import COVERAGE_UNKNOWN, RunResult

NO_PACKAGES_MESSAGE = "No matching packages found."
WATCH_SEPARATOR = "----------------------------------"


def success_percent(ran: int, succeeded: int) -> float | None:
    """Return ``succeeded / ran * 100``, or ``None`` when nothing ran."""
    if ran <= 0:
        return None
    return succeeded / ran * 100.0


def format_counts(ran: int, succeeded: int, failed: int) -> str:
    percent = success_percent(ran, succeeded)
    if percent is None:
        return NO_PACKAGES_MESSAGE
    return f"{ran} run. {succeeded} succeeded. {failed} failed. [{percent:.0f}% success]"


def format_failures(result: RunResult) -> str:
    """List passed then failed messages; empty when nothing failed."""
    if not result.failures:
        return ""
    lines = ["Passed Packages:", *result.pass_messages, "", "Failed Packages:", *result.fail_messages, ""]
    return "\n".join(lines) + "\n"


def format_coverage(result: RunResult) -> str:
    lines = ["Coverage Summary:", ""]
    for package, coverage in result.coverage.items():
        if coverage == COVERAGE_UNKNOWN:
            lines.append(f"{package}: N/A (tests failed or no tests found)")
        else:
            lines.append(f"{package}: {coverage:.1f}%")
    return "\n".join(lines) + "\n"


def format_raw(result: RunResult) -> str:
    if not result.failures:
        return ""
    return "\n\n".join(result.fail_messages) + "\n"


def format_report(report: RunReport) -> str:
    """Render everything printed after the progress counter for ``report``."""
    counts = format_counts(report.ran, report.succeeded, report.failed)
    if report.ran == 0:
        return f"\n\n{counts}\n\n"

    if report.command.summary == SUMMARY_RAW:
        body = format_raw(report.result)
    elif report.command.summary == SUMMARY_COVERAGE:
        body = format_coverage(report.result)
    else:
        body = format_failures(report.result)
    return f"\n\n{body}\n{counts}\n\n"


def format_exclusions(exclusions: Sequence[str]) -> str:
    joined = "\n\t".join(exclusions)
    return f"Excluded Directories:\n\t{joined}"
