"""Table of build-tool commands lazytest knows how to run.

Each entry describes how one command is invoked per package and how its
output is judged and summarized. Adding a command means adding a row.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import UsageError

MARKER_TEST = "_test.go"
MARKER_SOURCE = ".go"

SUMMARY_COUNTS = "summary"
SUMMARY_COVERAGE = "coverage"
SUMMARY_RAW = "raw"


@dataclass(frozen=True)
class CommandSpec:
    """How one command runs against a package and how its output is read."""

    name: str
    args: tuple[str, ...]
    marker: str
    title: str
    parse_output: bool
    output_is_failure: bool
    summary: str = SUMMARY_COUNTS


COMMANDS: dict[str, CommandSpec] = {
    spec.name: spec
    for spec in (
        CommandSpec(
            name="install",
            args=("test", "-run", "^$"),
            marker=MARKER_TEST,
            title="Installing tests",
            parse_output=False,
            # Prints "ok" lines even when nothing runs; only the exit status counts.
            output_is_failure=False,
        ),
        CommandSpec(
            name="test",
            args=("test",),
            marker=MARKER_TEST,
            title="Running tests",
            parse_output=True,
            output_is_failure=False,
        ),
        CommandSpec(
            name="race",
            args=("test", "-race"),
            marker=MARKER_TEST,
            title="Running race tests",
            parse_output=True,
            output_is_failure=False,
        ),
        CommandSpec(
            name="coverage",
            args=("test", "-cover"),
            marker=MARKER_TEST,
            title="Running coverage tests",
            parse_output=True,
            output_is_failure=False,
            summary=SUMMARY_COVERAGE,
        ),
        CommandSpec(
            name="vet",
            args=("vet",),
            marker=MARKER_SOURCE,
            title="Vetting packages",
            parse_output=False,
            output_is_failure=True,
            summary=SUMMARY_RAW,
        ),
    )
}

WATCHABLE_COMMANDS = ("test", "race", "vet", "coverage")
DEFAULT_WATCH_COMMAND = "test"


def command_names() -> list[str]:
    return list(COMMANDS)


def get_command(name: str) -> CommandSpec:
    try:
        return COMMANDS[name]
    except KeyError:
        raise UsageError(f"Unknown command: {name}") from None


def resolve_watch_command(name: str | None) -> CommandSpec:
    """Return the command a watch session re-runs; empty means ``test``."""
    name = name or DEFAULT_WATCH_COMMAND
    if name not in WATCHABLE_COMMANDS:
        raise UsageError(f"Cannot watch command: {name} (choose from {', '.join(WATCHABLE_COMMANDS)})")
    return get_command(name)
