"""Command-line front door for lazytest.

Parses the subcommand, builds the per-invocation ``Session`` and dispatches
to the run pipeline, the watch loop, or the exclusion-list commands.
"""

from __future__ import annotations

import argparse
import dataclasses
from pathlib import Path

from .commands import DEFAULT_WATCH_COMMAND, command_names, get_command, resolve_watch_command
from .errors import LazyTestError
from .log import level_for_flags, setup_base_logger
from .results.summary import format_exclusions
from .runtime import config
from .runtime.pipeline import ensure_tool_available, report_exit_code, run_install_then_test, run_pipeline
from .runtime.session import Session
from .watch.runner import run_watch

PACKAGE_HELP = (
    'Package to act on. Defaults to every package not excluded; "all" includes excluded packages, '
    "any other value selects the first package whose path contains it."
)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _positive_float(value: str) -> float:
    """argparse type for positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazytest",
        description=(
            "Find Go packages below the current directory and build, test, vet or watch them. "
            "Without a subcommand, installs test dependencies and then runs the tests."
        ),
    )
    parser.add_argument("--root", type=Path, default=None, help="Directory to search (default: current directory).")
    parser.add_argument("--serial", action="store_true", help="Run packages one at a time.")
    parser.add_argument("--jobs", type=_positive_int, default=None, help="Maximum packages run concurrently.")
    parser.add_argument(
        "--debounce",
        type=_positive_float,
        default=None,
        help="Seconds of filesystem quiet before a watch run starts.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug detail to stderr.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors.")

    subparsers = parser.add_subparsers(dest="command", metavar="command")
    for name in command_names():
        spec = get_command(name)
        sub = subparsers.add_parser(name, help=f"{spec.title} in every package, or a named package.")
        sub.add_argument("package", nargs="?", default="", help=PACKAGE_HELP)

    watch = subparsers.add_parser("watch", help="Re-run a command whenever files change.")
    watch.add_argument("watch_command", nargs="?", default=DEFAULT_WATCH_COMMAND, help="test, race, vet or coverage.")
    watch.add_argument("package", nargs="?", default="", help=PACKAGE_HELP)

    exclude = subparsers.add_parser("exclude", help="Exclude the named directory from recursion.")
    exclude.add_argument("name")
    include = subparsers.add_parser("include", help="Remove the named directory from the exclusion list.")
    include.add_argument("name")
    subparsers.add_parser("exclusions", help="Print the exclusion list.")
    subparsers.add_parser("help", help="Show this help.")
    return parser


def _session_for(args: argparse.Namespace) -> Session:
    session = Session.load(args.root)
    settings = session.settings
    if args.serial:
        settings = dataclasses.replace(settings, parallel=False)
    if args.jobs is not None:
        settings = dataclasses.replace(settings, max_workers=args.jobs)
    if args.debounce is not None:
        settings = dataclasses.replace(settings, debounce_seconds=args.debounce)
    session.settings = settings
    return session


def _dispatch(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    if args.command == "help":
        parser.print_help()
        return 0

    session = _session_for(args)

    if args.command == "exclude":
        session.exclusions = config.exclude(session.root, args.name)
        session.write(f'\nExcluded "{args.name}" from being examined during recursion.\n')
        session.write(f"\n{format_exclusions(session.exclusions)}\n\n")
        return 0
    if args.command == "include":
        session.exclusions = config.include(session.root, args.name)
        session.write(f'\nRemoved "{args.name}" from the exclusion list.\n')
        session.write(f"\n{format_exclusions(session.exclusions)}\n\n")
        return 0
    if args.command == "exclusions":
        session.write(f"\n{format_exclusions(session.exclusions)}\n\n")
        return 0

    if args.command == "watch":
        command = resolve_watch_command(args.watch_command)
        ensure_tool_available(session)
        run_watch(session, command, args.package)
        return 0

    ensure_tool_available(session)
    if args.command is None:
        report = run_install_then_test(session)
    else:
        report = run_pipeline(session, get_command(args.command), args.package)
    return report_exit_code(report)


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the requested command and return an exit status.

    Fatal problems (unreadable directories, a malformed exclusions file, a
    missing build tool) are raised as ``SystemExit`` with their message.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_base_logger(level_for_flags(args.verbose, args.quiet))
    try:
        return _dispatch(parser, args)
    except LazyTestError as exc:
        raise SystemExit(str(exc)) from None


if __name__ == "__main__":
    raise SystemExit(main())
