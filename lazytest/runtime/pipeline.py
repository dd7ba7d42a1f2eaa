"""Discovery -> filtering -> execution -> summary, as one callable pass."""

from __future__ import annotations

import shutil

from ..commands import CommandSpec, get_command
from ..discovery.packages import filter_packages, locate_packages
from ..errors import UsageError
from ..execution.engine import RunReport
from ..results.summary import format_report
from .session import Session


def ensure_tool_available(session: Session) -> None:
    binary = session.settings.go_binary
    if shutil.which(binary) is None:
        raise UsageError(f"Build tool not found on PATH: {binary}")


def select_packages(session: Session, command: CommandSpec, target: str = "") -> list[str]:
    """Discover packages for ``command`` afresh and apply target/exclusions."""
    packages = locate_packages(session.root, command.marker)
    selected = filter_packages(packages, target, session.exclusions)
    session.logger.debug("%d package(s) found, %d selected", len(packages), len(selected))
    return selected


def run_pipeline(session: Session, command: CommandSpec, target: str = "") -> RunReport:
    """Run ``command`` over the selected packages and print its summary."""
    session.write(f"\n{command.title}: ")
    packages = select_packages(session, command, target)
    report = session.engine().run(packages, command)
    session.write(format_report(report))
    return report


def run_install_then_test(session: Session, target: str = "") -> RunReport:
    """Default action: build every test package, then test if all built."""
    install_report = run_pipeline(session, get_command("install"), target)
    if install_report.ran == 0 or install_report.failed:
        return install_report
    return run_pipeline(session, get_command("test"), target)


def report_exit_code(report: RunReport) -> int:
    return 0 if report.ran and not report.failed else 1
