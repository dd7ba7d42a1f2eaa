"""Wire a ``Session`` into a watchdog-backed ``WatchController``."""

from __future__ import annotations

from ..commands import CommandSpec
from ..results.summary import WATCH_SEPARATOR
from ..runtime.pipeline import run_pipeline
from ..runtime.session import Session
from .controller import WatchController
from .subscriptions import WatchdogSubscriber


def build_watch_controller(session: Session, command: CommandSpec, target: str = "") -> WatchController:
    def run_cycle() -> None:
        # Packages can appear or vanish between passes, so each pass rediscovers.
        run_pipeline(session, command, target)
        session.write(f"\n{WATCH_SEPARATOR}\n")

    return WatchController(
        session.root,
        WatchdogSubscriber,
        run_cycle,
        debounce_seconds=session.settings.debounce_seconds,
    )


def run_watch(session: Session, command: CommandSpec, target: str = "") -> None:
    session.write(
        "\nStarting FS Watcher for the current directory and sub-directories, "
        f"and running {command.name} whenever files are changed...\n\n"
        f"\n{WATCH_SEPARATOR}\n"
    )
    controller = build_watch_controller(session, command, target)
    controller.run_forever()
    session.write("\nDone - exiting...\n")
