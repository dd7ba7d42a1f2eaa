"""Debounced watch loop that re-runs the pipeline when files change.

The loop thread owns the watch set, the debounce deadline and the
``running`` flag. Filesystem events arrive from the backend thread and run
completions from the worker thread; both only ever enqueue a message, and
the loop applies them one at a time.

States: IDLE, PENDING (deadline armed), RUNNING (a pass is in flight) and
STOPPED. A deadline that expires while RUNNING does not start a second
pass; it sets a rerun flag that is honoured as soon as the pass finishes.
"""

from __future__ import annotations

import enum
import threading
import time
from collections.abc import Callable
from pathlib import Path
from queue import Empty, Queue

from ..log import get_logger
from .events import WatchEvent
from .subscriptions import WatchSubscriber
from .watch_set import WatchSet

logger = get_logger("watch")

DEFAULT_DEBOUNCE_SECONDS = 1.0
# Upper bound on one blocking wait so Ctrl-C is noticed promptly.
POLL_SECONDS = 0.25


class WatchState(enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    RUNNING = "running"
    STOPPED = "stopped"


class _RunFinished:
    pass


class _Stop:
    pass


def _start_daemon_thread(target: Callable[[], None]) -> None:
    threading.Thread(target=target, name="lazytest-watch-run", daemon=True).start()


class WatchController:
    """Own a watch session: subscriptions, debounce timer and run scheduling.

    ``subscriber_factory`` receives the thread-safe ``post_event`` callback
    and returns the subscription backend. ``run_cycle`` performs one full
    pipeline pass; ``start_run`` decides where it executes (a daemon thread
    by default).
    """

    def __init__(
        self,
        root: Path,
        subscriber_factory: Callable[[Callable[[WatchEvent], None]], WatchSubscriber],
        run_cycle: Callable[[], object],
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
        start_run: Callable[[Callable[[], None]], None] = _start_daemon_thread,
    ) -> None:
        self.root = root
        self.debounce_seconds = debounce_seconds
        self.runs_started = 0
        self._run_cycle = run_cycle
        self._monotonic = monotonic
        self._start_run = start_run
        self._queue: Queue[object] = Queue()
        self._deadline: float | None = None
        self._running = False
        self._rerun_requested = False
        self._stopped = False
        self._subscriber = subscriber_factory(self.post_event)
        self.watch_set = WatchSet(self._subscriber)

    @property
    def state(self) -> WatchState:
        if self._stopped:
            return WatchState.STOPPED
        if self._running:
            return WatchState.RUNNING
        if self._deadline is not None:
            return WatchState.PENDING
        return WatchState.IDLE

    @property
    def rerun_requested(self) -> bool:
        return self._rerun_requested

    # Thread-safe entry points.
    def post_event(self, event: WatchEvent) -> None:
        self._queue.put(event)

    def request_stop(self) -> None:
        self._queue.put(_Stop())

    # Loop-side operations.
    def start(self) -> None:
        added = self.watch_set.add_tree(str(self.root))
        logger.info("Watching %d directories under %s", len(added), self.root)

    def handle_event(self, event: WatchEvent) -> None:
        if self._stopped:
            return
        logger.info("Received event for path %s: %s", event.path, event.kind.value)
        self.watch_set.apply(event)
        if event.triggers_run:
            self._deadline = self._monotonic() + self.debounce_seconds

    def fire_timer_if_due(self) -> None:
        if self._stopped or self._deadline is None:
            return
        if self._monotonic() < self._deadline:
            return
        self._deadline = None
        if self._running:
            self._rerun_requested = True
            return
        self._launch()

    def handle_run_finished(self) -> None:
        self._running = False
        if self._rerun_requested and not self._stopped:
            self._rerun_requested = False
            self._launch()

    def stop(self) -> None:
        """Enter STOPPED and drop every subscription.

        An in-flight pass is not interrupted; its external process keeps
        running until it exits on its own.
        """
        if self._stopped:
            return
        self._stopped = True
        self._deadline = None
        self._rerun_requested = False
        self.watch_set.clear()
        self._subscriber.close()

    def _launch(self) -> None:
        self._running = True
        self.runs_started += 1
        self._start_run(self._run_in_background)

    def _run_in_background(self) -> None:
        try:
            self._run_cycle()
        except Exception:
            logger.exception("Watch-triggered run failed")
        finally:
            self._queue.put(_RunFinished())

    def dispatch(self, message: object) -> None:
        if isinstance(message, WatchEvent):
            self.handle_event(message)
        elif isinstance(message, _RunFinished):
            self.handle_run_finished()
        elif isinstance(message, _Stop):
            self.stop()

    def next_timeout(self) -> float:
        if self._deadline is None:
            return POLL_SECONDS
        return max(0.0, min(POLL_SECONDS, self._deadline - self._monotonic()))

    def step(self, timeout: float | None = None) -> bool:
        """Wait for and apply at most one message, then check the timer.

        Returns ``False`` once the controller has stopped.
        """
        wait = self.next_timeout() if timeout is None else timeout
        try:
            message = self._queue.get(timeout=wait) if wait > 0 else self._queue.get_nowait()
        except Empty:
            message = None
        if message is not None:
            self.dispatch(message)
        self.fire_timer_if_due()
        return not self._stopped

    def run_forever(self) -> None:
        """Start watching and loop until stopped or interrupted."""
        self.start()
        try:
            while self.step():
                pass
        except KeyboardInterrupt:
            logger.debug("Interrupted")
        finally:
            self.stop()
