"""Per-directory watch subscriptions backed by ``watchdog``.

Each watched directory gets its own non-recursive schedule so the watch set
stays the single source of truth for what is subscribed. Backend events are
translated to ``WatchEvent`` and handed to a listener on the observer thread.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Protocol

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import ObservedWatch

from ..log import get_logger
from .events import EventKind, WatchEvent

logger = get_logger("watch")

OBSERVER_JOIN_SECONDS = 2.0

_EVENT_KINDS: dict[str, EventKind] = {
    EVENT_TYPE_CREATED: EventKind.CREATE,
    EVENT_TYPE_DELETED: EventKind.DELETE,
    EVENT_TYPE_MOVED: EventKind.RENAME,
    EVENT_TYPE_MODIFIED: EventKind.MODIFY,
}


class WatchSubscriber(Protocol):
    def watch(self, path: str) -> None: ...

    def unwatch(self, path: str) -> None: ...

    def close(self) -> None: ...


def translate_event(event: FileSystemEvent) -> WatchEvent:
    """Map a watchdog event onto ``WatchEvent``; unknown types become OTHER."""
    kind = _EVENT_KINDS.get(event.event_type, EventKind.OTHER)
    dest = getattr(event, "dest_path", None)
    return WatchEvent(
        path=os.fsdecode(event.src_path),
        kind=kind,
        dest_path=os.fsdecode(dest) if dest else None,
    )


class _ForwardingHandler(FileSystemEventHandler):
    def __init__(self, on_event: Callable[[WatchEvent], None]) -> None:
        super().__init__()
        self._on_event = on_event

    def on_any_event(self, event: FileSystemEvent) -> None:
        self._on_event(translate_event(event))


class WatchdogSubscriber:
    """``watch``/``unwatch`` individual directories on a watchdog observer."""

    def __init__(self, on_event: Callable[[WatchEvent], None]) -> None:
        self._observer = Observer()
        self._handler = _ForwardingHandler(on_event)
        self._watches: dict[str, ObservedWatch] = {}
        self._observer.start()

    def watch(self, path: str) -> None:
        if path in self._watches:
            return
        self._watches[path] = self._observer.schedule(self._handler, path, recursive=False)

    def unwatch(self, path: str) -> None:
        observed = self._watches.pop(path, None)
        if observed is None:
            return
        try:
            self._observer.unschedule(observed)
        except (KeyError, OSError) as exc:
            # The backend may already have dropped a watch whose directory vanished.
            logger.debug("unwatch %s: %s", path, exc)

    def close(self) -> None:
        self._watches.clear()
        self._observer.unschedule_all()
        self._observer.stop()
        self._observer.join(timeout=OBSERVER_JOIN_SECONDS)
