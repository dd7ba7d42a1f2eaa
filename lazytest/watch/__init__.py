"""Watch mode: subscriptions, the watch set and the debounced run loop."""

from .controller import WatchController, WatchState
from .events import EventKind, WatchEvent
from .watch_set import WatchSet

__all__ = ["EventKind", "WatchController", "WatchEvent", "WatchSet", "WatchState"]
