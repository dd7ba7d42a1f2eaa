"""The set of directories a watch session is subscribed to.

Creation of a directory subscribes its whole visible subtree; deletion of a
watched directory unsubscribes it and every watched descendant. All mutation
happens on the watch loop thread.
"""

from __future__ import annotations

import os
from pathlib import Path

from ..discovery.walker import is_hidden_name, iter_subdirectories
from ..errors import DiscoveryError
from ..log import get_logger
from .events import EventKind, WatchEvent
from .subscriptions import WatchSubscriber

logger = get_logger("watch")


def _warn_unlistable(directory: Path, exc: DiscoveryError) -> None:
    logger.warning("Could not scan directory %s: %s", directory, exc)


class WatchSet:
    """Map of absolute directory path -> subscribed flag."""

    def __init__(self, subscriber: WatchSubscriber) -> None:
        self._subscriber = subscriber
        self.watched: dict[str, bool] = {}

    def __contains__(self, path: object) -> bool:
        return path in self.watched

    def __len__(self) -> int:
        return len(self.watched)

    def paths(self) -> list[str]:
        return sorted(self.watched)

    def _subscribe(self, path: str) -> bool:
        if path in self.watched:
            return False
        try:
            self._subscriber.watch(path)
        except OSError as exc:
            logger.warning("Could not watch %s: %s", path, exc)
            return False
        self.watched[path] = True
        logger.debug("Watching %s", path)
        return True

    def add_tree(self, root: str) -> list[str]:
        """Subscribe ``root`` and its visible subdirectories; return new paths.

        A directory that cannot be listed (gone, or no permission) is left
        out together with its subtree, with a warning; its siblings are still
        subscribed.
        """
        added: list[str] = []
        for directory in iter_subdirectories(Path(root), on_error=_warn_unlistable):
            path = str(directory)
            if self._subscribe(path):
                added.append(path)
        return added

    def remove_tree(self, path: str) -> list[str]:
        """Unsubscribe ``path`` and watched descendants; return removed paths."""
        if path not in self.watched:
            return []
        prefix = path + os.sep
        removed = [path, *(watched for watched in self.watched if watched.startswith(prefix))]
        for watched in removed:
            logger.info("Unwatching %s", watched)
            self._subscriber.unwatch(watched)
            del self.watched[watched]
        return removed

    def handle_create(self, path: str) -> list[str]:
        if is_hidden_name(os.path.basename(path)) or not os.path.isdir(path):
            return []
        return self.add_tree(path)

    def apply(self, event: WatchEvent) -> None:
        """Update subscriptions for one event."""
        if event.kind is EventKind.CREATE:
            self.handle_create(event.path)
        elif event.kind is EventKind.DELETE:
            self.remove_tree(event.path)
        elif event.kind is EventKind.RENAME:
            if event.dest_path is not None:
                self.remove_tree(event.path)
                self.handle_create(event.dest_path)
            elif event.path in self.watched:
                # Only one side reported: a watched path must be the old name.
                self.remove_tree(event.path)
            else:
                self.handle_create(event.path)
        elif event.kind is EventKind.OTHER:
            logger.debug("Ignoring %s event for %s", event.kind.value, event.path)

    def clear(self) -> None:
        for path in list(self.watched):
            self._subscriber.unwatch(path)
        self.watched.clear()
