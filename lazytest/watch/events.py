"""Filesystem change events as seen by the watch loop."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class EventKind(enum.Enum):
    CREATE = "create"
    DELETE = "delete"
    RENAME = "rename"
    MODIFY = "modify"
    OTHER = "other"


# Kinds that restart the debounce timer. OTHER covers open/close
# notifications, which the build tool itself generates while reading files.
TRIGGERING_KINDS = frozenset({EventKind.CREATE, EventKind.DELETE, EventKind.RENAME, EventKind.MODIFY})


@dataclass(frozen=True)
class WatchEvent:
    """One change notification.

    ``dest_path`` is set for renames when the backend reports both sides.
    """

    path: str
    kind: EventKind
    dest_path: str | None = None

    @property
    def triggers_run(self) -> bool:
        return self.kind in TRIGGERING_KINDS
