"""In-place ``[i of N]`` progress counter."""

from __future__ import annotations

from typing import TextIO


class ProgressCounter:
    """Overwrite a ``[i of N]`` counter in place using backspaces.

    Only the thread that collects results writes to it; the last value
    written is ``[N of N]`` once every package has reported.
    """

    def __init__(self, total: int, stream: TextIO) -> None:
        self.total = total
        self.completed = 0
        self._stream = stream
        self._last_len = 0

    @property
    def text(self) -> str:
        return f"[{self.completed} of {self.total}]"

    def advance(self) -> None:
        self.completed += 1
        text = self.text
        self._stream.write("\b" * self._last_len + text)
        self._stream.flush()
        self._last_len = len(text)
