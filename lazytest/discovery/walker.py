"""Recursive directory traversal primitives.

``walk_matching_directories`` yields directories holding at least one file
that satisfies a name predicate. ``iter_subdirectories`` lists every visible
directory of a subtree, which is what the watch set subscribes to.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

from ..errors import DiscoveryError

HIDDEN_PREFIX = "."


def is_hidden_name(name: str) -> bool:
    """Return whether ``name`` is a hidden (dot-prefixed) entry."""
    return name.startswith(HIDDEN_PREFIX)


def _scan_sorted(directory: Path) -> list[os.DirEntry[str]]:
    """List ``directory`` children sorted by name.

    Raises ``DiscoveryError`` when the directory cannot be opened or listed;
    the rest of a walk is meaningless without it.
    """
    try:
        with os.scandir(directory) as entries:
            children = list(entries)
    except OSError as exc:
        raise DiscoveryError(f"There was an error when attempting to recurse directories: {exc}") from exc
    children.sort(key=lambda entry: entry.name)
    return children


def _entry_is_dir(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def walk_matching_directories(
    root: Path,
    matches: Callable[[str], bool],
    should_skip: Callable[[str], bool] | None = None,
    target: str | None = None,
) -> Iterator[Path]:
    """Yield directories under ``root`` that directly contain a matching file.

    Traversal is depth-first and each directory is yielded after all of its
    subdirectories, so nested packages come before their parents. Hidden
    directories are never entered; ``should_skip`` can prune more by base
    name. Once one file in a directory matches, the remaining file names are
    not checked, but subdirectories are still visited.

    When ``target`` is given only directories whose base name equals it are
    yielded. The generator is single-pass; call again for a fresh walk.
    """
    matched = False
    for entry in _scan_sorted(root):
        if _entry_is_dir(entry):
            if is_hidden_name(entry.name):
                continue
            if should_skip is not None and should_skip(entry.name):
                continue
            yield from walk_matching_directories(Path(entry.path), matches, should_skip, target)
            continue
        if not matched and matches(entry.name):
            matched = True

    if not matched:
        return
    if target is not None and root.name != target:
        return
    yield root


def iter_subdirectories(
    root: Path,
    on_error: Callable[[Path, DiscoveryError], None] | None = None,
) -> Iterator[Path]:
    """Yield ``root`` and every non-hidden directory below it, parents first.

    Without ``on_error`` an unlistable directory ends the walk with
    ``DiscoveryError``. With it, the callback receives the directory and the
    error, that directory and its subtree are left out, and the walk carries
    on with its siblings.
    """
    try:
        children = _scan_sorted(root)
    except DiscoveryError as exc:
        if on_error is None:
            raise
        on_error(root, exc)
        return
    yield root
    for entry in children:
        if not _entry_is_dir(entry) or is_hidden_name(entry.name):
            continue
        yield from iter_subdirectories(Path(entry.path), on_error)


__all__ = [
    "HIDDEN_PREFIX",
    "is_hidden_name",
    "iter_subdirectories",
    "walk_matching_directories",
]
