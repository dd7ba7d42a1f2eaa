"""Package discovery and exclusion filtering.

A package is any directory holding at least one file whose name contains a
marker such as ``_test.go``. Packages are reported relative to the run root
(``.`` for the root itself, ``./a/b`` below it) so they read well in output
and can be matched against user-supplied names.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .walker import walk_matching_directories

ALL_PACKAGES = "all"
ROOT_PACKAGE = "."


def relative_package_name(root: Path, directory: Path) -> str:
    """Convert ``directory`` under ``root`` into its ``./relative`` form."""
    relative = directory.relative_to(root)
    if relative == Path("."):
        return ROOT_PACKAGE
    return f"{ROOT_PACKAGE}/{relative.as_posix()}"


def package_directory(root: Path, package: str) -> Path:
    """Resolve a relative package name back to its directory under ``root``."""
    if package == ROOT_PACKAGE:
        return root
    return root / package.removeprefix(f"{ROOT_PACKAGE}/")


def locate_packages(root: Path, marker: str, target: str | None = None) -> list[str]:
    """Return relative names of directories under ``root`` containing ``marker``.

    The tree is walked fresh on every call. ``target`` restricts results to
    directories whose base name equals it.
    """
    root = root.resolve()
    return [
        relative_package_name(root, directory)
        for directory in walk_matching_directories(root, lambda name: marker in name, target=target)
    ]


def filter_packages(packages: Sequence[str], target: str, exclusions: Sequence[str]) -> list[str]:
    """Select the packages a run should act on.

    ``"all"`` returns every package, bypassing exclusions. A non-empty
    ``target`` returns the first package whose path contains it, and nothing
    else. An empty ``target`` drops packages whose path contains any
    exclusion entry. Input order is preserved.
    """
    if target == ALL_PACKAGES:
        return list(packages)

    if target:
        for package in packages:
            if target in package:
                return [package]
        return []

    return [package for package in packages if not any(excluded and excluded in package for excluded in exclusions)]


__all__ = [
    "ALL_PACKAGES",
    "ROOT_PACKAGE",
    "filter_packages",
    "locate_packages",
    "package_directory",
    "relative_package_name",
]
