"""Tests for recursive package-directory traversal."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazytest.discovery.walker import iter_subdirectories, walk_matching_directories
from lazytest.errors import DiscoveryError


def _touch(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")


def _scandir_refusing(name: str):
    real_scandir = os.scandir

    def scandir(path):
        if Path(path).name == name:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    return scandir


class WalkMatchingDirectoriesTests(unittest.TestCase):
    def test_yields_directories_with_matching_files_children_first(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / "root_test.go")
            _touch(root / "a" / "a_test.go")
            _touch(root / "a" / "deep" / "deep_test.go")
            _touch(root / "b" / "main.go")

            found = list(walk_matching_directories(root, lambda name: "_test.go" in name))

            self.assertEqual(found, [root / "a" / "deep", root / "a", root])

    def test_hidden_directories_are_never_entered(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / ".git" / "x_test.go")
            _touch(root / "pkg" / ".cache" / "y_test.go")
            _touch(root / "pkg" / "p_test.go")

            found = list(walk_matching_directories(root, lambda name: "_test.go" in name))

            self.assertEqual(found, [root / "pkg"])

    def test_skip_predicate_prunes_whole_subtree(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / "vendor" / "lib" / "l_test.go")
            _touch(root / "app" / "a_test.go")

            found = list(
                walk_matching_directories(
                    root,
                    lambda name: "_test.go" in name,
                    should_skip=lambda name: name == "vendor",
                )
            )

            self.assertEqual(found, [root / "app"])

    def test_target_limits_results_to_matching_base_name(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root / "one" / "o_test.go")
            _touch(root / "two" / "t_test.go")
            _touch(root / "nested" / "two" / "n_test.go")

            found = list(walk_matching_directories(root, lambda name: "_test.go" in name, target="two"))

            self.assertEqual(found, [root / "nested" / "two", root / "two"])

    def test_match_predicate_stops_after_first_hit_in_a_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("a_test.go", "b_test.go", "c_test.go"):
                _touch(root / name)
            seen: list[str] = []

            def matches(name: str) -> bool:
                seen.append(name)
                return True

            found = list(walk_matching_directories(root, matches))

            self.assertEqual(found, [root])
            self.assertEqual(seen, ["a_test.go"])

    def test_unlistable_directory_raises_discovery_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            with mock.patch("lazytest.discovery.walker.os.scandir", side_effect=PermissionError("denied")):
                with self.assertRaises(DiscoveryError) as ctx:
                    list(walk_matching_directories(root, lambda name: True))
            self.assertIn("denied", str(ctx.exception))

    def test_missing_root_raises_discovery_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(DiscoveryError):
                list(walk_matching_directories(Path(tmp) / "missing", lambda name: True))


class IterSubdirectoriesTests(unittest.TestCase):
    def test_lists_root_and_visible_subdirectories_parents_first(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "a" / "b").mkdir(parents=True)
            (root / "c").mkdir()
            (root / ".hidden" / "inner").mkdir(parents=True)
            _touch(root / "a" / "file.go")

            found = list(iter_subdirectories(root))

            self.assertEqual(found, [root, root / "a", root / "a" / "b", root / "c"])

    def test_unlistable_directory_raises_without_error_callback(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "b").mkdir()
            with mock.patch("lazytest.discovery.walker.os.scandir", side_effect=_scandir_refusing("b")):
                with self.assertRaises(DiscoveryError):
                    list(iter_subdirectories(root))

    def test_error_callback_skips_only_the_unlistable_subtree(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("a", "b/inner", "c/d"):
                (root / name).mkdir(parents=True)
            failures: list[Path] = []

            with mock.patch("lazytest.discovery.walker.os.scandir", side_effect=_scandir_refusing("b")):
                found = list(iter_subdirectories(root, on_error=lambda path, exc: failures.append(path)))

            self.assertEqual(found, [root, root / "a", root / "c", root / "c" / "d"])
            self.assertEqual(failures, [root / "b"])


if __name__ == "__main__":
    unittest.main()
