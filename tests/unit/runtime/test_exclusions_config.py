"""Tests for the project exclusions file and user settings."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazytest.errors import ConfigError
from lazytest.runtime import config


class ExclusionsFileTests(unittest.TestCase):
    def test_missing_file_means_no_exclusions(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(config.load_exclusions(Path(tmp)), [])

    def test_exclude_appends_once_and_persists(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            config.exclude(root, "vendor")
            config.exclude(root, "gen")
            exclusions = config.exclude(root, "vendor")

            self.assertEqual(exclusions, ["vendor", "gen"])
            saved = json.loads((root / config.EXCLUSIONS_FILENAME).read_text(encoding="utf-8"))
            self.assertEqual(saved, {"exclusions": ["vendor", "gen"]})
            self.assertEqual(config.load_exclusions(root), ["vendor", "gen"])

    def test_include_removes_entry_and_deletes_empty_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            config.exclude(root, "vendor")
            config.exclude(root, "gen")

            self.assertEqual(config.include(root, "vendor"), ["gen"])
            self.assertTrue((root / config.EXCLUSIONS_FILENAME).exists())

            self.assertEqual(config.include(root, "gen"), [])
            self.assertFalse((root / config.EXCLUSIONS_FILENAME).exists())

    def test_include_of_unknown_name_is_harmless(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(config.include(Path(tmp), "nothing"), [])

    def test_exclude_rejects_empty_name(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ConfigError):
                config.exclude(Path(tmp), "  ")

    def test_malformed_json_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / config.EXCLUSIONS_FILENAME).write_text("{not json", encoding="utf-8")
            with self.assertRaises(ConfigError) as ctx:
                config.load_exclusions(root)
            self.assertIn("parsing your configuration file", str(ctx.exception))

    def test_wrong_shape_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for payload in ('["a"]', '{"exclusions": "a"}', '{"exclusions": [1, 2]}'):
                with self.subTest(payload=payload):
                    (root / config.EXCLUSIONS_FILENAME).write_text(payload, encoding="utf-8")
                    with self.assertRaises(ConfigError):
                        config.load_exclusions(root)

    def test_duplicates_in_file_are_collapsed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / config.EXCLUSIONS_FILENAME).write_text('{"exclusions": ["a", "b", "a"]}', encoding="utf-8")
            self.assertEqual(config.load_exclusions(root), ["a", "b"])


class SettingsTests(unittest.TestCase):
    def test_defaults_when_settings_file_missing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("lazytest.runtime.config.SETTINGS_PATH", Path(tmp) / "config.json"):
                self.assertEqual(config.load_settings(), config.Settings())

    def test_valid_values_are_loaded(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            settings_path = Path(tmp) / "config.json"
            settings_path.write_text(
                json.dumps({"go_binary": "go1.22", "debounce_seconds": 0.5, "max_workers": 2, "parallel": False}),
                encoding="utf-8",
            )
            with mock.patch("lazytest.runtime.config.SETTINGS_PATH", settings_path):
                settings = config.load_settings()

        self.assertEqual(settings, config.Settings(go_binary="go1.22", debounce_seconds=0.5, max_workers=2, parallel=False))

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            settings_path = Path(tmp) / "config.json"
            settings_path.write_text(
                json.dumps({"go_binary": "", "debounce_seconds": -1, "max_workers": True, "parallel": "yes"}),
                encoding="utf-8",
            )
            with mock.patch("lazytest.runtime.config.SETTINGS_PATH", settings_path):
                self.assertEqual(config.load_settings(), config.Settings())

    def test_malformed_settings_file_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            settings_path = Path(tmp) / "config.json"
            settings_path.write_text("[[[", encoding="utf-8")
            with mock.patch("lazytest.runtime.config.SETTINGS_PATH", settings_path):
                self.assertEqual(config.load_settings(), config.Settings())


if __name__ == "__main__":
    unittest.main()
