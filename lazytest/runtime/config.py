"""Persistent JSON configuration.

Two files are involved. The project exclusions file (``.lazytest`` in the run
root) holds ``{"exclusions": [...]}``; it is strict, because running with a
half-read exclusion list would silently test the wrong packages. The user
settings file under the platform config directory holds tool preferences and
is read defensively: anything missing or malformed falls back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..errors import ConfigError

APP_NAME = "lazytest"
EXCLUSIONS_FILENAME = ".lazytest"
EXCLUSIONS_KEY = "exclusions"
SETTINGS_FILENAME = "config.json"
SETTINGS_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / SETTINGS_FILENAME


def exclusions_path(root: Path) -> Path:
    return root / EXCLUSIONS_FILENAME


def load_exclusions(root: Path) -> list[str]:
    """Load the exclusion list stored under ``root``.

    A missing file means no exclusions. Unparsable JSON or a document that is
    not ``{"exclusions": [str, ...]}`` raises ``ConfigError``.
    """
    path = exclusions_path(root)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except OSError as exc:
        raise ConfigError(f"There was an error reading your configuration file: {exc}") from exc

    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ConfigError(f"There was an error parsing your configuration file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"There was an error parsing your configuration file: {path} is not a JSON object")
    value = data.get(EXCLUSIONS_KEY, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"There was an error parsing your configuration file: {EXCLUSIONS_KEY!r} must be a list of strings")

    exclusions: list[str] = []
    for item in value:
        if item and item not in exclusions:
            exclusions.append(item)
    return exclusions


def save_exclusions(root: Path, exclusions: list[str]) -> None:
    """Persist ``exclusions``; an empty list deletes the file instead."""
    path = exclusions_path(root)
    try:
        if not exclusions:
            path.unlink(missing_ok=True)
            return
        path.write_text(json.dumps({EXCLUSIONS_KEY: exclusions}, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"There was an error attempting to save your configuration file: {exc}") from exc


def exclude(root: Path, name: str) -> list[str]:
    """Add ``name`` to the exclusion list (once) and return the new list."""
    name = name.strip()
    if not name:
        raise ConfigError("Cannot exclude an empty directory name")
    exclusions = load_exclusions(root)
    if name not in exclusions:
        exclusions.append(name)
    save_exclusions(root, exclusions)
    return exclusions


def include(root: Path, name: str) -> list[str]:
    """Remove ``name`` from the exclusion list and return the new list."""
    exclusions = [item for item in load_exclusions(root) if item != name.strip()]
    save_exclusions(root, exclusions)
    return exclusions


@dataclass(frozen=True)
class Settings:
    """User preferences for running the build tool."""

    go_binary: str = "go"
    debounce_seconds: float = 1.0
    max_workers: int = 8
    parallel: bool = True


def load_settings_data() -> dict[str, object]:
    """Load the raw user settings object, or ``{}`` when unavailable."""
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def _coerce_positive_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value >= 1 else default


def load_settings() -> Settings:
    """Build ``Settings`` from the user config, ignoring invalid values."""
    data = load_settings_data()
    defaults = Settings()

    go_binary = data.get("go_binary")
    if not isinstance(go_binary, str) or not go_binary.strip():
        go_binary = defaults.go_binary
    parallel = data.get("parallel")

    return Settings(
        go_binary=go_binary.strip(),
        debounce_seconds=_coerce_positive_float(data.get("debounce_seconds"), defaults.debounce_seconds),
        max_workers=_coerce_positive_int(data.get("max_workers"), defaults.max_workers),
        parallel=parallel if isinstance(parallel, bool) else defaults.parallel,
    )
