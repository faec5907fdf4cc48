"""Startup configuration and persisted bookmarks.

The JSON config is read once at startup. All access is defensive: malformed
or missing config falls back to defaults with a logged warning, and session
changes to sort or hidden-file state are never written back.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from ..bookmarks import is_bookmark_key
from ..directory_model.types import SortMode

LOGGER = logging.getLogger(__name__)

APP_NAME = "lazyfm"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_COLORS: dict[str, str] = {
    "directory": "blue",
    "file": "white",
    "symlink": "cyan",
    "selected": "yellow",
}


@dataclass(frozen=True)
class AppConfig:
    """Settings consumed by the core at startup."""

    show_hidden: bool = False
    sort_by: SortMode = SortMode.NAME
    colors: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLORS))

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> AppConfig:
        """Validate a decoded config object, substituting defaults for bad values."""
        show_hidden = data.get("show_hidden", False)
        if not isinstance(show_hidden, bool):
            LOGGER.warning("config: show_hidden must be a boolean, got %r", show_hidden)
            show_hidden = False

        raw_sort = data.get("sort_by", SortMode.NAME.value)
        sort_by = SortMode.parse(raw_sort)
        if sort_by is None:
            LOGGER.warning("config: unknown sort_by %r, using name", raw_sort)
            sort_by = SortMode.NAME

        colors = dict(DEFAULT_COLORS)
        raw_colors = data.get("colors", {})
        if isinstance(raw_colors, Mapping):
            for key, value in raw_colors.items():
                if isinstance(key, str) and isinstance(value, str) and value.strip():
                    colors[key] = value.strip()
                else:
                    LOGGER.warning("config: ignoring color %r=%r", key, value)
        else:
            LOGGER.warning("config: colors must be an object, got %r", raw_colors)

        return cls(show_hidden=show_hidden, sort_by=sort_by, colors=colors)


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        LOGGER.warning("cannot read config %s: %s", config_path, exc)
        return {}
    try:
        data = json.loads(text)
    except ValueError as exc:
        LOGGER.warning("malformed config %s: %s", config_path, exc)
        return {}
    if not isinstance(data, dict):
        LOGGER.warning("config %s is not a JSON object", config_path)
        return {}
    return data


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so a read-only config
    directory never interrupts a session.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        LOGGER.warning("cannot write config %s: %s", config_path, exc)


def load_app_config(path: Path | None = None) -> AppConfig:
    return AppConfig.from_mapping(load_config(path))


def load_bookmarks(path: Path | None = None) -> dict[str, Path]:
    """Load persisted bookmarks, dropping invalid keys and non-string paths."""
    value = load_config(path).get("bookmarks")
    if not isinstance(value, dict):
        return {}

    bookmarks: dict[str, Path] = {}
    for key, raw_path in value.items():
        if not isinstance(key, str) or not is_bookmark_key(key):
            continue
        if not isinstance(raw_path, str) or not raw_path:
            continue
        bookmarks[key] = Path(raw_path)
    return bookmarks


def save_bookmarks(bookmarks: Mapping[str, Path], path: Path | None = None) -> None:
    serialized = {key: str(target) for key, target in bookmarks.items() if is_bookmark_key(key)}
    config = load_config(path)
    config["bookmarks"] = serialized
    save_config(config, path)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_COLORS",
    "AppConfig",
    "load_config",
    "save_config",
    "load_app_config",
    "load_bookmarks",
    "save_bookmarks",
]
