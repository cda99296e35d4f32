"""Persistent JSON config helpers.

Stores the UI theme, the line matcher backend, and the file-pane width.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from ..search.matcher import DEFAULT_MATCHER, MATCHER_NAMES

logger = logging.getLogger(__name__)

APP_NAME = "lazyreview"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem and serialization errors are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def load_left_pane_percent() -> float | None:
    """Read the file-pane width percentage, constrained to (0, 100)."""
    value = load_config().get("left_pane_percent")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value <= 0 or value >= 100:
        return None
    return float(value)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_theme_name(theme_name: str) -> None:
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)


def load_matcher_name() -> str:
    """Return the configured matcher backend, defaulting to substring matching."""
    value = load_config().get("matcher")
    if isinstance(value, str) and value.strip().lower() in MATCHER_NAMES:
        return value.strip().lower()
    return DEFAULT_MATCHER


def save_matcher_name(matcher_name: str) -> None:
    normalized = str(matcher_name).strip().lower()
    if normalized not in MATCHER_NAMES:
        return
    config = load_config()
    config["matcher"] = normalized
    save_config(config)


__all__ = [
    "CONFIG_PATH",
    "load_config",
    "load_left_pane_percent",
    "load_matcher_name",
    "load_theme_name",
    "save_config",
    "save_matcher_name",
    "save_theme_name",
]
