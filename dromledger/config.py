"""Persistent JSON user preferences.

Stores the default for git staging and the Pygments style used by ``show``.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "dromledger"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_STYLE = "monokai"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def load_git_enabled() -> bool:
    """Return whether saves stage files in git by default.

    Only explicit boolean values are honored; anything else means ``True``.
    """
    value = load_config().get("git")
    return value if isinstance(value, bool) else True


def save_git_enabled(enabled: bool) -> None:
    config = load_config()
    config["git"] = bool(enabled)
    save_config(config)


def load_style() -> str:
    """Load the Pygments style name for ``show``, falling back to monokai."""
    value = load_config().get("style")
    if not isinstance(value, str):
        return DEFAULT_STYLE
    stripped = value.strip()
    return stripped if stripped else DEFAULT_STYLE


def save_style(style: str) -> None:
    stripped = str(style).strip()
    if not stripped:
        return
    config = load_config()
    config["style"] = stripped
    save_config(config)
