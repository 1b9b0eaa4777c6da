"""Settings file I/O for logconsole.

Manages a JSON settings file at XDG_CONFIG_HOME/logconsole/settings.json.
Console settings (maxLogEntries, flash) and the saved layout are top-level keys.

Import as: import logconsole.io.settings
"""

import json
import os
import tempfile
from pathlib import Path

from logconsole.core.errors import ConfigurationLoadFailure


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / logconsole / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "logconsole" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file.

    A missing file is the "no data" case and yields {}. An unreadable file,
    malformed JSON, or a non-object top level raises ConfigurationLoadFailure.
    """
    path = get_config_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        raise ConfigurationLoadFailure(path, str(exc)) from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationLoadFailure(path, f"malformed JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationLoadFailure(path, f"expected an object, got {type(data).__name__}")
    return data


def save_settings(data: dict) -> None:
    """Atomic write of settings dict to JSON file.

    Creates parent directories if needed. Writes to temp file then renames
    to avoid partial writes on crash.
    """
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def load_setting(key: str, default=None):
    """Load a single setting by key. Returns default if absent."""
    return load_settings().get(key, default)


def save_setting(key: str, value) -> None:
    """Save a single setting by key (merge into existing settings)."""
    data = load_settings()
    data[key] = value
    save_settings(data)
