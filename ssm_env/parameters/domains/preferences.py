"""Persistent ssm-env preferences.

Only one preference is used today: ``config_path``, the config file chosen
with ``ssm-env config set-path``. Stored as a JSON object in
~/.config/ssm-env/preferences.json
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

PREFERENCES_DIR = Path.home() / ".config" / "ssm-env"
PREFERENCES_FILE = PREFERENCES_DIR / "preferences.json"


def _read_preferences() -> Dict[str, Any]:
    """
    Read the preferences object.

    A missing, unreadable or malformed file counts as "no preferences"
    so a broken file never blocks loading parameters.
    """
    try:
        text = PREFERENCES_FILE.read_text()
    except FileNotFoundError:
        return {}
    except OSError as e:
        logger.error(f"Cannot read preferences from {PREFERENCES_FILE}: {e}")
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Ignoring malformed preferences file {PREFERENCES_FILE}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.error(f"Ignoring preferences file {PREFERENCES_FILE}: expected a JSON object")
        return {}
    return data


def _write_preferences(data: Dict[str, Any]) -> None:
    """Write the preferences object, creating ~/.config/ssm-env as needed."""
    PREFERENCES_DIR.mkdir(parents=True, exist_ok=True)
    PREFERENCES_FILE.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n")


def get_preference(key: str) -> Optional[str]:
    return _read_preferences().get(key)


def set_preference(key: str, value: str) -> None:
    data = _read_preferences()
    data[key] = value
    _write_preferences(data)
    logger.info(f"Saved preference {key}={value}")


def clear_preference(key: str) -> None:
    """Remove a preference. A key that was never set is left alone."""
    data = _read_preferences()
    if data.pop(key, None) is None:
        logger.debug(f"No preference {key} to clear")
        return
    _write_preferences(data)
    logger.info(f"Cleared preference {key}")
