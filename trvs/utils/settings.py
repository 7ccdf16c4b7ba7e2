import logging
import os
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

# --- Application constants ---
APP_NAME = "TRVS"
APP_VERSION = "2.1.0"
AUTHOR = "Midge"
SETTINGS_FILE = "settings.yaml"

# --- User Settings ---
USER_SETTINGS = {
    "log_file_limit": {
        "default": 15,
        "type": int,
        "minimum": 0,
        "description": "The number of log files the program will allow before deleting the oldest one(s). "
        "Set to 0 to allow infinite log file generation.",
    },
}


class SettingsError(Exception):
    """Raised when the user settings file cannot be used."""


def _default_settings_text() -> str:
    lines = []
    for key, config in USER_SETTINGS.items():
        lines.append(f"# {config['description']}")
        lines.append(f"# Default: {config['default']}")
        lines.append(f"{key}: {config['default']}")
    return "\n".join(lines) + "\n"


def create_default_settings_file(path: str) -> str:
    """
    Write a commented settings file holding every default value.

    Returns:
        Absolute path of the created file
    """
    with open(path, "w", encoding="utf-8") as f:
        f.write(_default_settings_text())
    full_path = os.path.abspath(path)
    logger.debug(f"Created a default user settings file at {full_path}.")
    return full_path


def _coerce_setting(key: str, value: Any) -> Any:
    config = USER_SETTINGS[key]
    if value is None:
        return config["default"]

    # Type conversion
    if config["type"] is int:
        if isinstance(value, bool):
            raise SettingsError(f"Setting '{key}' must be a whole number, got {value!r}")
        if isinstance(value, float) and not value.is_integer():
            raise SettingsError(f"Setting '{key}' must be a whole number, got {value!r}")
        try:
            value = int(value)
        except (TypeError, ValueError):
            raise SettingsError(f"Setting '{key}' must be a whole number, got {value!r}")
        minimum = config.get("minimum")
        if minimum is not None and value < minimum:
            raise SettingsError(f"Setting '{key}' must be at least {minimum}, got {value}")
        return value
    elif config["type"] is bool:
        return bool(value)
    else:
        return value


def parse_user_settings(text: str) -> Dict[str, Any]:
    """
    Parse settings YAML text into a dict containing every known setting.

    Unknown keys are ignored with a warning; missing keys take their defaults.

    Raises:
        SettingsError: The text is not valid YAML, not a mapping, or holds an invalid value
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SettingsError(f"YAML parsing error: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsError("Invalid settings format, expected a mapping of setting names to values")

    settings = {}
    for key in USER_SETTINGS:
        settings[key] = _coerce_setting(key, data.get(key))

    for key in data:
        if key not in USER_SETTINGS:
            logger.warning(f"Ignoring unknown setting '{key}'")

    return settings


def load_user_settings(path: str = SETTINGS_FILE, on_created=None) -> Dict[str, Any]:
    """
    Load the user settings file, creating a default one first if it doesn't exist.

    Args:
        path: Settings file location
        on_created: Optional callback receiving the absolute path of a newly created file

    Returns:
        Dict of setting name to value
    """
    if not os.path.exists(path):
        created = create_default_settings_file(path)
        if on_created is not None:
            on_created(created)

    with open(path, "r", encoding="utf-8") as f:
        settings = parse_user_settings(f.read())

    logger.debug(f"Loaded user settings from {path}: {settings}")
    return settings


def get_setting(settings: Optional[Dict[str, Any]], key: str) -> Any:
    """Get a user setting, falling back to its default."""
    if settings and key in settings:
        return settings[key]
    return USER_SETTINGS[key]["default"]
