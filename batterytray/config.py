"""Configuration management for the battery tray monitor."""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)


# Default configuration values
DEFAULTS = {
    # Where device data comes from
    "hub": {
        "backend": "sysfs",  # "sysfs" (Linux) or "icue" (Windows, Corsair)
        "connect_timeout_seconds": 10,  # Startup fails if the hub is not ready by then
    },

    # Polling settings
    "polling": {
        "interval_seconds": 1.0,  # How often to rescan and read batteries
    },

    "logging": {
        "level": "INFO",
    },
}


def get_config_dir() -> Path:
    """Get the configuration directory, creating it if needed."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        config_dir = Path(xdg_config) / "batterytray"
    else:
        config_dir = Path.home() / ".config" / "batterytray"

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    return get_config_dir() / "config.json"


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base, returning new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config() -> dict:
    """Load configuration from file, merging with defaults."""
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, "r") as f:
                user_config = json.load(f)
            return _deep_merge(copy.deepcopy(DEFAULTS), user_config)
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load config from %s: %s", config_path, e)
            return copy.deepcopy(DEFAULTS)

    # Create default config file on first run
    save_config(DEFAULTS)
    return copy.deepcopy(DEFAULTS)


def save_config(config: dict) -> bool:
    """Save configuration to file."""
    config_path = get_config_path()

    try:
        with open(config_path, "w") as f:
            json.dump(config, f, indent=2)
        return True
    except OSError as e:
        log.error("Could not save config to %s: %s", config_path, e)
        return False


def get(key: str, default: Any = None) -> Any:
    """Get a config value using dot notation (e.g., 'polling.interval_seconds')."""
    config = load_config()
    value = config

    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value


def set(key: str, value: Any) -> bool:
    """Set a config value using dot notation."""
    config = load_config()
    keys = key.split(".")

    # Navigate to parent
    target = config
    for k in keys[:-1]:
        if k not in target:
            target[k] = {}
        target = target[k]

    target[keys[-1]] = value
    return save_config(config)


class Config:
    """Configuration accessor with attribute-style access."""

    def __init__(self):
        self._config = load_config()

    def reload(self):
        """Reload configuration from file."""
        self._config = load_config()

    def save(self):
        """Save current configuration to file."""
        save_config(self._config)

    @property
    def hub(self) -> dict:
        return self._config.get("hub", DEFAULTS["hub"])

    @property
    def polling(self) -> dict:
        return self._config.get("polling", DEFAULTS["polling"])

    @property
    def logging(self) -> dict:
        return self._config.get("logging", DEFAULTS["logging"])

    def __getitem__(self, key: str) -> Any:
        return get(key)

    def __setitem__(self, key: str, value: Any):
        set(key, value)
        self._config = load_config()


def configure_logging(level: Any = None) -> None:
    """Set up root logging at ``level``, or the configured level if None."""
    if level is None:
        level = get("logging.level", DEFAULTS["logging"]["level"])
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
