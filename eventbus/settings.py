"""Settings for processes hosting an event bus: defaults overlaid with config/settings.yaml."""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.yaml"

_DEFAULTS: dict[str, Any] = {
    "event_bus": {
        "connection_retry_count": 5,
        "default_topic_name": "EventBus",
        "connection_string": "",
        "subscriber_app_name": "",
        "event_name_prefix": "",
        "event_name_suffix": "IntegrationEvent",
        "bus_type": "RabbitMQ",
        "trim_mode": "charset",
    },
    "logging": {
        "file": "logs/eventbus.log",
        "level": "INFO",
        "log_to_console": False,
        "max_bytes": 10485760,  # 10 MB
        "backup_count": 3,
        "loggers": {},
    },
}

_cached: dict[str, Any] | None = None


def _overlay(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively apply overrides onto base in place. None values keep the default."""
    for key, value in overrides.items():
        if value is None:
            continue
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _overlay(current, value)
        else:
            base[key] = value
    return base


def get_default_settings() -> dict[str, Any]:
    return copy.deepcopy(_DEFAULTS)


def get_setting(settings: dict[str, Any], path: str, default: Any = None) -> Any:
    """Get a nested value by dot path (e.g. 'event_bus.event_name_suffix')."""
    current: Any = settings
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def reload_settings() -> None:
    """Drop the cached settings so the next load_settings() rereads the file."""
    global _cached
    _cached = None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: top level is not a mapping", path)
        return {}
    return data


def load_settings(config_dir: Path | None = None) -> dict[str, Any]:
    """Return defaults merged with <config_dir>/settings.yaml (default: ./config). Cached."""
    global _cached
    if _cached is not None:
        return _cached

    path = (config_dir or Path.cwd() / "config") / SETTINGS_FILE
    settings = get_default_settings()
    if path.exists():
        _overlay(settings, _read_yaml(path))

    _cached = settings
    return settings
