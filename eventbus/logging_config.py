"""Logging setup for processes hosting an event bus.

Reads the ``logging`` settings section: an optional rotating log file, optional
console output, and per-logger level overrides such as
``loggers: {eventbus.dispatch: DEBUG}``.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: Any, default: int = logging.INFO) -> int:
    if isinstance(name, int):
        return name
    return getattr(logging, str(name).upper(), default)


def _rotating_file_handler(project_root: Path, cfg: dict[str, Any]) -> logging.Handler:
    log_path = project_root / cfg["file"]
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=int(cfg.get("max_bytes", 10 * 1024 * 1024)),
        backupCount=int(cfg.get("backup_count", 3)),
        encoding="utf-8",
    )


def setup_logging(project_root: Path, settings: dict[str, Any]) -> list[logging.Handler]:
    """Replace root handlers according to settings["logging"]. Returns the new handlers.

    With no file configured, console output is forced on so records are not lost.
    """
    cfg = settings.get("logging", {}) or {}
    level = _level(cfg.get("level", "INFO"))
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = []
    if cfg.get("file"):
        handlers.append(_rotating_file_handler(project_root, cfg))
    if cfg.get("log_to_console", False) or not handlers:
        handlers.append(logging.StreamHandler())

    root = logging.getLogger()
    root.setLevel(level)
    for h in root.handlers[:]:
        root.removeHandler(h)
    # Handlers stay at NOTSET so per-logger overrides below the root level pass through.
    for h in handlers:
        h.setFormatter(formatter)
        root.addHandler(h)

    for name, logger_level in (cfg.get("loggers") or {}).items():
        logging.getLogger(name).setLevel(_level(logger_level))
    return handlers
