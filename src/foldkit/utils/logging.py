"""Logging setup for the foldkit CLI and viewer.

Records go to ``~/.foldkit/logs/foldkit.log`` (or ``$FOLDKIT_LOG_DIR``) through a
size-capped rotating handler. A console handler is added on request.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["setup_logging", "get_logger", "log_path"]

LOG_FILENAME = "foldkit.log"
_DEFAULT_LOG_DIR = Path.home() / ".foldkit" / "logs"
_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
_QUIET_LOGGERS = ("PySide6",)

_active_path: Path | None = None


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = False,
    max_bytes: int = 512_000,
    backup_count: int = 2,
    force: bool = False,
) -> Path:
    """Install foldkit's handlers on the root logger and return the log file path.

    Repeated calls are no-ops unless ``force`` is set.
    """

    global _active_path
    if _active_path is not None and not force:
        return _active_path

    directory = Path(log_dir or os.environ.get("FOLDKIT_LOG_DIR") or _DEFAULT_LOG_DIR).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / LOG_FILENAME

    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    ]
    if console:
        handlers.append(logging.StreamHandler())
    formatter = logging.Formatter(_FORMAT, datefmt="%H:%M:%S")
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _active_path = path
    return path


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_path() -> Path | None:
    """Return the file configured by :func:`setup_logging`, if any."""

    return _active_path
