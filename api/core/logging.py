"""
Logging setup (stdlib `logging`).

Modules log through `logging.getLogger(__name__)`; this module only wires
handlers once per process. Console output always, plus daily-rotated
files when LOG_DIR is set.
"""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from . import settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_RETENTION_DAYS = 14

_configured = False


def _file_handler(directory: Path, filename: str, level: int) -> logging.Handler:
    directory.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        directory / filename,
        when="midnight",
        backupCount=LOG_RETENTION_DAYS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def configure_logging() -> None:
    global _configured
    if _configured:
        return None

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_dir = settings.log_dir()
    if log_dir is not None:
        handlers.append(_file_handler(log_dir, "combined.log", logging.DEBUG))
        handlers.append(_file_handler(log_dir, "error.log", logging.ERROR))

    root = logging.getLogger()
    root.setLevel(settings.log_level())
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    _configured = True
