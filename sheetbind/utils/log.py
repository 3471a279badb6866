"""Logging helpers for the sheetbind package."""

# Module responsibilities:
# - Centralize logging configuration with stream + optional rotating file handlers.
# - Provide get_logger() that installs the console handler once per process.

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "sheetbind"
LOG_DIR_ENV = "SHEETBIND_LOG_DIR"
_LOG_CONFIGURED = False


def _resolve_log_dir(log_dir: Optional[Path] = None) -> Optional[Path]:
    """Resolve the log directory from the argument or environment, ensuring existence."""
    target = log_dir
    if target is None and os.environ.get(LOG_DIR_ENV):
        target = Path(os.environ[LOG_DIR_ENV])
    if target is None:
        return None
    target = target.expanduser()
    target.mkdir(parents=True, exist_ok=True)
    return target


_FORMATTER = logging.Formatter(
    fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _attach_file_handler(root_logger: logging.Logger, directory: Path) -> None:
    """Add a rotating handler for *directory* unless one already writes there."""
    target = os.path.abspath(directory / "sheetbind.log")
    for handler in root_logger.handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler) and handler.baseFilename == target:
            return
    file_handler = logging.handlers.RotatingFileHandler(
        target, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(_FORMATTER)
    root_logger.addHandler(file_handler)


def configure_logging(log_dir: Optional[Path] = None, level: str | int | None = None) -> logging.Logger:
    """Configure the package logger with console and optional rotating file handlers.

    The console handler is installed once. Later calls still apply an explicit
    *level* and attach a file handler for a *log_dir* not seen before.
    """
    global _LOG_CONFIGURED
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)

    if not _LOG_CONFIGURED:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(_FORMATTER)
        root_logger.addHandler(console_handler)
        root_logger.setLevel(logging.INFO)
        root_logger.propagate = False
        _LOG_CONFIGURED = True

    directory = _resolve_log_dir(log_dir)
    if directory is not None:
        _attach_file_handler(root_logger, directory)

    if level is not None:
        root_logger.setLevel(level if isinstance(level, int) else level.upper())
    return root_logger


def get_logger(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """Return a package-scoped logger.

    Args:
        name: Logger name suffix appended to the package root logger namespace.
        log_dir: Optional directory for an additional rotating log file.

    Returns:
        Configured logger scoped under ``sheetbind``.
    """

    configure_logging(log_dir)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Drop configured handlers. Mainly for testing purposes."""
    global _LOG_CONFIGURED
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    _LOG_CONFIGURED = False


__all__ = ["configure_logging", "get_logger", "reset_logging"]
