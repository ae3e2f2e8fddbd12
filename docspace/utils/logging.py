"""Logging helpers for docspace.

All module loggers hang under the ``docspace`` parent logger, which owns a
console handler. ``setup_logging`` adds a size-rotated file under the
workspace logs directory.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from docspace.settings import settings

LOG_FORMAT = "[%(asctime)s.%(msecs)03d][%(levelname)s][%(filename)s:%(lineno)d]: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "docspace"


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def _is_console_handler(handler: logging.Handler) -> bool:
    # FileHandler subclasses StreamHandler
    return isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)


def _configure_parent() -> logging.Logger:
    """Attach the console handler to the parent logger once."""
    parent = logging.getLogger(ROOT_LOGGER_NAME)
    if not any(_is_console_handler(h) for h in parent.handlers):
        console = logging.StreamHandler()
        console.setFormatter(_formatter())
        parent.addHandler(console)
        parent.setLevel(logging.DEBUG if settings.debug else logging.INFO)
        parent.propagate = False
    return parent


def setup_logging(log_name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Add rotating file output for ``log_name``.

    The file is ``{workspace}/logs/{log_name}.log``; calling again with the
    same name reuses the existing handler. When the logs directory cannot be
    created only console output is kept.

    Returns:
        The ``docspace.{log_name}`` logger
    """
    parent = _configure_parent()
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{log_name}")

    log_dir = _get_logs_root()
    if log_dir is None:
        return logger

    log_file = str(log_dir / f"{log_name}.log")
    attached = {h.baseFilename for h in parent.handlers if isinstance(h, RotatingFileHandler)}
    if log_file not in attached:
        handler = RotatingFileHandler(
            log_file,
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(_formatter())
        parent.addHandler(handler)
        parent.info(f"Writing logs to {log_file}")

    logger.propagate = True
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, placed under the docspace namespace."""
    _configure_parent()
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def _get_logs_root() -> Path | None:
    logs_root = settings.get_logs_root()
    try:
        logs_root.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return logs_root


_configure_parent()
