"""Application-wide logger writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "dailyvault"
_LOG_FILE = "dailyvault.log"
_MAX_BYTES = 2 * 1024 * 1024  # 2 MB
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None
_handler: logging.Handler | None = None
_log_dir: Path | None = None


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return handler


def get_logger(log_dir: Path | None = None) -> logging.Logger:
    """Return the root ``dailyvault`` logger, initialising it on first call.

    Module loggers (``logging.getLogger(__name__)``) propagate here. Nothing
    logged under this tree may contain secrets, keys or plaintext.

    Passing ``log_dir`` moves the log file there even after initialisation.
    """
    global _logger, _handler, _log_dir
    if _logger is not None and log_dir is None:
        return _logger

    log_dir = Path(log_dir or user_log_dir(_APP_NAME))
    if _logger is not None and log_dir == _log_dir:
        return _logger

    logger = logging.getLogger(_APP_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler.close()

    _handler = _file_handler(log_dir)
    _log_dir = log_dir
    logger.addHandler(_handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    _logger = logger
    return _logger


def reset_logger() -> None:
    """Detach the log file and forget the configured logger."""
    global _logger, _handler, _log_dir
    if _handler is not None:
        logging.getLogger(_APP_NAME).removeHandler(_handler)
        _handler.close()
    _handler = None
    _log_dir = None
    _logger = None
