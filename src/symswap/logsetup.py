#!/usr/bin/env python3
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from .errors import ConfigError


def _drop_file_handlers(logger: logging.Logger, keep: str | None = None) -> None:
    for h in list(logger.handlers):
        if isinstance(h, RotatingFileHandler) and h.baseFilename != keep:
            logger.removeHandler(h)
            h.close()


def setup_logging() -> logging.Logger:
    """Configure file logging for the 'symswap' logger.

    File logging is opt-in: without SYMSWAP_LOG_DIR nothing is written to disk.

    Environment variables:
    - SYMSWAP_LOG_DIR (default: unset, logging disabled)
    - SYMSWAP_LOG_LEVEL (default: INFO)
    - SYMSWAP_LOG_MAX_BYTES (default: 10485760 i.e., 10MB)
    - SYMSWAP_LOG_BACKUPS (default: 5)

    Raises ConfigError when the log directory or file cannot be created.
    """
    logger = logging.getLogger("symswap")
    logger.propagate = False  # stdout is the human report; keep log records out of it

    log_dir = os.environ.get("SYMSWAP_LOG_DIR")
    if not log_dir:
        _drop_file_handlers(logger)
        if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
            logger.addHandler(logging.NullHandler())
        return logger

    log_file = os.path.abspath(os.path.join(log_dir, "symswap.log"))
    level_name = os.environ.get("SYMSWAP_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    max_bytes = int(os.environ.get("SYMSWAP_LOG_MAX_BYTES", 10 * 1024 * 1024))
    backups = int(os.environ.get("SYMSWAP_LOG_BACKUPS", 5))
    logger.setLevel(level)

    # Re-point the handler if the log file moved (e.g. a second run in the same process)
    _drop_file_handlers(logger, keep=log_file)
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        try:
            os.makedirs(log_dir, exist_ok=True)
            handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backups)
        except OSError as e:
            raise ConfigError(f'Cannot write log file in $SYMSWAP_LOG_DIR "{log_dir}": {e.strerror or e}')
        fmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s [%(process)d] %(name)s %(module)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    for h in logger.handlers:
        h.setLevel(level)
    logger.debug("Logging initialized: %s level=%s", log_file, level_name)
    return logger
