from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from rewardledger.config import LOG_BACKUP_COUNT, LOG_FILE, LOG_MAX_BYTES


def setup_logger(
    log_file: str | None = None, level: int = logging.INFO
) -> logging.Logger:
    """Attach a rotating file handler to the package logger (once)."""
    path = log_file or LOG_FILE
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    logger = logging.getLogger("rewardledger")
    logger.setLevel(level)

    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        handler = RotatingFileHandler(
            path,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    return logger
