from __future__ import annotations

import logging
import os

# Loader records come from pool threads; the thread name tells critical from deferred.
LOG_FORMAT = "%(levelname)s | %(threadName)s | %(name)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        level = os.getenv("SF_LOG_LEVEL", "INFO").upper()
        logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    return logger
