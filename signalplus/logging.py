"""Logger factory for WiFi Signal Plus."""

from __future__ import annotations

import logging
import sys

from signalplus.config import LOG_FORMAT, LOG_LEVEL


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger.

    Handlers are attached only once per logger name, so repeated calls
    return the same logger without duplicating output.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    return logger
