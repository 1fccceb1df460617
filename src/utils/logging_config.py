"""Structured logger setup shared across handlers and services."""

import logging
from typing import List

from pythonjsonlogger import jsonlogger

_level = "INFO"
_configured: List[logging.Logger] = []


def get_logger(name: str) -> logging.Logger:
    """
    Configure a JSON logger once and reuse it.

    Queue transitions log the ticket number and desk id as structured fields
    so a day's activity can be reconstructed from the log stream.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter("%(levelname)s %(name)s %(message)s %(asctime)s"))
    logger.addHandler(handler)
    logger.setLevel(_level)
    logger.propagate = False
    _configured.append(logger)
    return logger


def configure_logging(level: str) -> None:
    """Apply the configured level to every queue logger, present and future."""
    global _level
    _level = level.upper()
    for logger in _configured:
        logger.setLevel(_level)
