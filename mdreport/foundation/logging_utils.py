"""Logging setup shared by the CLI."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_logger(level: str = "INFO", name: str = "mdreport") -> logging.Logger:
    """Configure the package logger to write pipe-delimited lines to stderr."""
    normalized = level.strip().upper()
    if normalized not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level!r}")

    logger = logging.getLogger(name)
    logger.setLevel(normalized)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(normalized)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
