"""Logging configuration for the command line entry point."""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def _normalise_level(level: Optional[Union[str, int]]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        value = level.strip().upper()
        if value.isdigit():
            return int(value)
        resolved = logging.getLevelName(value)
        if isinstance(resolved, int):
            return resolved
    return logging.INFO


def configure_logging(level: Optional[Union[str, int]] = None) -> int:
    """Route root logging to stderr, and to ``PAGESCRAPER_LOG_FILE`` if set.

    stdout is reserved for the JSON output. Returns the effective level.
    """
    if level is None:
        level = os.getenv("PAGESCRAPER_LOG_LEVEL")
    log_level = _normalise_level(level)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_file = os.getenv("PAGESCRAPER_LOG_FILE")
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.basicConfig(level=log_level, format=LOG_FORMAT, handlers=handlers)
    return log_level
