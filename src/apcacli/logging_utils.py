"""Central logging configuration used across modules."""

from __future__ import annotations

import logging
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

VERBOSITY_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG, TRACE]


def level_for_verbosity(verbosity: int) -> int:
    """Map the number of ``-v`` flags to a logging level."""
    index = min(max(verbosity, 0), len(VERBOSITY_LEVELS) - 1)
    return VERBOSITY_LEVELS[index]


def setup_logger(verbosity: int = 0) -> logging.Logger:
    """Configure and return the client logger.

    Logs always go to stderr so that reports written to stdout stay
    machine-readable.
    """
    logger = logging.getLogger("apcacli")
    logger.setLevel(level_for_verbosity(verbosity))
    logger.propagate = False

    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    return logger
