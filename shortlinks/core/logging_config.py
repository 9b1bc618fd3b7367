"""Logging configuration for the shortlinks service."""

import logging
import sys

LOGGER_NAME = "shortlinks"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the package logger.

    Every module logs through a child of the "shortlinks" logger, so a
    single console handler here covers services, middleware and startup.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Repeated app construction (tests, reloads) must not stack handlers
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
