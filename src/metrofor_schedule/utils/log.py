"""Logging setup for the command-line front-end."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "metrofor_schedule"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Configure the package logger to write through rich on stderr.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    # Remove existing handlers so repeated CLI invocations don't duplicate output
    logger.handlers = []

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)

    return logger
