"""Logging setup for applications embedding the engine."""

import logging
import sys

from .config import get_settings

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None, fmt: str = DEFAULT_FORMAT) -> None:
    """
    Configure the root logger with a single stream handler.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults
            to the configured `log_level`.
        fmt: Format string for log records
    """
    if level is None:
        level = get_settings().log_level

    root_logger = logging.getLogger()

    # Clear existing handlers
    root_logger.handlers.clear()

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))

    root_logger.addHandler(handler)
