"""Core package - shared configuration, errors and logging."""

from .config import Settings, get_settings
from .errors import RulesError
from .logging import configure_logging

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "RulesError",
    # Logging
    "configure_logging",
]
