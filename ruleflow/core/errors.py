"""
Domain exception for rule parsing and evaluation.

Every failure surfaced to callers is a RulesError. The kind of failure
(structural, schema, type, grammar, runtime or I/O) is carried by the
message text, and the original cause is chained where there is one.
"""

from typing import Any


class RulesError(Exception):
    """Base exception for all rule parsing and evaluation errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def with_context(self, context: str) -> "RulesError":
        """Return a copy of this error with `context` appended to the message."""
        return type(self)(f"{self.message} {context}", dict(self.details))
