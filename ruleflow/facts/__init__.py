"""Facts package - typed values and the fact schema registry."""

from .values import (
    ScalarType,
    Operator,
    Value,
    SUPPORTED_OPERATORS,
    parse_literal,
)
from .schema import FactSchema

__all__ = [
    # Values
    "ScalarType",
    "Operator",
    "Value",
    "SUPPORTED_OPERATORS",
    "parse_literal",
    # Schema
    "FactSchema",
]
