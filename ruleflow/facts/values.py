"""
Typed scalar values for facts and condition literals.

A value is one of a closed set of scalar types (string, int, decimal,
bool). Every value knows which comparison operators it supports, and can
be built either from a rule literal or from a native Python value.
"""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable

from ruleflow.core.errors import RulesError


# =============================================================================
# Types and Operators
# =============================================================================


class ScalarType(str, Enum):
    """Scalar types a fact can hold."""

    STRING = "string"
    INT = "int"
    DECIMAL = "decimal"
    BOOL = "bool"


class Operator(str, Enum):
    """Condition operators.

    AND and OR only tag the combinator of a condition set; they are never
    evaluated against a fact.
    """

    AND = "And"
    OR = "Or"
    NOT_DEFINED = "NotDefined"
    IS_DEFINED = "IsDefined"
    EQUAL = "Equal"
    NOT_EQUAL = "NotEqual"
    LESS_THAN = "LessThan"
    GREATER_THAN = "GreaterThan"
    LESS_OR_EQUAL = "LessOrEqual"
    GREATER_OR_EQUAL = "GreaterOrEqual"

    @property
    def is_combinator(self) -> bool:
        return self in (Operator.AND, Operator.OR)

    @property
    def is_presence_check(self) -> bool:
        return self in (Operator.IS_DEFINED, Operator.NOT_DEFINED)

    def __str__(self) -> str:
        return self.value


_COMPARATORS: dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.EQUAL: operator.eq,
    Operator.NOT_EQUAL: operator.ne,
    Operator.LESS_THAN: operator.lt,
    Operator.GREATER_THAN: operator.gt,
    Operator.LESS_OR_EQUAL: operator.le,
    Operator.GREATER_OR_EQUAL: operator.ge,
}

_EQUALITY = frozenset({Operator.EQUAL, Operator.NOT_EQUAL})
_RELATIONAL = frozenset(_COMPARATORS)

SUPPORTED_OPERATORS: dict[ScalarType, frozenset[Operator]] = {
    ScalarType.STRING: _EQUALITY,
    ScalarType.INT: _RELATIONAL,
    ScalarType.DECIMAL: _RELATIONAL,
    ScalarType.BOOL: _EQUALITY,
}


# =============================================================================
# Literal Parsing
# =============================================================================

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)")


def _parse_int(text: str) -> int | None:
    text = text.strip()
    if not _INT_PATTERN.fullmatch(text):
        return None
    return int(text)


def _parse_decimal(text: str) -> Decimal | None:
    text = text.strip()
    if not _DECIMAL_PATTERN.fullmatch(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def _parse_bool(text: str) -> bool | None:
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def parse_literal(scalar_type: ScalarType, text: str | None) -> Value:
    """Build a value of `scalar_type` from a rule literal.

    Parsing never raises: a literal that does not parse yields an unset
    value, and callers check `Value.is_unset` to report the failure.
    """
    if not text:
        return Value(scalar_type)

    if scalar_type == ScalarType.STRING:
        data: Any = text
    elif scalar_type == ScalarType.INT:
        data = _parse_int(text)
    elif scalar_type == ScalarType.DECIMAL:
        data = _parse_decimal(text)
    elif scalar_type == ScalarType.BOOL:
        data = _parse_bool(text)
    else:
        raise RulesError(f"Don't know how to parse {scalar_type} value")

    return Value(scalar_type, data)


# =============================================================================
# Value
# =============================================================================


@dataclass(frozen=True)
class Value:
    """A typed scalar value. `data` is None when the value is unset."""

    type: ScalarType
    data: str | int | Decimal | bool | None = None

    @property
    def is_unset(self) -> bool:
        return self.data is None

    @classmethod
    def of(cls, scalar_type: ScalarType, native: Any) -> Value:
        """Build a value from a native Python value, checking its type."""
        if scalar_type == ScalarType.STRING and isinstance(native, str):
            return cls(scalar_type, native or None)
        if scalar_type == ScalarType.BOOL and isinstance(native, bool):
            return cls(scalar_type, native)
        if not isinstance(native, bool):
            if scalar_type == ScalarType.INT and isinstance(native, int):
                return cls(scalar_type, native)
            if scalar_type == ScalarType.DECIMAL and isinstance(native, (Decimal, int, float)):
                # Via str() so 1.1 becomes Decimal('1.1'), not its binary expansion
                data = native if isinstance(native, Decimal) else Decimal(str(native))
                if data.is_finite():
                    return cls(scalar_type, data)

        raise RulesError(
            f"Expected a {scalar_type.value} value but got {type(native).__name__} '{native}'",
            {"type": scalar_type.value},
        )

    def to_native(self) -> Any:
        return self.data

    def supports(self, op: Operator) -> bool:
        return op in SUPPORTED_OPERATORS[self.type]

    def compare(self, op: Operator, other: Value) -> bool:
        """Compare this value (left side) with `other` using `op`.

        Raises:
            RulesError: If `op` is not supported for this type, or the
                values cannot be compared.
        """
        if not self.supports(op):
            raise RulesError(
                f"Unsupported {self.type.value} operation '{op}'",
                {"type": self.type.value, "operator": op.value},
            )
        if other.type != self.type:
            raise RulesError(
                f"Cannot compare {self.type.value} value '{self}' "
                f"with {other.type.value} value '{other}'"
            )
        if self.is_unset or other.is_unset:
            raise RulesError(f"Cannot compare unset {self.type.value} value")

        return _COMPARATORS[op](self.data, other.data)

    def __str__(self) -> str:
        if self.data is None:
            return ""
        return str(self.data)
