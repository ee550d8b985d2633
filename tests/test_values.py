"""Tests for typed scalar values."""

import pytest
from decimal import Decimal

from ruleflow import Operator, RulesError, ScalarType, Value, parse_literal


class TestParseLiteral:
    """Test building values from rule literals."""

    def test_string(self):
        value = parse_literal(ScalarType.STRING, "Trigger Rule 1")
        assert value.data == "Trigger Rule 1"
        assert not value.is_unset

    def test_empty_string_is_unset(self):
        assert parse_literal(ScalarType.STRING, "").is_unset
        assert parse_literal(ScalarType.STRING, None).is_unset

    @pytest.mark.parametrize("text,expected", [("123", 123), ("-7", -7), ("+4", 4), (" 12 ", 12)])
    def test_int(self, text, expected):
        assert parse_literal(ScalarType.INT, text).data == expected

    @pytest.mark.parametrize("text", ["a", "123.45", "1e3", "1_000", "", "\u0663", "\uff11\uff12"])
    def test_bad_int_is_unset(self, text):
        assert parse_literal(ScalarType.INT, text).is_unset

    def test_decimal_keeps_scale(self):
        value = parse_literal(ScalarType.DECIMAL, "1.230")
        assert value.data == Decimal("1.23")
        assert str(value) == "1.230"

    @pytest.mark.parametrize("text", ["a", "NaN", "Infinity", "1e5", "1.2.3", "\u0661.\u0665", "\u0663"])
    def test_bad_decimal_is_unset(self, text):
        assert parse_literal(ScalarType.DECIMAL, text).is_unset

    @pytest.mark.parametrize("text,expected", [("true", True), ("True", True), ("FALSE", False)])
    def test_bool(self, text, expected):
        assert parse_literal(ScalarType.BOOL, text).data is expected

    @pytest.mark.parametrize("text", ["a", "2", "yes", "1"])
    def test_bad_bool_is_unset(self, text):
        assert parse_literal(ScalarType.BOOL, text).is_unset


class TestValueOf:
    """Test building values from native Python values."""

    def test_native_types(self):
        assert Value.of(ScalarType.STRING, "abc").data == "abc"
        assert Value.of(ScalarType.INT, 3).data == 3
        assert Value.of(ScalarType.DECIMAL, Decimal("1.5")).data == Decimal("1.5")
        assert Value.of(ScalarType.BOOL, False).data is False

    def test_decimal_accepts_int_and_float(self):
        assert Value.of(ScalarType.DECIMAL, 2).data == Decimal(2)
        assert Value.of(ScalarType.DECIMAL, 1.1).data == Decimal("1.1")

    @pytest.mark.parametrize(
        "native", [float("nan"), float("inf"), float("-inf"), Decimal("NaN"), Decimal("Infinity")]
    )
    def test_decimal_rejects_non_finite(self, native):
        with pytest.raises(RulesError, match="Expected a decimal value"):
            Value.of(ScalarType.DECIMAL, native)

    def test_bool_is_not_an_int(self):
        with pytest.raises(RulesError, match="Expected a int value"):
            Value.of(ScalarType.INT, True)

    def test_wrong_type(self):
        with pytest.raises(RulesError, match="Expected a bool value but got str"):
            Value.of(ScalarType.BOOL, "true")


class TestCompare:
    """Test operator support and comparison semantics."""

    def test_string_equality(self):
        a = Value(ScalarType.STRING, "UK")
        assert a.compare(Operator.EQUAL, Value(ScalarType.STRING, "UK"))
        assert a.compare(Operator.NOT_EQUAL, Value(ScalarType.STRING, "uk"))

    def test_string_less_than_is_unsupported(self):
        a = Value(ScalarType.STRING, "a")
        with pytest.raises(RulesError, match="Unsupported string operation 'LessThan'"):
            a.compare(Operator.LESS_THAN, Value(ScalarType.STRING, "b"))

    def test_bool_ordering_is_unsupported(self):
        a = Value(ScalarType.BOOL, True)
        with pytest.raises(RulesError, match="Unsupported bool operation"):
            a.compare(Operator.GREATER_THAN, Value(ScalarType.BOOL, False))

    def test_int_relational(self):
        two = Value(ScalarType.INT, 2)
        assert two.compare(Operator.LESS_OR_EQUAL, Value(ScalarType.INT, 2))
        assert two.compare(Operator.LESS_THAN, Value(ScalarType.INT, 3))
        assert not two.compare(Operator.GREATER_THAN, Value(ScalarType.INT, 2))
        assert two.compare(Operator.GREATER_OR_EQUAL, Value(ScalarType.INT, 1))

    def test_decimal_is_numeric(self):
        a = parse_literal(ScalarType.DECIMAL, "1.230")
        assert a.compare(Operator.EQUAL, parse_literal(ScalarType.DECIMAL, "1.23"))
        assert a.compare(Operator.LESS_THAN, parse_literal(ScalarType.DECIMAL, "1.2300001"))

    def test_presence_operators_are_not_comparisons(self):
        a = Value(ScalarType.INT, 1)
        with pytest.raises(RulesError, match="Unsupported int operation"):
            a.compare(Operator.IS_DEFINED, a)

    def test_mismatched_types(self):
        with pytest.raises(RulesError, match="Cannot compare"):
            Value(ScalarType.INT, 1).compare(Operator.EQUAL, Value(ScalarType.DECIMAL, Decimal(1)))


class TestRendering:
    """Test stable text rendering."""

    def test_str(self):
        assert str(Value(ScalarType.STRING, "abc")) == "abc"
        assert str(Value(ScalarType.INT, 42)) == "42"
        assert str(parse_literal(ScalarType.DECIMAL, "1.23")) == "1.23"
        assert str(Value(ScalarType.BOOL, True)) == "True"
        assert str(Value(ScalarType.BOOL, False)) == "False"
        assert str(Value(ScalarType.STRING)) == ""
