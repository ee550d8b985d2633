"""ruleflow - forward-chaining evaluation of YAML business rules."""

from .core import RulesError, Settings, get_settings, configure_logging
from .facts import FactSchema, ScalarType, Operator, Value, parse_literal
from .rules import (
    Condition,
    ConditionSet,
    Fact,
    ActionKind,
    RuleAction,
    Rule,
    RuleParser,
)
from .engine import RulesEngine, Results, RunnerResults, Runner, Outcome

__version__ = "0.1.0"

__all__ = [
    # Core
    "RulesError",
    "Settings",
    "get_settings",
    "configure_logging",
    # Facts
    "FactSchema",
    "ScalarType",
    "Operator",
    "Value",
    "parse_literal",
    # Rules
    "Condition",
    "ConditionSet",
    "Fact",
    "ActionKind",
    "RuleAction",
    "Rule",
    "RuleParser",
    # Engine
    "RulesEngine",
    "Results",
    "RunnerResults",
    "Runner",
    "Outcome",
]
