"""Rules package - rule data model, YAML reading and parsing."""

from .models import (
    Condition,
    ConditionSet,
    Fact,
    ActionKind,
    RuleAction,
    Rule,
)
from .document import read_source, compose_document
from .parser import RuleParser

__all__ = [
    # Models
    "Condition",
    "ConditionSet",
    "Fact",
    "ActionKind",
    "RuleAction",
    "Rule",
    # Reading
    "read_source",
    "compose_document",
    # Parser
    "RuleParser",
]
