"""Result models for rule evaluation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ruleflow.rules.models import ActionKind, Fact, Rule, RuleAction


class RunnerResults(BaseModel):
    """Output of a single pass over the remaining rules."""

    model_config = ConfigDict(frozen=True)

    facts: list[Fact] = Field(default_factory=list)
    """Facts added by rules that triggered, in evaluation order."""

    actions: list[RuleAction] = Field(default_factory=list)
    """Actions added by rules that triggered, in evaluation order."""

    remaining_rules: dict[str, Rule] = Field(default_factory=dict)
    """Rules that could not be decided yet."""


class Results(BaseModel):
    """Complete result of a run.

    `facts` holds every known fact (supplied and deduced) in schema order;
    `actions` holds the actions of every triggered rule, deduplicated and
    sorted by type then id.
    """

    model_config = ConfigDict(frozen=True)

    facts: dict[str, Any] = Field(default_factory=dict)
    actions: list[RuleAction] = Field(default_factory=list)
    passes: int = 0

    def get(self, fact_id: str, default: Any = None) -> Any:
        """Get a fact value, or `default` if the fact is not defined."""
        return self.facts.get(fact_id, default)

    def has_action(self, action_type: ActionKind | str, action_id: str) -> bool:
        """Check whether an action was triggered."""
        kind = ActionKind.parse(action_type)
        return any(a.type == kind and a.id == action_id for a in self.actions)
