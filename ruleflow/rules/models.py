"""Immutable rule data model: conditions, facts, actions and rules."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ruleflow.core.errors import RulesError
from ruleflow.facts.values import Operator, Value


# =============================================================================
# Conditions
# =============================================================================


class Condition(BaseModel):
    """A single condition on a fact."""

    model_config = ConfigDict(frozen=True)

    id: str
    operator: Operator
    value: Value | None = None

    def __str__(self) -> str:
        if self.value is None:
            return f"{self.id} {self.operator}"
        return f"{self.id} {self.operator} {self.value}"


class ConditionSet(BaseModel):
    """A set of conditions combined with AND (the default) or OR."""

    model_config = ConfigDict(frozen=True)

    is_and: bool = True
    conditions: tuple[Condition, ...] = ()


# =============================================================================
# Facts and Actions
# =============================================================================


class Fact(BaseModel):
    """A fact id with its typed value."""

    model_config = ConfigDict(frozen=True)

    id: str
    value: Value

    def __str__(self) -> str:
        return f"{self.id} = {self.value}"


class ActionKind(str, Enum):
    """Types of action a rule can trigger. Declaration order is sort order."""

    FIELD = "Field"
    FIELD_GROUP = "FieldGroup"
    BLOCK = "Block"
    PLAYER = "Player"

    @classmethod
    def parse(cls, action_type: ActionKind | str) -> ActionKind:
        """Get the action kind named `action_type`, raising if there is none."""
        try:
            return cls(action_type)
        except ValueError as exc:
            kinds = ", ".join(kind.value for kind in cls)
            raise RulesError(
                f"Action type '{action_type}' is not defined (expected one of: {kinds})",
                {"action_type": str(action_type)},
            ) from exc

    @property
    def order(self) -> int:
        return list(ActionKind).index(self)

    def __str__(self) -> str:
        return self.value


class RuleAction(BaseModel):
    """An action triggered by a rule, e.g. 'Field Amount'."""

    model_config = ConfigDict(frozen=True)

    type: ActionKind
    id: str

    @property
    def key(self) -> str:
        return f"{self.type.value} {self.id}"

    def sort_key(self) -> tuple[int, str]:
        return self.type.order, self.id

    def __str__(self) -> str:
        return self.key


# =============================================================================
# Rule
# =============================================================================


class Rule(BaseModel):
    """A parsed and validated rule.

    Rules are trigger-once: after a rule has been decided (true or false)
    in a run it is not evaluated again. A final rule checks whether facts
    are defined, so it is held back until all other rules have stopped
    adding facts.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    condition_set: ConditionSet | None = None
    facts: dict[str, Fact] | None = None
    actions: dict[str, RuleAction] | None = None
    is_final: bool = Field(False, description="Evaluated only in the final phase")

    @property
    def conditions(self) -> tuple[Condition, ...]:
        if self.condition_set is None:
            return ()
        return self.condition_set.conditions

    def __str__(self) -> str:
        return self.name
