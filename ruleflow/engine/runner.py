"""
Single pass rule evaluation.

Conditions are evaluated with three-valued logic: a condition on a fact
that is not known yet is UNKNOWN rather than false, and a rule whose
outcome is UNKNOWN is kept for the next pass.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Mapping

from ruleflow.core.errors import RulesError
from ruleflow.facts.values import Operator
from ruleflow.rules.models import Condition, Fact, Rule, RuleAction
from .results import RunnerResults

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    """Three-valued result of a condition or rule."""

    TRUE = "true"
    FALSE = "false"
    UNKNOWN = "unknown"

    @classmethod
    def of(cls, value: bool) -> Outcome:
        return cls.TRUE if value else cls.FALSE


class Runner:
    """Evaluates each remaining rule once (a single pass)."""

    @staticmethod
    def evaluate(
        facts: Mapping[str, Fact],
        rules: Mapping[str, Rule],
        final_phase: bool,
    ) -> RunnerResults:
        """Try to decide each rule in turn.

        Args:
            facts: The known facts.
            rules: The rules still to be decided, in declaration order.
            final_phase: If True, evaluate final rules only, otherwise
                evaluate non-final rules only.

        Returns:
            The facts and actions added by rules that triggered, and the
            rules that could not be decided yet.
        """
        new_facts: list[Fact] = []
        new_actions: list[RuleAction] = []
        remaining: dict[str, Rule] = {}

        # Facts added by a rule are visible to the rules after it
        known = dict(facts)

        for name, rule in rules.items():
            if rule.is_final != final_phase:
                remaining[name] = rule
                continue

            outcome = evaluate_rule(rule, known)
            logger.debug("Rule '%s' evaluated to %s", name, outcome.value)

            if outcome == Outcome.UNKNOWN:
                remaining[name] = rule
                continue

            if outcome == Outcome.TRUE:
                for fact in (rule.facts or {}).values():
                    new_facts.append(fact)
                    known.setdefault(fact.id, fact)
                new_actions.extend((rule.actions or {}).values())

        return RunnerResults(facts=new_facts, actions=new_actions, remaining_rules=remaining)


def evaluate_rule(rule: Rule, facts: Mapping[str, Fact]) -> Outcome:
    """Evaluate a rule's conditions. A rule without conditions is TRUE."""
    condition_set = rule.condition_set
    try:
        if condition_set is None:
            return Outcome.TRUE
        if condition_set.is_and:
            return evaluate_and(condition_set.conditions, facts)
        return evaluate_or(condition_set.conditions, facts)
    except RulesError as exc:
        raise exc.with_context(f"in rule '{rule.name}'") from exc


def evaluate_and(conditions: Iterable[Condition], facts: Mapping[str, Fact]) -> Outcome:
    """TRUE if all conditions are TRUE, FALSE if any is FALSE.

    UNKNOWN if a fact needed by any comparison is missing, in which case
    no condition is evaluated.
    """
    conditions = list(conditions)

    for condition in conditions:
        if not condition.operator.is_presence_check and condition.id not in facts:
            return Outcome.UNKNOWN

    for condition in conditions:
        if evaluate_condition(condition, facts) == Outcome.FALSE:
            return Outcome.FALSE

    return Outcome.TRUE


def evaluate_or(conditions: Iterable[Condition], facts: Mapping[str, Fact]) -> Outcome:
    """TRUE if any condition is TRUE, FALSE if all are FALSE, else UNKNOWN."""
    result = Outcome.FALSE

    for condition in conditions:
        outcome = evaluate_condition(condition, facts)
        if outcome == Outcome.TRUE:
            return Outcome.TRUE
        if outcome == Outcome.UNKNOWN:
            result = Outcome.UNKNOWN

    return result


def evaluate_condition(condition: Condition, facts: Mapping[str, Fact]) -> Outcome:
    """Evaluate one condition against the known facts.

    Presence checks are never UNKNOWN. A comparison on a missing fact is
    UNKNOWN, and an operator the fact's type does not support raises.
    """
    fact = facts.get(condition.id)

    if condition.operator == Operator.IS_DEFINED:
        return Outcome.of(fact is not None)
    if condition.operator == Operator.NOT_DEFINED:
        return Outcome.of(fact is None)

    if fact is None:
        return Outcome.UNKNOWN

    if condition.value is None:
        raise RulesError(f"Condition '{condition}' has no value to compare")

    try:
        return Outcome.of(fact.value.compare(condition.operator, condition.value))
    except RulesError as exc:
        raise exc.with_context(f"evaluating condition '{condition}'") from exc
