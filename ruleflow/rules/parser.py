"""YAML rule parser and validator.

Rule format:

    - name: Fouled out
      description: Player has too many personal fouls
      conditions:
        - or
        - PersonalFoulCount >= 6
        - "&Ejected"
      facts:
        - FouledOut = true
      actions:
        - Player Substitute

Conditions are 'and' / 'or' (first condition only), '&id' (fact is
defined), '!id' (fact is not defined) or 'id OP value' with OP one of
==, !=, <, >, <=, >=. Facts are 'id = value' and actions are 'type id'.
Every fact id must be declared in the fact schema and every literal must
parse to the fact's declared type.
"""

from __future__ import annotations

import logging
from pathlib import Path

from yaml.nodes import Node

from ruleflow.core.errors import RulesError
from ruleflow.facts.schema import FactSchema
from ruleflow.facts.values import Operator, parse_literal
from .document import as_mapping, as_sequence, as_string, compose_document, describe, read_source
from .models import ActionKind, Condition, ConditionSet, Fact, Rule, RuleAction

logger = logging.getLogger(__name__)


OPERATOR_TOKENS: dict[str, Operator] = {
    "==": Operator.EQUAL,
    "!=": Operator.NOT_EQUAL,
    "<": Operator.LESS_THAN,
    ">": Operator.GREATER_THAN,
    "<=": Operator.LESS_OR_EQUAL,
    ">=": Operator.GREATER_OR_EQUAL,
}

PRESENCE_PREFIXES: dict[str, Operator] = {
    "&": Operator.IS_DEFINED,
    "!": Operator.NOT_DEFINED,
}

COMBINATORS: dict[str, Operator] = {
    "and": Operator.AND,
    "or": Operator.OR,
}

RULE_ATTRIBUTES = ("name", "description", "conditions", "facts", "actions")

CONDITION_FORMAT = "'AND', 'OR', '!id', 'id [==|!=|<|>|<=|>=] value'"


class RuleParser:
    """Parses and validates rules against a fact schema."""

    def __init__(self, schema: FactSchema):
        self.schema = schema

    def parse_file(self, path: str | Path) -> dict[str, Rule]:
        """Parse rules from a YAML file."""
        return self.parse_text(read_source(filename=path))

    def parse_text(self, text: str) -> dict[str, Rule]:
        """Parse rules from YAML text."""
        return self.parse(compose_document(text))

    def parse(self, root: Node) -> dict[str, Rule]:
        """Parse a node tree into a rule table keyed by rule name."""
        children = as_sequence(root)
        if children is None:
            raise RulesError("Expected a list of rules but root does not contain a sequence")

        rules: dict[str, Rule] = {}
        for node in children:
            rule = self._parse_rule(node)
            if rule.name in rules:
                raise RulesError(f"Duplicate rule name '{rule.name}'")
            rules[rule.name] = rule

        logger.info("Parsed %d rules", len(rules))
        return rules

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _parse_rule(self, node: Node) -> Rule:
        """Parse a single rule mapping."""
        attributes = as_mapping(node)
        if attributes is None:
            raise RulesError(f"Expected a rule object but found: {describe(node)}")

        context = describe(node)
        data: dict = {}

        for key_node, value_node in attributes:
            key = as_string(key_node)
            if key not in RULE_ATTRIBUTES:
                raise RulesError(f"Unknown attribute '{key}' in rule: {context}")
            if key in data:
                raise RulesError(f"Duplicate attribute '{key}' in rule: {context}")

            if key == "name":
                data["name"] = as_string(value_node)
            elif key == "description":
                data["description"] = as_string(value_node)
            else:
                try:
                    if key == "conditions":
                        data["conditions"] = self._parse_conditions(value_node)
                    elif key == "facts":
                        data["facts"] = self._parse_facts(value_node)
                    else:
                        data["actions"] = self._parse_actions(value_node)
                except RulesError as exc:
                    raise exc.with_context(f"when reading rule: {context}") from exc

        if data.get("name") is None:
            raise RulesError(f"Missing mandatory attribute 'name' in rule: {context}")

        condition_set = data.get("conditions")

        # A rule checking whether facts are defined must wait until all
        # other rules have stopped adding facts.
        is_final = condition_set is not None and any(
            condition.operator.is_presence_check for condition in condition_set.conditions
        )

        return Rule(
            name=data["name"],
            description=data.get("description"),
            condition_set=condition_set,
            facts=data.get("facts"),
            actions=data.get("actions"),
            is_final=is_final,
        )

    # -------------------------------------------------------------------------
    # Conditions
    # -------------------------------------------------------------------------

    def _parse_conditions(self, node: Node) -> ConditionSet:
        """Parse a list of conditions into a condition set."""
        children = as_sequence(node)
        if children is None:
            raise RulesError(
                "Expected a list of conditions but conditions does not contain a sequence"
            )

        is_and = True
        conditions: list[Condition] = []

        for index, child in enumerate(children):
            condition = self._parse_condition(child)

            if condition.operator.is_combinator:
                if index > 0:
                    raise RulesError(
                        "Only the first condition can be 'and' / 'or' "
                        "(break complex conditions into separate rules)"
                    )
                is_and = condition.operator == Operator.AND
                continue

            # Trap AND conditions that can never be true,
            # e.g. Country == UK AND Country == US
            if is_and and condition.operator == Operator.EQUAL:
                for previous in conditions:
                    if previous.id == condition.id and previous.operator == Operator.EQUAL:
                        raise RulesError(
                            f"Found multiple 'AND ==' conditions for '{condition.id}' "
                            "(did you forget to add '- OR')"
                        )

            conditions.append(condition)

        return ConditionSet(is_and=is_and, conditions=tuple(conditions))

    def _parse_condition(self, node: Node) -> Condition:
        """Parse a single condition line."""
        text = as_string(node)
        if text is None:
            raise RulesError(f"Expected a condition (string) but found: {describe(node)}")

        # The value (third token) may contain spaces
        tokens = text.split(" ", 2)

        if len(tokens) == 1:
            token = tokens[0]
            operator = PRESENCE_PREFIXES.get(token[0])
            if operator is not None:
                fact_id = token[1:]
                try:
                    self.schema.lookup(fact_id)
                except RulesError as exc:
                    raise exc.with_context(f"in condition: {text}") from exc
                return Condition(id=fact_id, operator=operator)

            operator = COMBINATORS.get(token.lower())
            if operator is not None:
                return Condition(id=token, operator=operator)

        elif len(tokens) == 3:
            # The fact is validated before the operator, so a bad id or
            # value is reported even when the operator is also wrong
            try:
                fact = self._parse_fact_value(tokens[0], tokens[2])
            except RulesError as exc:
                raise exc.with_context(f"in condition: {text}") from exc

            operator = OPERATOR_TOKENS.get(tokens[1])
            if operator is not None:
                return Condition(id=fact.id, operator=operator, value=fact.value)

        raise RulesError(f"Expected condition in format: {CONDITION_FORMAT} but found: {text}")

    # -------------------------------------------------------------------------
    # Facts
    # -------------------------------------------------------------------------

    def _parse_facts(self, node: Node) -> dict[str, Fact]:
        """Parse a list of facts keyed by fact id."""
        children = as_sequence(node)
        if children is None:
            raise RulesError("Expected a list of facts but facts does not contain a sequence")

        facts: dict[str, Fact] = {}
        for child in children:
            fact = self._parse_fact(child)
            if fact.id in facts:
                raise RulesError(f"Duplicate fact '{fact.id}'")
            facts[fact.id] = fact

        return facts

    def _parse_fact(self, node: Node) -> Fact:
        """Parse a single 'id = value' line."""
        text = as_string(node)
        if text is None:
            raise RulesError(f"Expected a fact (string) but found: {describe(node)}")

        tokens = text.split(" ", 2)
        if len(tokens) != 3 or tokens[1] != "=":
            raise RulesError(f"Expected fact in format: 'id = value' but found: {text}")

        try:
            return self._parse_fact_value(tokens[0], tokens[2])
        except RulesError as exc:
            raise exc.with_context(f"in fact: {text}") from exc

    def _parse_fact_value(self, fact_id: str, literal: str) -> Fact:
        """Validate a fact id against the schema and parse its literal."""
        scalar_type = self.schema.lookup(fact_id)

        value = parse_literal(scalar_type, literal)
        if value.is_unset:
            raise RulesError(
                f"Failed to parse {scalar_type.value} value",
                {"fact_id": fact_id, "literal": literal},
            )

        return Fact(id=fact_id, value=value)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def _parse_actions(self, node: Node) -> dict[str, RuleAction]:
        """Parse a list of actions keyed by 'type id'."""
        children = as_sequence(node)
        if children is None:
            raise RulesError("Expected a list of actions but actions does not contain a sequence")

        actions: dict[str, RuleAction] = {}
        for child in children:
            action = self._parse_action(child)
            if action.key in actions:
                raise RulesError(f"Duplicate action '{action.key}'")
            actions[action.key] = action

        return actions

    def _parse_action(self, node: Node) -> RuleAction:
        """Parse a single 'type id' line."""
        text = as_string(node)
        if text is None:
            raise RulesError(f"Expected an action (string) but found: {describe(node)}")

        tokens = text.split(" ")
        if len(tokens) != 2:
            raise RulesError(f"Expected action in format: 'type id' but found: {text}")

        action_type, action_id = tokens
        try:
            kind = ActionKind.parse(action_type)
        except RulesError as exc:
            raise exc.with_context(f"in action: {text}") from exc

        return RuleAction(type=kind, id=action_id)
