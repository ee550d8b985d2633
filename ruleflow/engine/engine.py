"""Forward-chaining rules engine."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel

from ruleflow.core.config import Settings, get_settings
from ruleflow.core.errors import RulesError
from ruleflow.facts.schema import FactSchema
from ruleflow.facts.values import Operator
from ruleflow.rules.document import compose_document, read_source
from ruleflow.rules.models import ActionKind, Fact, Rule, RuleAction
from ruleflow.rules.parser import RuleParser
from .results import Results
from .runner import Runner

logger = logging.getLogger(__name__)


class RulesEngine:
    """Runs a fixed set of rules against supplied facts.

    The rules are read and validated once, when the engine is created, and
    are never modified afterwards, so one engine can serve any number of
    runs. Each run keeps its own facts and actions.
    """

    def __init__(
        self,
        schema: FactSchema | None = None,
        filename: str | Path | None = None,
        content: str | None = None,
        settings: Settings | None = None,
    ):
        """Read and validate the rules.

        Args:
            schema: Fact schema the rules are checked against. Loaded from
                the configured schema file if not supplied.
            filename: YAML file containing all rules. Ignored if content
                is supplied; the configured rules file is used if neither
                is supplied.
            content: Rules in YAML format.
            settings: Settings to use instead of the environment.
        """
        self.settings = settings or get_settings()
        self.schema = schema if schema is not None else self._load_schema()

        if filename is None and content is None:
            filename = self.settings.rules_file

        try:
            text = read_source(filename=filename, content=content)
            rules = RuleParser(self.schema).parse(compose_document(text))
        except RulesError as exc:
            raise type(exc)(f"Cannot read YAML rules: {exc.message}", exc.details) from exc

        self._rules: Mapping[str, Rule] = MappingProxyType(rules)

    def _load_schema(self) -> FactSchema:
        if not self.settings.schema_file:
            raise RulesError("A fact schema must be supplied or configured")
        return FactSchema.from_file(self.settings.schema_file, name=self.settings.schema_name)

    @property
    def rules(self) -> Mapping[str, Rule]:
        """Read-only view of the rule table."""
        return self._rules

    def get_rule(self, name: str) -> Rule | None:
        """Get a rule by name."""
        return self._rules.get(name)

    def __len__(self) -> int:
        return len(self._rules)

    def list_all_actions(self, action_type: ActionKind | str | None = None) -> list[RuleAction]:
        """Every distinct action of every rule, sorted by type then id.

        The engine only validates action types, so callers use this to
        check action ids against their own catalogue.
        """
        kind = ActionKind.parse(action_type) if action_type is not None else None

        actions: dict[str, RuleAction] = {}
        for rule in self._rules.values():
            for action in (rule.actions or {}).values():
                if kind is None or action.type == kind:
                    actions.setdefault(action.key, action)

        return sorted(actions.values(), key=RuleAction.sort_key)

    def run(self, facts: Mapping[str, Any] | BaseModel | None) -> Results:
        """Run the rules against the supplied facts.

        Supplied facts can trigger rules that add more facts, which can
        trigger further rules. Passes are repeated until no rule is left
        or no pass can add a fact. Rules that check whether a fact is
        defined run only once the other rules have stopped adding facts.

        Args:
            facts: Known facts by id, as native values or typed values.
                Missing or None values are treated as not defined.

        Returns:
            The final facts (supplied and deduced) and the triggered actions.

        Raises:
            RulesError: If facts are not supplied or do not match the
                schema, or if a rule tries to change an established fact.
        """
        if facts is None:
            raise RulesError("Initial facts must be supplied")

        known = self._initial_facts(facts)
        actions: dict[str, RuleAction] = {}

        remaining = self._rules
        final_phase = False
        max_passes = 2 * len(self._rules) + 1
        passes = 0

        while True:
            passes += 1
            if passes > max_passes:
                raise RulesError(f"Rules did not converge within {max_passes} passes")

            results = Runner.evaluate(known, remaining, final_phase)
            added = self._merge_facts(known, results.facts)

            for action in results.actions:
                actions.setdefault(action.key, action)

            logger.debug(
                "Pass %d (%s): %d new facts, %d actions, %d rules remaining",
                passes,
                "final" if final_phase else "normal",
                added,
                len(results.actions),
                len(results.remaining_rules),
            )

            remaining = results.remaining_rules

            # Every rule has been decided
            if not remaining:
                break

            if final_phase and added == 0:
                break

            # Nothing new was learned, so unlock the final rules
            if added == 0:
                final_phase = True

        logger.info(
            "Run finished after %d passes with %d facts and %d actions",
            passes,
            len(known),
            len(actions),
        )

        return Results(
            facts=self.schema.render({fact_id: fact.value for fact_id, fact in known.items()}),
            actions=sorted(actions.values(), key=RuleAction.sort_key),
            passes=passes,
        )

    def _initial_facts(self, facts: Mapping[str, Any] | BaseModel) -> dict[str, Fact]:
        """Convert supplied facts to typed facts, skipping undefined ones."""
        if isinstance(facts, BaseModel):
            facts = facts.model_dump(exclude_none=True)

        known: dict[str, Fact] = {}
        for fact_id, native in facts.items():
            value = self.schema.coerce(fact_id, native)
            if value is not None:
                known[fact_id] = Fact(id=fact_id, value=value)
        return known

    @staticmethod
    def _merge_facts(known: dict[str, Fact], produced: list[Fact]) -> int:
        """Add produced facts to the known facts, returning how many were new.

        Established facts cannot change: an equal value is ignored, a
        different value raises.
        """
        added = 0
        for fact in produced:
            existing = known.get(fact.id)
            if existing is None:
                known[fact.id] = fact
                added += 1
            elif not existing.value.compare(Operator.EQUAL, fact.value):
                raise RulesError(
                    f"Established fact '{existing}' cannot be modified to '{fact}'",
                    {"fact_id": fact.id},
                )
        return added
