"""Fact schema registry: the closed set of fact ids and their scalar types."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml

from ruleflow.core.errors import RulesError
from .values import ScalarType, Value

logger = logging.getLogger(__name__)


class FactSchema:
    """Maps fact ids to scalar types.

    Every fact referenced by a rule, and every fact supplied to a run, must
    be declared here. Declaration order is kept and used when rendering
    results.
    """

    def __init__(self, types: Mapping[str, ScalarType | str], name: str = "facts"):
        self.name = name
        self._types: dict[str, ScalarType] = {}
        for fact_id, scalar_type in types.items():
            try:
                self._types[str(fact_id)] = ScalarType(scalar_type)
            except ValueError as exc:
                allowed = ", ".join(t.value for t in ScalarType)
                raise RulesError(
                    f"Fact '{fact_id}' has unknown type '{scalar_type}' "
                    f"(expected one of: {allowed})"
                ) from exc

    @classmethod
    def from_file(cls, path: str | Path, name: str | None = None) -> FactSchema:
        """Load a schema from a YAML mapping of `id: type`."""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except OSError as exc:
            raise RulesError(f"Cannot read fact schema file {path}") from exc
        except yaml.YAMLError as exc:
            raise RulesError(f"Failed to parse fact schema YAML: {exc}") from exc

        if not isinstance(content, dict):
            raise RulesError(f"Expected a mapping of fact types in {path}")

        schema = cls(content, name=name or path.stem)
        logger.info("Loaded fact schema '%s' with %d facts", schema.name, len(schema))
        return schema

    def lookup(self, fact_id: str) -> ScalarType:
        """Get the type of a fact, raising if the fact is not declared."""
        scalar_type = self._types.get(fact_id)
        if scalar_type is None:
            raise RulesError(
                f"Fact '{fact_id}' is not defined in the fact schema '{self.name}'",
                {"fact_id": fact_id, "schema": self.name},
            )
        return scalar_type

    def get(self, fact_id: str) -> ScalarType | None:
        return self._types.get(fact_id)

    def ids(self) -> list[str]:
        return list(self._types)

    def coerce(self, fact_id: str, native: Any) -> Value | None:
        """Convert a caller-supplied value into a typed value.

        Returns None when the fact is absent (None or an empty string).
        """
        scalar_type = self.lookup(fact_id)
        if native is None:
            return None
        if isinstance(native, Value):
            if native.type != scalar_type:
                raise RulesError(
                    f"Fact '{fact_id}' expects a {scalar_type.value} value "
                    f"but got a {native.type.value} value"
                )
            value = native
        else:
            try:
                value = Value.of(scalar_type, native)
            except RulesError as exc:
                raise RulesError(f"{exc.message} for fact '{fact_id}'", exc.details) from exc
        return None if value.is_unset else value

    def render(self, values: Mapping[str, Value]) -> dict[str, Any]:
        """Render typed values back to native values in declaration order."""
        return {
            fact_id: values[fact_id].to_native()
            for fact_id in self._types
            if fact_id in values
        }

    def __contains__(self, fact_id: object) -> bool:
        return fact_id in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"FactSchema(name={self.name!r}, facts={len(self._types)})"
