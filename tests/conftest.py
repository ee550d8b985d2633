"""Pytest fixtures for test suite."""

import pytest
from pathlib import Path
from typing import Callable

from ruleflow import FactSchema, RulesEngine, Settings


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def data_dir() -> Path:
    """Path to the test data directory."""
    return Path(__file__).parent / "data"


@pytest.fixture
def schema(data_dir: Path) -> FactSchema:
    """Fact schema shared by all test rules."""
    return FactSchema.from_file(data_dir / "schema.yaml")


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    """Settings pointing at the test data files."""
    return Settings(
        rules_file=str(data_dir / "rules.yaml"),
        schema_file=str(data_dir / "schema.yaml"),
        schema_name="schema",
    )


@pytest.fixture
def good_rules(data_dir: Path) -> str:
    """A valid set of rules exercising every kind of condition."""
    return (data_dir / "rules.yaml").read_text(encoding="utf-8")


@pytest.fixture
def engine(schema: FactSchema, good_rules: str, settings: Settings) -> RulesEngine:
    """Engine with the good rules loaded."""
    return RulesEngine(schema, content=good_rules, settings=settings)


@pytest.fixture
def make_engine(schema: FactSchema, settings: Settings) -> Callable[[str], RulesEngine]:
    """Factory building an engine from YAML rule text."""

    def _make(content: str) -> RulesEngine:
        return RulesEngine(schema, content=content, settings=settings)

    return _make
