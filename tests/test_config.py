"""Tests for settings, logging and error helpers."""

import logging

import pytest

from ruleflow import RulesEngine, RulesError, Settings, configure_logging, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("RULEFLOW_RULES_FILE", raising=False)
        monkeypatch.delenv("RULEFLOW_SCHEMA_FILE", raising=False)
        monkeypatch.delenv("RULEFLOW_LOG_LEVEL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.rules_file == "rules.yaml"
        assert settings.schema_file is None
        assert settings.schema_name == "facts"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("RULEFLOW_RULES_FILE", "/tmp/other.yaml")
        monkeypatch.setenv("RULEFLOW_LOG_LEVEL", "DEBUG")
        settings = Settings(_env_file=None)
        assert settings.rules_file == "/tmp/other.yaml"
        assert settings.log_level == "DEBUG"

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()

    def test_engine_uses_configured_files(self, monkeypatch, data_dir):
        monkeypatch.setenv("RULEFLOW_RULES_FILE", str(data_dir / "basketball.yaml"))
        monkeypatch.setenv("RULEFLOW_SCHEMA_FILE", str(data_dir / "schema.yaml"))
        get_settings.cache_clear()
        try:
            engine = RulesEngine()
        finally:
            get_settings.cache_clear()
        assert engine.schema.name == "facts"
        assert "Still playing" in engine.rules


class TestLogging:
    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root_logger = logging.getLogger()
        handlers, level = list(root_logger.handlers), root_logger.level
        yield
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)

    def test_configure_logging(self):
        configure_logging("debug")
        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1

    def test_level_defaults_to_settings(self, monkeypatch):
        monkeypatch.setenv("RULEFLOW_LOG_LEVEL", "WARNING")
        get_settings.cache_clear()
        try:
            configure_logging()
        finally:
            get_settings.cache_clear()
        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        configure_logging("chatty")
        assert logging.getLogger().level == logging.INFO

    def test_run_is_logged(self, engine, caplog):
        with caplog.at_level(logging.INFO, logger="ruleflow"):
            engine.run({"IntFact": 2})
        assert "Run finished after" in caplog.text


class TestRulesError:
    def test_details(self):
        exc = RulesError("Bad rule", {"rule": "R"})
        assert str(exc) == "Bad rule"
        assert exc.details == {"rule": "R"}

    def test_with_context(self):
        exc = RulesError("Bad value", {"fact_id": "IntFact"}).with_context("in fact: IntFact = a")
        assert exc.message == "Bad value in fact: IntFact = a"
        assert exc.details == {"fact_id": "IntFact"}
