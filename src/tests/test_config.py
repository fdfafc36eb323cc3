"""Unit tests for Config environment handling and the default unit system."""

from pathlib import Path

import pytest

from pack_planner.utils.config import Config, get_config, reset_config


class TestUnitSystem:
    """PACK_PLANNER_IMPERIAL drives the default unit system."""

    def setup_method(self):
        """Reset config singleton before each test."""
        reset_config()

    def teardown_method(self):
        """Clean up after each test."""
        reset_config()

    def test_metric_by_default(self, monkeypatch):
        monkeypatch.delenv("PACK_PLANNER_IMPERIAL", raising=False)
        assert Config().imperial is False

    @pytest.mark.parametrize("value", ["1", "true", "YES", "imperial"])
    def test_truthy_env_selects_imperial(self, monkeypatch, value):
        monkeypatch.setenv("PACK_PLANNER_IMPERIAL", value)
        assert Config().imperial is True

    def test_other_values_stay_metric(self, monkeypatch):
        monkeypatch.setenv("PACK_PLANNER_IMPERIAL", "metric")
        assert Config().imperial is False

    def test_explicit_argument_wins(self, monkeypatch):
        monkeypatch.setenv("PACK_PLANNER_IMPERIAL", "1")
        assert Config(imperial=False).imperial is False


class TestEnvironment:
    """Database location per environment."""

    def setup_method(self):
        reset_config()

    def teardown_method(self):
        reset_config()

    def test_production_uses_documents(self):
        config = Config("production")
        assert config.is_production
        assert config.database_path == Path.home() / "Documents" / "PackPlanner" / "pack_planner.db"

    def test_development_uses_project_data_dir(self):
        config = Config("development")
        assert config.is_development
        assert config.database_path.parent.name == "data"
        assert config.database_url.startswith("sqlite:///")

    def test_get_config_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PACK_PLANNER_ENV", "development")
        assert get_config().environment == "development"

    def test_singleton_keeps_environment(self, monkeypatch, caplog):
        monkeypatch.setenv("PACK_PLANNER_ENV", "development")
        first = get_config()
        assert get_config("production") is first
        assert "singleton already exists" in caplog.text
