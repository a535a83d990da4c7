"""Tests for environment-driven settings."""

import pytest

from budget_tracker.audit import configure_logging
from budget_tracker.config import AppSettings, get_settings, validate_all_settings
from budget_tracker.models.month import YearMonth
from budget_tracker.services.storage import TextFileStorage
from budget_tracker.session import FinanceSession


class TestSettings:
    """Tests for settings groups and their environment overrides."""

    def test_defaults(self):
        """Test the built-in defaults."""
        settings = get_settings()
        assert settings.storage.data_file_suffix == "_data.txt"
        assert settings.storage.backup_suffix == ".backup"
        assert settings.storage.credentials_filename == "users.txt"

    def test_default_budget_from_environment(self, monkeypatch):
        """Test that the seeded amount follows the environment."""
        monkeypatch.setenv("BUDGET_TRACKER_BUDGET_DEFAULT_MONTHLY_BUDGET", "250")
        session = FinanceSession(current_month=YearMonth(2024, 1))
        assert session.budgets.get_budget("Food", YearMonth(2024, 1)) == 250

    def test_data_dir_from_environment(self, monkeypatch, tmp_path):
        """Test that storage picks up the configured data directory."""
        monkeypatch.setenv("BUDGET_TRACKER_STORAGE_DATA_DIR", str(tmp_path / "store"))
        storage = TextFileStorage()
        assert storage.data_dir == tmp_path / "store"
        assert storage.data_dir.is_dir()

    def test_validate_all_settings(self):
        """Test that every settings group loads."""
        assert validate_all_settings() == {"storage": True, "budget": True, "app": True}

    def test_app_settings_fields(self):
        """Test that app settings hold only what the engine reads."""
        assert set(AppSettings.model_fields) == {"log_level", "audit_history_size"}

    def test_invalid_log_level_reported(self, monkeypatch):
        """Test that a bad log level is reported rather than raised."""
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        results = validate_all_settings()
        assert results["app"] is False
        assert "app_error" in results

    def test_negative_default_budget_rejected(self, monkeypatch):
        """Test that the default budget cannot be negative."""
        monkeypatch.setenv("BUDGET_TRACKER_BUDGET_DEFAULT_MONTHLY_BUDGET", "-1")
        with pytest.raises(ValueError):
            get_settings().budget


class TestConfigureLogging:
    """Tests for logging setup."""

    def test_configure_logging_runs(self):
        """Test logging setup with an explicit and with the configured level."""
        configure_logging("warning")
        configure_logging()
