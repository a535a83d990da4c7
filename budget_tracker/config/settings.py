"""
Configuration Management for Budget Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Services read their defaults from these settings but always accept
explicit overrides, so tests never depend on the environment.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Per-user text file storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_TRACKER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding per-user data files and the credential file"
    )
    data_file_suffix: str = Field(
        default="_data.txt",
        min_length=1,
        description="Suffix appended to the username to name its data file"
    )
    backup_suffix: str = Field(
        default=".backup",
        min_length=1,
        description="Suffix appended to a data file to name its backup"
    )
    credentials_filename: str = Field(
        default="users.txt",
        min_length=1,
        description="Name of the shared credential-list file inside data_dir"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding used for every file this package writes"
    )


class BudgetSettings(BaseSettings):
    """Budget store defaults."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_TRACKER_BUDGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_monthly_budget: float = Field(
        default=1000.0,
        ge=0.0,
        description="Amount seeded for every category of the current month"
    )
    seed_current_month: bool = Field(
        default=True,
        description="Seed the current month with default budgets on first use"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured log output"
    )

    # Audit trail
    audit_history_size: int = Field(
        default=500,
        ge=1,
        le=100000,
        description="Number of audit events kept in memory"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        level = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def budget(self) -> BudgetSettings:
        return BudgetSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for groups that failed to load.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "budget", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
