"""Configuration package."""

from budget_tracker.config.settings import (
    AppSettings,
    BudgetSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "BudgetSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
