"""Configuration package."""

from household_budget.config.settings import (
    AppSettings,
    ProjectionSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ProjectionSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
