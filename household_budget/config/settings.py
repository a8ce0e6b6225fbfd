"""
Configuration Management for the Household Budget engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The projection core itself is a pure function; settings only choose
between documented policies (skip-and-continue vs fail-fast, drop vs
raise on out-of-range occurrences) and tune the flow around it.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProjectionSettings(BaseSettings):
    """Projection engine policies."""

    model_config = SettingsConfigDict(
        env_prefix="PROJECTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    fail_fast: bool = Field(
        default=False,
        description="Raise on the first transaction that cannot be expanded "
                    "instead of skipping it with a warning"
    )
    strict_year_bounds: bool = Field(
        default=False,
        description="Raise when an occurrence outside the requested year "
                    "reaches the aggregator (default: drop it and log)"
    )
    month_label_format: str = Field(
        default="%b",
        min_length=1,
        description="strftime format used for month labels"
    )

    # Transaction source retries
    fetch_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts when the transaction source is unreachable"
    )
    fetch_retry_min_wait: float = Field(
        default=2.0,
        ge=0.0,
        description="Minimum seconds between fetch attempts"
    )
    fetch_retry_max_wait: float = Field(
        default=10.0,
        ge=0.0,
        description="Maximum seconds between fetch attempts"
    )

    @field_validator('month_label_format')
    @classmethod
    def validate_month_label_format(cls, v: str) -> str:
        """A label format without any directive would label every month the same."""
        if "%" not in v:
            raise ValueError(f"month_label_format must contain a strftime directive, got {v!r}")
        return v


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

    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()


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
    def projection(self) -> ProjectionSettings:
        return ProjectionSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool | str]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    {setting_name}_error message for every section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.projection
        results["projection"] = True
    except Exception as e:
        results["projection"] = False
        results["projection_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
