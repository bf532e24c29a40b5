"""
Configuration Management for the Life Plan engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All tunable defaults are centralized here.
The engine functions never read these values themselves; the orchestrator
and report aggregator receive them explicitly.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """
    Engine-wide settings.

    Loads configuration from LIFEPLAN_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIFEPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Goal detection
    default_member_age: int = Field(
        default=30,
        ge=0,
        le=150,
        description="Age reported for the current year when no family member is selected"
    )
    current_year: Optional[int] = Field(
        default=None,
        ge=1,
        description="Pin the calendar year used for age arithmetic (defaults to today)"
    )

    # Reports
    report_top_n: int = Field(
        default=5,
        ge=1,
        description="Rows kept by category/event breakdowns"
    )
    dashboard_top_n: int = Field(
        default=3,
        ge=1,
        description="Rows kept by dashboard rankings"
    )
    other_bucket_label: str = Field(
        default="Other",
        min_length=1,
        description="Label of the bucket collecting unmatched group keys"
    )
    other_bucket_color: str = Field(
        default="#6c757d",
        description="Color of the bucket collecting unmatched group keys"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Level for the engine's structured logger"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any case, store upper case."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> EngineSettings:
    """
    Get engine settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return EngineSettings()
