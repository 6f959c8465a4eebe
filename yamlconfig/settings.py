"""
Library settings using pydantic-settings.

Values come from YAMLCONFIG_* environment variables (or a .env file) and are
loaded once and cached.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR")


class Settings(BaseSettings):
    """
    Settings for loading configuration files.

    All settings have defaults; override with YAMLCONFIG_ENCODING and
    YAMLCONFIG_LOG_LEVEL.
    """

    model_config = SettingsConfigDict(
        env_prefix="YAMLCONFIG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    encoding: str = Field(
        default="utf-8",
        description="Text encoding used to read configuration files",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for the yamlconfig command: TRACE, DEBUG, INFO, WARNING or ERROR",
    )

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log_level."""
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"Invalid YAMLCONFIG_LOG_LEVEL: {v}. Must be one of {', '.join(LOG_LEVELS)}")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Call get_settings.cache_clear() after changing the environment.
    """
    return Settings()
