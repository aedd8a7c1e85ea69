"""Environment-based configuration using pydantic-settings.

Example:
    >>> from retrykit.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.attempts
    3
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # RETRYKIT_RETRY_ATTEMPTS=10
    # RETRYKIT_RETRY_METHOD=incremental
    # RETRYKIT_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeFloat, PositiveFloat, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Defaults for Retry.from_settings()."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYKIT_RETRY_",
        extra="ignore",
    )

    attempts: int = Field(default=3, description="Attempt budget (<= 0 disables execution)")
    delay: NonNegativeFloat = Field(default=0.1, description="Base delay in seconds")
    max_delay: NonNegativeFloat | None = Field(default=None, description="Ceiling on any computed wait")
    method: Literal["constant", "incremental", "exponential"] = "constant"
    method_max_delay: PositiveFloat = Field(default=1.0, description="Cap used by incremental/exponential methods")

    @field_validator("method", mode="before")
    @classmethod
    def _normalize_method(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYKIT_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class RetrykitSettings(BaseSettings):
    """Root settings.

    Loads configuration from environment variables with the RETRYKIT_
    prefix and from a .env file. Nested sections read their own prefixes
    (RETRYKIT_RETRY_, RETRYKIT_LOG_).
    """

    model_config = SettingsConfigDict(
        env_prefix="RETRYKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> RetrykitSettings:
    """Get the global settings instance (cached)."""
    return RetrykitSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() rereads the environment."""
    get_settings.cache_clear()
