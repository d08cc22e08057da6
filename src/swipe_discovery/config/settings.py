"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import AnimationMs, QueueCapacity, TimeoutSeconds


class ApiSettings(BaseModel):
    """Remote discovery service configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    base_url: str = Field(
        default="http://localhost:3000/api",
        validation_alias=AliasChoices("base_url", "url", "api_url"),
    )
    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "api_token", "bearer_token")
    )
    timeout_seconds: TimeoutSeconds = Field(
        default=10.0,
        validation_alias=AliasChoices("timeout_seconds", "timeout"),
    )
    strategy: Literal["custom_prediction", "spotify_fallback", "hybrid"] = "hybrid"

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate API base URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(ErrorMessages.INVALID_BASE_URL)
        return v.rstrip("/")


class GestureSettings(BaseModel):
    """Swipe classification thresholds."""

    model_config = SettingsConfigDict(frozen=True)

    commit_ratio: float = Field(default=0.2, gt=0.0, le=1.0)
    velocity_floor: float = Field(default=800.0, gt=0.0)
    max_rotation_deg: float = Field(default=15.0, ge=0.0, le=90.0)
    rotation_per_px: float = Field(default=0.1, ge=0.0)
    tap_slop_px: float = Field(default=8.0, ge=0.0)
    card_width: float = Field(default=360.0, gt=0.0)


class QueueSettings(BaseModel):
    """Look-ahead buffer configuration."""

    model_config = SettingsConfigDict(frozen=True)

    capacity: QueueCapacity = 5
    low_water_mark: int = Field(default=2, ge=0)

    @model_validator(mode="after")
    def validate_low_water_mark(self) -> QueueSettings:
        if self.low_water_mark >= self.capacity:
            raise ValueError(ErrorMessages.LOW_WATER_MARK_TOO_HIGH)
        return self


class SessionSettings(BaseModel):
    """Card transition configuration."""

    model_config = SettingsConfigDict(frozen=True)

    exit_animation_ms: AnimationMs = 200
    reset_animation_ms: AnimationMs = 150
    haptic_intensity: float = Field(default=0.5, ge=0.0, le=1.0)
    shutdown_grace_seconds: float = Field(default=2.0, ge=0.0, le=30.0)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - API__BASE_URL, API__TOKEN, API__TIMEOUT_SECONDS (nested with ``__``)
    - GESTURE__COMMIT_RATIO, QUEUE__CAPACITY, SESSION__EXIT_ANIMATION_MS, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    api: ApiSettings = Field(default_factory=ApiSettings)
    gesture: GestureSettings = Field(default_factory=GestureSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
