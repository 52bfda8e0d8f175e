"""The settings for the Charge Assistant."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_COMMAND_TIMEOUT,
    DEFAULT_ENTITY_ID,
    DEFAULT_HIGH_BATTERY_THRESHOLD,
    DEFAULT_LOOP_INTERVAL,
    DEFAULT_LOW_BATTERY_THRESHOLD,
    DEFAULT_REQUEST_TIMEOUT,
)


class ConfigError(Exception):
    """The configuration is missing or invalid."""


class Settings(BaseSettings):
    """Settings for the Charge Assistant."""

    HOMEASSISTANT_URL: str = Field(min_length=1)
    HOMEASSISTANT_TOKEN: str = Field(min_length=1)
    ENTITY_ID: str = Field(default=DEFAULT_ENTITY_ID, min_length=1)

    LOW_BATTERY_THRESHOLD: float = Field(default=DEFAULT_LOW_BATTERY_THRESHOLD, ge=0, le=100)
    HIGH_BATTERY_THRESHOLD: float = Field(default=DEFAULT_HIGH_BATTERY_THRESHOLD, ge=0, le=100)
    LOOP_INTERVAL: float = Field(default=DEFAULT_LOOP_INTERVAL, gt=0)
    REQUEST_TIMEOUT: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)

    BATTERY_SOURCE: Literal["adb", "sysfs"] = "adb"
    ADB_PATH: str = "adb"
    ADB_DEVICE: str | None = None
    COMMAND_TIMEOUT: float = Field(default=DEFAULT_COMMAND_TIMEOUT, gt=0)
    SYSFS_BATTERY: str = "BAT0"

    DEMO_MODE: bool = False
    NOTIFICATIONS: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FILE: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("HOMEASSISTANT_URL", "HOMEASSISTANT_TOKEN", mode="before")
    @classmethod
    def strip_whitespace(cls, value: str) -> str:
        """Treat values consisting of whitespace only as empty."""
        return value.strip() if isinstance(value, str) else value

    @field_validator("HOMEASSISTANT_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Remove a trailing slash so that service paths can be appended."""
        return value.rstrip("/")

    @field_validator("ADB_DEVICE", mode="before")
    @classmethod
    def empty_device_filter(cls, value: str | None) -> str | None:
        """An empty device filter means no filter."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        """Log levels are upper case in the logging module."""
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def check_thresholds(self) -> "Settings":
        """The low threshold must be below the high threshold."""
        if self.LOW_BATTERY_THRESHOLD >= self.HIGH_BATTERY_THRESHOLD:
            raise ValueError(
                f"LOW_BATTERY_THRESHOLD ({self.LOW_BATTERY_THRESHOLD}) must be below "
                f"HIGH_BATTERY_THRESHOLD ({self.HIGH_BATTERY_THRESHOLD})",
            )
        return self


def load_settings(env_file: Path | str | None = ".env") -> Settings:
    """Load the settings from the environment and the optional env file."""
    try:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    except ValidationError as error:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'settings'}: {err['msg']}" for err in error.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from error


@dataclass(frozen=True)
class ControlConfig:
    """Static parameters of the control loop."""

    entity_id: str = DEFAULT_ENTITY_ID
    low_threshold: float = DEFAULT_LOW_BATTERY_THRESHOLD
    high_threshold: float = DEFAULT_HIGH_BATTERY_THRESHOLD
    interval: float = DEFAULT_LOOP_INTERVAL

    @classmethod
    def from_settings(cls, settings: Settings) -> "ControlConfig":
        """Create the control configuration from the settings."""
        return cls(
            entity_id=settings.ENTITY_ID,
            low_threshold=settings.LOW_BATTERY_THRESHOLD,
            high_threshold=settings.HIGH_BATTERY_THRESHOLD,
            interval=settings.LOOP_INTERVAL,
        )
