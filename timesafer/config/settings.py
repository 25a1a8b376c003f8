"""Settings management using Pydantic for type validation and configuration.

Only the command line layer reads these settings; the library core never
consults the environment.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from timesafer.timezone.service import BACKENDS

ENV_PREFIX = "TIMESAFER_"

LOG_LEVELS = ("DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(BaseModel):
    """Console logging configuration settings."""

    console_level: str = Field(
        default="WARNING",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )

    @field_validator("console_level", "third_party_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {LOG_LEVELS}, got {value!r}")
        return level


class TimesaferSettings(BaseSettings):
    """Timesafer settings with environment variable and YAML file support."""

    timezone_backend: str = Field(
        default="auto", description="Timezone backend: auto, zoneinfo, pytz"
    )
    assume_local_offset: bool = Field(
        default=False,
        description="Read timestamps without a UTC offset as CET wall time instead of rejecting them",
    )
    config_dir: Path = Field(
        default_factory=lambda: Path.home() / ".config" / "timesafer",
        description="Directory searched for config.yaml",
    )
    config_file: Optional[Path] = Field(
        default=None, description="Explicit YAML configuration file"
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_assignment=True,
        extra="ignore",
    )

    _explicit_args: set = PrivateAttr(default_factory=set)
    _env_vars_set: set = PrivateAttr(default_factory=set)

    @field_validator("timezone_backend")
    @classmethod
    def _check_backend(cls, value: str) -> str:
        backend = value.lower()
        if backend not in BACKENDS:
            raise ValueError(f"timezone_backend must be one of {BACKENDS}, got {value!r}")
        return backend

    def __init__(self, **kwargs: Any) -> None:
        # Track which environment variables are set before calling parent
        env_vars_set = set()
        for key in os.environ:
            if key.upper().startswith(ENV_PREFIX):
                env_vars_set.add(key[len(ENV_PREFIX) :].lower().split("__")[0])

        super().__init__(**kwargs)

        self._explicit_args = set(kwargs.keys())
        self._env_vars_set = env_vars_set

        # YAML sits below explicit arguments and environment variables
        self._load_yaml_config()

    def _find_config_file(self) -> Optional[Path]:
        """Find config file: explicit path, then project directory, then user config dir."""
        if self.config_file is not None:
            return self.config_file if self.config_file.exists() else None

        project_root = Path(__file__).parent.parent.parent
        project_config = project_root / "config" / "config.yaml"
        if project_config.exists():
            return project_config

        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config

        return None

    def _is_overridden(self, setting: str) -> bool:
        return setting in self._explicit_args or setting in self._env_vars_set

    def _load_basic_settings(self, config_data: dict) -> None:
        """Load top-level settings from YAML data."""
        for setting in ("timezone_backend", "assume_local_offset"):
            if setting in config_data and not self._is_overridden(setting):
                setattr(self, setting, config_data[setting])

    def _load_logging_config(self, config_data: dict) -> None:
        """Load logging configuration from YAML data."""
        if "logging" not in config_data or self._is_overridden("logging"):
            return

        logging_config = config_data["logging"] or {}
        merged = self.logging.model_dump()
        for setting in ("console_level", "console_colors", "third_party_level"):
            if setting in logging_config:
                merged[setting] = logging_config[setting]
        self.logging = LoggingSettings(**merged)

    def _load_yaml_config(self) -> None:
        """Load configuration from YAML file if it exists."""
        config_file = self._find_config_file()
        if not config_file:
            return

        try:
            with config_file.open(encoding="utf-8") as f:
                config_data = yaml.safe_load(f)

            if not config_data:
                return

            self._load_basic_settings(config_data)
            self._load_logging_config(config_data)

        except (OSError, yaml.YAMLError, ValueError) as e:
            # Don't fail if YAML loading fails, just continue with defaults/env vars
            logging.getLogger(__name__).warning(
                "Could not load YAML config from %s: %s", config_file, e
            )


# Global settings management
_settings_instance: Optional[TimesaferSettings] = None


def get_settings() -> TimesaferSettings:
    """Get the global settings instance, creating it lazily if needed.

    Returns:
        TimesaferSettings: The global settings instance
    """
    # Access module-level variable without using 'global'
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = TimesaferSettings()
    return globals()["_settings_instance"]


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    globals()["_settings_instance"] = None
