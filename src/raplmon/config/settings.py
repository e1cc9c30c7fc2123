"""Application configuration settings.

This module provides the AppConfig class and settings singleton.
"""

from pathlib import Path

import structlog
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from raplmon.config.env_loader import Environment, get_environment, load_env_files
from raplmon.config.validators import (
    resolve_path,
    validate_log_format,
    validate_log_level,
    validate_sensor_prefix,
)

log = structlog.get_logger(__name__)

DEFAULT_POWERCAP_ROOT = Path("/sys/class/powercap")
DEFAULT_SENSOR_PREFIX = "intel-rapl:"


class AppConfig(BaseSettings):
    """Unified application configuration.

    Loads configuration from environment variables, .env files, and defaults.
    Validates all values using Pydantic.
    """

    model_config = SettingsConfigDict(
        env_prefix="RAPLMON_",  # All env vars use RAPLMON_ prefix
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,  # Allow both field name and alias
        validate_default=True,  # Resolve default paths too
    )

    # Environment
    environment: Environment = Field(
        default_factory=get_environment, description="Current environment"
    )
    debug: bool = Field(
        default=False,
        validation_alias=AliasChoices("RAPLMON_DEBUG", "APP_DEBUG"),
        description="Debug mode flag",
    )

    # Telemetry
    log_dir: Path = Field(
        default=Path("~/.local/state/raplmon/logs"), description="Log directory path"
    )
    log_file_enabled: bool = Field(
        default=False, description="Write JSON-lines logs to log_dir/current.jsonl"
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("RAPLMON_LOG_LEVEL", "APP_LOG_LEVEL"),
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="console",
        validation_alias=AliasChoices("RAPLMON_LOG_FORMAT", "APP_LOG_FORMAT"),
        description="Console log format (json or console)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)

    @field_validator("log_dir", "powercap_root", mode="before")
    @classmethod
    def resolve_paths(cls, v: Path | str) -> Path:
        """Resolve relative paths to absolute."""
        return resolve_path(v)

    # Sensor source
    powercap_root: Path = Field(
        default=DEFAULT_POWERCAP_ROOT,
        description="Directory holding one subdirectory per power-capping zone",
    )
    sensor_prefix: str = Field(
        default=DEFAULT_SENSOR_PREFIX,
        description="Entry name prefix of zones to monitor (e.g. intel-rapl:)",
    )
    read_timeout_seconds: float = Field(
        default=2.0,
        gt=0,
        le=30,
        description="Upper bound on a single label/counter file read",
    )

    @field_validator("sensor_prefix")
    @classmethod
    def validate_sensor_prefix(cls, v: str) -> str:
        """Validate sensor prefix."""
        return validate_sensor_prefix(v)


_settings: AppConfig | None = None


def load_app_config() -> AppConfig:
    """Load and validate application configuration.

    This function:
    1. Loads .env files in priority order (via env_loader)
    2. Creates AppConfig instance (reads from environment variables)
    3. Validates all values using Pydantic
    4. Logs configuration loading using structlog

    Returns:
        Validated AppConfig instance.

    Raises:
        ValidationError: If configuration validation fails.
    """
    log.debug("loading_app_config", environment=get_environment().value)

    load_env_files()

    try:
        config = AppConfig()
        log.debug(
            "app_config_loaded",
            environment=config.environment.value,
            debug=config.debug,
            log_level=config.log_level,
            powercap_root=str(config.powercap_root),
            sensor_prefix=config.sensor_prefix,
        )
        return config
    except Exception as e:
        log.error("app_config_load_failed", error=str(e), error_type=type(e).__name__)
        raise


def get_settings() -> AppConfig:
    """Get the application settings singleton.

    Returns:
        AppConfig instance (singleton pattern).
    """
    global _settings
    if _settings is None:
        _settings = load_app_config()
    return _settings
