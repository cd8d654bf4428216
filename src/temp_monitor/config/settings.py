"""Application configuration settings.

This module provides the AppConfig class and the cached settings accessor.
"""

from pathlib import Path

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from temp_monitor.config.bootstrap import DEFAULT_LOG_DIR, DEFAULT_LOG_FORMAT, DEFAULT_LOG_LEVEL
from temp_monitor.config.env_loader import Environment, get_environment, load_env_files
from temp_monitor.config.validators import (
    resolve_path,
    validate_log_format,
    validate_log_level,
    validate_service_name,
)
from temp_monitor.telemetry.logger import configure_logging

log = structlog.get_logger(__name__)


class AppConfig(BaseSettings):
    """Unified application configuration.

    Loads configuration from environment variables, .env files, and defaults.
    Validates all values using Pydantic.
    """

    model_config = SettingsConfigDict(
        # .env files are loaded manually via env_loader to support
        # environment-specific files with priority order
        env_prefix="TEMPMON_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    environment: Environment = Field(
        default_factory=get_environment, description="Current environment"
    )
    debug: bool = Field(default=False, alias="APP_DEBUG", description="Debug mode flag")

    # Telemetry
    log_dir: Path = Field(default=DEFAULT_LOG_DIR, description="Directory for current.jsonl")
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="APP_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default=DEFAULT_LOG_FORMAT,
        alias="APP_LOG_FORMAT",
        description="Console log format (console or json); the log file is always JSON",
    )

    # SMC
    smc_service_name: str = Field(
        default="AppleSMC", description="IOKit class matched first when opening the SMC"
    )
    smc_fallback_service_name: str = Field(
        default="com.apple.driver.AppleSMC",
        description="IOKit service name matched when the primary class yields no service",
    )

    # Display
    poll_interval_seconds: float = Field(
        default=2.0, gt=0, description="Interval between slot refreshes"
    )
    preferences_path: Path = Field(
        default=Path("~/.config/temp_monitor/preferences.yaml"),
        description="YAML file holding layout and slot assignments",
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

    @field_validator("smc_service_name", "smc_fallback_service_name")
    @classmethod
    def validate_service_names(cls, v: str) -> str:
        """Validate IOKit service names."""
        return validate_service_name(v)

    @field_validator("log_dir", "preferences_path", mode="before")
    @classmethod
    def resolve_paths(cls, v: Path | str) -> Path:
        """Resolve relative and user paths to absolute."""
        return resolve_path(v)


_settings: AppConfig | None = None


def load_app_config() -> AppConfig:
    """Load and validate application configuration.

    This function:
    1. Loads .env files in priority order (via env_loader)
    2. Creates AppConfig instance (reads from environment variables)
    3. Validates all values using Pydantic
    4. Reconfigures logging with the validated log directory, level and format
    5. Logs configuration loading using structlog

    Returns:
        Validated AppConfig instance.

    Raises:
        ValidationError: If configuration validation fails.
    """
    log.info("loading_app_config", environment=get_environment().value)

    load_env_files()

    try:
        config = AppConfig()
    except Exception as e:
        log.error("app_config_load_failed", error=str(e), error_type=type(e).__name__)
        raise

    configure_logging(config)
    log.info(
        "app_config_loaded",
        environment=config.environment.value,
        debug=config.debug,
        log_level=config.log_level,
        log_format=config.log_format,
        log_dir=str(config.log_dir),
        smc_service_name=config.smc_service_name,
        poll_interval_seconds=config.poll_interval_seconds,
    )
    return config


def get_settings() -> AppConfig:
    """Get the cached application settings.

    Returns:
        AppConfig instance, loaded on first call.
    """
    global _settings
    if _settings is None:
        _settings = load_app_config()
    return _settings
