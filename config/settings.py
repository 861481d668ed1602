"""
Configuration management for the dummy OpenTelemetry generator.

This module provides centralized configuration loading and validation using
Pydantic settings. Values are loaded from environment variables or .env files;
the collector endpoint itself is supplied on the command line.

Environment-specific files are layered on top of the base .env file:
- .env.development
- .env.staging
- .env.production
"""

import os
from enum import Enum
from pathlib import Path
from typing import Optional, List, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Supported deployment environments."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


def _detect_environment() -> Environment:
    """
    Detect the current environment from the ENVIRONMENT variable.

    Returns:
        Environment: The detected environment, defaults to DEVELOPMENT if not set.
    """
    env_value = os.environ.get("ENVIRONMENT", "development").lower().strip()
    try:
        return Environment(env_value)
    except ValueError:
        return Environment.DEVELOPMENT


def _get_env_files(environment: Environment) -> Tuple[str, ...]:
    """
    Get the list of .env files to load for the given environment.

    Files are loaded in order, with later files overriding earlier ones.

    Args:
        environment: The target environment.

    Returns:
        Tuple of .env file paths to load.
    """
    env_file_map = {
        Environment.DEVELOPMENT: ".env.development",
        Environment.STAGING: ".env.staging",
        Environment.PRODUCTION: ".env.production",
    }
    env_specific_file = env_file_map.get(environment, ".env.development")
    return (".env", env_specific_file)


class Settings(BaseSettings):
    """
    Generator settings loaded from environment variables.

    Every field has a default, so the generator runs with no environment
    at all. The resource identity attached to every span, metric and log
    record is fixed (see telemetry.providers) and not read from here.
    """

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Deployment environment (development, staging, production)"
    )

    # Instrumentation scope
    instrumentation_name: str = Field(
        default="dummy-otel-app",
        description="Name of the tracer, meter and OpenTelemetry-bound logger"
    )

    # Emission
    emit_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Seconds between two emitted span/metric/log triples"
    )

    # Exporter configuration
    otlp_insecure: bool = Field(
        default=False,
        description="Use plain HTTP for bare host:port endpoints instead of HTTPS"
    )
    otlp_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Per-request timeout of the OTLP/HTTP exporters"
    )
    metric_export_interval_millis: int = Field(
        default=60000,
        ge=1,
        description="Interval of the periodic metric reader in milliseconds"
    )
    register_global_providers: bool = Field(
        default=True,
        description="Install the tracer and meter providers and the propagator process-wide"
    )

    # Local logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("instrumentation_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Validate that the instrumentation name is not empty."""
        if not v or not v.strip():
            raise ValueError("value cannot be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is a valid logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.strip().upper()
        if v not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(valid_levels))}")
        return v


class ConfigurationError(Exception):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, missing_fields: Optional[List[str]] = None,
                 invalid_fields: Optional[dict] = None):
        self.message = message
        self.missing_fields = missing_fields or []
        self.invalid_fields = invalid_fields or {}
        super().__init__(self.format_error_message())

    def format_error_message(self) -> str:
        """Format a descriptive error message listing all issues."""
        parts = [self.message]

        if self.missing_fields:
            parts.append(f"\nMissing required fields: {', '.join(self.missing_fields)}")

        if self.invalid_fields:
            invalid_parts = [f"  - {field}: {error}" for field, error in self.invalid_fields.items()]
            parts.append("\nInvalid field values:\n" + "\n".join(invalid_parts))

        return "".join(parts)


def create_settings_for_environment(environment: Optional[Environment] = None) -> Settings:
    """
    Factory function to create Settings for a specific environment.

    Detects the environment from the ENVIRONMENT variable (if not provided)
    and loads the matching environment-specific .env file.

    Args:
        environment: Optional environment override.

    Returns:
        Settings: Validated settings for the specified environment.

    Raises:
        ConfigurationError: If settings are missing or invalid.
    """
    if environment is None:
        environment = _detect_environment()

    env_files = _get_env_files(environment)
    existing_env_files = [f for f in env_files if Path(f).exists()] or list(env_files)

    try:
        class EnvironmentSettings(Settings):
            model_config = SettingsConfigDict(
                env_file=tuple(existing_env_files),
                env_file_encoding="utf-8",
                case_sensitive=False,
                extra="ignore"
            )

        return EnvironmentSettings()
    except Exception as e:
        missing_fields = []
        invalid_fields = {}

        if hasattr(e, 'errors'):
            for error in e.errors():
                field_name = '.'.join(str(loc) for loc in error.get('loc', []))
                error_type = error.get('type', '')
                error_msg = error.get('msg', str(error))

                if error_type == 'missing':
                    missing_fields.append(field_name)
                else:
                    invalid_fields[field_name] = error_msg

        raise ConfigurationError(
            f"Failed to load configuration for environment '{environment.value}'",
            missing_fields=missing_fields,
            invalid_fields=invalid_fields
        ) from e


# Global settings cache
_settings_cache: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the settings singleton.

    Settings are loaded once and cached for subsequent calls.

    Raises:
        ConfigurationError: If settings are missing or invalid.
    """
    global _settings_cache

    if _settings_cache is None:
        _settings_cache = create_settings_for_environment()

    return _settings_cache


def clear_settings_cache() -> None:
    """Clear the settings cache so tests can reload with different variables."""
    global _settings_cache
    _settings_cache = None
