# Configuration module for the dummy OpenTelemetry generator
from .settings import (
    Settings,
    Environment,
    ConfigurationError,
    get_settings,
    clear_settings_cache,
)

__all__ = ["Settings", "Environment", "ConfigurationError", "get_settings", "clear_settings_cache"]
