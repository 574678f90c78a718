"""Configuration management for the talent bank engine."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, parse_app_config, validate_config_file
from .models import (
    AppConfig,
    DirectoryConfig,
    EmailConfig,
    JobCatalogConfig,
    JobCatalogSource,
    LogFormat,
    LogLevel,
    LoggingConfig,
    MatchingConfig,
    NotificationConfig,
    PaginationStrategy,
)

__all__ = [
    # Main loader functions
    "load_config",
    "parse_app_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "MatchingConfig",
    "DirectoryConfig",
    "NotificationConfig",
    "EmailConfig",
    "JobCatalogConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "PaginationStrategy",
    "JobCatalogSource",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
