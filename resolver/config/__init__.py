"""Configuration management for the company resolver."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, parse_app_config
from .models import (
    DEFAULT_FALLBACK_CHAIN,
    AdvancedConfig,
    AppConfig,
    FallbackChainConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ModelRole,
    ModelTierConfig,
    RateLimitConfig,
    SearchDepth,
    WebSearchConfig,
)

__all__ = [
    "load_config",
    "parse_app_config",
    "load_environment_config",
    "AppConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    "FallbackChainConfig",
    "LoggingConfig",
    "ModelTierConfig",
    "RateLimitConfig",
    "WebSearchConfig",
    "DEFAULT_FALLBACK_CHAIN",
    "LogFormat",
    "LogLevel",
    "ModelRole",
    "SearchDepth",
    "ConfigurationError",
]
