"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_DATABASE_URL = "sqlite:///./data/resolver.db"
DEFAULT_LOGO_STORAGE_DIR = "./data/logos"


class EnvironmentConfig:
    """Secrets and deployment settings read from the environment."""

    def __init__(
        self,
        openrouter_api_key: str,
        tavily_api_key: Optional[str] = None,
        log_level: Optional[str] = None,
        database_url: Optional[str] = None,
        logo_storage_dir: Optional[str] = None,
        logo_public_base_url: Optional[str] = None,
    ):
        self.openrouter_api_key = openrouter_api_key
        self.tavily_api_key = tavily_api_key
        self.log_level = log_level
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.logo_storage_dir = logo_storage_dir or DEFAULT_LOGO_STORAGE_DIR
        self.logo_public_base_url = logo_public_base_url

    @property
    def web_search_enabled(self) -> bool:
        return bool(self.tavily_api_key)


def load_environment_config() -> EnvironmentConfig:
    """Load and validate environment variables.

    Required:
    - OPENROUTER_API_KEY: API key for the chat completion provider

    Optional:
    - TAVILY_API_KEY: enables the web search tier
    - LOG_LEVEL: overrides the configured log level
    - DATABASE_URL: canonical store URL (default: sqlite:///./data/resolver.db)
    - LOGO_STORAGE_DIR: directory logos are written to
    - LOGO_PUBLIC_BASE_URL: public URL prefix for stored logos

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    openrouter_api_key = (os.getenv("OPENROUTER_API_KEY") or "").strip()
    tavily_api_key = (os.getenv("TAVILY_API_KEY") or "").strip() or None
    log_level = os.getenv("LOG_LEVEL")
    database_url = os.getenv("DATABASE_URL")
    logo_storage_dir = os.getenv("LOGO_STORAGE_DIR")
    logo_public_base_url = os.getenv("LOGO_PUBLIC_BASE_URL")

    if not openrouter_api_key:
        errors.append("Missing required environment variable: OPENROUTER_API_KEY")

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if logo_public_base_url and "://" not in logo_public_base_url:
        errors.append(
            f"Invalid LOGO_PUBLIC_BASE_URL: '{logo_public_base_url}'. Must be an absolute URL."
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Ensure all required environment variables are set",
            ],
        )

    return EnvironmentConfig(
        openrouter_api_key=openrouter_api_key,
        tavily_api_key=tavily_api_key,
        log_level=log_level.upper() if log_level else None,
        database_url=database_url,
        logo_storage_dir=logo_storage_dir,
        logo_public_base_url=logo_public_base_url,
    )
