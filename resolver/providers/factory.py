"""Factory functions for instantiating external collaborators."""

from typing import Optional

from resolver.config.environment import EnvironmentConfig
from resolver.config.models import AppConfig
from resolver.logging import get_logger

from .chat import ChatCompleter, OpenRouterChatCompleter
from .exceptions import ProviderConfigurationError
from .logos import ClearbitLogoDownloader, LogoDownloader
from .storage import LocalLogoStorage, LogoStorage
from .web_search import TavilySearchClient, WebSearchClient

logger = get_logger(__name__, component="provider")


def build_chat_completer(app_config: AppConfig, env_config: EnvironmentConfig) -> ChatCompleter:
    """Create the chat completer shared by every tier.

    Raises:
        ProviderConfigurationError: If the client cannot be created
    """
    advanced = app_config.advanced
    try:
        return OpenRouterChatCompleter(
            api_key=env_config.openrouter_api_key,
            base_url=advanced.chat_base_url,
            timeout=advanced.http_request_timeout,
            user_agent=advanced.user_agent,
        )
    except ProviderConfigurationError:
        raise
    except Exception as e:
        raise ProviderConfigurationError(f"Failed to create chat completer: {e}") from e


def build_web_search_client(
    app_config: AppConfig, env_config: EnvironmentConfig
) -> Optional[WebSearchClient]:
    """Create the web search client, or None when the web tier is disabled.

    The tier is disabled by configuration (``web_search.enabled: false``) or
    by the absence of a web search API key.
    """
    if not app_config.web_search.enabled:
        logger.info(
            "Web search tier disabled by configuration",
            extra={"event": "provider.web_search.disabled", "reason": "config"},
        )
        return None

    if not env_config.web_search_enabled:
        logger.info(
            "Web search tier disabled: TAVILY_API_KEY not set",
            extra={"event": "provider.web_search.disabled", "reason": "missing_api_key"},
        )
        return None

    advanced = app_config.advanced
    return TavilySearchClient(
        api_key=env_config.tavily_api_key,
        search_url=advanced.web_search_url,
        timeout=advanced.http_request_timeout,
        user_agent=advanced.user_agent,
        min_relevance_score=app_config.web_search.min_relevance_score,
    )


def build_logo_downloader(app_config: AppConfig) -> LogoDownloader:
    advanced = app_config.advanced
    return ClearbitLogoDownloader(
        base_url=advanced.logo_base_url,
        timeout=advanced.http_request_timeout,
        user_agent=advanced.user_agent,
    )


def build_logo_storage(env_config: EnvironmentConfig) -> LogoStorage:
    return LocalLogoStorage(
        base_dir=env_config.logo_storage_dir,
        public_base_url=env_config.logo_public_base_url,
    )
