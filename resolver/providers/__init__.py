"""External collaborators: chat completion, web search, logos and logo storage.

Use the factory functions to build collaborators from configuration:
    from resolver.providers import build_chat_completer
    completer = build_chat_completer(app_config, env_config)
    text = completer.complete(model_id, system_prompt, user_prompt, CompletionOptions())

Exception handling:
    from resolver.providers import ProviderError, ProviderHTTPError, ProviderTimeoutError
"""

from .base import BaseHTTPClient
from .chat import ChatCompleter, CompletionOptions, OpenRouterChatCompleter
from .exceptions import (
    ProviderConfigurationError,
    ProviderError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from .factory import (
    build_chat_completer,
    build_logo_downloader,
    build_logo_storage,
    build_web_search_client,
)
from .logos import ClearbitLogoDownloader, LogoDownloader
from .storage import LocalLogoStorage, LogoStorage
from .web_search import TavilySearchClient, WebSearchClient

__all__ = [
    # Base and factories
    "BaseHTTPClient",
    "build_chat_completer",
    "build_logo_downloader",
    "build_logo_storage",
    "build_web_search_client",
    # Interfaces and implementations
    "ChatCompleter",
    "CompletionOptions",
    "OpenRouterChatCompleter",
    "WebSearchClient",
    "TavilySearchClient",
    "LogoDownloader",
    "ClearbitLogoDownloader",
    "LogoStorage",
    "LocalLogoStorage",
    # Exceptions
    "ProviderError",
    "ProviderHTTPError",
    "ProviderTimeoutError",
    "ProviderResponseError",
    "ProviderConfigurationError",
]
