"""Chat completion collaborator shared by every tier of the fallback chain."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from resolver.logging import get_logger

from .base import BaseHTTPClient
from .exceptions import ProviderConfigurationError, ProviderResponseError

logger = get_logger(__name__, component="provider")


@dataclass(frozen=True)
class CompletionOptions:
    """Sampling options for a single completion call."""

    temperature: float = 0.3
    max_tokens: int = 3000


class ChatCompleter(ABC):
    """Capability to turn a system + user prompt into raw model text.

    Both the language-model tiers and the web-processing step of the
    fallback chain depend on this interface.
    """

    @abstractmethod
    def complete(
        self,
        model_id: str,
        system_prompt: str,
        user_prompt: str,
        options: CompletionOptions,
    ) -> str:
        """Return the model's raw text answer (possibly empty).

        Raises:
            ProviderError: On any transport or response failure
        """
        pass


class OpenRouterChatCompleter(BaseHTTPClient, ChatCompleter):
    """ChatCompleter backed by an OpenAI-compatible ``/chat/completions`` API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout: int = 30,
        user_agent: str = "CompanyResolver/1.0",
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent)
        if not api_key or not api_key.strip():
            raise ProviderConfigurationError("Chat completion API key cannot be empty")
        self.base_url = base_url.rstrip("/")
        self._session.headers.update({"Authorization": f"Bearer {api_key.strip()}"})

    def complete(
        self,
        model_id: str,
        system_prompt: str,
        user_prompt: str,
        options: CompletionOptions,
    ) -> str:
        payload = {
            "model": model_id,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
        }

        data = self._make_request(
            f"{self.base_url}/chat/completions",
            method="POST",
            json_data=payload,
        )

        if not isinstance(data, dict):
            raise ProviderResponseError(
                f"Unexpected chat completion payload type: {type(data).__name__}"
            )

        choices = data.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            logger.warning(
                "Chat completion returned no choices",
                extra={"event": "provider.chat.empty", "model_id": model_id},
            )
            return ""

        message = choices[0].get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        return content if isinstance(content, str) else ""
