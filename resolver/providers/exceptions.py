"""Custom exceptions for external HTTP collaborators."""


class ProviderError(Exception):
    """Base exception for all provider errors.

    Catching this exception catches any failure of a chat, web search, logo
    or storage collaborator. The orchestrator treats every such failure as an
    empty result for the attempt that raised it.
    """

    pass


class ProviderHTTPError(ProviderError):
    """HTTP request failed with a 4xx or 5xx status, or could not be sent.

    A ``status_code`` of 0 means the request never produced a response
    (connection refused, DNS failure, ...).
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ProviderTimeoutError(ProviderError):
    """HTTP request timed out."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class ProviderResponseError(ProviderError):
    """Response parsing or validation failed.

    Raised for invalid JSON bodies, unexpected payload shapes and invalid
    base64 data URLs handed to logo storage.
    """

    pass


class ProviderConfigurationError(ProviderError):
    """Invalid provider configuration (missing API key, bad timeout, ...)."""

    pass
