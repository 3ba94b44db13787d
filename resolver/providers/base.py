"""Base HTTP client shared by every external collaborator.

This module provides the request plumbing used by the chat completion,
web search and logo clients: session setup with a user agent, timeouts,
and mapping of transport failures onto the ProviderError family.
"""

import logging
from typing import Any, Dict, Optional

import requests

from resolver.logging import get_logger

from .exceptions import (
    ProviderConfigurationError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTimeoutError,
)

logger = get_logger(__name__, component="provider")


class BaseHTTPClient:
    """Base class for HTTP collaborators.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    def __init__(self, timeout: int = 30, user_agent: str = "CompanyResolver/1.0") -> None:
        """Initialize client with configuration.

        Args:
            timeout: HTTP request timeout in seconds (range 5-300)
            user_agent: User-Agent header for requests

        Raises:
            ProviderConfigurationError: If timeout is outside valid range or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise ProviderConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise ProviderConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    def _send(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        """Send a request and return the raw response, whatever its status.

        Raises:
            ProviderTimeoutError: On request timeout
            ProviderHTTPError: When the request could not be sent (status_code 0)
        """
        request_headers = self._session.headers.copy()
        if headers:
            request_headers.update(headers)

        logger.debug(
            f"HTTP {method} request to {url}",
            extra={
                "event": "provider.request.sent",
                "method": method,
                "url": url,
                "timeout": self.timeout,
            },
        )

        try:
            return self._session.request(
                method=method,
                url=url,
                headers=request_headers,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "provider.request.timeout",
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise ProviderTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.warning(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "provider.request.failed",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise ProviderHTTPError(
                f"Request to {url} failed: {e}",
                status_code=0,
                url=url,
            ) from e

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make an HTTP request and parse the JSON body.

        Returns:
            Parsed JSON response

        Raises:
            ProviderHTTPError: On 4xx or 5xx HTTP status
            ProviderTimeoutError: On request timeout
            ProviderResponseError: On invalid JSON
        """
        response = self._send(url, method=method, headers=headers, params=params, json_data=json_data)

        if response.status_code >= 400:
            is_retryable = response.status_code >= 500 or response.status_code == 429
            logger.log(
                logging.WARNING if is_retryable else logging.ERROR,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "provider.request.http_error",
                    "status_code": response.status_code,
                    "url": url,
                    "retryable": is_retryable,
                },
            )
            raise ProviderHTTPError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"Failed to parse JSON response from {url}",
                extra={
                    "event": "provider.response.invalid_json",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise ProviderResponseError(f"Failed to parse JSON response from {url}: {e}") from e

        logger.debug(
            "HTTP request succeeded",
            extra={
                "event": "provider.request.succeeded",
                "status_code": response.status_code,
                "url": url,
            },
        )
        return data
