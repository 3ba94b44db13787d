"""Logo download collaborator."""

import base64
from abc import ABC, abstractmethod
from typing import Optional

from resolver.logging import get_logger

from .base import BaseHTTPClient

logger = get_logger(__name__, component="provider")


class LogoDownloader(ABC):
    """Fetches a company logo as a base64 data URL."""

    @abstractmethod
    def download_logo(self, domain: str) -> Optional[str]:
        """Return ``data:<mime>;base64,<payload>`` or None when no logo exists.

        Raises:
            ProviderError: On transport failures
        """
        pass


class ClearbitLogoDownloader(BaseHTTPClient, LogoDownloader):
    """LogoDownloader backed by the Clearbit logo endpoint."""

    def __init__(
        self,
        base_url: str = "https://logo.clearbit.com",
        timeout: int = 30,
        user_agent: str = "CompanyResolver/1.0",
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent)
        self.base_url = base_url.rstrip("/")

    def download_logo(self, domain: str) -> Optional[str]:
        if not domain or not domain.strip():
            return None

        response = self._send(f"{self.base_url}/{domain.strip()}")
        if not 200 <= response.status_code < 300:
            logger.warning(
                f"Failed to download logo for domain {domain}: {response.status_code}",
                extra={
                    "event": "provider.logo.missing",
                    "domain": domain,
                    "status_code": response.status_code,
                },
            )
            return None

        mime_type = response.headers.get("content-type") or "image/png"
        payload = base64.b64encode(response.content).decode("ascii")
        return f"data:{mime_type};base64,{payload}"
