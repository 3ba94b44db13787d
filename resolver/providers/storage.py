"""Logo storage collaborator.

Stores base64 data URLs (as produced by the logo downloader) and returns a
public URL for the stored object.
"""

import base64
import binascii
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple

from resolver.logging import get_logger

from .exceptions import ProviderConfigurationError, ProviderResponseError

logger = get_logger(__name__, component="storage")

_DATA_URL = re.compile(r"^data:([^;]+);base64,(.*)$", re.IGNORECASE | re.DOTALL)
_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9/_.-]")


def mime_to_extension(mime: str) -> str:
    """Map an image MIME type to a file extension (``bin`` when unknown)."""
    m = mime.lower()
    if "image/png" in m:
        return "png"
    if "image/jpeg" in m or "image/jpg" in m:
        return "jpg"
    if "image/svg" in m:
        return "svg"
    if "image/webp" in m:
        return "webp"
    if "image/x-icon" in m or "image/vnd.microsoft.icon" in m:
        return "ico"
    if "image/gif" in m:
        return "gif"
    return "bin"


def parse_data_url(data_url: str) -> Tuple[str, bytes]:
    """Split a base64 data URL into (mime type, decoded bytes).

    Raises:
        ProviderResponseError: If the value is not a valid base64 data URL
    """
    match = _DATA_URL.match(data_url or "")
    if not match:
        raise ProviderResponseError("Invalid base64 data URL")
    mime, payload = match.group(1), match.group(2)
    try:
        return mime, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ProviderResponseError(f"Invalid base64 payload: {e}") from e


def safe_key(key_prefix: str) -> str:
    """Replace characters that are unsafe in object keys and collapse repeats."""
    key = _UNSAFE_KEY_CHARS.sub("_", key_prefix)
    key = re.sub(r"_{2,}", "_", key)
    key = re.sub(r"/{2,}", "/", key)
    return key.strip("/")


class LogoStorage(ABC):
    """Object storage for logo images."""

    @abstractmethod
    def upload_image(self, base64_data_url: str, key_prefix: str) -> str:
        """Store the image and return its public URL.

        Raises:
            ProviderError: If the data URL is invalid or the write fails
        """
        pass


class LocalLogoStorage(LogoStorage):
    """LogoStorage writing files below a local directory.

    The public URL is ``<public_base_url>/<key>`` when a public base URL is
    configured, and a ``file://`` URI of the written file otherwise.
    """

    def __init__(self, base_dir: str, public_base_url: Optional[str] = None) -> None:
        if not base_dir or not str(base_dir).strip():
            raise ProviderConfigurationError("Logo storage directory cannot be empty")
        self.base_dir = Path(base_dir)
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def upload_image(self, base64_data_url: str, key_prefix: str) -> str:
        mime, content = parse_data_url(base64_data_url)
        key = f"{safe_key(key_prefix)}.{mime_to_extension(mime)}"
        target = self.base_dir / key

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            raise ProviderResponseError(f"Failed to write logo {key}: {e}") from e

        logger.info(
            f"Stored logo {key}",
            extra={
                "event": "storage.logo.uploaded",
                "key": key,
                "mime_type": mime,
                "size_bytes": len(content),
            },
        )

        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return target.resolve().as_uri()
