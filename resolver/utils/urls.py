"""URL and domain normalization helpers.

Canonicalization maps a website URL to ``scheme://host``: lowercased, with a
leading ``www.`` removed and any path, query or fragment dropped. The
canonical form is the identity key of a persisted record.
"""

import re
from typing import Optional
from urllib.parse import urlsplit

_WWW_PREFIX = re.compile(r"^www\.", re.IGNORECASE)
_VALID_HOST = re.compile(r"^[a-z0-9]([a-z0-9.-]*[a-z0-9])?$")


def _split(url: str):
    url = url.strip()
    if "://" not in url:
        url = f"https://{url}"
    return urlsplit(url)


def extract_host(url: Optional[str]) -> Optional[str]:
    """Return the lowercased hostname of ``url`` without ``www.``.

    Returns None when the URL has no parseable host.

    Example:
        >>> extract_host("https://www.Naukri.com/jobs")
        'naukri.com'
    """
    if not url or not url.strip():
        return None
    try:
        hostname = _split(url).hostname
    except ValueError:
        return None
    if not hostname or not _VALID_HOST.match(hostname.lower()):
        return None
    return _WWW_PREFIX.sub("", hostname.lower())


def canonicalize_url(url: Optional[str]) -> Optional[str]:
    """Normalize a website URL to ``scheme://host`` (port kept when present).

    Example:
        >>> canonicalize_url("HTTPS://www.Example.com/about?x=1")
        'https://example.com'
    """
    if not url or not url.strip():
        return None
    try:
        parts = _split(url)
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return None
    if not hostname or not _VALID_HOST.match(hostname.lower()):
        return None

    host = _WWW_PREFIX.sub("", hostname.lower())
    if port:
        host = f"{host}:{port}"
    scheme = (parts.scheme or "https").lower()
    return f"{scheme}://{host}"


def normalize_domain(domain: Optional[str]) -> str:
    """Lowercase a free-text domain and strip surrounding space and ``www.``."""
    if not domain:
        return ""
    return _WWW_PREFIX.sub("", domain.strip().lower())


def core_form(text: Optional[str]) -> str:
    """Lowercase ``text`` and drop every non-alphanumeric character."""
    if not text:
        return ""
    return re.sub(r"[^a-z0-9]", "", text.lower())
