"""Utility helpers for URLs, value coercion, and timestamps."""

from .sanitize import coerce_bool, coerce_number, coerce_text, is_unknown
from .timestamps import ensure_utc, utc_now
from .urls import canonicalize_url, core_form, extract_host, normalize_domain

__all__ = [
    "canonicalize_url",
    "core_form",
    "extract_host",
    "normalize_domain",
    "coerce_bool",
    "coerce_number",
    "coerce_text",
    "is_unknown",
    "ensure_utc",
    "utc_now",
]
