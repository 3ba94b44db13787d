"""Parsing of raw model output into candidate records."""

from .service import ResponseNormalizer

__all__ = ["ResponseNormalizer"]
