"""Contamination checks for candidate records."""

from .integrity import ClaimedKeys, IntegrityValidator
from .rules import is_domain_plausible, meaningful_tokens

__all__ = ["ClaimedKeys", "IntegrityValidator", "is_domain_plausible", "meaningful_tokens"]
