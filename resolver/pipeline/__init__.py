"""Fallback chain orchestration for entity resolution."""

from .heuristics import is_sufficient, needs_reasoning
from .models import ResolutionResult, TierAttempt
from .runner import FallbackOrchestrator
from .tiers import Tier
from .web import WebSearchFallback

__all__ = [
    "FallbackOrchestrator",
    "ResolutionResult",
    "Tier",
    "TierAttempt",
    "WebSearchFallback",
    "is_sufficient",
    "needs_reasoning",
]
