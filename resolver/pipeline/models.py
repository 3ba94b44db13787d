"""Data models for resolution tracking and reporting."""

from dataclasses import dataclass, field
from typing import List, Optional

from resolver.domain.models import CandidateRecord

from .tiers import Tier


@dataclass
class TierAttempt:
    """
    Outcome of one model call (or the web search itself) within a resolution.

    Attributes:
        tier: Tier the attempt belongs to
        model_id: Model identifier, or None for the web search call
        candidate_count: Candidates parsed (after validation on the web path)
        sufficient: Whether the attempt ended the chain
        error_message: Error text if the call failed
        duration_seconds: Wall time of the call
    """

    tier: Tier
    model_id: Optional[str] = None
    candidate_count: int = 0
    sufficient: bool = False
    error_message: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def failed(self) -> bool:
        return self.error_message is not None


@dataclass
class ResolutionResult:
    """
    Result of running the fallback chain for one query.

    Attributes:
        query: The resolved query
        resolution_id: Identifier shared by every log line of the resolution
        candidates: Validated candidates (empty when every tier came up short)
        resolved_tier: Tier that produced the candidates, if any
        resolved_model: Model id that produced the candidates, if any
        attempts: Every model call in the order it was made
        duration_seconds: Total wall time
    """

    query: str
    resolution_id: str
    candidates: List[CandidateRecord] = field(default_factory=list)
    resolved_tier: Optional[Tier] = None
    resolved_model: Optional[str] = None
    attempts: List[TierAttempt] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.candidates

    @property
    def error_count(self) -> int:
        return sum(1 for attempt in self.attempts if attempt.failed)
