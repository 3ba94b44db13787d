"""Domain models for the company resolver."""

from .models import (
    CandidateRecord,
    CandidateSet,
    CanonicalRecord,
    EntityKind,
    EntityProfile,
    Founder,
    FundingRound,
    Headquarters,
    Leader,
    WebSearchResponse,
    WebSearchResult,
)

__all__ = [
    "CandidateRecord",
    "CandidateSet",
    "CanonicalRecord",
    "EntityKind",
    "EntityProfile",
    "Founder",
    "FundingRound",
    "Headquarters",
    "Leader",
    "WebSearchResponse",
    "WebSearchResult",
]
