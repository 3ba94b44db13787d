"""Escalation heuristics for the fallback chain."""

from typing import Optional

from resolver.domain.models import CandidateRecord, CandidateSet

SUFFICIENT_CONFIDENCE = 0.7

DISAMBIGUATION_KEYWORDS = (
    "which",
    "what",
    "difference",
    "compare",
    "versus",
    "vs",
    "better",
    "similar",
    "alternative",
    "like",
    "related",
)

AMBIGUOUS_QUERY_TOKENS = 3
AMBIGUOUS_QUERY_CHARS = ("/", "&", "+")


def _is_confident(candidate: CandidateRecord) -> bool:
    return candidate.confidence is not None and candidate.confidence >= SUFFICIENT_CONFIDENCE


def is_sufficient(candidate_set: Optional[CandidateSet]) -> bool:
    """True when at least one candidate is complete and trustworthy.

    A candidate qualifies when it has name, website URL and domain, and
    either a confidence of at least 0.7 or a non-empty sources list.
    """
    if candidate_set is None:
        return False
    return any(
        candidate.has_identity and (_is_confident(candidate) or bool(candidate.sources))
        for candidate in candidate_set.companies
    )


def needs_reasoning(query: str, last_result: Optional[CandidateSet]) -> bool:
    """Decide whether the reasoning tier should run.

    Args:
        query: The user's query
        last_result: Last non-empty result from the secondary tier, if any

    Returns:
        True if the query looks like a disambiguation/comparison question, is
        ambiguous (three or more words, or contains ``/``, ``&``, ``+``), or
        the last result holds a low-confidence or unsourced candidate.
    """
    lowered = query.lower()
    if any(keyword in lowered for keyword in DISAMBIGUATION_KEYWORDS):
        return True

    if len(query.split()) >= AMBIGUOUS_QUERY_TOKENS:
        return True
    if any(ch in query for ch in AMBIGUOUS_QUERY_CHARS):
        return True

    candidates = last_result.companies if last_result is not None else []
    if any(not _is_confident(c) for c in candidates):
        return True
    return any(not c.sources for c in candidates)
