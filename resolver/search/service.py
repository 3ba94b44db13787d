"""Search entry point: validation, rate limiting, resolution, logos, merge."""

import logging
from typing import List, Optional, Sequence, Union

from resolver.domain.models import CandidateRecord, CanonicalRecord, EntityKind
from resolver.logging import get_logger
from resolver.logging.context import log_context
from resolver.merging.service import RecordMerger
from resolver.pipeline.runner import FallbackOrchestrator
from resolver.providers.exceptions import ProviderError
from resolver.providers.logos import LogoDownloader

from .exceptions import InputValidationError, RateLimitExceededError
from .rate_limiter import RateLimiter

logger = get_logger(__name__, component="search")

MIN_QUERY_LENGTH = 4

SearchResults = Union[List[CandidateRecord], List[CanonicalRecord]]


class EntitySearchService:
    """
    Resolves free-text company and platform queries.

    Companies and platforms share the resolution pipeline; the entity kind
    only selects the store merged into.
    """

    def __init__(
        self,
        orchestrator: FallbackOrchestrator,
        rate_limiter: RateLimiter,
        logo_downloader: Optional[LogoDownloader] = None,
        merger: Optional[RecordMerger] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.orchestrator = orchestrator
        self.rate_limiter = rate_limiter
        self.logo_downloader = logo_downloader
        self.merger = merger
        self.logger = logger_instance or logger

    def search(
        self,
        query: str,
        kind: EntityKind = EntityKind.COMPANY,
        persist: bool = False,
    ) -> SearchResults:
        """
        Resolve ``query`` into candidates, or canonical records when persisting.

        Args:
            query: Free-text query (at least 4 characters after trimming)
            kind: Entity kind to resolve
            persist: Merge the candidates into the canonical store

        Returns:
            CandidateRecords (with logos), or CanonicalRecords when ``persist``
            is set and a merger is configured. Empty when nothing was found.

        Raises:
            InputValidationError: If the query is too short
            RateLimitExceededError: If the request budget is spent
            PersistenceError: If merging fails
        """
        trimmed = (query or "").strip()
        if len(trimmed) < MIN_QUERY_LENGTH:
            raise InputValidationError(
                f"Query must be at least {MIN_QUERY_LENGTH} characters long",
                query=query or "",
            )

        if not self.rate_limiter.can_proceed():
            retry_after = self.rate_limiter.retry_after()
            self.logger.warning(
                "Rate limit exceeded",
                extra={"event": "search.rate_limited", "retry_after_seconds": round(retry_after, 1)},
            )
            raise RateLimitExceededError(
                "Rate limit exceeded. Please try again later.",
                retry_after_seconds=retry_after,
            )
        self.rate_limiter.record_request()

        with log_context(query=trimmed, entity_kind=kind.value):
            self.logger.info(
                f"Searching {kind.value} entities for '{trimmed}'",
                extra={"event": "search.started", "persist": persist},
            )

            resolution = self.orchestrator.resolve(trimmed)
            candidates = self._attach_logos(resolution.candidates)

            if persist and self.merger is None:
                self.logger.warning(
                    "Persistence requested but no merger configured; returning candidates",
                    extra={"event": "search.persist.unavailable"},
                )

            results: SearchResults = candidates
            if persist and self.merger is not None and candidates:
                results = self.merger.merge(candidates, kind)

            self.logger.info(
                f"Found {len(results)} {kind.value} entities for '{trimmed}'",
                extra={
                    "event": "search.completed",
                    "result_count": len(results),
                    "resolved_tier": resolution.resolved_tier.value if resolution.resolved_tier else None,
                    "persisted": persist and self.merger is not None,
                },
            )
            return results

    def search_platforms(self, query: str, persist: bool = False) -> SearchResults:
        return self.search(query, kind=EntityKind.PLATFORM, persist=persist)

    def _attach_logos(self, candidates: Sequence[CandidateRecord]) -> List[CandidateRecord]:
        if self.logo_downloader is None:
            return list(candidates)
        return [
            candidate.model_copy(update={"logo_base64": self._download_logo(candidate.domain)})
            for candidate in candidates
        ]

    def _download_logo(self, domain: Optional[str]) -> Optional[str]:
        if not domain:
            return None
        try:
            return self.logo_downloader.download_logo(domain)
        except ProviderError as e:
            self.logger.warning(
                f"Failed to download logo for {domain}: {e}",
                extra={"event": "search.logo.failed", "domain": domain, "error_type": type(e).__name__},
            )
        except Exception as e:
            self.logger.error(
                f"Unexpected error downloading logo for {domain}: {e}",
                extra={"event": "search.logo.failed", "domain": domain, "error_type": type(e).__name__},
                exc_info=True,
            )
        return None
