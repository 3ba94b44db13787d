"""Unit tests for the search entry point."""

from unittest.mock import MagicMock, Mock

import pytest

from resolver.domain.models import CandidateRecord, CanonicalRecord, EntityKind
from resolver.pipeline.models import ResolutionResult
from resolver.pipeline.tiers import Tier
from resolver.providers.exceptions import ProviderHTTPError
from resolver.search import (
    EntitySearchService,
    InputValidationError,
    RateLimitExceededError,
    SlidingWindowRateLimiter,
)
from resolver.search.rate_limiter import RateLimiter

NAUKRI = CandidateRecord(name="Naukri.com", website_url="https://naukri.com", domain="naukri.com")


def _resolution(*candidates):
    return ResolutionResult(
        query="naukri",
        resolution_id="abc",
        candidates=list(candidates),
        resolved_tier=Tier.PRIMARY if candidates else None,
    )


@pytest.fixture
def orchestrator():
    mock = Mock()
    mock.resolve.return_value = _resolution(NAUKRI)
    return mock


@pytest.fixture
def rate_limiter():
    return SlidingWindowRateLimiter(max_requests=10, window_seconds=60)


class TestInputValidation:
    @pytest.mark.parametrize("query", ["", "   ", "abc", "  ab  ", None])
    def test_short_queries_rejected(self, orchestrator, rate_limiter, query):
        service = EntitySearchService(orchestrator, rate_limiter)

        with pytest.raises(InputValidationError):
            service.search(query)

        orchestrator.resolve.assert_not_called()

    def test_query_is_trimmed(self, orchestrator, rate_limiter):
        service = EntitySearchService(orchestrator, rate_limiter)

        service.search("  naukri  ")

        orchestrator.resolve.assert_called_once_with("naukri")

    def test_rejected_query_does_not_consume_budget(self, orchestrator):
        limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=60)
        service = EntitySearchService(orchestrator, limiter)

        with pytest.raises(InputValidationError):
            service.search("ab")

        assert limiter.can_proceed()


class TestRateLimiting:
    def test_exceeding_budget_raises_before_resolution(self, orchestrator):
        limiter = SlidingWindowRateLimiter(max_requests=2, window_seconds=60)
        service = EntitySearchService(orchestrator, limiter)

        service.search("naukri")
        service.search("naukri")
        with pytest.raises(RateLimitExceededError) as exc_info:
            service.search("naukri")

        assert orchestrator.resolve.call_count == 2
        assert exc_info.value.retry_after_seconds > 0

    def test_limiter_default_retry_after(self, orchestrator):
        class ClosedLimiter(RateLimiter):
            def __init__(self):
                self.recorded = 0

            def can_proceed(self):
                return False

            def record_request(self):
                self.recorded += 1

        limiter = ClosedLimiter()
        service = EntitySearchService(orchestrator, limiter)

        with pytest.raises(RateLimitExceededError) as exc_info:
            service.search("naukri")

        assert exc_info.value.retry_after_seconds == 0.0
        assert limiter.recorded == 0


class TestSearch:
    def test_returns_candidates(self, orchestrator, rate_limiter):
        service = EntitySearchService(orchestrator, rate_limiter)

        results = service.search("naukri")

        assert results == [NAUKRI]

    def test_empty_resolution_is_empty_list(self, orchestrator, rate_limiter):
        orchestrator.resolve.return_value = _resolution()
        service = EntitySearchService(orchestrator, rate_limiter)

        assert service.search("unknown-company-xyz") == []

    def test_attaches_logos(self, orchestrator, rate_limiter):
        downloader = Mock()
        downloader.download_logo.return_value = "data:image/png;base64,AAAA"
        service = EntitySearchService(orchestrator, rate_limiter, logo_downloader=downloader)

        results = service.search("naukri")

        downloader.download_logo.assert_called_once_with("naukri.com")
        assert results[0].logo_base64 == "data:image/png;base64,AAAA"

    def test_logo_failures_are_not_fatal(self, orchestrator, rate_limiter):
        other = CandidateRecord(name="Info Edge", website_url="https://infoedge.in", domain="infoedge.in")
        orchestrator.resolve.return_value = _resolution(NAUKRI, other)
        downloader = Mock()
        downloader.download_logo.side_effect = [
            ProviderHTTPError("HTTP 500", status_code=500, url="x"),
            RuntimeError("boom"),
        ]
        service = EntitySearchService(orchestrator, rate_limiter, logo_downloader=downloader)

        results = service.search("naukri")

        assert [r.logo_base64 for r in results] == [None, None]

    def test_persist_merges_into_kind_store(self, orchestrator, rate_limiter):
        merger = Mock()
        stored = CanonicalRecord(id="1", website_url="https://naukri.com", name="Naukri.com")
        merger.merge.return_value = [stored]
        service = EntitySearchService(orchestrator, rate_limiter, merger=merger)

        results = service.search_platforms("naukri", persist=True)

        assert results == [stored]
        merger.merge.assert_called_once_with([NAUKRI], EntityKind.PLATFORM)

    def test_without_persist_merger_not_called(self, orchestrator, rate_limiter):
        merger = Mock()
        service = EntitySearchService(orchestrator, rate_limiter, merger=merger)

        service.search("naukri")

        merger.merge.assert_not_called()

    def test_persist_without_merger_warns_and_returns_candidates(self, orchestrator, rate_limiter):
        mock_logger = MagicMock()
        service = EntitySearchService(orchestrator, rate_limiter, logger_instance=mock_logger)

        results = service.search("naukri", persist=True)

        assert results == [NAUKRI]
        events = [call.kwargs["extra"]["event"] for call in mock_logger.warning.call_args_list]
        assert "search.persist.unavailable" in events
