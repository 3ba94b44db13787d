"""Unit tests for the web search fallback tier."""

import pytest

from resolver.config.models import ModelRole, ModelTierConfig, SearchDepth, WebSearchConfig
from resolver.domain.models import WebSearchResponse, WebSearchResult
from resolver.pipeline.web import WebSearchFallback, web_attribution
from tests.helpers.fixture_completer import (
    FixtureChatCompleter,
    FixtureWebSearchClient,
    companies_json,
    company,
)

WEB_MODEL = ModelTierConfig(id="web/a", name="Web-A", role=ModelRole.WEB_PROCESSING, max_tokens=4000)


def _response(*scores, content="Naukri.com is an Indian job portal."):
    return WebSearchResponse(
        query="naukri",
        results=[
            WebSearchResult(
                title=f"Result {i}",
                url=f"https://www.crunchbase.com/organization/r{i}",
                content=content,
                score=score,
            )
            for i, score in enumerate(scores)
        ],
    )


class TestSearch:
    def test_enriched_scoped_query(self):
        client = FixtureWebSearchClient()
        config = WebSearchConfig(
            max_results=7,
            search_depth=SearchDepth.ADVANCED,
            include_domains=("crunchbase.com",),
            exclude_domains=("wikipedia.org",),
        )
        fallback = WebSearchFallback(FixtureChatCompleter(), client, config=config)

        fallback.search("naukri")

        assert client.queries == [
            "naukri company funding valuation employees headquarters founded crunchbase linkedin"
        ]
        assert client.last_kwargs == {
            "max_results": 7,
            "search_depth": "advanced",
            "include_domains": ("crunchbase.com",),
            "exclude_domains": ("wikipedia.org",),
        }


class TestIsUseful:
    @pytest.fixture
    def fallback(self):
        return WebSearchFallback(FixtureChatCompleter(), FixtureWebSearchClient())

    def test_none_or_empty_is_not_useful(self, fallback):
        assert not fallback.is_useful(None)
        assert not fallback.is_useful(_response())

    def test_score_must_exceed_threshold(self, fallback):
        assert not fallback.is_useful(_response(0.1, 0.3))
        assert fallback.is_useful(_response(0.1, 0.31))

    def test_custom_threshold(self):
        fallback = WebSearchFallback(
            FixtureChatCompleter(),
            FixtureWebSearchClient(),
            config=WebSearchConfig(min_relevance_score=0.8),
        )
        assert not fallback.is_useful(_response(0.5))


class TestBuildContext:
    def test_caps_snippet_count_and_length(self):
        config = WebSearchConfig(max_snippets=2, snippet_chars=50)
        fallback = WebSearchFallback(FixtureChatCompleter(), FixtureWebSearchClient(), config=config)

        context = fallback.build_context(_response(0.9, 0.8, 0.7, content="x" * 200))

        assert context.count("Source: ") == 2
        assert "x" * 51 not in context
        assert "Content: " + "x" * 50 + "..." in context
        assert "Title: Result 0" in context


class TestProcess:
    def test_extracts_and_attributes_candidates(self):
        completer = FixtureChatCompleter({"web/a": [companies_json(company("Naukri.com", "https://naukri.com"))]})
        fallback = WebSearchFallback(completer, FixtureWebSearchClient())

        result = fallback.process("naukri", _response(0.9), WEB_MODEL)

        assert [c.name for c in result.companies] == ["Naukri.com"]
        assert result.companies[0].sources == ["WebSearchProvider + Web-A"]

        model_id, system_prompt, user_prompt, options = completer.calls[0]
        assert model_id == "web/a"
        assert "Web Search Results:" in system_prompt
        assert "Naukri.com is an Indian job portal." in system_prompt
        assert user_prompt == "naukri"
        assert options.max_tokens == 4000

    def test_unusable_output_is_empty(self):
        completer = FixtureChatCompleter({"web/a": ["no idea"]})
        fallback = WebSearchFallback(completer, FixtureWebSearchClient())

        assert fallback.process("naukri", _response(0.9), WEB_MODEL).is_empty

    def test_implausible_candidates_dropped(self):
        completer = FixtureChatCompleter({"web/a": [companies_json(company("2seventy bio", "https://bms.com"))]})
        fallback = WebSearchFallback(completer, FixtureWebSearchClient())

        assert fallback.process("2seventy bio", _response(0.9), WEB_MODEL).is_empty


def test_web_attribution():
    assert web_attribution(WEB_MODEL) == "WebSearchProvider + Web-A"
