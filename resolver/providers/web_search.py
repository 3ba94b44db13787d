"""Scoped web search collaborator used by the last tier of the chain."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence

from resolver.domain.models import WebSearchResponse, WebSearchResult
from resolver.logging import get_logger
from resolver.utils.urls import extract_host

from .base import BaseHTTPClient
from .exceptions import ProviderConfigurationError, ProviderResponseError

logger = get_logger(__name__, component="provider")

# A search is useful when at least one hit scores above this
DEFAULT_MIN_RELEVANCE_SCORE = 0.3


class WebSearchClient(ABC):
    """Search capability consumed by the web fallback."""

    @abstractmethod
    def search(
        self,
        query: str,
        max_results: int = 10,
        search_depth: str = "basic",
        include_domains: Sequence[str] = (),
        exclude_domains: Sequence[str] = (),
    ) -> WebSearchResponse:
        """Run one search.

        Raises:
            ProviderError: On any transport or response failure
        """
        pass


class TavilySearchClient(BaseHTTPClient, WebSearchClient):
    """WebSearchClient backed by the Tavily search API."""

    def __init__(
        self,
        api_key: str,
        search_url: str = "https://api.tavily.com/search",
        timeout: int = 30,
        user_agent: str = "CompanyResolver/1.0",
        min_relevance_score: float = DEFAULT_MIN_RELEVANCE_SCORE,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent)
        if not api_key or not api_key.strip():
            raise ProviderConfigurationError("Web search API key cannot be empty")
        self.search_url = search_url
        self.min_relevance_score = min_relevance_score
        self._session.headers.update({"Authorization": f"Bearer {api_key.strip()}"})

    def search(
        self,
        query: str,
        max_results: int = 10,
        search_depth: str = "basic",
        include_domains: Sequence[str] = (),
        exclude_domains: Sequence[str] = (),
    ) -> WebSearchResponse:
        payload: Dict[str, Any] = {
            "query": query,
            "max_results": max_results,
            "search_depth": search_depth,
            "include_domains": list(include_domains),
            "exclude_domains": list(exclude_domains),
        }

        data = self._make_request(self.search_url, method="POST", json_data=payload)
        if not isinstance(data, dict):
            raise ProviderResponseError(
                f"Unexpected web search payload type: {type(data).__name__}"
            )

        results = [
            self._to_result(item) for item in data.get("results") or [] if isinstance(item, dict)
        ]
        has_results = any(r.score > self.min_relevance_score for r in results)

        logger.debug(
            f"Web search returned {len(results)} results",
            extra={
                "event": "provider.web_search.completed",
                "result_count": len(results),
                "has_results": has_results,
            },
        )
        return WebSearchResponse(query=query, results=results, has_results=has_results)

    @staticmethod
    def _to_result(item: Dict[str, Any]) -> WebSearchResult:
        url = item.get("url") or ""
        score = item.get("score")
        return WebSearchResult(
            title=item.get("title") or "",
            url=url,
            content=item.get("content") or "",
            domain=extract_host(url) or "",
            score=float(score) if isinstance(score, (int, float)) else 0.0,
        )
