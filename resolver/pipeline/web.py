"""Web search fallback: the last tier of the chain.

Searches a scoped set of trusted sites, then asks a web-processing model to
extract companies from the returned snippets.
"""

from typing import Optional

from resolver.config.models import ModelTierConfig, WebSearchConfig
from resolver.domain.models import CandidateSet, WebSearchResponse
from resolver.logging import get_logger
from resolver.normalization.service import ResponseNormalizer
from resolver.providers.chat import ChatCompleter, CompletionOptions
from resolver.providers.web_search import WebSearchClient
from resolver.validation.integrity import IntegrityValidator

from .prompts import build_web_system_prompt

logger = get_logger(__name__, component="web_fallback")

QUERY_ENRICHMENT = "company funding valuation employees headquarters founded crunchbase linkedin"


def web_attribution(model: ModelTierConfig) -> str:
    return f"WebSearchProvider + {model.name}"


class WebSearchFallback:
    """Builds the enriched search, judges it and feeds it to processing models."""

    def __init__(
        self,
        chat_completer: ChatCompleter,
        search_client: WebSearchClient,
        config: Optional[WebSearchConfig] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        validator: Optional[IntegrityValidator] = None,
    ):
        self.chat_completer = chat_completer
        self.search_client = search_client
        self.config = config or WebSearchConfig()
        self.normalizer = normalizer or ResponseNormalizer()
        self.validator = validator or IntegrityValidator()

    @staticmethod
    def build_query(query: str) -> str:
        return f"{query} {QUERY_ENRICHMENT}"

    def search(self, query: str) -> WebSearchResponse:
        """Run the scoped, enriched search for ``query``.

        Raises:
            ProviderError: If the search collaborator fails
        """
        return self.search_client.search(
            self.build_query(query),
            max_results=self.config.max_results,
            search_depth=self.config.search_depth.value,
            include_domains=self.config.include_domains,
            exclude_domains=self.config.exclude_domains,
        )

    def is_useful(self, response: Optional[WebSearchResponse]) -> bool:
        """A search is useful when at least one hit clears the relevance bar."""
        if response is None or not response.results:
            return False
        return any(r.score > self.config.min_relevance_score for r in response.results)

    def build_context(self, response: WebSearchResponse) -> str:
        """Concatenate the top snippets, each body capped in length."""
        snippets = [
            f"Source: {r.url}\nTitle: {r.title}\nContent: {r.content[: self.config.snippet_chars]}..."
            for r in response.results[: self.config.max_snippets]
        ]
        return "\n\n".join(snippets)

    def process(
        self, query: str, response: WebSearchResponse, model: ModelTierConfig
    ) -> CandidateSet:
        """Extract validated candidates from the snippets with one model.

        Raises:
            ProviderError: If the chat completion fails
        """
        system_prompt = build_web_system_prompt(query, self.build_context(response))
        raw_text = self.chat_completer.complete(
            model.id,
            system_prompt,
            query,
            CompletionOptions(temperature=model.temperature, max_tokens=model.max_tokens),
        )

        parsed = self.normalizer.parse(raw_text, query)
        if parsed is None:
            logger.info(
                f"{model.name} produced no usable output from web results",
                extra={"event": "web_fallback.process.empty", "model_id": model.id},
            )
            return CandidateSet()

        return self.validator.validate(parsed, web_attribution(model), query)
