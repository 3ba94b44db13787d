"""Fallback chain orchestration for entity resolution."""

import logging
import time
from typing import Callable, Optional, Tuple
from uuid import uuid4

from resolver.config.models import DEFAULT_FALLBACK_CHAIN, FallbackChainConfig, ModelTierConfig
from resolver.domain.models import CandidateSet
from resolver.logging import get_logger
from resolver.logging.context import log_context
from resolver.normalization.service import ResponseNormalizer
from resolver.providers.chat import ChatCompleter, CompletionOptions
from resolver.providers.exceptions import ProviderError
from resolver.validation.integrity import IntegrityValidator

from .heuristics import is_sufficient, needs_reasoning
from .models import ResolutionResult, TierAttempt
from .prompts import SYSTEM_PROMPT, build_reasoning_prompt, build_user_prompt
from .tiers import FIRST_TIER, Tier
from .web import WebSearchFallback

logger = get_logger(__name__, component="orchestrator")


class FallbackOrchestrator:
    """
    Resolves a query by walking the cost-ordered fallback chain.

    Tiers run strictly in order (primary, secondary, reasoning when the
    heuristic asks for it, then web search) and models within a tier in
    priority order. The first sufficient answer wins and is validated and
    returned; later tiers are never called. Every call failure is logged
    and counted as an empty answer for that attempt only.
    """

    def __init__(
        self,
        chat_completer: ChatCompleter,
        chain: FallbackChainConfig = DEFAULT_FALLBACK_CHAIN,
        web_fallback: Optional[WebSearchFallback] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        validator: Optional[IntegrityValidator] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            chat_completer: Completion capability shared by every model tier
            chain: Immutable priority lists per tier
            web_fallback: Web search tier; None disables it
            normalizer: Parser for raw model text
            validator: Integrity validator applied to winning answers
            logger_instance: Logger instance (defaults to module logger)
        """
        self.chat_completer = chat_completer
        self.chain = chain
        self.web_fallback = web_fallback
        self.normalizer = normalizer or ResponseNormalizer()
        self.validator = validator or IntegrityValidator()
        self.logger = logger_instance or logger

    def resolve(self, query: str) -> ResolutionResult:
        """
        Run the fallback chain for ``query``.

        Returns:
            ResolutionResult; its candidates are empty when every tier came up
            short, which is a valid outcome rather than an error.
        """
        started = time.monotonic()
        result = ResolutionResult(query=query, resolution_id=uuid4().hex)

        with log_context(resolution_id=result.resolution_id, query=query):
            self.logger.info(
                "Resolution started",
                extra={"event": "orchestrator.resolution.started"},
            )

            last_secondary: Optional[CandidateSet] = None
            tier: Optional[Tier] = FIRST_TIER

            while tier is not None:
                if tier.is_conditional and not needs_reasoning(query, last_secondary):
                    self.logger.info(
                        "Reasoning tier skipped: query and last result look unambiguous",
                        extra={"event": "orchestrator.tier.skipped", "tier": tier.value},
                    )
                    tier = tier.next()
                    continue

                if tier is Tier.WEB:
                    done = self._run_web_tier(query, result)
                else:
                    done, last_result = self._run_model_tier(tier, query, result)
                    if tier is Tier.SECONDARY and last_result is not None:
                        last_secondary = last_result

                if done:
                    break
                tier = tier.next()

            result.duration_seconds = time.monotonic() - started

            if result.is_empty:
                self.logger.info(
                    "All tiers exhausted without a sufficient result",
                    extra={
                        "event": "orchestrator.resolution.exhausted",
                        "attempt_count": len(result.attempts),
                        "error_count": result.error_count,
                        "duration_ms": int(result.duration_seconds * 1000),
                    },
                )
            else:
                self.logger.info(
                    f"Resolution completed with {len(result.candidates)} candidates",
                    extra={
                        "event": "orchestrator.resolution.completed",
                        "tier": result.resolved_tier.value if result.resolved_tier else None,
                        "model_id": result.resolved_model,
                        "candidate_count": len(result.candidates),
                        "attempt_count": len(result.attempts),
                        "duration_ms": int(result.duration_seconds * 1000),
                    },
                )

        return result

    def _run_model_tier(
        self, tier: Tier, query: str, result: ResolutionResult
    ) -> Tuple[bool, Optional[CandidateSet]]:
        """Try each model of ``tier``; return (resolved, last non-empty answer)."""
        models = self.chain.models_for(tier.role)
        if not models:
            self.logger.debug(
                f"No models configured for tier {tier.value}",
                extra={"event": "orchestrator.tier.empty", "tier": tier.value},
            )
            return False, None

        self.logger.info(
            f"Tier {tier.value} started",
            extra={"event": "orchestrator.tier.started", "tier": tier.value, "model_count": len(models)},
        )

        user_prompt = build_reasoning_prompt(query) if tier is Tier.REASONING else build_user_prompt(query)
        last_non_empty: Optional[CandidateSet] = None

        for model in models:
            attempt = TierAttempt(tier=tier, model_id=model.id)
            candidates = self._attempt(
                attempt,
                model,
                lambda m=model: self._complete_and_parse(m, user_prompt, query),
            )
            result.attempts.append(attempt)

            if not candidates.is_empty:
                last_non_empty = candidates

            if is_sufficient(candidates):
                attempt.sufficient = True
                validated = self.validator.validate(candidates, f"{tier.value} ({model.name})", query)
                self._resolve(result, tier, model, validated)
                return True, last_non_empty

            self.logger.info(
                f"{model.name} answer insufficient",
                extra={
                    "event": "orchestrator.model.insufficient",
                    "tier": tier.value,
                    "model_id": model.id,
                    "candidate_count": attempt.candidate_count,
                },
            )

        return False, last_non_empty

    def _run_web_tier(self, query: str, result: ResolutionResult) -> bool:
        if self.web_fallback is None:
            self.logger.info(
                "Web search tier not configured",
                extra={"event": "orchestrator.tier.skipped", "tier": Tier.WEB.value},
            )
            return False

        models = self.chain.models_for(Tier.WEB.role)
        if not models:
            return False

        self.logger.info(
            "Tier web started",
            extra={"event": "orchestrator.tier.started", "tier": Tier.WEB.value, "model_count": len(models)},
        )

        search_attempt = TierAttempt(tier=Tier.WEB)
        started = time.monotonic()
        try:
            response = self.web_fallback.search(query)
        except ProviderError as e:
            self._record_failure(search_attempt, e, logging.WARNING)
            response = None
        except Exception as e:
            self._record_failure(search_attempt, e, logging.ERROR)
            response = None
        search_attempt.duration_seconds = time.monotonic() - started
        search_attempt.candidate_count = len(response.results) if response is not None else 0
        result.attempts.append(search_attempt)

        if not self.web_fallback.is_useful(response):
            self.logger.info(
                "Web search returned no useful results",
                extra={"event": "orchestrator.web.not_useful", "result_count": search_attempt.candidate_count},
            )
            return False

        for model in models:
            attempt = TierAttempt(tier=Tier.WEB, model_id=model.id)
            validated = self._attempt(
                attempt,
                model,
                lambda m=model: self.web_fallback.process(query, response, m),
            )
            result.attempts.append(attempt)

            if not validated.is_empty:
                attempt.sufficient = True
                self._resolve(result, Tier.WEB, model, validated)
                return True

        return False

    def _complete_and_parse(self, model: ModelTierConfig, user_prompt: str, query: str) -> CandidateSet:
        raw_text = self.chat_completer.complete(
            model.id,
            SYSTEM_PROMPT,
            user_prompt,
            CompletionOptions(temperature=model.temperature, max_tokens=model.max_tokens),
        )
        if not raw_text:
            self.logger.info(
                f"No output from {model.name}",
                extra={"event": "orchestrator.model.no_output", "model_id": model.id},
            )
            return CandidateSet()
        return self.normalizer.parse(raw_text, query) or CandidateSet()

    def _attempt(
        self,
        attempt: TierAttempt,
        model: ModelTierConfig,
        call: Callable[[], CandidateSet],
    ) -> CandidateSet:
        """Run one model call; any failure becomes an empty answer."""
        self.logger.info(
            f"Attempting {attempt.tier.value} model {model.name}",
            extra={"event": "orchestrator.model.attempted", "tier": attempt.tier.value, "model_id": model.id},
        )
        started = time.monotonic()
        try:
            candidates = call()
        except ProviderError as e:
            self._record_failure(attempt, e, logging.WARNING)
            candidates = CandidateSet()
        except Exception as e:
            self._record_failure(attempt, e, logging.ERROR)
            candidates = CandidateSet()
        attempt.duration_seconds = time.monotonic() - started
        attempt.candidate_count = len(candidates)
        return candidates

    def _record_failure(self, attempt: TierAttempt, error: Exception, level: int) -> None:
        attempt.error_message = str(error) or type(error).__name__
        self.logger.log(
            level,
            f"{attempt.tier.value} call failed: {error}",
            extra={
                "event": "orchestrator.model.failed",
                "tier": attempt.tier.value,
                "model_id": attempt.model_id,
                "error_type": type(error).__name__,
            },
            exc_info=level >= logging.ERROR,
        )

    @staticmethod
    def _resolve(
        result: ResolutionResult, tier: Tier, model: ModelTierConfig, candidates: CandidateSet
    ) -> None:
        result.candidates = list(candidates.companies)
        result.resolved_tier = tier
        result.resolved_model = model.id
