"""Response normalization: raw model text to a candidate set.

Models wrap JSON in code fences, prepend commentary, or answer with a single
company object instead of the ``{"companies": [...]}`` envelope. The
normalizer tolerates all of these and otherwise reports "nothing found"
(None). It never raises.
"""

import json
import logging
import re
from typing import Any, List, Optional

from pydantic import ValidationError

from resolver.domain.models import CandidateRecord, CandidateSet
from resolver.logging import get_logger

logger = get_logger(__name__, component="normalization")

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


class ResponseNormalizer:
    """Parses raw model output into a CandidateSet.

    Accepted shapes:
    - ``{"companies": [...]}``: passes through
    - a bare record with ``name`` and ``websiteUrl``: wrapped into a
      one-element list, with a warning

    Anything else yields None, which callers treat exactly like an empty
    answer. Individual list items that are not objects, or that fail
    validation, are skipped.
    """

    def __init__(self, logger_instance: Optional[logging.Logger] = None):
        self.logger = logger_instance or logger

    def parse(self, raw_text: Optional[str], query: str) -> Optional[CandidateSet]:
        """Parse ``raw_text`` into a CandidateSet, or return None.

        Args:
            raw_text: Model output, possibly fenced or surrounded by prose
            query: Query the output answers (for logging only)
        """
        text = self._strip_fences(raw_text or "")
        if not text:
            return None

        parsed = self._load(text, query)
        if parsed is None:
            # Retry on the outermost {...} span
            first, last = text.find("{"), text.rfind("}")
            if first != -1 and last > first:
                parsed = self._load(text[first : last + 1], query)

        if parsed is None:
            self.logger.info(
                f"Could not parse model response for '{query}'",
                extra={"event": "normalization.response.unparsable", "response_chars": len(text)},
            )
        return parsed

    @staticmethod
    def _strip_fences(raw_text: str) -> str:
        text = raw_text.strip()
        if text.startswith("```"):
            text = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text, count=1))
        return text.strip()

    def _load(self, text: str, query: str) -> Optional[CandidateSet]:
        try:
            data = json.loads(text)
        except (ValueError, RecursionError):
            return None

        if not isinstance(data, dict):
            return None

        companies = data.get("companies")
        if isinstance(companies, list):
            return CandidateSet(companies=self._build_candidates(companies, query))

        if data.get("name") and data.get("websiteUrl"):
            self.logger.warning(
                f"Model returned a single company object instead of a list for '{query}'; wrapping it",
                extra={"event": "normalization.response.single_object"},
            )
            return CandidateSet(companies=self._build_candidates([data], query))

        return None

    def _build_candidates(self, items: List[Any], query: str) -> List[CandidateRecord]:
        candidates = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                self.logger.debug(
                    "Skipping non-object candidate",
                    extra={"event": "normalization.candidate.skipped", "index": index},
                )
                continue
            try:
                candidates.append(CandidateRecord.model_validate(item))
            except ValidationError as e:
                self.logger.warning(
                    f"Skipping invalid candidate at index {index} for '{query}'",
                    extra={
                        "event": "normalization.candidate.invalid",
                        "index": index,
                        "error_count": e.error_count(),
                    },
                )
        return candidates
