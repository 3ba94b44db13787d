"""Integrity validation of candidate sets.

Every candidate runs through ordered checks; the first failure drops it:

1. completeness: name, websiteUrl and domain are all present
2. batch uniqueness: no earlier candidate in the same response claimed the
   same normalized domain or website
3. domain consistency: the host parsed from websiteUrl overwrites a
   disagreeing domain (unparsable URLs are dropped)
4. plausibility: the domain plausibly belongs to the company name

Survivors get an attribution entry appended to ``sources``.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from resolver.domain.models import CandidateRecord, CandidateSet
from resolver.logging import get_logger
from resolver.utils.urls import extract_host, normalize_domain

from .rules import is_domain_plausible

logger = get_logger(__name__, component="validator")


@dataclass
class ClaimedKeys:
    """Domains and websites already claimed by earlier candidates of one response."""

    domains: Set[str] = field(default_factory=set)
    websites: Set[str] = field(default_factory=set)

    def is_claimed(self, domain: str, website: str) -> bool:
        return domain in self.domains or website in self.websites

    def claim(self, domain: str, website: str, corrected_domain: str) -> None:
        self.domains.update({domain, corrected_domain})
        self.websites.add(website)


class IntegrityValidator:
    """Drops incomplete, duplicated, inconsistent or implausible candidates."""

    def __init__(self, logger_instance: Optional[logging.Logger] = None):
        self.logger = logger_instance or logger

    def validate(self, candidate_set: CandidateSet, attribution: str, query: str) -> CandidateSet:
        """Return the surviving candidates in input order.

        Args:
            candidate_set: Parsed candidates from one model response
            attribution: Label of the producing tier/path, appended to sources
            query: Query being resolved (for logging)

        Returns:
            New CandidateSet; never longer than the input
        """
        claimed = ClaimedKeys()
        survivors: List[CandidateRecord] = []

        for candidate in candidate_set.companies:
            checked, reason = self._check(candidate, claimed)
            if checked is None:
                self.logger.warning(
                    f"Dropping candidate '{candidate.name}': {reason}",
                    extra={
                        "event": "validator.candidate.dropped",
                        "candidate_name": candidate.name,
                        "candidate_domain": candidate.domain,
                        "reason": reason,
                    },
                )
                continue
            survivors.append(self._attribute(checked, attribution))

        self.logger.info(
            f"Validation completed for '{query}': {len(candidate_set.companies)} -> {len(survivors)} candidates",
            extra={
                "event": "validator.completed",
                "attribution": attribution,
                "input_count": len(candidate_set.companies),
                "output_count": len(survivors),
            },
        )
        return CandidateSet(companies=survivors)

    def _check(
        self, candidate: CandidateRecord, claimed: ClaimedKeys
    ) -> Tuple[Optional[CandidateRecord], Optional[str]]:
        if not candidate.has_identity:
            return None, "missing_required_fields"

        domain = normalize_domain(candidate.domain)
        website = candidate.website_url.strip().lower()
        if claimed.is_claimed(domain, website):
            return None, "duplicate_domain_or_website"

        url_host = extract_host(candidate.website_url)
        if not url_host:
            return None, "invalid_website_url"

        if url_host != domain:
            self.logger.warning(
                f"Domain mismatch for '{candidate.name}': URL host {url_host}, declared {domain}; using URL host",
                extra={
                    "event": "validator.domain.corrected",
                    "candidate_name": candidate.name,
                    "declared_domain": domain,
                    "url_host": url_host,
                },
            )
        candidate = candidate.model_copy(update={"domain": url_host})

        if not is_domain_plausible(candidate.name, url_host):
            return None, "implausible_domain"

        claimed.claim(domain, website, url_host)
        return candidate, None

    @staticmethod
    def _attribute(candidate: CandidateRecord, attribution: str) -> CandidateRecord:
        if not attribution or attribution in candidate.sources:
            return candidate
        return candidate.model_copy(update={"sources": [*candidate.sources, attribution]})
