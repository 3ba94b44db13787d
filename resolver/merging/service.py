"""Idempotent merge of validated candidates into the canonical store.

Lookup is by canonical website host first, then by domain. Existing
records are only enriched: a field is overwritten when the incoming value
is present and different, never cleared. Concurrent inserts of the same
host are resolved optimistically by re-reading the row the other writer
created.
"""

import logging
from contextlib import AbstractContextManager
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel
from sqlalchemy.orm import Session

from resolver.domain.models import CandidateRecord, CanonicalRecord, EntityKind
from resolver.logging import get_logger
from resolver.persistence.database import get_session
from resolver.persistence.exceptions import DataIntegrityError
from resolver.persistence.repositories import CanonicalRecordRepository
from resolver.providers.exceptions import ProviderError
from resolver.providers.storage import LogoStorage
from resolver.utils.sanitize import is_unknown
from resolver.utils.timestamps import utc_now
from resolver.utils.urls import canonicalize_url, extract_host

logger = get_logger(__name__, component="merger")

# Profile fields subject to the present-and-different rule
MERGEABLE_FIELDS = (
    "name",
    "domain",
    "date_of_incorporation",
    "founded_year",
    "description",
    "industries",
    "hq",
    "employee_count",
    "founders",
    "leadership",
    "linkedin_url",
    "crunchbase_url",
    "traxcn_url",
    "funding_total_usd",
    "last_funding",
    "is_public",
    "ticker",
    "confidence",
)

SessionFactory = Callable[[], AbstractContextManager]


def is_present(value: Any) -> bool:
    """True unless ``value`` is None, an unknown marker, or an empty container."""
    if value is None or is_unknown(value):
        return False
    if isinstance(value, (list, tuple, dict, set)) and not value:
        return False
    if isinstance(value, BaseModel):
        return any(is_present(v) for v in value.model_dump().values())
    return True


def _comparable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_comparable(v) for v in value]
    return value


class RecordMerger:
    """Upserts candidates into the companies or platforms store."""

    def __init__(
        self,
        logo_storage: Optional[LogoStorage] = None,
        session_factory: SessionFactory = get_session,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """
        Args:
            logo_storage: Storage for logos; None skips logo uploads
            session_factory: Context manager factory yielding a Session that
                commits on success (defaults to persistence.get_session)
            logger_instance: Logger instance (defaults to module logger)
        """
        self.logo_storage = logo_storage
        self.session_factory = session_factory
        self.logger = logger_instance or logger

    def merge(self, candidates: List[CandidateRecord], kind: EntityKind) -> List[CanonicalRecord]:
        """Merge every candidate, each in its own transaction.

        Candidates without a parseable website URL are skipped.
        """
        merged = []
        for candidate in candidates:
            record = self.merge_one(candidate, kind)
            if record is not None:
                merged.append(record)
        return merged

    def merge_one(self, candidate: CandidateRecord, kind: EntityKind) -> Optional[CanonicalRecord]:
        """Create or enrich the canonical record for ``candidate``.

        Raises:
            PersistenceError: On database failures other than a recoverable
                unique-constraint race
        """
        host_url = canonicalize_url(candidate.website_url)
        if host_url is None or not candidate.name:
            self.logger.warning(
                f"Skipping merge of '{candidate.name}': no usable website URL",
                extra={"event": "merger.candidate.skipped", "website_url": candidate.website_url},
            )
            return None

        try:
            with self.session_factory() as session:
                return self._upsert(session, candidate, kind, host_url)
        except DataIntegrityError:
            return self._recover_conflict(kind, host_url)

    def _upsert(
        self, session: Session, candidate: CandidateRecord, kind: EntityKind, host_url: str
    ) -> CanonicalRecord:
        repo = CanonicalRecordRepository(session, kind)

        existing = repo.find_by_host(host_url)
        matched_by = "host"
        if existing is None and candidate.domain:
            existing = repo.find_by_domain(candidate.domain)
            matched_by = "domain"

        logo_url = self._store_logo(candidate, kind, host_url)

        if existing is None:
            now = utc_now()
            record = CanonicalRecord(
                id=uuid4().hex,
                kind=kind,
                website_url=host_url,
                name=candidate.name,
                logo_url=logo_url,
                sources=list(candidate.sources),
                created_at=now,
                updated_at=now,
                **{
                    field: getattr(candidate, field)
                    for field in MERGEABLE_FIELDS
                    if field != "name" and is_present(getattr(candidate, field))
                },
            )
            created = repo.insert(record)
            self.logger.info(
                f"Created {kind.value} {host_url}",
                extra={"event": "merger.record.created", "kind": kind.value, "website_url": host_url},
            )
            return created

        changes = self._changes(existing, candidate)
        if logo_url and logo_url != existing.logo_url:
            changes["logo_url"] = logo_url

        if not changes:
            self.logger.debug(
                f"{kind.value.capitalize()} {existing.website_url} already up to date",
                extra={"event": "merger.record.unchanged", "matched_by": matched_by},
            )
            return existing

        updated = repo.update(existing.model_copy(update={**changes, "updated_at": utc_now()}))
        self.logger.info(
            f"Updated {kind.value} {existing.website_url}",
            extra={
                "event": "merger.record.updated",
                "kind": kind.value,
                "website_url": existing.website_url,
                "matched_by": matched_by,
                "changed_fields": sorted(changes),
            },
        )
        return updated

    def _changes(self, existing: CanonicalRecord, candidate: CandidateRecord) -> Dict[str, Any]:
        """Fields whose incoming value is present and differs from the stored one."""
        changes: Dict[str, Any] = {}
        for field in MERGEABLE_FIELDS:
            incoming = getattr(candidate, field)
            if not is_present(incoming):
                continue
            if _comparable(incoming) != _comparable(getattr(existing, field)):
                changes[field] = incoming

        merged_sources, added = self._merge_sources(existing.sources, candidate.sources)
        if added:
            changes["sources"] = merged_sources
        return changes

    @staticmethod
    def _merge_sources(existing: List[str], incoming: List[str]) -> Tuple[List[str], bool]:
        merged = list(existing)
        for source in incoming:
            if source not in merged:
                merged.append(source)
        return merged, len(merged) != len(existing)

    def _store_logo(
        self, candidate: CandidateRecord, kind: EntityKind, host_url: str
    ) -> Optional[str]:
        """Upload a fresh logo when one was downloaded; failures are non-blocking."""
        if not candidate.logo_base64 or self.logo_storage is None:
            return None

        host = extract_host(host_url) or host_url
        try:
            return self.logo_storage.upload_image(candidate.logo_base64, f"logos/{kind.value}/{host}/logo")
        except ProviderError as e:
            self.logger.warning(
                f"Logo upload failed for {host}: {e}",
                extra={"event": "merger.logo.upload_failed", "website_url": host_url, "error_type": type(e).__name__},
            )
            return None

    def _recover_conflict(self, kind: EntityKind, host_url: str) -> CanonicalRecord:
        """Return the row a concurrent writer created for ``host_url``.

        Raises:
            DataIntegrityError: If the conflicting row cannot be found
        """
        with self.session_factory() as session:
            winner = CanonicalRecordRepository(session, kind).find_by_host(host_url)

        if winner is None:
            raise DataIntegrityError(
                f"Insert of {host_url} conflicted but no existing {kind.value} was found"
            )

        self.logger.info(
            f"Recovered from concurrent insert of {host_url}",
            extra={"event": "merger.conflict.recovered", "kind": kind.value, "website_url": host_url},
        )
        return winner
