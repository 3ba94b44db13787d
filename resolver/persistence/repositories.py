"""Data access layer for canonical records.

Repositories encapsulate database operations and return domain models
(CanonicalRecord) rather than ORM rows.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from resolver.domain.models import CanonicalRecord, EntityKind
from resolver.utils.urls import normalize_domain

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import MODELS_BY_KIND

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50


class CanonicalRecordRepository:
    """Repository for the canonical store of one entity kind."""

    def __init__(self, session: Session, kind: EntityKind = EntityKind.COMPANY):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
            kind: Entity kind; selects the companies or platforms table
        """
        self.session = session
        self.kind = kind
        self.model = MODELS_BY_KIND[kind]

    def find_by_host(self, website_url: str) -> Optional[CanonicalRecord]:
        """Retrieve the record whose canonical website URL equals ``website_url``.

        Args:
            website_url: Canonical ``scheme://host`` form

        Returns:
            CanonicalRecord if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(self.model).where(self.model.website_url == website_url)
            row = self.session.execute(stmt).scalar_one_or_none()
            return row.to_domain(self.kind) if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.kind.value} by host {website_url}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve {self.kind.value}: {e}") from e

    def find_by_domain(self, domain: str) -> Optional[CanonicalRecord]:
        """Retrieve a record by domain, case-insensitively (oldest match wins).

        Raises:
            PersistenceError: If database error occurs
        """
        normalized = normalize_domain(domain)
        if not normalized:
            return None

        try:
            stmt = (
                select(self.model)
                .where(func.lower(self.model.domain) == normalized)
                .order_by(self.model.created_at.asc())
                .limit(1)
            )
            row = self.session.execute(stmt).scalars().first()
            return row.to_domain(self.kind) if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.kind.value} by domain {domain}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve {self.kind.value}: {e}") from e

    def insert(self, record: CanonicalRecord) -> CanonicalRecord:
        """Insert a new record.

        Returns:
            Persisted CanonicalRecord

        Raises:
            DataIntegrityError: If the canonical website URL (or id) already exists
            PersistenceError: If database error occurs
        """
        try:
            row = self.model.from_domain(record)
            self.session.add(row)
            self.session.flush()
            return row.to_domain(self.kind)
        except IntegrityError as e:
            logger.warning(
                f"Integrity error inserting {self.kind.value} {record.website_url}",
                extra={"event": "repository.insert.conflict", "website_url": record.website_url},
            )
            raise DataIntegrityError(
                f"Failed to insert {self.kind.value} due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error inserting {self.kind.value} {record.website_url}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to insert {self.kind.value}: {e}") from e

    def update(self, record: CanonicalRecord) -> CanonicalRecord:
        """Overwrite the stored record that has ``record.id``.

        Raises:
            RecordNotFoundError: If no record has this id
            DataIntegrityError: If the update violates a constraint
            PersistenceError: If database error occurs
        """
        try:
            row = self.session.get(self.model, record.id)
            if row is None:
                raise RecordNotFoundError(
                    f"{self.kind.value.capitalize()} with id {record.id} not found"
                )
            row.apply_domain(record)
            self.session.flush()
            return row.to_domain(self.kind)
        except RecordNotFoundError:
            raise
        except IntegrityError as e:
            logger.error(f"Integrity error updating {self.kind.value} {record.id}: {e}", exc_info=True)
            raise DataIntegrityError(
                f"Failed to update {self.kind.value} due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating {self.kind.value} {record.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update {self.kind.value}: {e}") from e

    def list(self, search: Optional[str] = None, limit: int = DEFAULT_LIST_LIMIT) -> List[CanonicalRecord]:
        """List records, newest first, optionally filtered by name or domain substring.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(self.model)
            if search and search.strip():
                pattern = f"%{search.strip().lower()}%"
                stmt = stmt.where(
                    or_(
                        func.lower(self.model.name).like(pattern),
                        func.lower(self.model.domain).like(pattern),
                    )
                )
            stmt = stmt.order_by(self.model.created_at.desc()).limit(limit)
            rows = self.session.execute(stmt).scalars().all()
            return [row.to_domain(self.kind) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Error listing {self.kind.value} records: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list {self.kind.value} records: {e}") from e
