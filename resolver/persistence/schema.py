"""Database schema definition and ORM models.

Companies and platforms live in separate tables with identical columns.
``website_url`` stores the canonical host URL and carries the UNIQUE
constraint that makes concurrent inserts of the same entity collide.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type

from sqlalchemy import JSON, Boolean, Column, Float, Index, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, declared_attr

from resolver.domain.models import CanonicalRecord, EntityKind
from resolver.utils.timestamps import ensure_utc

logger = logging.getLogger(__name__)

Base = declarative_base()

# Columns holding lists or nested objects
JSON_FIELDS = ("industries", "hq", "founders", "leadership", "last_funding", "sources")

# Columns copied one-to-one between CanonicalRecord and the ORM row
RECORD_FIELDS = (
    "name",
    "domain",
    "website_url",
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
    "logo_url",
    "sources",
    "confidence",
)


class CanonicalRecordMixin:
    """Columns shared by the companies and platforms tables."""

    id = Column(String(32), primary_key=True, nullable=False)

    # Identity: canonical scheme://host, unique per table
    website_url = Column(String(512), nullable=False, unique=True)
    domain = Column(String(255), nullable=True)
    name = Column(String(255), nullable=False)

    # Profile
    date_of_incorporation = Column(String(50), nullable=True)
    founded_year = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    industries = Column(JSON, nullable=True)
    hq = Column(JSON, nullable=True)
    employee_count = Column(String(100), nullable=True)
    founders = Column(JSON, nullable=True)
    leadership = Column(JSON, nullable=True)
    linkedin_url = Column(Text, nullable=True)
    crunchbase_url = Column(Text, nullable=True)
    traxcn_url = Column(Text, nullable=True)
    funding_total_usd = Column(Float, nullable=True)
    last_funding = Column(JSON, nullable=True)
    is_public = Column(Boolean, nullable=True)
    ticker = Column(String(32), nullable=True)

    # Provenance
    logo_url = Column(Text, nullable=True)
    sources = Column(JSON, nullable=True)
    confidence = Column(Float, nullable=True)

    # Timestamps (stored as ISO 8601 strings)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    @declared_attr
    def __table_args__(cls):
        return (Index(f"idx_{cls.__tablename__}_domain", "domain"),)

    def to_domain(self, kind: EntityKind) -> CanonicalRecord:
        """Convert ORM row to a CanonicalRecord."""
        values: Dict[str, Any] = {field: getattr(self, field) for field in RECORD_FIELDS}
        return CanonicalRecord(
            id=self.id,
            kind=kind,
            created_at=_parse_datetime(self.created_at),
            updated_at=_parse_datetime(self.updated_at),
            **values,
        )

    def apply_domain(self, record: CanonicalRecord) -> None:
        """Copy every field of ``record`` onto this row."""
        dumped = record.model_dump(mode="json")
        for field in RECORD_FIELDS:
            setattr(self, field, dumped.get(field))
        if record.updated_at is not None:
            self.updated_at = _format_datetime(record.updated_at)

    @classmethod
    def from_domain(cls, record: CanonicalRecord):
        row = cls(
            id=record.id,
            created_at=_format_datetime(record.created_at),
            updated_at=_format_datetime(record.updated_at or record.created_at),
        )
        row.apply_domain(record)
        return row


class CompanyModel(CanonicalRecordMixin, Base):
    """ORM model for the companies table."""

    __tablename__ = "companies"


class PlatformModel(CanonicalRecordMixin, Base):
    """ORM model for the platforms table (job boards, ATS products, ...)."""

    __tablename__ = "platforms"


MODELS_BY_KIND: Dict[EntityKind, Type[CanonicalRecordMixin]] = {
    EntityKind.COMPANY: CompanyModel,
    EntityKind.PLATFORM: PlatformModel,
}


def _format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as an ISO 8601 UTC string with a Z suffix."""
    if dt is None:
        return None
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 string written by _format_datetime."""
    if not dt_str:
        return None
    dt_str = dt_str.rstrip("Z")
    try:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S")
    return dt.replace(tzinfo=timezone.utc)


def create_schema(engine: Engine) -> None:
    """Create the companies and platforms tables if they don't exist (idempotent)."""
    try:
        Base.metadata.create_all(engine, checkfirst=True)
        logger.info(
            "Database schema ready",
            extra={"event": "database.schema.ready", "tables": sorted(Base.metadata.tables)},
        )
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
