"""Persistence layer for canonical records.

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository
    - CanonicalRecordRepository: lookups, inserts and updates per entity kind

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - RecordNotFoundError: Required record not found
    - DataIntegrityError: Constraint violations (e.g. duplicate website host)

Example usage:
    >>> from resolver.persistence import init_database, get_session, CanonicalRecordRepository
    >>> from resolver.domain.models import EntityKind
    >>>
    >>> init_database("sqlite:///./data/resolver.db")
    >>> with get_session() as session:
    ...     repo = CanonicalRecordRepository(session, EntityKind.COMPANY)
    ...     record = repo.find_by_host("https://naukri.com")
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import CanonicalRecordRepository

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "CanonicalRecordRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
