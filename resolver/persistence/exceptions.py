"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError for easy catching.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL format
    - Database file not accessible
    - Database used before init_database() was called
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when a required canonical record is not found.

    Lookups that may legitimately miss (find_by_host, find_by_domain) return
    None instead.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a database constraint is violated.

    The unique constraint on the canonical website host raises this when two
    resolutions insert the same entity concurrently; the record merger
    recovers by re-reading the row the other writer created.
    """

    pass
