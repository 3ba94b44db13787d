"""Errors surfaced to callers of the search entry point.

Only these reach the end caller; every other failure inside a resolution
degrades to fewer or zero results.
"""


class SearchError(Exception):
    """Base exception for search entry point errors."""

    pass


class InputValidationError(SearchError):
    """The query is unusable (shorter than the minimum length after trimming)."""

    def __init__(self, message: str, query: str) -> None:
        super().__init__(message)
        self.query = query


class RateLimitExceededError(SearchError):
    """The request budget for the current window is spent.

    Raised before any tier runs.
    """

    def __init__(self, message: str, retry_after_seconds: float = 0.0) -> None:
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds
