"""Search entry point for company and platform queries."""

from .exceptions import InputValidationError, RateLimitExceededError, SearchError
from .rate_limiter import RateLimiter, SlidingWindowRateLimiter
from .service import MIN_QUERY_LENGTH, EntitySearchService

__all__ = [
    "EntitySearchService",
    "MIN_QUERY_LENGTH",
    "RateLimiter",
    "SlidingWindowRateLimiter",
    "SearchError",
    "InputValidationError",
    "RateLimitExceededError",
]
