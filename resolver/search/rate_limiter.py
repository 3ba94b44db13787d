"""In-process request budget for the search entry point."""

import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque


class RateLimiter(ABC):
    """Request budget consulted once per search, before any tier runs."""

    @abstractmethod
    def can_proceed(self) -> bool:
        pass

    @abstractmethod
    def record_request(self) -> None:
        pass

    def retry_after(self) -> float:
        """Seconds until a request would be allowed again (0.0 when unknown)."""
        return 0.0


class SlidingWindowRateLimiter(RateLimiter):
    """Allows at most ``max_requests`` recorded requests per sliding window.

    Thread-safe. ``clock`` returns monotonic seconds and can be replaced in
    tests.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError(f"max_requests must be at least 1, got: {max_requests}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got: {window_seconds}")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._timestamps: Deque[float] = deque()
        self._lock = threading.Lock()

    def _evict(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self._timestamps and self._timestamps[0] <= cutoff:
            self._timestamps.popleft()

    def can_proceed(self) -> bool:
        with self._lock:
            self._evict(self._clock())
            return len(self._timestamps) < self.max_requests

    def record_request(self) -> None:
        with self._lock:
            now = self._clock()
            self._evict(now)
            self._timestamps.append(now)

    def retry_after(self) -> float:
        """Seconds until the oldest recorded request leaves the window."""
        with self._lock:
            now = self._clock()
            self._evict(now)
            if len(self._timestamps) < self.max_requests:
                return 0.0
            return max(0.0, self._timestamps[0] + self.window_seconds - now)
