"""Rate Limiter - Imperative Shell.

A single shared gate for API quota, safe for concurrent callers.
State changes are serialized with a lock; the quota decisions themselves
are the pure functions in src.core.rate_limit.

Create one RateLimiter per process and pass it to every pipeline that
shares the same API key.
"""

import logging
import threading
import time
from typing import Callable

from src.core.rate_limit import (
    RateLimitConfig,
    RateLimitState,
    RateLimitStatus,
    RateLimitUsage,
    check_rate_limit,
    get_usage,
    prune_state,
    record_request,
)


logger = logging.getLogger(__name__)


class RateLimiter:
    """Thread-safe tracker of API requests against per-second/hour/day quotas."""

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize rate limiter.

        Args:
            config: Quota configuration
            clock: Returns the current time in epoch seconds
        """
        self.config = config or RateLimitConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._state = RateLimitState()

    def _check_locked(self, now: float) -> RateLimitStatus:
        """Prune windows and check quotas. Caller must hold the lock."""
        self._state = prune_state(self._state, now, self.config)
        return check_rate_limit(self._state, now, self.config)

    def check_rate_limit(self) -> RateLimitStatus:
        """Check whether a request is currently allowed.

        Does not record anything; call record_request() before making
        the request if this returns ALLOWED.
        """
        with self._lock:
            return self._check_locked(self._clock())

    def record_request(self) -> None:
        """Record that a request is about to be made."""
        with self._lock:
            self._state = record_request(self._state, self._clock())

    def try_acquire(self) -> RateLimitStatus:
        """Check quotas and, if allowed, record the request atomically.

        Returns:
            ALLOWED if the request was recorded, otherwise the exceeded quota
        """
        with self._lock:
            now = self._clock()
            status = self._check_locked(now)
            if status == RateLimitStatus.ALLOWED:
                self._state = record_request(self._state, now)

        if status != RateLimitStatus.ALLOWED:
            logger.info("Rate limit check: %s", status.value)

        return status

    def usage(self) -> RateLimitUsage:
        """Get current quota usage."""
        with self._lock:
            self._state = prune_state(self._state, self._clock(), self.config)
            return get_usage(self._state, self.config)
