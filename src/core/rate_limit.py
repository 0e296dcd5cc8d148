"""Rate limiting logic - Pure functions.

This module decides whether another call to the weather API fits within
the provider's quotas. Three budgets apply, checked in priority order:
per-second spacing, a trailing one-hour window, and a trailing one-day
window. All functions are pure with no side effects; the shared,
lock-protected state lives in src.shell.rate_limiter.
"""

from dataclasses import dataclass
from enum import Enum


HOUR_SECONDS = 60 * 60
DAY_SECONDS = 24 * HOUR_SECONDS


class RateLimitStatus(Enum):
    """Outcome of a rate limit check."""
    ALLOWED = "allowed"
    EXCEEDED_PER_SECOND = "exceeded_per_second"
    EXCEEDED_PER_HOUR = "exceeded_per_hour"
    EXCEEDED_PER_DAY = "exceeded_per_day"


@dataclass(frozen=True)
class RateLimitConfig:
    """API quota configuration.

    Attributes:
        requests_per_second: Maximum request rate (spacing is 1/rate seconds)
        requests_per_hour: Maximum requests in any trailing hour
        requests_per_day: Maximum requests in any trailing day
        hour_window_seconds: Length of the hourly window
        day_window_seconds: Length of the daily window
    """
    requests_per_second: int = 3
    requests_per_hour: int = 25
    requests_per_day: int = 500
    hour_window_seconds: float = HOUR_SECONDS
    day_window_seconds: float = DAY_SECONDS

    @property
    def min_interval_seconds(self) -> float:
        """Minimum spacing between consecutive requests."""
        return 1.0 / self.requests_per_second


@dataclass(frozen=True)
class RateLimitState:
    """Request history used for quota checks.

    Attributes:
        last_request_time: Epoch seconds of the most recent request (None if none yet)
        hourly_requests: Request timestamps within the hourly window, oldest first
        daily_requests: Request timestamps within the daily window, oldest first
    """
    last_request_time: float | None = None
    hourly_requests: tuple[float, ...] = ()
    daily_requests: tuple[float, ...] = ()


@dataclass(frozen=True)
class RateLimitUsage:
    """Snapshot of quota usage for diagnostics.

    Attributes:
        hourly_count: Requests in the trailing hour
        hourly_limit: Hourly quota
        daily_count: Requests in the trailing day
        daily_limit: Daily quota
    """
    hourly_count: int
    hourly_limit: int
    daily_count: int
    daily_limit: int


def prune_window(
    window: tuple[float, ...],
    now: float,
    duration: float,
) -> tuple[float, ...]:
    """Drop timestamps strictly older than ``now - duration``.

    Pure function.

    Args:
        window: Timestamps, oldest first
        now: Current time (epoch seconds)
        duration: Window length in seconds

    Returns:
        Timestamps still within the window
    """
    cutoff = now - duration
    return tuple(t for t in window if t >= cutoff)


def prune_state(
    state: RateLimitState,
    now: float,
    config: RateLimitConfig,
) -> RateLimitState:
    """Return state with both windows pruned.

    Pure function.
    """
    return RateLimitState(
        last_request_time=state.last_request_time,
        hourly_requests=prune_window(
            state.hourly_requests, now, config.hour_window_seconds
        ),
        daily_requests=prune_window(
            state.daily_requests, now, config.day_window_seconds
        ),
    )


def check_rate_limit(
    state: RateLimitState,
    now: float,
    config: RateLimitConfig,
) -> RateLimitStatus:
    """Check whether a request is allowed under all quotas.

    Pure function. Expects a state already pruned for ``now``.

    Args:
        state: Current (pruned) rate limit state
        now: Current time (epoch seconds)
        config: Quota configuration

    Returns:
        The first exceeded quota in priority order, or ALLOWED
    """
    if (
        state.last_request_time is not None
        and now - state.last_request_time < config.min_interval_seconds
    ):
        return RateLimitStatus.EXCEEDED_PER_SECOND

    if len(state.hourly_requests) >= config.requests_per_hour:
        return RateLimitStatus.EXCEEDED_PER_HOUR

    if len(state.daily_requests) >= config.requests_per_day:
        return RateLimitStatus.EXCEEDED_PER_DAY

    return RateLimitStatus.ALLOWED


def record_request(state: RateLimitState, now: float) -> RateLimitState:
    """Record a request and return updated state.

    Pure function - returns new state without modifying input.

    Args:
        state: Current rate limit state
        now: Time of the request (epoch seconds)

    Returns:
        New state with the request appended to both windows
    """
    return RateLimitState(
        last_request_time=now,
        hourly_requests=state.hourly_requests + (now,),
        daily_requests=state.daily_requests + (now,),
    )


def get_usage(state: RateLimitState, config: RateLimitConfig) -> RateLimitUsage:
    """Summarize quota usage.

    Pure function.
    """
    return RateLimitUsage(
        hourly_count=len(state.hourly_requests),
        hourly_limit=config.requests_per_hour,
        daily_count=len(state.daily_requests),
        daily_limit=config.requests_per_day,
    )
