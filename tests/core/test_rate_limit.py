"""Tests for rate limiting logic."""

import pytest

from src.core.rate_limit import (
    DAY_SECONDS,
    HOUR_SECONDS,
    RateLimitConfig,
    RateLimitState,
    RateLimitStatus,
    check_rate_limit,
    get_usage,
    prune_state,
    prune_window,
    record_request,
)


CONFIG = RateLimitConfig()
NOW = 1_700_000_000.0


def state_with(count: int, start: float, spacing: float = 10.0) -> RateLimitState:
    """Build a state with ``count`` requests starting at ``start``."""
    state = RateLimitState()
    for i in range(count):
        state = record_request(state, start + i * spacing)
    return state


class TestRateLimitConfig:
    """Tests for RateLimitConfig defaults."""

    def test_defaults(self):
        assert CONFIG.requests_per_second == 3
        assert CONFIG.requests_per_hour == 25
        assert CONFIG.requests_per_day == 500
        assert CONFIG.hour_window_seconds == HOUR_SECONDS
        assert CONFIG.day_window_seconds == DAY_SECONDS

    def test_min_interval(self):
        assert CONFIG.min_interval_seconds == pytest.approx(1 / 3)


class TestPruneWindow:
    """Tests for prune_window function."""

    def test_drops_old_timestamps(self):
        window = (NOW - 4000, NOW - 3000, NOW - 10)
        assert prune_window(window, NOW, HOUR_SECONDS) == (NOW - 3000, NOW - 10)

    def test_keeps_timestamp_exactly_at_cutoff(self):
        window = (NOW - HOUR_SECONDS,)
        assert prune_window(window, NOW, HOUR_SECONDS) == window

    def test_empty(self):
        assert prune_window((), NOW, HOUR_SECONDS) == ()

    def test_no_timestamp_older_than_duration_after_prune(self):
        window = tuple(NOW - i * 600 for i in range(20, -1, -1))
        pruned = prune_window(window, NOW, HOUR_SECONDS)
        assert all(NOW - t <= HOUR_SECONDS for t in pruned)


class TestCheckRateLimit:
    """Tests for check_rate_limit function."""

    def test_allows_first_request(self):
        assert check_rate_limit(RateLimitState(), NOW, CONFIG) == RateLimitStatus.ALLOWED

    def test_blocks_requests_closer_than_min_interval(self):
        state = record_request(RateLimitState(), NOW)

        result = check_rate_limit(state, NOW + 0.2, CONFIG)

        assert result == RateLimitStatus.EXCEEDED_PER_SECOND

    def test_allows_after_min_interval(self):
        state = record_request(RateLimitState(), NOW)

        result = check_rate_limit(state, NOW + 0.34, CONFIG)

        assert result == RateLimitStatus.ALLOWED

    def test_blocks_when_hourly_limit_reached(self):
        state = state_with(25, NOW - 1000)

        result = check_rate_limit(state, NOW, CONFIG)

        assert result == RateLimitStatus.EXCEEDED_PER_HOUR

    def test_allows_just_under_hourly_limit(self):
        state = state_with(24, NOW - 1000)
        assert check_rate_limit(state, NOW, CONFIG) == RateLimitStatus.ALLOWED

    def test_blocks_when_daily_limit_reached(self):
        config = RateLimitConfig(requests_per_hour=1000, requests_per_day=5)
        state = state_with(5, NOW - 1000)

        result = check_rate_limit(state, NOW, config)

        assert result == RateLimitStatus.EXCEEDED_PER_DAY

    def test_per_second_has_priority(self):
        """Per-second is reported even when hourly is also exceeded."""
        state = state_with(25, NOW - 24 * 10, spacing=10.0)

        result = check_rate_limit(state, NOW + 0.1, CONFIG)

        assert result == RateLimitStatus.EXCEEDED_PER_SECOND

    def test_hourly_has_priority_over_daily(self):
        config = RateLimitConfig(requests_per_hour=3, requests_per_day=3)
        state = state_with(3, NOW - 100)

        assert check_rate_limit(state, NOW, config) == RateLimitStatus.EXCEEDED_PER_HOUR


class TestRecordRequest:
    """Tests for record_request function."""

    def test_appends_to_both_windows(self):
        new_state = record_request(RateLimitState(), NOW)

        assert new_state.last_request_time == NOW
        assert new_state.hourly_requests == (NOW,)
        assert new_state.daily_requests == (NOW,)

    def test_does_not_modify_original_state(self):
        original = record_request(RateLimitState(), NOW)

        new_state = record_request(original, NOW + 1)

        assert original.hourly_requests == (NOW,)
        assert new_state.hourly_requests == (NOW, NOW + 1)
        assert new_state is not original


class TestHourlyWindowRecovery:
    """Hourly quota frees up as requests age out."""

    def test_recovers_after_oldest_request_ages_out(self):
        state = state_with(25, NOW, spacing=60.0)
        last = NOW + 24 * 60

        assert check_rate_limit(prune_state(state, last + 1, CONFIG), last + 1, CONFIG) == (
            RateLimitStatus.EXCEEDED_PER_HOUR
        )

        later = NOW + HOUR_SECONDS + 1
        pruned = prune_state(state, later, CONFIG)

        assert len(pruned.hourly_requests) == 24
        assert len(pruned.daily_requests) == 25
        assert check_rate_limit(pruned, later, CONFIG) == RateLimitStatus.ALLOWED


class TestGetUsage:
    """Tests for get_usage function."""

    def test_reports_counts_and_limits(self):
        usage = get_usage(state_with(3, NOW), CONFIG)

        assert usage.hourly_count == 3
        assert usage.hourly_limit == 25
        assert usage.daily_count == 3
        assert usage.daily_limit == 500
