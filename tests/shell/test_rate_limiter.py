"""Tests for the thread-safe RateLimiter."""

import threading

import pytest

from src.core.rate_limit import RateLimitConfig, RateLimitStatus
from src.shell.rate_limiter import RateLimiter


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(RateLimitConfig(), clock=clock)


class TestRateLimiter:
    """Tests for RateLimiter."""

    def test_first_request_allowed(self, limiter):
        assert limiter.check_rate_limit() == RateLimitStatus.ALLOWED

    def test_check_does_not_record(self, limiter):
        limiter.check_rate_limit()
        limiter.check_rate_limit()

        assert limiter.usage().hourly_count == 0

    def test_back_to_back_requests_hit_per_second_limit(self, limiter, clock):
        limiter.record_request()
        clock.advance(0.1)

        assert limiter.check_rate_limit() == RateLimitStatus.EXCEEDED_PER_SECOND

    def test_allowed_after_min_interval(self, limiter, clock):
        limiter.record_request()
        clock.advance(1.0)

        assert limiter.check_rate_limit() == RateLimitStatus.ALLOWED

    def test_hourly_limit(self, limiter, clock):
        """25 spaced requests exhaust the hourly quota."""
        for _ in range(25):
            assert limiter.try_acquire() == RateLimitStatus.ALLOWED
            clock.advance(2)

        assert limiter.check_rate_limit() == RateLimitStatus.EXCEEDED_PER_HOUR

    def test_hourly_limit_recovers_after_an_hour(self, limiter, clock):
        for _ in range(25):
            limiter.record_request()
            clock.advance(2)

        clock.advance(3600)

        assert limiter.check_rate_limit() == RateLimitStatus.ALLOWED
        assert limiter.usage().hourly_count == 0

    def test_daily_limit(self, clock):
        limiter = RateLimiter(
            RateLimitConfig(requests_per_hour=1000, requests_per_day=5),
            clock=clock,
        )
        for _ in range(5):
            limiter.record_request()
            clock.advance(10)

        assert limiter.check_rate_limit() == RateLimitStatus.EXCEEDED_PER_DAY

    def test_try_acquire_records_only_when_allowed(self, limiter, clock):
        assert limiter.try_acquire() == RateLimitStatus.ALLOWED
        assert limiter.try_acquire() == RateLimitStatus.EXCEEDED_PER_SECOND

        assert limiter.usage().hourly_count == 1

    def test_usage_reports_limits(self, limiter):
        limiter.record_request()

        usage = limiter.usage()

        assert usage.hourly_count == 1
        assert usage.hourly_limit == 25
        assert usage.daily_count == 1
        assert usage.daily_limit == 500

    def test_concurrent_try_acquire_admits_one(self, limiter):
        """Only one of many simultaneous callers gets through per instant."""
        results = []
        results_lock = threading.Lock()
        start = threading.Barrier(10)

        def worker():
            start.wait()
            status = limiter.try_acquire()
            with results_lock:
                results.append(status)

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(RateLimitStatus.ALLOWED) == 1
        assert results.count(RateLimitStatus.EXCEEDED_PER_SECOND) == 9
        assert limiter.usage().hourly_count == 1
