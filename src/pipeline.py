"""Alert Pipeline - Wires Functional Core and Imperative Shell.

This module coordinates a single alert fetch:
cache lookup, rate limiting, the remote call, range filtering,
deduplication, normalization and caching of the result.

One pipeline instance (with its RateLimiter and AlertCache) is meant to be
shared by all callers in a process. The remote call is made without
holding any lock.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

import requests

from src.core.alert import Alert, parse_raw_events, to_alert
from src.core.cache import make_location_key
from src.core.config import Config
from src.core.dedup import filter_relevant, make_alert_id, make_alert_key
from src.core.errors import (
    PipelineError,
    QuotaPeriod,
    classify_http_status,
    format_error_message,
    no_alerts_in_range,
    quota_exceeded,
)
from src.core.rate_limit import RateLimitStatus
from src.shell.alert_cache import AlertCache
from src.shell.rate_limiter import RateLimiter
from src.shell.tomorrow_client import TomorrowClient


logger = logging.getLogger(__name__)

# One initial attempt plus one retry after a per-second limit
MAX_ATTEMPTS = 2


def wait_for_retry(delay: float, cancel_event: threading.Event | None) -> bool:
    """Block for delay seconds, waking early if cancel_event is set.

    Returns:
        True if the caller cancelled during the wait
    """
    if cancel_event is None:
        time.sleep(delay)
        return False
    return cancel_event.wait(delay)


class AlertSource(Protocol):
    """Remote capability that returns raw alert events for a location."""

    def fetch_raw_alerts(self, location_key: str, api_key: str) -> dict[str, Any]:
        ...


@dataclass
class FetchResult:
    """Result of a fetch_alerts call.

    Attributes:
        alerts: Alerts within range, deduplicated, in upstream order
        error: Classified failure (None on success)
        notice: Informational condition on success (e.g., nothing in range)
        from_cache: True if served from the cache
        cancelled: True if the caller cancelled before the result was ready
    """
    alerts: list[Alert] = field(default_factory=list)
    error: PipelineError | None = None
    notice: PipelineError | None = None
    from_cache: bool = False
    cancelled: bool = False

    @property
    def success(self) -> bool:
        """Returns True if no error occurred."""
        return self.error is None

    @property
    def message(self) -> str | None:
        """User-facing text for the error or notice, if any."""
        if self.error is not None:
            return format_error_message(self.error)
        if self.notice is not None:
            return format_error_message(self.notice)
        return None


class AlertPipeline:
    """Fetches, filters and caches weather alerts for a location.

    This class wires together:
    - AlertCache (time-boxed memoization per location)
    - RateLimiter (shared API quota)
    - Tomorrow.io client (remote events)
    - Core functions (parsing, range filtering, deduplication)
    """

    def __init__(
        self,
        config: Config,
        rate_limiter: RateLimiter | None = None,
        cache: AlertCache | None = None,
        client: AlertSource | None = None,
        wait: Callable[[float, threading.Event | None], bool] = wait_for_retry,
    ) -> None:
        """Initialize pipeline with configuration.

        Args:
            config: Application configuration
            rate_limiter: Shared rate limiter (created if not provided)
            cache: Shared alert cache (created if not provided)
            client: Remote alert source (Tomorrow.io client if not provided)
            wait: Blocks for the retry delay; returns True if cancelled
        """
        self.config = config
        self.rate_limiter = (
            rate_limiter if rate_limiter is not None else RateLimiter(config.rate_limit)
        )
        self.cache = (
            cache if cache is not None else AlertCache(ttl_seconds=config.cache_ttl_seconds)
        )
        self.client = client if client is not None else TomorrowClient(
            base_url=config.base_url,
            timeout=config.request_timeout_seconds,
            insights=config.insights,
        )
        self._wait = wait

    def _wait_before_retry(self, cancel_event: threading.Event | None) -> bool:
        """Wait the retry delay.

        Returns:
            True if the caller cancelled during the wait
        """
        return self._wait(self.config.retry_delay_seconds, cancel_event)

    def _select_alerts(
        self,
        response: dict[str, Any],
        latitude: float,
        longitude: float,
        radius_km: float,
    ) -> list[Alert]:
        """Turn a raw API response into in-range, unique alerts.

        Args:
            response: Raw JSON from the alert source
            latitude: Center latitude
            longitude: Center longitude
            radius_km: Search radius

        Returns:
            Normalized alerts in upstream order
        """
        events = parse_raw_events(response)
        relevant = filter_relevant(events, latitude, longitude, radius_km)

        now = datetime.now(timezone.utc)
        alerts = []
        for event in relevant:
            alert = to_alert(event, make_alert_id(make_alert_key(event)), now)
            if alert is None:
                logger.debug("Dropping event without a usable title")
                continue
            alerts.append(alert)

        logger.info(
            "Kept %d of %d events within %.1fkm (%d out of range or duplicate, %d without a title)",
            len(alerts),
            len(events),
            radius_km,
            len(events) - len(relevant),
            len(relevant) - len(alerts),
        )

        return alerts

    def _fetch_remote(
        self,
        location_key: str,
        latitude: float,
        longitude: float,
        radius_km: float,
    ) -> FetchResult:
        """Call the alert source and store the filtered result.

        The request must already be recorded with the rate limiter.
        """
        try:
            response = self.client.fetch_raw_alerts(location_key, self.config.api_key)
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            error = classify_http_status(status_code, str(e))
            logger.error(
                "Alert fetch failed for %s: %s (HTTP %s)",
                location_key,
                error.kind.value,
                status_code,
            )
            return FetchResult(error=error)
        except requests.RequestException as e:
            logger.error("Alert fetch failed for %s: %s", location_key, e)
            return FetchResult(error=classify_http_status(None, str(e)))

        alerts = self._select_alerts(response, latitude, longitude, radius_km)
        self.cache.put(location_key, alerts)

        if not alerts:
            return FetchResult(alerts=[], notice=no_alerts_in_range(radius_km))

        return FetchResult(alerts=alerts)

    def fetch_alerts(
        self,
        latitude: float,
        longitude: float,
        radius_km: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> FetchResult:
        """Fetch weather alerts near a location.

        This is the main entry point that:
        1. Serves a fresh cached result for the location, if any
        2. Checks and records the API quota
        3. Fetches events from the remote source
        4. Keeps events in range, dropping duplicates and invalid records
        5. Caches and returns the alerts

        A per-second quota hit waits retry_delay_seconds and tries once
        more. Hourly and daily quota hits return immediately.

        Setting cancel_event marks the result as cancelled but does not
        undo a recorded request or a cache write.

        Args:
            latitude: Center latitude
            longitude: Center longitude
            radius_km: Search radius (config default if None)
            cancel_event: Set by the caller to abandon the fetch

        Returns:
            FetchResult with alerts or a classified error
        """
        if radius_km is None:
            radius_km = self.config.default_radius_km

        location_key = make_location_key(latitude, longitude)
        result = FetchResult(error=quota_exceeded(QuotaPeriod.SECOND))

        for attempt in range(MAX_ATTEMPTS):
            cached = self.cache.get(location_key)
            if cached is not None:
                logger.info("Cache hit for %s (%d alerts)", location_key, len(cached))
                result = FetchResult(alerts=list(cached), from_cache=True)
                if not cached:
                    result.notice = no_alerts_in_range(radius_km)
                break

            status = self.rate_limiter.try_acquire()

            if status == RateLimitStatus.ALLOWED:
                result = self._fetch_remote(location_key, latitude, longitude, radius_km)
                break

            if status == RateLimitStatus.EXCEEDED_PER_HOUR:
                logger.warning("Hourly API quota exhausted")
                result = FetchResult(error=quota_exceeded(QuotaPeriod.HOURLY))
                break

            if status == RateLimitStatus.EXCEEDED_PER_DAY:
                logger.warning("Daily API quota exhausted")
                result = FetchResult(error=quota_exceeded(QuotaPeriod.DAILY))
                break

            # Per-second limit: wait and retry once
            if attempt + 1 < MAX_ATTEMPTS:
                logger.info(
                    "Per-second limit hit for %s, retrying in %.1fs",
                    location_key,
                    self.config.retry_delay_seconds,
                )
                if self._wait_before_retry(cancel_event):
                    logger.info("Fetch for %s cancelled during retry wait", location_key)
                    result.cancelled = True
                    return result
            else:
                logger.warning("Per-second limit still exceeded for %s after retry", location_key)

        if cancel_event is not None and cancel_event.is_set():
            result.cancelled = True

        return result
