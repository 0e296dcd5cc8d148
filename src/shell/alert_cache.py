"""Alert Cache - Imperative Shell.

In-memory, per-location memoization of fetched alerts. Entries live for
the process lifetime and are judged for expiry when read.
"""

import logging
import threading
import time
from typing import Callable, Sequence

from src.core.alert import Alert
from src.core.cache import CACHE_DURATION_SECONDS, CacheEntry, is_expired


logger = logging.getLogger(__name__)


class AlertCache:
    """Thread-safe, time-boxed cache of alert lists keyed by location."""

    def __init__(
        self,
        ttl_seconds: float = CACHE_DURATION_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize alert cache.

        Args:
            ttl_seconds: How long an entry is served after it is stored
            clock: Returns the current time in epoch seconds
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}

    def get(self, location_key: str) -> tuple[Alert, ...] | None:
        """Get cached alerts for a location.

        Args:
            location_key: Canonical "lat,lon" key

        Returns:
            Cached alerts, or None if missing or expired
        """
        with self._lock:
            entry = self._entries.get(location_key)

        if entry is None:
            return None

        if is_expired(entry, self._clock(), self.ttl_seconds):
            logger.debug("Cache entry expired for %s", location_key)
            return None

        return entry.alerts

    def put(self, location_key: str, alerts: Sequence[Alert]) -> None:
        """Store alerts for a location, replacing any existing entry.

        Args:
            location_key: Canonical "lat,lon" key
            alerts: Alerts to cache
        """
        entry = CacheEntry(
            location_key=location_key,
            alerts=tuple(alerts),
            stored_at=self._clock(),
        )
        with self._lock:
            self._entries[location_key] = entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
