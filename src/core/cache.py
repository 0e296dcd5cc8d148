"""Alert cache entries and expiry - Pure functions.

Fetched alert lists are memoized per location for a fixed duration.
Expiry is judged when an entry is read; entries are never evicted.
The lock-protected store lives in src.shell.alert_cache.
"""

from dataclasses import dataclass

from src.core.alert import Alert


# Cached alert lists are served for 30 minutes
CACHE_DURATION_SECONDS = 30 * 60


@dataclass(frozen=True)
class CacheEntry:
    """A cached alert list for one location.

    Attributes:
        location_key: Canonical "lat,lon" key
        alerts: Alerts as returned by the pipeline
        stored_at: Epoch seconds when the entry was written
    """
    location_key: str
    alerts: tuple[Alert, ...]
    stored_at: float


def make_location_key(latitude: float, longitude: float) -> str:
    """Build the canonical cache and API location key.

    Pure function.

    Example:
        >>> make_location_key(37.77, -122.42)
        '37.77,-122.42'
    """
    return f"{latitude},{longitude}"


def is_expired(
    entry: CacheEntry,
    now: float,
    ttl_seconds: float = CACHE_DURATION_SECONDS,
) -> bool:
    """Check whether a cache entry is older than the TTL.

    Pure function. An entry exactly ttl_seconds old is still valid.
    """
    return now - entry.stored_at > ttl_seconds
