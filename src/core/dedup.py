"""Deduplication logic - Pure functions.

The upstream API may repeat an alert within one response, sometimes with
small differences in fields that do not affect identity. Two events are
the same alert when their identity key (title, start time, end time,
severity, geometry) matches exactly. All functions are pure with no side
effects.
"""

import hashlib
from typing import Iterable, NamedTuple

from src.core.alert import Geometry, RawAlertEvent
from src.core.geo import is_geometry_in_range


class AlertKey(NamedTuple):
    """Identity of an alert within one fetch batch."""
    title: str | None
    start_time: str
    end_time: str
    severity: str
    geometry: Geometry | None


def make_alert_key(event: RawAlertEvent) -> AlertKey:
    """Build the identity key for a raw event.

    Pure function.
    """
    return AlertKey(
        title=event.title,
        start_time=event.start_time,
        end_time=event.end_time,
        severity=event.severity,
        geometry=event.geometry,
    )


def make_alert_id(key: AlertKey) -> str:
    """Derive a stable identifier from an alert key.

    Pure function.

    Args:
        key: Alert identity key

    Returns:
        16-character hex digest
    """
    digest = hashlib.sha1(repr(tuple(key)).encode("utf-8"))
    return digest.hexdigest()[:16]


def dedupe(events: Iterable[RawAlertEvent]) -> list[RawAlertEvent]:
    """Keep the first occurrence of each alert key.

    Pure function.

    Args:
        events: Events in upstream order

    Returns:
        Events with duplicates removed, first occurrences in input order
    """
    seen: set[AlertKey] = set()
    unique = []

    for event in events:
        key = make_alert_key(event)
        if key in seen:
            continue
        seen.add(key)
        unique.append(event)

    return unique


def filter_relevant(
    events: Iterable[RawAlertEvent],
    center_lat: float,
    center_lon: float,
    radius_km: float,
) -> list[RawAlertEvent]:
    """Range-filter and deduplicate events in a single pass.

    Pure function. An event is kept iff its geometry is within radius_km
    of the center and its key has not been kept already.

    Args:
        events: Raw events in upstream order
        center_lat: Center point latitude
        center_lon: Center point longitude
        radius_km: Radius in kilometers

    Returns:
        Relevant, unique events in input order
    """
    seen: set[AlertKey] = set()
    relevant = []

    for event in events:
        if not is_geometry_in_range(center_lat, center_lon, event.geometry, radius_km):
            continue

        key = make_alert_key(event)
        if key in seen:
            continue

        seen.add(key)
        relevant.append(event)

    return relevant
