"""Weather alert data models and parsing - Pure functions.

This module handles parsing Tomorrow.io event payloads into typed objects.
Geometry is resolved into a tagged union once, at parse time, so nothing
downstream needs to inspect loosely-typed coordinate arrays.
All functions are pure with no side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union


class Severity(Enum):
    """Alert severity as reported by the upstream API."""
    MINOR = "Minor"
    MODERATE = "Moderate"
    SEVERE = "Severe"
    EXTREME = "Extreme"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """Parse a severity string case-insensitively.

        Unrecognised or missing values map to UNKNOWN.
        """
        if not isinstance(value, str):
            return cls.UNKNOWN
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        return cls.UNKNOWN


@dataclass(frozen=True)
class PointGeometry:
    """A single location.

    Attributes:
        latitude: Point latitude
        longitude: Point longitude
    """
    latitude: float
    longitude: float


@dataclass(frozen=True)
class PolygonGeometry:
    """An area described by its outer ring.

    Attributes:
        ring: Vertices as (longitude, latitude) pairs, GeoJSON order
    """
    ring: tuple[tuple[float, float], ...]


Geometry = Union[PointGeometry, PolygonGeometry]


@dataclass(frozen=True)
class RawAlertEvent:
    """Upstream event before range filtering and normalization.

    Attributes:
        title: Event title (e.g., "Flood Warning")
        description: Free-text description
        severity: Severity string as sent by the API
        start_time: ISO-8601 start time string as sent by the API
        end_time: ISO-8601 end time string as sent by the API
        geometry: Parsed geometry, None if missing or unsupported
        insight: Tomorrow.io insight category (e.g., "floods")
    """
    title: str | None
    description: str
    severity: str
    start_time: str
    end_time: str
    geometry: Geometry | None = None
    insight: str = ""


@dataclass(frozen=True)
class Alert:
    """Immutable normalized weather alert.

    Attributes:
        id: Identifier derived from the alert's identity key
        title: Event title
        description: Free-text description
        severity: Parsed severity
        start_time: Start time (UTC)
        end_time: End time (UTC)
        geometry: Affected location or area
        insight: Tomorrow.io insight category
    """
    id: str
    title: str
    description: str
    severity: Severity
    start_time: datetime
    end_time: datetime
    geometry: Geometry | None = None
    insight: str = ""


def parse_iso_time(value: Any, fallback: datetime) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Pure function: returns ``fallback`` when the value cannot be parsed.

    Args:
        value: Timestamp string (e.g., "2024-05-01T12:00:00Z")
        fallback: Value to return on parse failure

    Returns:
        Parsed datetime in UTC, or fallback
    """
    if not isinstance(value, str) or not value:
        return fallback

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return fallback

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_position(position: Any) -> tuple[float, float]:
    """Parse a GeoJSON position into a (longitude, latitude) pair."""
    if not isinstance(position, (list, tuple)) or len(position) < 2:
        raise ValueError(f"Invalid position: {position!r}")
    return (float(position[0]), float(position[1]))


def parse_geometry(location: Any) -> Geometry | None:
    """Parse a GeoJSON-style location into a typed geometry.

    Pure function.

    Supports ``Point`` (coordinates ``[lon, lat]``) and ``Polygon``
    (first ring of ``[[[lon, lat], ...], ...]``). Any other type or a
    malformed payload returns None.

    Args:
        location: The ``eventValues.location`` dict from the API

    Returns:
        PointGeometry, PolygonGeometry, or None
    """
    if not isinstance(location, dict):
        return None

    geometry_type = location.get("type")
    coordinates = location.get("coordinates")

    try:
        if geometry_type == "Point":
            lon, lat = _parse_position(coordinates)
            return PointGeometry(latitude=lat, longitude=lon)

        if geometry_type == "Polygon":
            if not isinstance(coordinates, (list, tuple)) or not coordinates:
                return None
            outer_ring = coordinates[0]
            if not isinstance(outer_ring, (list, tuple)):
                return None
            return PolygonGeometry(
                ring=tuple(_parse_position(p) for p in outer_ring),
            )
    except (TypeError, ValueError):
        return None

    return None


def parse_raw_event(event: Any) -> RawAlertEvent | None:
    """Parse a single Tomorrow.io event into a RawAlertEvent.

    Pure function: takes raw dict, returns typed event or None if invalid.

    Args:
        event: Event dict from the ``data.events`` array

    Returns:
        RawAlertEvent or None if the payload is not an object
    """
    if not isinstance(event, dict):
        return None

    values = event.get("eventValues")
    if not isinstance(values, dict):
        values = {}

    title = values.get("title")

    return RawAlertEvent(
        title=title if isinstance(title, str) else None,
        description=str(values.get("description") or ""),
        severity=str(event.get("severity") or ""),
        start_time=str(event.get("startTime") or ""),
        end_time=str(event.get("endTime") or ""),
        geometry=parse_geometry(values.get("location")),
        insight=str(event.get("insight") or ""),
    )


def parse_raw_events(response: Any) -> list[RawAlertEvent]:
    """Parse a Tomorrow.io events response into raw events.

    Pure function: skips invalid entries, keeps upstream order.

    Args:
        response: Full JSON response (``{"data": {"events": [...]}}``)

    Returns:
        List of RawAlertEvent objects
    """
    if not isinstance(response, dict):
        return []

    data = response.get("data")
    if not isinstance(data, dict):
        return []

    events = data.get("events")
    if not isinstance(events, list):
        return []

    parsed = []
    for event in events:
        raw = parse_raw_event(event)
        if raw is not None:
            parsed.append(raw)

    return parsed


def to_alert(
    event: RawAlertEvent,
    alert_id: str,
    now: datetime | None = None,
) -> Alert | None:
    """Convert a raw event into a normalized Alert.

    Pure function. Unparseable timestamps fall back to ``now``.

    Args:
        event: Raw event that passed range filtering
        alert_id: Identifier to assign
        now: Fallback time for unparseable timestamps (defaults to current UTC)

    Returns:
        Alert, or None if the event has no usable title
    """
    if event.title is None or not event.title.strip():
        return None

    fallback = now or datetime.now(timezone.utc)

    return Alert(
        id=alert_id,
        title=event.title,
        description=event.description,
        severity=Severity.parse(event.severity),
        start_time=parse_iso_time(event.start_time, fallback),
        end_time=parse_iso_time(event.end_time, fallback),
        geometry=event.geometry,
        insight=event.insight,
    )
