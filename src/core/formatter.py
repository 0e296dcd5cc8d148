"""Alert formatting - Pure functions.

This module turns alerts into JSON-ready dicts and human-readable text.
All functions are pure with no side effects.
"""

from typing import Any

from src.core.alert import Alert, Geometry, PointGeometry, PolygonGeometry, Severity


# Most severe first
SEVERITY_ORDER = {
    Severity.EXTREME: 0,
    Severity.SEVERE: 1,
    Severity.MODERATE: 2,
    Severity.MINOR: 3,
    Severity.UNKNOWN: 4,
}


def get_severity_emoji(severity: Severity) -> str:
    """Get an emoji representing alert severity.

    Pure function.
    """
    if severity == Severity.EXTREME:
        return "🚨"
    elif severity == Severity.SEVERE:
        return "⚠️"
    elif severity == Severity.MODERATE:
        return "🔶"
    elif severity == Severity.MINOR:
        return "🔸"
    else:
        return "🔹"


def sort_by_severity(alerts: list[Alert]) -> list[Alert]:
    """Sort alerts most severe first, then by start time.

    Pure function. Used for display only.
    """
    return sorted(
        alerts,
        key=lambda a: (SEVERITY_ORDER[a.severity], a.start_time),
    )


def geometry_to_dict(geometry: Geometry | None) -> dict[str, Any] | None:
    """Convert a geometry back to GeoJSON form.

    Pure function.
    """
    if isinstance(geometry, PointGeometry):
        return {
            "type": "Point",
            "coordinates": [geometry.longitude, geometry.latitude],
        }
    if isinstance(geometry, PolygonGeometry):
        return {
            "type": "Polygon",
            "coordinates": [[list(vertex) for vertex in geometry.ring]],
        }
    return None


def alert_to_dict(alert: Alert) -> dict[str, Any]:
    """Convert an Alert to a JSON-serializable dict.

    Pure function.
    """
    return {
        "id": alert.id,
        "title": alert.title,
        "description": alert.description,
        "severity": alert.severity.value,
        "start_time": alert.start_time.isoformat(),
        "end_time": alert.end_time.isoformat(),
        "insight": alert.insight,
        "geometry": geometry_to_dict(alert.geometry),
    }


def format_alert_summary(alert: Alert) -> str:
    """Format a one-line summary of an alert.

    Pure function.

    Args:
        alert: Alert to summarize

    Returns:
        One-line summary string
    """
    start = alert.start_time.strftime("%Y-%m-%d %H:%M UTC")
    end = alert.end_time.strftime("%Y-%m-%d %H:%M UTC")
    return (
        f"{get_severity_emoji(alert.severity)} [{alert.severity.value}] "
        f"{alert.title} ({start} - {end})"
    )


def format_alert_list(alerts: list[Alert], radius_km: float) -> str:
    """Format a multi-line summary of alerts, most severe first.

    Pure function.

    Args:
        alerts: Alerts to list
        radius_km: Search radius, for the header line

    Returns:
        Summary text
    """
    if not alerts:
        return f"No active alerts within {radius_km}km of this location"

    noun = "alert" if len(alerts) == 1 else "alerts"
    lines = [f"{len(alerts)} active {noun} within {radius_km}km:"]
    for alert in sort_by_severity(alerts):
        lines.append(f"  {format_alert_summary(alert)}")

    return "\n".join(lines)
