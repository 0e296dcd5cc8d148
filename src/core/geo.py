"""Geographic calculations - Pure functions.

This module provides distance and range checks for alert geometries.
All functions are pure with no side effects.

Polygon range checks sample the polygon's vertices only. A large polygon
whose interior covers the center but whose vertices are all far away is
reported as out of range.
"""

import math
from typing import Sequence

from src.core.alert import Geometry, PointGeometry, PolygonGeometry


# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    # Convert to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    # Rounding can push a just past 1.0 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def is_point_in_range(
    center_lat: float,
    center_lon: float,
    target_lat: float,
    target_lon: float,
    radius_km: float,
) -> bool:
    """Check if a point is within a radius of a center point.

    Pure function. The boundary is inclusive.

    Returns:
        True if the distance is at most radius_km
    """
    distance = calculate_distance(center_lat, center_lon, target_lat, target_lon)
    return distance <= radius_km


def is_polygon_in_range(
    center_lat: float,
    center_lon: float,
    ring: Sequence[tuple[float, float]],
    radius_km: float,
) -> bool:
    """Check if any vertex of a polygon ring is within a radius.

    Pure function.

    Args:
        center_lat: Center point latitude
        center_lon: Center point longitude
        ring: Polygon vertices as (longitude, latitude) pairs
        radius_km: Radius in kilometers

    Returns:
        True if at least one vertex is in range (False for an empty ring)
    """
    return any(
        is_point_in_range(center_lat, center_lon, lat, lon, radius_km)
        for lon, lat in ring
    )


def is_geometry_in_range(
    center_lat: float,
    center_lon: float,
    geometry: Geometry | None,
    radius_km: float,
) -> bool:
    """Check if an alert geometry is within a radius of a center point.

    Pure function. Alerts without a usable geometry are never in range.
    """
    if isinstance(geometry, PointGeometry):
        return is_point_in_range(
            center_lat,
            center_lon,
            geometry.latitude,
            geometry.longitude,
            radius_km,
        )

    if isinstance(geometry, PolygonGeometry):
        return is_polygon_in_range(center_lat, center_lon, geometry.ring, radius_km)

    return False
