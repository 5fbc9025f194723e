"""
Distance calculation using the Haversine formula.

Route points come from a routing engine or from the straight-line
approximation below, so consecutive points are close together and the
great-circle distance between them is a good estimate of road distance.
Summing those hops gives the length of a route or of any sub-segment.

Complexity: O(1) per pair, O(n) per path.
"""

from __future__ import annotations

import math
from typing import Sequence

from .entities import GeoPoint

EARTH_RADIUS_METERS = 6_371_000.0


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Return the great-circle distance in **metres** between two points."""
    lat1_r, lat2_r = math.radians(a.lat), math.radians(b.lat)
    dlat = math.radians(b.lat - a.lat)
    dlng = math.radians(b.lng - a.lng)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(min(1.0, h)))


def path_length_meters(points: Sequence[GeoPoint]) -> float:
    """Cumulative length of a polyline, hop by hop."""
    total = 0.0
    for j in range(len(points) - 1):
        total += distance_meters(points[j], points[j + 1])
    return total


def interpolate_route(
    start: GeoPoint, end: GeoPoint, steps: int = 20
) -> list[GeoPoint]:
    """
    Straight-line route approximation with ``steps + 1`` evenly spaced
    points, start and end included.  Used when a ride is posted without
    a polyline from the routing engine.
    """
    if steps < 1:
        raise ValueError("steps must be at least 1")
    return [
        GeoPoint(
            start.lat + (end.lat - start.lat) * i / steps,
            start.lng + (end.lng - start.lng) * i / steps,
        )
        for i in range(steps + 1)
    ]
