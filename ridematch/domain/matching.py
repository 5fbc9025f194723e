"""
Route Matching Algorithm
========================

Decides whether a driver's route carries a passenger from *origin* to
*destination*.

1. **Anchoring** -- for each query point, scan every route point and keep
   the nearest one within ``tolerance_meters``.  Ties go to the lowest
   index, so a route passing the same place twice (loop, u-turn) always
   anchors on the first pass.
2. **Ordering** -- the origin anchor must come strictly before the
   destination anchor in travel order.  Equal or inverted indices mean
   the driver is not heading the passenger's way: the match is rejected.
3. **Segment** -- the route between the anchors and its path length
   (see ``segments.extract_segment``).

Complexity
----------
Let M = points on the route.

* Anchoring:  O(M) per query point, two query points per route
* Segment:    O(M) worst case
* Per search: O(N x M) over N candidate routes
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from .distance import distance_meters
from .entities import GeoPoint, MatchAnchor, Route, RouteMatch
from .polyline import route_points as _route_points
from .segments import extract_segment

DEFAULT_TOLERANCE_METERS = 3000.0


def find_anchor(
    query: GeoPoint,
    route_points: Sequence[GeoPoint],
    tolerance_meters: float,
) -> Optional[MatchAnchor]:
    """Nearest route point to *query* within tolerance, or ``None``."""
    best: Optional[MatchAnchor] = None
    for index, point in enumerate(route_points):
        d = distance_meters(query, point)
        if d > tolerance_meters:
            continue
        # strict "<" keeps the earliest point on ties
        if best is None or d < best.distance_meters:
            best = MatchAnchor(point=point, distance_meters=d, route_index=index)
    return best


def match_route(
    origin: GeoPoint,
    destination: GeoPoint,
    route: Union[Route, Sequence[GeoPoint]],
    tolerance_meters: float = DEFAULT_TOLERANCE_METERS,
) -> Optional[RouteMatch]:
    """
    Match a passenger journey against one route.

    *route* is either a ``Route`` (decoded on demand) or its points.

    Returns ``None`` when either point is out of tolerance or when the
    destination does not come after the origin along the route.
    """
    route_points = _route_points(route) if isinstance(route, Route) else route
    origin_anchor = find_anchor(origin, route_points, tolerance_meters)
    if origin_anchor is None:
        return None
    destination_anchor = find_anchor(destination, route_points, tolerance_meters)
    if destination_anchor is None:
        return None
    if origin_anchor.route_index >= destination_anchor.route_index:
        return None

    segment, length = extract_segment(
        route_points, origin_anchor, destination_anchor
    )
    return RouteMatch(
        origin_anchor=origin_anchor,
        destination_anchor=destination_anchor,
        segment=segment,
        segment_distance_meters=length,
    )


def match_quality(route_match: RouteMatch, tolerance_meters: float) -> float:
    """
    Ranking score in ``[0, 1]``: 1 when both anchors sit on the route,
    0 when both are at the tolerance limit.
    """
    if tolerance_meters <= 0:
        return 1.0
    raw = 1 - route_match.combined_anchor_distance / (2 * tolerance_meters)
    return min(1.0, max(0.0, raw))
