"""
Candidate classification
========================

Splits candidate rides into two tiers:

* **connected** -- the route carries the passenger from origin to
  destination (both anchors within tolerance, origin before destination).
  Each gets its segment fare and a match quality for ranking.
* **other** -- no valid route match.  Kept, not discarded: callers may
  surface them as fallback results (e.g. same cities, no route data).

Every input candidate appears exactly once in the output.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from .entities import GeoPoint, RideOffer, SearchCandidate, SearchError
from .enums import MatchType, SearchErrorKind
from .errors import DecodeError, InvalidRouteError, SearchCancelled
from .matching import match_quality, match_route
from .polyline import route_points
from .pricing import compute_segment_fare

logger = logging.getLogger(__name__)


def _other(offer: RideOffer) -> SearchCandidate:
    return SearchCandidate(
        ride_id=offer.ride_id,
        route=offer.route,
        match_type=MatchType.OTHER,
        offer=offer,
    )


def classify_one(
    offer: RideOffer,
    origin: GeoPoint,
    destination: GeoPoint,
    tolerance_meters: float,
    errors: Optional[list[SearchError]] = None,
    precision: int = 5,
) -> SearchCandidate:
    """Classify a single candidate.  Candidate-level errors are contained."""
    route = offer.route
    if not route.has_route_data:
        return _other(offer)

    try:
        points = route_points(route, precision)
        route_match = match_route(origin, destination, points, tolerance_meters)
    except (DecodeError, InvalidRouteError) as exc:
        kind = (
            SearchErrorKind.DECODE
            if isinstance(exc, DecodeError)
            else SearchErrorKind.INVALID_ROUTE
        )
        logger.warning("Ride %s: unusable route (%s)", offer.ride_id, exc)
        if errors is not None:
            errors.append(SearchError(offer.ride_id, kind, str(exc)))
        return _other(offer)

    if route_match is None:
        return _other(offer)

    try:
        fare = compute_segment_fare(route, route_match)
    except InvalidRouteError as exc:
        # Geometry matched but the fare cannot be computed: fall back to
        # the "other" tier with no fare.
        logger.warning("Ride %s: no segment fare (%s)", offer.ride_id, exc)
        if errors is not None:
            errors.append(
                SearchError(offer.ride_id, SearchErrorKind.INVALID_ROUTE, str(exc))
            )
        return _other(offer)

    return SearchCandidate(
        ride_id=offer.ride_id,
        route=route,
        match_type=MatchType.CONNECTED,
        match_quality=match_quality(route_match, tolerance_meters),
        route_match=route_match,
        segment_fare=fare,
        offer=offer,
    )


def classify(
    offers: Sequence[RideOffer],
    origin: GeoPoint,
    destination: GeoPoint,
    tolerance_meters: float,
    *,
    errors: Optional[list[SearchError]] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
    precision: int = 5,
) -> list[SearchCandidate]:
    """
    Classify every offer and order the result.

    Order: connected by match quality (desc), then combined anchor
    distance (asc), then input order; other candidates follow in input
    order.

    *should_cancel* is polled before each candidate; when it returns true
    ``SearchCancelled`` is raised and nothing partial is returned.

    Complexity: O(N x M) for N offers of up to M route points.
    """
    connected: list[tuple[int, SearchCandidate]] = []
    other: list[SearchCandidate] = []

    for position, offer in enumerate(offers):
        if should_cancel is not None and should_cancel():
            raise SearchCancelled(
                f"cancelled after {position} of {len(offers)} candidates"
            )
        candidate = classify_one(
            offer, origin, destination, tolerance_meters, errors, precision
        )
        if candidate.is_connected:
            connected.append((position, candidate))
        else:
            other.append(candidate)

    connected.sort(
        key=lambda item: (
            -item[1].match_quality,
            item[1].route_match.combined_anchor_distance,
            item[0],
        )
    )
    return [c for _, c in connected] + other
