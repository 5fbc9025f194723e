"""
Search Orchestrator
===================

Entry point of the engine:

1. Resolve origin and destination text through the geocoding
   collaborator.  Failure aborts the search with ``GeocodeError``.
2. Load the candidate pool through the loading collaborator.
3. Decode every route once.  A malformed polyline excludes that ride and
   is reported in ``SearchResult.errors``; the other rides still match.
4. Classify (off the event loop, cooperative cancellation).
5. Apply post-filters.

Each collaborator is called exactly once per search and never retried;
callers wanting retries wrap the collaborator.  Collaborators may be plain
functions or coroutine functions.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import replace
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from .classifier import classify
from .entities import GeoPoint, RideOffer, SearchError, SearchQuery, SearchResult
from .enums import SearchErrorKind
from .errors import DecodeError, GeocodeError, InvalidRouteError, SearchCancelled
from .filters import apply_filters
from .matching import DEFAULT_TOLERANCE_METERS
from .polyline import route_points

logger = logging.getLogger(__name__)

ResolveLocation = Callable[[str], Union[GeoPoint, None, Awaitable[Optional[GeoPoint]]]]
LoadCandidates = Callable[[Any], Union[Sequence[RideOffer], Awaitable[Sequence[RideOffer]]]]


async def _call(fn: Callable, *args):
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def _resolve(text: str, resolve_location: ResolveLocation) -> GeoPoint:
    if not text or not text.strip():
        raise GeocodeError(text, "empty location")
    point = await _call(resolve_location, text)
    if point is None:
        raise GeocodeError(text)
    return point


def prepare_offers(
    offers: Sequence[RideOffer],
    errors: list[SearchError],
    precision: int = 5,
) -> list[RideOffer]:
    """
    Decode routes up front.  Rides whose route data is present but
    unusable are dropped and reported; rides without route data pass
    through untouched.
    """
    prepared: list[RideOffer] = []
    for offer in offers:
        route = offer.route
        if not route.has_route_data:
            prepared.append(offer)
            continue
        try:
            points = route_points(route, precision)
        except (DecodeError, InvalidRouteError) as exc:
            kind = (
                SearchErrorKind.DECODE
                if isinstance(exc, DecodeError)
                else SearchErrorKind.INVALID_ROUTE
            )
            logger.warning("Excluding ride %s: %s", offer.ride_id, exc)
            errors.append(SearchError(offer.ride_id, kind, str(exc)))
            continue
        prepared.append(_with_points(offer, points))
    return prepared


def _with_points(offer: RideOffer, points) -> RideOffer:
    if offer.route.coordinates:
        return offer
    return replace(offer, route=offer.route.with_coordinates(points))


async def search(
    query: SearchQuery,
    resolve_location: ResolveLocation,
    load_candidates: LoadCandidates,
    *,
    tolerance_meters: float = DEFAULT_TOLERANCE_METERS,
    precision: int = 5,
    cancel_event: Optional[asyncio.Event] = None,
) -> SearchResult:
    """Run one search.  Raises ``GeocodeError`` or ``SearchCancelled``."""
    origin = await _resolve(query.origin_text, resolve_location)
    destination = await _resolve(query.destination_text, resolve_location)
    logger.info(
        "Search %r (%.5f, %.5f) -> %r (%.5f, %.5f)",
        query.origin_text, origin.lat, origin.lng,
        query.destination_text, destination.lat, destination.lng,
    )

    offers = list(await _call(load_candidates, query.date))
    if cancel_event is not None and cancel_event.is_set():
        raise SearchCancelled("cancelled before classification")

    errors: list[SearchError] = []
    prepared = prepare_offers(offers, errors, precision)

    should_cancel = cancel_event.is_set if cancel_event is not None else None
    candidates = await asyncio.to_thread(
        classify,
        prepared,
        origin,
        destination,
        tolerance_meters,
        errors=errors,
        should_cancel=should_cancel,
        precision=precision,
    )

    filtered = apply_filters(
        candidates, query.filters, query.origin_text, query.destination_text
    )
    result = SearchResult(
        origin=origin, destination=destination, candidates=filtered, errors=errors
    )
    logger.info(
        "Search done: %d candidates, %d connected, %d other, %d errors",
        len(offers), len(result.connected), len(result.other), len(errors),
    )
    return result
