"""
Encoded polyline codec
======================

The compact route format used by routing engines (Google, OSRM, ORS).
Encoding and decoding are done by the ``polyline`` package; this module
maps its tuples to ``GeoPoint`` and turns malformed input into
``DecodeError``.

Valid strings only use the characters ``?`` .. ``~`` (chunk value plus
63).  The library does not check that, so it is checked here first.

Complexity: O(n) in the length of the string / number of points.
"""

from __future__ import annotations

from typing import Sequence

import polyline as polyline_codec

from .entities import GeoPoint, Route
from .errors import DecodeError, InvalidRouteError

_MIN_CHAR = "?"
_MAX_CHAR = "~"


def _check_precision(precision: int) -> None:
    if not isinstance(precision, int) or precision < 0:
        raise ValueError(f"precision must be a non-negative integer, got {precision!r}")


def decode(encoded: str, precision: int = 5) -> list[GeoPoint]:
    """Decode *encoded* into an ordered list of points.

    Raises ``DecodeError`` for characters outside the alphabet, an
    unterminated value or a latitude without its longitude.
    """
    _check_precision(precision)
    for index, char in enumerate(encoded):
        if not _MIN_CHAR <= char <= _MAX_CHAR:
            raise DecodeError(f"Invalid character {char!r} at position {index}")

    try:
        pairs = polyline_codec.decode(encoded, precision)
    except (IndexError, ValueError) as exc:
        raise DecodeError(
            f"Malformed polyline of length {len(encoded)}: truncated or unterminated value"
        ) from exc
    return [GeoPoint(lat, lng) for lat, lng in pairs]


def encode(points: Sequence[GeoPoint], precision: int = 5) -> str:
    """Encode *points*; ``decode(encode(p))`` returns *p* rounded to precision."""
    _check_precision(precision)
    return polyline_codec.encode([(p.lat, p.lng) for p in points], precision)


def route_points(route: Route, precision: int = 5) -> tuple[GeoPoint, ...]:
    """
    Coordinates of *route* in travel order, decoding the polyline when the
    route was not handed over pre-decoded.

    Raises ``DecodeError`` for a malformed polyline and ``InvalidRouteError``
    when the route has no route data or fewer than two points.
    """
    if route.coordinates:
        points = tuple(route.coordinates)
    elif route.encoded_polyline:
        points = tuple(decode(route.encoded_polyline, precision))
    else:
        raise InvalidRouteError("route has no coordinates and no polyline")
    if len(points) < 2:
        raise InvalidRouteError(f"route needs at least 2 points, got {len(points)}")
    return points
