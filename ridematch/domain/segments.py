"""Extraction of the part of a driver's route a passenger travels."""

from __future__ import annotations

from typing import Sequence

from .distance import path_length_meters
from .entities import GeoPoint, MatchAnchor


def extract_segment(
    route_points: Sequence[GeoPoint],
    origin_anchor: MatchAnchor,
    destination_anchor: MatchAnchor,
) -> tuple[tuple[GeoPoint, ...], float]:
    """
    Return the sub-route from the origin anchor to the destination anchor
    (both inclusive) and its cumulative length in metres.

    The length follows the route hop by hop, so a winding road is longer
    than the straight line between the anchors.
    """
    start = origin_anchor.route_index
    end = destination_anchor.route_index
    if start >= end:
        raise ValueError(
            f"origin index {start} must precede destination index {end}"
        )
    segment = tuple(route_points[start : end + 1])
    return segment, path_length_meters(segment)
