"""Unit tests for distance, anchoring, ordering and segment extraction."""

import math

import pytest

from ridematch.domain.distance import (
    distance_meters,
    interpolate_route,
    path_length_meters,
)
from ridematch.domain.entities import GeoPoint, MatchAnchor, Route
from ridematch.domain.errors import InvalidRouteError
from ridematch.domain.matching import (
    DEFAULT_TOLERANCE_METERS,
    find_anchor,
    match_quality,
    match_route,
)
from ridematch.domain.polyline import encode
from ridematch.domain.segments import extract_segment
from tests.helpers import EQUATOR_ROUTE

ONE_DEGREE_AT_EQUATOR = 6_371_000 * math.pi / 180  # ~111 195 m


class TestHaversine:
    def test_same_point_is_zero(self):
        assert distance_meters(GeoPoint(19.0, 72.0), GeoPoint(19.0, 72.0)) == 0.0

    def test_known_distance(self):
        # Mumbai -> Pune, ~120 km as the crow flies
        d = distance_meters(GeoPoint(19.0760, 72.8777), GeoPoint(18.5204, 73.8567))
        assert 115_000 < d < 125_000

    def test_one_degree_of_longitude_on_equator(self):
        d = distance_meters(GeoPoint(0, 0), GeoPoint(0, 1))
        assert d == pytest.approx(ONE_DEGREE_AT_EQUATOR)

    def test_symmetric(self):
        a, b = GeoPoint(19.0, 72.0), GeoPoint(20.0, 73.0)
        assert abs(distance_meters(a, b) - distance_meters(b, a)) < 1e-6


class TestPathLength:
    def test_sums_hops(self):
        assert path_length_meters(EQUATOR_ROUTE) == pytest.approx(
            3 * ONE_DEGREE_AT_EQUATOR
        )

    def test_short_paths_are_zero(self):
        assert path_length_meters([]) == 0.0
        assert path_length_meters([GeoPoint(1, 1)]) == 0.0

    def test_detour_is_longer_than_straight_line(self):
        detour = [GeoPoint(0, 0), GeoPoint(1, 1), GeoPoint(0, 2)]
        assert path_length_meters(detour) > distance_meters(detour[0], detour[-1])


class TestInterpolateRoute:
    def test_endpoints_and_count(self):
        start, end = GeoPoint(19.0, 72.8), GeoPoint(18.5, 73.8)
        points = interpolate_route(start, end, steps=20)
        assert len(points) == 21
        assert points[0] == start
        assert points[-1].lat == pytest.approx(end.lat)
        assert points[-1].lng == pytest.approx(end.lng)

    def test_evenly_spaced(self):
        points = interpolate_route(GeoPoint(0, 0), GeoPoint(0, 4), steps=4)
        assert [p.lng for p in points] == [0, 1, 2, 3, 4]

    def test_rejects_zero_steps(self):
        with pytest.raises(ValueError):
            interpolate_route(GeoPoint(0, 0), GeoPoint(0, 1), steps=0)


class TestFindAnchor:
    def test_nearest_point_within_tolerance(self):
        anchor = find_anchor(GeoPoint(0, 1.0001), EQUATOR_ROUTE, 500)
        assert anchor is not None
        assert anchor.route_index == 1
        assert anchor.point == GeoPoint(0, 1)
        assert anchor.distance_meters == pytest.approx(11.12, abs=0.01)

    def test_none_when_out_of_tolerance(self):
        assert find_anchor(GeoPoint(10, 10), EQUATOR_ROUTE, 3000) is None

    def test_boundary_distance_is_accepted(self):
        query = GeoPoint(0, 1.0001)
        exact = distance_meters(query, GeoPoint(0, 1))
        anchor = find_anchor(query, EQUATOR_ROUTE, exact)
        assert anchor is not None
        assert anchor.distance_meters <= exact

    def test_tie_goes_to_lowest_index(self):
        # Query sits exactly half way between two route points
        route = [GeoPoint(0, 0), GeoPoint(0, 1)]
        anchor = find_anchor(GeoPoint(0, 0.5), route, 1_000_000)
        assert anchor.route_index == 0

    def test_repeated_point_anchors_on_first_pass(self):
        out_and_back = [GeoPoint(0, 0), GeoPoint(0, 1), GeoPoint(0, 0)]
        first = find_anchor(GeoPoint(0, 0), out_and_back, 100)
        second = find_anchor(GeoPoint(0, 0), out_and_back, 100)
        assert first.route_index == 0
        assert first == second

    def test_empty_route(self):
        assert find_anchor(GeoPoint(0, 0), [], 3000) is None


class TestMatchRoute:
    def test_exact_match_scenario(self):
        match = match_route(GeoPoint(0, 1.0001), GeoPoint(0, 2.0001), EQUATOR_ROUTE, 500)
        assert match is not None
        assert match.origin_anchor.route_index == 1
        assert match.destination_anchor.route_index == 2
        assert match.segment == (GeoPoint(0, 1), GeoPoint(0, 2))
        assert match.segment_distance_meters == pytest.approx(ONE_DEGREE_AT_EQUATOR)

    def test_reversed_direction_rejected(self):
        assert match_route(GeoPoint(0, 2.0001), GeoPoint(0, 1.0001), EQUATOR_ROUTE, 500) is None

    def test_out_of_tolerance_origin(self):
        assert match_route(GeoPoint(10, 10), GeoPoint(0, 2.0001), EQUATOR_ROUTE, 500) is None

    def test_out_of_tolerance_destination(self):
        assert match_route(GeoPoint(0, 1.0001), GeoPoint(10, 10), EQUATOR_ROUTE, 500) is None

    def test_same_anchor_rejected(self):
        """Origin and destination both snap to index 1: no journey to carry."""
        assert match_route(GeoPoint(0, 1.0001), GeoPoint(0, 0.9999), EQUATOR_ROUTE, 500) is None

    def test_segment_follows_the_route_not_the_straight_line(self):
        zigzag = [GeoPoint(0, 0), GeoPoint(0.5, 0.5), GeoPoint(0, 1)]
        match = match_route(GeoPoint(0, 0), GeoPoint(0, 1), zigzag, 100)
        assert match.segment == tuple(zigzag)
        assert match.segment_distance_meters == pytest.approx(path_length_meters(zigzag))
        assert match.segment_distance_meters > distance_meters(zigzag[0], zigzag[-1])

    def test_accepts_route_with_encoded_polyline(self):
        route = Route(encoded_polyline=encode(EQUATOR_ROUTE))
        match = match_route(GeoPoint(0, 1.0001), GeoPoint(0, 2.0001), route, 500)
        assert match.origin_anchor.route_index == 1
        assert match.destination_anchor.route_index == 2

    def test_route_without_data_is_invalid(self):
        with pytest.raises(InvalidRouteError):
            match_route(GeoPoint(0, 1), GeoPoint(0, 2), Route(), 500)

    def test_default_tolerance_is_three_km(self):
        assert DEFAULT_TOLERANCE_METERS == 3000
        # ~2.2 km off the route: inside the default tolerance
        assert match_route(GeoPoint(0.02, 1), GeoPoint(0.02, 2), EQUATOR_ROUTE) is not None
        # ~4.4 km off the route: outside it
        assert match_route(GeoPoint(0.04, 1), GeoPoint(0.04, 2), EQUATOR_ROUTE) is None

    def test_u_turn_route_uses_first_pass(self):
        """A there-and-back route: the return leg cannot be booked because
        ties anchor on the outbound pass."""
        there_and_back = [
            GeoPoint(0, 0), GeoPoint(0, 1), GeoPoint(0, 2), GeoPoint(0, 1), GeoPoint(0, 0),
        ]
        assert match_route(GeoPoint(0, 2.0001), GeoPoint(0, 1.0001), there_and_back, 500) is None
        assert match_route(GeoPoint(0, 1.0001), GeoPoint(0, 2.0001), there_and_back, 500) is not None

    def test_invariants_hold_over_a_grid_of_queries(self):
        tolerance = 20_000
        route = [GeoPoint(0.1 * (i % 3), i * 0.25) for i in range(13)]
        for olng in range(-1, 14):
            for dlng in range(-1, 14):
                origin = GeoPoint(0.05, olng * 0.25)
                destination = GeoPoint(0.05, dlng * 0.25)
                match = match_route(origin, destination, route, tolerance)
                if match is None:
                    continue
                assert match.origin_anchor.route_index < match.destination_anchor.route_index
                assert match.origin_anchor.distance_meters <= tolerance
                assert match.destination_anchor.distance_meters <= tolerance


class TestExtractSegment:
    def test_inclusive_slice(self):
        a = MatchAnchor(EQUATOR_ROUTE[0], 0.0, 0)
        b = MatchAnchor(EQUATOR_ROUTE[2], 0.0, 2)
        segment, length = extract_segment(EQUATOR_ROUTE, a, b)
        assert segment == EQUATOR_ROUTE[:3]
        assert length == pytest.approx(2 * ONE_DEGREE_AT_EQUATOR)

    def test_unordered_anchors_rejected(self):
        a = MatchAnchor(EQUATOR_ROUTE[2], 0.0, 2)
        b = MatchAnchor(EQUATOR_ROUTE[1], 0.0, 1)
        with pytest.raises(ValueError):
            extract_segment(EQUATOR_ROUTE, a, b)


class TestMatchQuality:
    def test_on_route_is_perfect(self):
        match = match_route(GeoPoint(0, 1), GeoPoint(0, 2), EQUATOR_ROUTE, 500)
        assert match_quality(match, 500) == 1.0

    def test_decreases_with_anchor_distance(self):
        near = match_route(GeoPoint(0.001, 1), GeoPoint(0.001, 2), EQUATOR_ROUTE, 3000)
        far = match_route(GeoPoint(0.01, 1), GeoPoint(0.01, 2), EQUATOR_ROUTE, 3000)
        assert 0 <= match_quality(far, 3000) < match_quality(near, 3000) <= 1

    def test_formula(self):
        match = match_route(GeoPoint(0, 1.0001), GeoPoint(0, 2.0001), EQUATOR_ROUTE, 500)
        expected = 1 - match.combined_anchor_distance / 1000
        assert match_quality(match, 500) == pytest.approx(expected)
