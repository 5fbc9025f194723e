"""Unit tests for post-classification filters."""

from decimal import Decimal

from ridematch.domain.entities import SearchCandidate, SearchFilters
from ridematch.domain.enums import Amenity, MatchType, VehicleType
from ridematch.domain.filters import (
    accepts,
    apply_filters,
    name_similarity,
    normalize_place,
)
from tests.helpers import make_offer


def _candidate(ride_id="1", *, segment_fare=None, match_type=MatchType.OTHER, **offer_fields):
    offer = make_offer(ride_id, **offer_fields)
    return SearchCandidate(
        ride_id=ride_id,
        route=offer.route,
        match_type=match_type,
        segment_fare=segment_fare,
        offer=offer,
    )


class TestNameSimilarity:
    def test_normalize(self):
        assert normalize_place("  New   Delhi! ") == "new delhi"

    def test_identical_after_normalization(self):
        assert name_similarity("Pune", " pune ") == 1.0

    def test_containment(self):
        assert name_similarity("Pune", "Pune Station") == 0.8

    def test_unrelated_names_score_low(self):
        assert name_similarity("Mumbai", "Kolhapur") < 0.5

    def test_empty_name(self):
        assert name_similarity("", "Pune") == 0.0


class TestAccepts:
    def test_no_filters_accepts_everything(self):
        assert accepts(_candidate(), SearchFilters())

    def test_min_seats(self):
        c = _candidate(available_seats=2)
        assert accepts(c, SearchFilters(min_seats=2))
        assert not accepts(c, SearchFilters(min_seats=3))

    def test_max_fare_uses_segment_fare_when_present(self):
        c = _candidate(fare=Decimal("900"), segment_fare=Decimal("150"), match_type=MatchType.CONNECTED)
        assert accepts(c, SearchFilters(max_fare=Decimal("200")))

    def test_max_fare_falls_back_to_seat_price(self):
        c = _candidate(fare=Decimal("900"))
        assert not accepts(c, SearchFilters(max_fare=Decimal("200")))

    def test_vehicle_type(self):
        c = _candidate(vehicle_type=VehicleType.SUV)
        assert accepts(c, SearchFilters(vehicle_type=VehicleType.SUV))
        assert not accepts(c, SearchFilters(vehicle_type=VehicleType.BIKE))

    def test_amenities_must_all_be_offered(self):
        c = _candidate(amenities=frozenset({Amenity.AC, Amenity.MUSIC}))
        assert accepts(c, SearchFilters(amenities=frozenset({Amenity.AC})))
        assert not accepts(c, SearchFilters(amenities=frozenset({Amenity.AC, Amenity.PETS})))

    def test_name_similarity_threshold(self):
        c = _candidate(start_name="Mumbai", end_name="Pune")
        filters = SearchFilters(min_name_similarity=0.9)
        assert accepts(c, filters, "mumbai", "PUNE")
        assert not accepts(c, filters, "Nashik", "Pune")

    def test_candidate_without_offer_fails_attribute_filters(self):
        c = SearchCandidate(ride_id="1", route=make_offer("1").route, match_type=MatchType.OTHER)
        assert not accepts(c, SearchFilters(min_seats=1))
        assert accepts(c, SearchFilters())


class TestApplyFilters:
    def test_order_preserved_and_tiers_treated_alike(self):
        candidates = [
            _candidate("a", available_seats=4, match_type=MatchType.CONNECTED),
            _candidate("b", available_seats=1),
            _candidate("c", available_seats=3),
        ]
        kept = apply_filters(candidates, SearchFilters(min_seats=3))
        assert [c.ride_id for c in kept] == ["a", "c"]
