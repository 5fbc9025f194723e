"""
Domain entities for route-match search.

Everything here is ephemeral: built per search request from the ride
records the loading collaborator returns, never persisted by the engine.

- ``GeoPoint`` is the value object every geometric function works on.
- ``Route`` keeps the driver's travel direction; nothing reverses it.
- ``RouteMatch`` carries the ordering invariant
  ``origin_anchor.route_index < destination_anchor.route_index``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Iterator, Optional

from .enums import Amenity, MatchType, PricingMode, SearchErrorKind, VehicleType


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class MatchAnchor:
    """Nearest route point to a query point, within tolerance."""

    point: GeoPoint
    distance_meters: float
    route_index: int


@dataclass(frozen=True)
class RouteMatch:
    origin_anchor: MatchAnchor
    destination_anchor: MatchAnchor
    segment: tuple[GeoPoint, ...]
    segment_distance_meters: float

    @property
    def combined_anchor_distance(self) -> float:
        return (
            self.origin_anchor.distance_meters
            + self.destination_anchor.distance_meters
        )


@dataclass(frozen=True)
class FareBreakdown:
    base_fare: Decimal
    platform_fee: Decimal
    gst_on_platform_fee: Decimal
    driver_net: Decimal
    passenger_service_fee: Decimal
    gst_on_service_fee: Decimal
    passenger_total: Decimal


# ── Entities ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Route:
    encoded_polyline: Optional[str] = None
    coordinates: Optional[tuple[GeoPoint, ...]] = None
    total_distance_meters: float = 0.0
    base_fare_per_seat: Decimal = Decimal("0")
    pricing_mode: PricingMode = PricingMode.FIXED
    per_km_rate: Optional[Decimal] = None

    @property
    def has_route_data(self) -> bool:
        return bool(self.coordinates) or bool(self.encoded_polyline)

    def with_coordinates(self, points) -> Route:
        return replace(self, coordinates=tuple(points))


@dataclass(frozen=True)
class RideOffer:
    """A posted ride as handed over by the candidate-loading collaborator."""

    ride_id: str
    route: Route
    start_name: str = ""
    end_name: str = ""
    departure: Optional[datetime] = None
    available_seats: int = 1
    vehicle_type: Optional[VehicleType] = None
    amenities: frozenset[Amenity] = frozenset()
    driver_name: str = ""


@dataclass(frozen=True)
class SearchCandidate:
    ride_id: str
    route: Route
    match_type: MatchType
    match_quality: float = 0.0
    route_match: Optional[RouteMatch] = None
    segment_fare: Optional[Decimal] = None
    offer: Optional[RideOffer] = None

    @property
    def is_connected(self) -> bool:
        return self.match_type is MatchType.CONNECTED

    @property
    def effective_fare(self) -> Decimal:
        """Segment fare when known, otherwise the full-trip seat price."""
        if self.segment_fare is not None:
            return self.segment_fare
        return self.route.base_fare_per_seat


# ── Search request / response ─────────────────────────────────────────


@dataclass(frozen=True)
class SearchFilters:
    min_seats: Optional[int] = None
    max_fare: Optional[Decimal] = None
    vehicle_type: Optional[VehicleType] = None
    amenities: frozenset[Amenity] = frozenset()
    min_name_similarity: Optional[float] = None


@dataclass(frozen=True)
class SearchQuery:
    origin_text: str
    destination_text: str
    date: Optional[date] = None
    filters: SearchFilters = field(default_factory=SearchFilters)


@dataclass(frozen=True)
class SearchError:
    ride_id: str
    kind: SearchErrorKind
    message: str


@dataclass
class SearchResult:
    origin: GeoPoint
    destination: GeoPoint
    candidates: list[SearchCandidate] = field(default_factory=list)
    errors: list[SearchError] = field(default_factory=list)

    @property
    def connected(self) -> list[SearchCandidate]:
        return [c for c in self.candidates if c.is_connected]

    @property
    def other(self) -> list[SearchCandidate]:
        return [c for c in self.candidates if not c.is_connected]

    @property
    def partial(self) -> bool:
        """True when some candidates could not be evaluated."""
        return bool(self.errors)

    def __iter__(self) -> Iterator[SearchCandidate]:
        return iter(self.candidates)

    def __len__(self) -> int:
        return len(self.candidates)
