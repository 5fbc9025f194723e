"""Test helpers: in-memory database, sample routes, fake geocoder."""

from datetime import datetime, time, timedelta
from decimal import Decimal

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from ridematch.domain.entities import GeoPoint, RideOffer, Route
from ridematch.domain.enums import PricingMode
from ridematch.domain.errors import GeocodeError
from ridematch.infrastructure.database import build_session_factory
from ridematch.infrastructure import models  # noqa: F401


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
TestSessionFactory = build_session_factory(test_engine)


# ── Sample geography ──────────────────────────────────────────────────

# Four points along the equator, one degree (~111 km) apart, west to east
EQUATOR_ROUTE = (
    GeoPoint(0, 0),
    GeoPoint(0, 1),
    GeoPoint(0, 2),
    GeoPoint(0, 3),
)

PLACES = {
    "west end": GeoPoint(0, 0),
    "first town": GeoPoint(0, 1.0001),
    "second town": GeoPoint(0, 2.0001),
    "east end": GeoPoint(0, 3),
    "far away": GeoPoint(10, 10),
}


def make_offer(
    ride_id: str,
    coordinates=EQUATOR_ROUTE,
    *,
    encoded_polyline=None,
    fare=Decimal("500"),
    mode=PricingMode.FIXED,
    rate=None,
    total_distance=333_585.0,
    **offer_fields,
) -> RideOffer:
    route = Route(
        encoded_polyline=encoded_polyline,
        coordinates=tuple(coordinates) if coordinates is not None else None,
        total_distance_meters=total_distance,
        base_fare_per_seat=fare,
        pricing_mode=mode,
        per_km_rate=rate,
    )
    return RideOffer(ride_id=ride_id, route=route, **offer_fields)


class FakeGeocoder:
    """Resolves names from ``PLACES``; records every call."""

    def __init__(self, places=None):
        self.places = dict(PLACES if places is None else places)
        self.calls: list[str] = []

    async def resolve(self, text: str) -> GeoPoint:
        self.calls.append(text)
        try:
            return self.places[text.lower()]
        except KeyError:
            raise GeocodeError(text, "not found") from None


def tomorrow_at(hour: int) -> datetime:
    return datetime.combine(datetime.now().date() + timedelta(days=1), time(hour))


