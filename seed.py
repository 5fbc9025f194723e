"""
Seed script -- populates the database with sample rides for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 6 rides along Maharashtra / Karnataka corridors, with straight-line
    route polylines (fixed and per-km pricing)
  - 1 ride without route data (only surfaces as an "other" result)
"""

import asyncio
from datetime import datetime, time, timedelta
from decimal import Decimal

from sqlalchemy import func, select

from ridematch.domain import polyline
from ridematch.domain.distance import interpolate_route, path_length_meters
from ridematch.domain.entities import GeoPoint
from ridematch.domain.enums import Amenity, PricingMode, VehicleType
from ridematch.infrastructure.database import async_session_factory, engine
from ridematch.infrastructure.models import RideModel
from ridematch.infrastructure.repositories import RideRepository

PLACES = {
    "Mumbai": GeoPoint(19.0760, 72.8777),
    "Lonavala": GeoPoint(18.7546, 73.4062),
    "Pune": GeoPoint(18.5204, 73.8567),
    "Satara": GeoPoint(17.6805, 74.0183),
    "Kolhapur": GeoPoint(16.7050, 74.2433),
    "Nashik": GeoPoint(19.9975, 73.7898),
    "Bengaluru": GeoPoint(12.9716, 77.5946),
    "Mysuru": GeoPoint(12.2958, 76.6394),
}


RIDES = [
    {
        "driver": "Aarav Sharma", "route": ["Mumbai", "Lonavala", "Pune"],
        "hour": 7, "seats": 3, "fare": Decimal("600"),
        "mode": PricingMode.FIXED, "rate": None,
        "vehicle": VehicleType.SEDAN, "number": "MH01AB1234",
        "amenities": {Amenity.AC, Amenity.MUSIC, Amenity.LUGGAGE},
    },
    {
        "driver": "Priya Patel", "route": ["Mumbai", "Pune", "Satara", "Kolhapur"],
        "hour": 6, "seats": 4, "fare": Decimal("1500"),
        "mode": PricingMode.PER_KM, "rate": Decimal("4.50"),
        "vehicle": VehicleType.SUV, "number": "MH02CD5678",
        "amenities": {Amenity.AC, Amenity.LUGGAGE, Amenity.CHILD_SEAT},
    },
    {
        "driver": "Rohan Mehta", "route": ["Pune", "Lonavala", "Mumbai"],
        "hour": 18, "seats": 2, "fare": Decimal("550"),
        "mode": PricingMode.FIXED, "rate": None,
        "vehicle": VehicleType.HATCHBACK, "number": "MH12EF9012",
        "amenities": {Amenity.MUSIC},
    },
    {
        "driver": "Sneha Gupta", "route": ["Mumbai", "Nashik"],
        "hour": 9, "seats": 3, "fare": Decimal("700"),
        "mode": PricingMode.FIXED, "rate": None,
        "vehicle": VehicleType.SEDAN, "number": "MH04GH3456",
        "amenities": {Amenity.AC, Amenity.WOMEN_ONLY},
    },
    {
        "driver": "Vikram Singh", "route": ["Bengaluru", "Mysuru"],
        "hour": 8, "seats": 4, "fare": Decimal("450"),
        "mode": PricingMode.PER_KM, "rate": Decimal("3.00"),
        "vehicle": VehicleType.MUV, "number": "KA01IJ7890",
        "amenities": {Amenity.AC, Amenity.PETS},
    },
    {
        "driver": "Meera Nair", "route": ["Pune", "Satara", "Kolhapur"],
        "hour": 10, "seats": 1, "fare": Decimal("500"),
        "mode": PricingMode.FIXED, "rate": None,
        "vehicle": VehicleType.BIKE, "number": "MH12KL2345",
        "amenities": set(),
    },
]


def build_route(stops: list[str], steps_per_leg: int = 20) -> list[GeoPoint]:
    """Chain straight-line legs through every stop, without duplicate joints."""
    points: list[GeoPoint] = []
    for a, b in zip(stops, stops[1:]):
        leg = interpolate_route(PLACES[a], PLACES[b], steps_per_leg)
        points.extend(leg if not points else leg[1:])
    return points


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(select(func.count()).select_from(RideModel))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        repo = RideRepository(session)
        tomorrow = datetime.now().date() + timedelta(days=1)

        # ── Rides with routes ─────────────────────────────────────────
        for r in RIDES:
            points = build_route(r["route"])
            distance = path_length_meters(points)
            await repo.create_ride(
                start_name=r["route"][0],
                end_name=r["route"][-1],
                departure=datetime.combine(tomorrow, time(r["hour"])),
                seats=r["seats"],
                fare=r["fare"],
                fare_mode=r["mode"],
                per_km_rate=r["rate"],
                route_polyline=polyline.encode(points),
                total_distance=distance,
                estimated_duration=round(distance / 1000 / 60 * 3600),
                vehicle_type=r["vehicle"],
                vehicle_number=r["number"],
                driver_name=r["driver"],
                amenities=frozenset(r["amenities"]),
            )
        print(f"  Created {len(RIDES)} rides with routes")

        # ── Ride without route data ───────────────────────────────────
        await repo.create_ride(
            start_name="Mumbai",
            end_name="Pune",
            departure=datetime.combine(tomorrow, time(14)),
            seats=2,
            fare=Decimal("650"),
            vehicle_type=VehicleType.SEDAN,
            vehicle_number="MH03MN6789",
            driver_name="Karan Joshi",
        )
        print("  Created 1 ride without route data")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
