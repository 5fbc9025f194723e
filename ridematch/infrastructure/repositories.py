"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

``RideRepository.load_candidates`` is the candidate-loading collaborator
the search orchestrator consumes: it turns ride rows into ``RideOffer``
domain objects and never decodes routes itself.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import RideModel
from ridematch.domain.entities import RideOffer, Route
from ridematch.domain.enums import Amenity, PricingMode, VehicleType

# ORM column -> amenity flag
AMENITY_COLUMNS: dict[str, Amenity] = {
    "ac_available": Amenity.AC,
    "luggage_allowed": Amenity.LUGGAGE,
    "music_allowed": Amenity.MUSIC,
    "pet_friendly": Amenity.PETS,
    "smoking_allowed": Amenity.SMOKING,
    "women_only": Amenity.WOMEN_ONLY,
    "child_seat_available": Amenity.CHILD_SEAT,
}


def to_offer(ride: RideModel) -> RideOffer:
    mode = PricingMode(ride.fare_mode)
    route = Route(
        encoded_polyline=ride.route_polyline or None,
        total_distance_meters=float(ride.total_distance or 0.0),
        base_fare_per_seat=Decimal(ride.fare),
        pricing_mode=mode,
        per_km_rate=(
            Decimal(ride.per_km_rate)
            if mode is PricingMode.PER_KM and ride.per_km_rate is not None
            else None
        ),
    )
    return RideOffer(
        ride_id=str(ride.id),
        route=route,
        start_name=ride.start_name,
        end_name=ride.end_name,
        departure=ride.departure,
        available_seats=ride.available_seats,
        vehicle_type=VehicleType(ride.vehicle_type) if ride.vehicle_type else None,
        amenities=frozenset(
            flag for column, flag in AMENITY_COLUMNS.items() if getattr(ride, column)
        ),
        driver_name=ride.driver_name,
    )


class RideRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_ride(
        self,
        *,
        start_name: str,
        end_name: str,
        departure: datetime,
        seats: int,
        fare: Decimal,
        fare_mode: PricingMode = PricingMode.FIXED,
        per_km_rate: Decimal | None = None,
        route_polyline: str | None = None,
        total_distance: float = 0.0,
        estimated_duration: int = 0,
        vehicle_type: VehicleType | None = None,
        vehicle_number: str = "",
        driver_name: str = "",
        amenities: frozenset[Amenity] = frozenset(),
    ) -> RideModel:
        ride = RideModel(
            driver_name=driver_name,
            start_name=start_name.strip(),
            end_name=end_name.strip(),
            departure=departure,
            seats=seats,
            available_seats=seats,
            fare=fare,
            fare_mode=fare_mode,
            per_km_rate=per_km_rate,
            route_polyline=route_polyline,
            total_distance=total_distance,
            estimated_duration=estimated_duration,
            vehicle_type=vehicle_type,
            vehicle_number=vehicle_number.upper(),
            **{
                column: flag in amenities
                for column, flag in AMENITY_COLUMNS.items()
            },
        )
        self.session.add(ride)
        await self.session.flush()
        return ride

    async def get_by_id(self, ride_id: int) -> Optional[RideModel]:
        return await self.session.get(RideModel, ride_id)

    async def get_active_rides(self, on: date | None = None) -> list[RideModel]:
        """Active rides departing on *on*, or from today onwards."""
        query = select(RideModel).where(RideModel.is_active.is_(True))
        if on is not None:
            day_start = datetime.combine(on, time.min)
            query = query.where(
                RideModel.departure >= day_start,
                RideModel.departure < day_start + timedelta(days=1),
            )
        else:
            query = query.where(
                RideModel.departure >= datetime.combine(date.today(), time.min)
            )
        result = await self.session.execute(
            query.order_by(RideModel.departure, RideModel.id)
        )
        return list(result.scalars().all())

    async def load_candidates(self, on: date | None = None) -> list[RideOffer]:
        return [to_offer(r) for r in await self.get_active_rides(on)]
