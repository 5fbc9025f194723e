"""
SQLAlchemy ORM models.

Tables
------
* ``rides`` -- rides posted by drivers, with route polyline and pricing

Indexes
-------
* **B-Tree** on ``departure`` and ``is_active`` for the candidate query
  the search engine runs on every request, and on ``(start_name,
  end_name)`` for name look-ups.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)

from .database import Base
from ridematch.domain.enums import PricingMode, VehicleType


class RideModel(Base):
    __tablename__ = "rides"

    id = Column(Integer, primary_key=True, autoincrement=True)
    driver_name = Column(String(120), nullable=False, default="")

    start_name = Column(String(255), nullable=False)
    end_name = Column(String(255), nullable=False)
    departure = Column(DateTime, nullable=False)  # local wall-clock time

    seats = Column(Integer, nullable=False)
    available_seats = Column(Integer, nullable=False)

    fare = Column(Numeric(10, 2), nullable=False)  # per seat, whole trip
    fare_mode = Column(Enum(PricingMode), default=PricingMode.FIXED, nullable=False)
    per_km_rate = Column(Numeric(10, 2), nullable=True)

    # Route from the routing engine (or straight-line approximation)
    route_polyline = Column(Text, nullable=True)
    total_distance = Column(Float, default=0.0, nullable=False)  # metres
    estimated_duration = Column(Integer, default=0, nullable=False)  # seconds

    vehicle_type = Column(Enum(VehicleType), nullable=True)
    vehicle_number = Column(String(20), nullable=False, default="")

    # Amenities
    ac_available = Column(Boolean, default=True, nullable=False)
    luggage_allowed = Column(Boolean, default=True, nullable=False)
    music_allowed = Column(Boolean, default=True, nullable=False)
    pet_friendly = Column(Boolean, default=False, nullable=False)
    smoking_allowed = Column(Boolean, default=False, nullable=False)
    women_only = Column(Boolean, default=False, nullable=False)
    child_seat_available = Column(Boolean, default=False, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_rides_departure", "departure"),
        Index("idx_rides_active", "is_active"),
        Index("idx_rides_names", "start_name", "end_name"),
    )
