"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ridematch.domain.entities import FareBreakdown, MatchAnchor, SearchCandidate
from ridematch.domain.enums import Amenity, MatchType, PricingMode, VehicleType


# ── Requests ──────────────────────────────────────────────────────────


class RideCreateRequest(BaseModel):
    driver_name: str = Field("", max_length=120)
    start_name: str = Field(..., min_length=1, max_length=255)
    end_name: str = Field(..., min_length=1, max_length=255)
    departure: datetime
    seats: int = Field(..., ge=1, le=8)
    fare: Decimal = Field(..., ge=0, description="Per-seat price for the whole trip.")
    fare_mode: PricingMode = PricingMode.FIXED
    per_km_rate: Optional[Decimal] = Field(None, ge=0)
    route_polyline: Optional[str] = Field(
        None,
        description=(
            "Encoded polyline from the routing engine.  When omitted, a "
            "straight-line route between the geocoded endpoints is used."
        ),
    )
    total_distance: Optional[float] = Field(None, ge=0, description="Metres.")
    vehicle_type: Optional[VehicleType] = None
    vehicle_number: str = Field("", max_length=20)
    amenities: list[Amenity] = []

    @model_validator(mode="after")
    def _per_km_needs_rate(self) -> RideCreateRequest:
        if self.fare_mode is PricingMode.PER_KM and self.per_km_rate is None:
            raise ValueError("per_km_rate is required when fare_mode is per_km")
        return self


# ── Responses ─────────────────────────────────────────────────────────


class RideResponse(BaseModel):
    id: int
    driver_name: str
    start_name: str
    end_name: str
    departure: datetime
    seats: int
    available_seats: int
    fare: Decimal
    fare_mode: PricingMode
    per_km_rate: Optional[Decimal] = None
    route_polyline: Optional[str] = None
    total_distance: float
    estimated_duration: int
    vehicle_type: Optional[VehicleType] = None
    vehicle_number: str
    is_active: bool

    model_config = {"from_attributes": True}


class PointResponse(BaseModel):
    lat: float
    lng: float


class AnchorResponse(BaseModel):
    lat: float
    lng: float
    distance_meters: float
    route_index: int

    @classmethod
    def from_anchor(cls, anchor: MatchAnchor) -> AnchorResponse:
        return cls(
            lat=anchor.point.lat,
            lng=anchor.point.lng,
            distance_meters=round(anchor.distance_meters, 1),
            route_index=anchor.route_index,
        )


class FareBreakdownResponse(BaseModel):
    base_fare: Decimal
    platform_fee: Decimal
    gst_on_platform_fee: Decimal
    driver_net: Decimal
    passenger_service_fee: Decimal
    gst_on_service_fee: Decimal
    passenger_total: Decimal

    model_config = {"from_attributes": True}


class SearchResultItem(BaseModel):
    ride_id: str
    match_type: MatchType
    match_quality: float
    start_name: str = ""
    end_name: str = ""
    departure: Optional[datetime] = None
    driver_name: str = ""
    available_seats: int = 0
    vehicle_type: Optional[VehicleType] = None
    amenities: list[Amenity] = []
    pricing_mode: PricingMode
    base_fare_per_seat: Decimal
    segment_fare: Optional[Decimal] = None
    segment_distance_meters: Optional[float] = None
    origin_anchor: Optional[AnchorResponse] = None
    destination_anchor: Optional[AnchorResponse] = None
    fare_breakdown: FareBreakdownResponse

    @classmethod
    def from_candidate(
        cls, candidate: SearchCandidate, breakdown: FareBreakdown
    ) -> SearchResultItem:
        offer = candidate.offer
        match = candidate.route_match
        return cls(
            ride_id=candidate.ride_id,
            match_type=candidate.match_type,
            match_quality=round(candidate.match_quality, 4),
            start_name=offer.start_name if offer else "",
            end_name=offer.end_name if offer else "",
            departure=offer.departure if offer else None,
            driver_name=offer.driver_name if offer else "",
            available_seats=offer.available_seats if offer else 0,
            vehicle_type=offer.vehicle_type if offer else None,
            amenities=sorted(offer.amenities, key=lambda a: a.value) if offer else [],
            pricing_mode=candidate.route.pricing_mode,
            base_fare_per_seat=candidate.route.base_fare_per_seat,
            segment_fare=candidate.segment_fare,
            segment_distance_meters=(
                round(match.segment_distance_meters, 1) if match else None
            ),
            origin_anchor=AnchorResponse.from_anchor(match.origin_anchor) if match else None,
            destination_anchor=(
                AnchorResponse.from_anchor(match.destination_anchor) if match else None
            ),
            fare_breakdown=FareBreakdownResponse.model_validate(breakdown),
        )


class SearchErrorResponse(BaseModel):
    ride_id: str
    kind: str
    message: str


class SearchResponse(BaseModel):
    origin: PointResponse
    destination: PointResponse
    connected: list[SearchResultItem] = []
    other: list[SearchResultItem] = []
    errors: list[SearchErrorResponse] = []
    partial: bool = False


class HealthResponse(BaseModel):
    status: str = "ok"


class PolicyResponse(BaseModel):
    match_tolerance_meters: float
    polyline_precision: int
    platform_fee_rate: Decimal
    gst_rate: Decimal
    passenger_service_fee: Decimal

