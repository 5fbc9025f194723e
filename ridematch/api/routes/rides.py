"""
Ride endpoints
==============

GET  /api/v1/rides/search    -- route-match search between two places
POST /api/v1/rides           -- driver posts a ride (returns 201 Created)
GET  /api/v1/rides/{ride_id} -- ride details
"""

import asyncio
import datetime as dt
import logging
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ridematch.api.dependencies import get_db, get_geocoder
from ridematch.api.middleware import RATE_LIMIT, limiter
from ridematch.api.schemas import (
    PointResponse,
    RideCreateRequest,
    RideResponse,
    SearchErrorResponse,
    SearchResponse,
    SearchResultItem,
)
from ridematch.config import settings
from ridematch.domain import polyline
from ridematch.domain.distance import interpolate_route, path_length_meters
from ridematch.domain.entities import SearchFilters, SearchQuery
from ridematch.domain.enums import Amenity, MatchType, VehicleType
from ridematch.domain.errors import DecodeError, GeocodeError, SearchCancelled
from ridematch.domain.pricing import PricingEngine
from ridematch.domain.search import search
from ridematch.infrastructure.geocoding import NominatimGeocoder
from ridematch.infrastructure.repositories import RideRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rides", tags=["rides"])

AVERAGE_SPEED_KMH = 60  # duration estimate for straight-line routes


def _local_naive(moment: dt.datetime) -> dt.datetime:
    """Departures are stored as naive local wall-clock time."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def _pricing() -> PricingEngine:
    return PricingEngine(
        platform_fee_rate=settings.platform_fee_rate,
        gst_rate=settings.gst_rate,
        passenger_service_fee=settings.passenger_service_fee,
    )


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Search rides whose route covers the journey",
    responses={
        422: {"description": "Origin or destination could not be geocoded."},
        503: {"description": "Search did not finish in time."},
    },
)
@limiter.limit(RATE_LIMIT)
async def search_rides(
    request: Request,
    origin: str = Query(..., min_length=1),
    destination: str = Query(..., min_length=1),
    date: Optional[dt.date] = None,
    seats: Optional[int] = Query(None, ge=1, le=8),
    max_fare: Optional[Decimal] = Query(None, ge=0),
    vehicle_type: Optional[VehicleType] = None,
    amenities: list[Amenity] = Query([]),
    min_name_similarity: Optional[float] = Query(None, ge=0, le=1),
    db: AsyncSession = Depends(get_db),
    geocoder: NominatimGeocoder = Depends(get_geocoder),
):
    query = SearchQuery(
        origin_text=origin,
        destination_text=destination,
        date=date,
        filters=SearchFilters(
            min_seats=seats,
            max_fare=max_fare,
            vehicle_type=vehicle_type,
            amenities=frozenset(amenities),
            min_name_similarity=min_name_similarity,
        ),
    )

    cancel_event = asyncio.Event()
    timer = asyncio.get_running_loop().call_later(
        settings.search_timeout_seconds, cancel_event.set
    )
    try:
        result = await search(
            query,
            geocoder.resolve,
            RideRepository(db).load_candidates,
            tolerance_meters=settings.match_tolerance_meters,
            precision=settings.polyline_precision,
            cancel_event=cancel_event,
        )
    except GeocodeError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except SearchCancelled:
        logger.warning("Search %r -> %r timed out", origin, destination)
        raise HTTPException(status_code=503, detail="Search timed out, please retry")
    finally:
        timer.cancel()

    pricing = _pricing()
    items = [
        SearchResultItem.from_candidate(c, pricing.breakdown(c.effective_fare))
        for c in result
    ]
    return SearchResponse(
        origin=PointResponse(lat=result.origin.lat, lng=result.origin.lng),
        destination=PointResponse(
            lat=result.destination.lat, lng=result.destination.lng
        ),
        connected=[i for i in items if i.match_type is MatchType.CONNECTED],
        other=[i for i in items if i.match_type is MatchType.OTHER],
        errors=[
            SearchErrorResponse(ride_id=e.ride_id, kind=e.kind.value, message=e.message)
            for e in result.errors
        ],
        partial=result.partial,
    )


@router.post(
    "",
    status_code=201,
    response_model=RideResponse,
    summary="Post a ride",
    responses={422: {"description": "Invalid polyline or ungeocodable place."}},
)
@limiter.limit(RATE_LIMIT)
async def create_ride(
    request: Request,
    body: RideCreateRequest,
    db: AsyncSession = Depends(get_db),
    geocoder: NominatimGeocoder = Depends(get_geocoder),
):
    precision = settings.polyline_precision

    if body.route_polyline:
        try:
            points = polyline.decode(body.route_polyline, precision)
        except DecodeError as exc:
            raise HTTPException(status_code=422, detail=f"Invalid route_polyline: {exc}")
        if len(points) < 2:
            raise HTTPException(
                status_code=422, detail="route_polyline needs at least 2 points"
            )
        encoded = body.route_polyline
    else:
        # No routing-engine polyline: approximate with a straight line
        try:
            start = await geocoder.resolve(body.start_name)
            end = await geocoder.resolve(body.end_name)
        except GeocodeError as exc:
            raise HTTPException(status_code=422, detail=str(exc))
        points = interpolate_route(start, end, settings.route_interpolation_steps)
        encoded = polyline.encode(points, precision)

    distance = (
        body.total_distance
        if body.total_distance is not None
        else path_length_meters(points)
    )
    duration = round(distance / 1000 / AVERAGE_SPEED_KMH * 3600)

    ride = await RideRepository(db).create_ride(
        start_name=body.start_name,
        end_name=body.end_name,
        departure=_local_naive(body.departure),
        seats=body.seats,
        fare=body.fare,
        fare_mode=body.fare_mode,
        per_km_rate=body.per_km_rate,
        route_polyline=encoded,
        total_distance=distance,
        estimated_duration=duration,
        vehicle_type=body.vehicle_type,
        vehicle_number=body.vehicle_number,
        driver_name=body.driver_name,
        amenities=frozenset(body.amenities),
    )
    logger.info(
        "Ride %s posted: %s -> %s (%.1f km)",
        ride.id, ride.start_name, ride.end_name, distance / 1000,
    )
    return ride


@router.get(
    "/{ride_id}",
    response_model=RideResponse,
    summary="Get ride details",
)
@limiter.limit(RATE_LIMIT)
async def get_ride(
    request: Request,
    ride_id: int,
    db: AsyncSession = Depends(get_db),
):
    ride = await RideRepository(db).get_by_id(ride_id)
    if not ride:
        raise HTTPException(status_code=404, detail="Ride not found")
    return ride
