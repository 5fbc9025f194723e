"""
Admin / observability endpoints
===============================

GET /api/v1/admin/health -- simple health check
GET /api/v1/admin/config -- matching and fee policy in effect
"""

from fastapi import APIRouter, Request

from ridematch.api.middleware import RATE_LIMIT, limiter
from ridematch.api.schemas import HealthResponse, PolicyResponse
from ridematch.config import settings

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()


@router.get(
    "/config",
    response_model=PolicyResponse,
    summary="Matching tolerance and fee policy in effect",
)
@limiter.limit(RATE_LIMIT)
async def policy(request: Request):
    return PolicyResponse(
        match_tolerance_meters=settings.match_tolerance_meters,
        polyline_precision=settings.polyline_precision,
        platform_fee_rate=settings.platform_fee_rate,
        gst_rate=settings.gst_rate,
        passenger_service_fee=settings.passenger_service_fee,
    )
