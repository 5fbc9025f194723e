"""FastAPI dependency injection helpers."""

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from ridematch.config import settings
from ridematch.infrastructure.database import async_session_factory
from ridematch.infrastructure.geocoding import NominatimGeocoder
from ridematch.infrastructure.redis_client import get_redis


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_geocoder(request: Request) -> NominatimGeocoder:
    """Geocoder sharing the app-wide HTTP client and Redis pool."""
    return NominatimGeocoder(
        request.app.state.http_client,
        await get_redis(),
        base_url=settings.geocoder_base_url,
        user_agent=settings.geocoder_user_agent,
        cache_ttl_seconds=settings.geocode_cache_ttl_seconds,
    )
