"""
Geocoding collaborator backed by OpenStreetMap Nominatim.

Results are cached in Redis under ``geocode:<normalized text>`` as a
``"lat,lng"`` string, so a popular city pair costs one upstream call per
TTL instead of one per search.  Nominatim's usage policy asks for an
identifying User-Agent and at most one request per second; the cache
keeps us well under that.

Failures are reported as ``GeocodeError`` and never retried here.  A
Redis outage only disables the cache: lookups go straight upstream.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from ridematch.domain.entities import GeoPoint
from ridematch.domain.errors import GeocodeError
from ridematch.domain.filters import normalize_place

logger = logging.getLogger(__name__)


class NominatimGeocoder:
    def __init__(
        self,
        client: httpx.AsyncClient,
        redis: Optional[aioredis.Redis] = None,
        *,
        base_url: str = "https://nominatim.openstreetmap.org",
        user_agent: str = "ridematch/1.0",
        cache_ttl_seconds: int = 86_400,
    ):
        self.client = client
        self.redis = redis
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.cache_ttl = cache_ttl_seconds

    @staticmethod
    def cache_key(text: str) -> str:
        return f"geocode:{normalize_place(text)}"

    async def resolve(self, text: str) -> GeoPoint:
        key = self.cache_key(text)
        cached = await self._cache_get(key)
        if cached:
            logger.debug("Geocode cache hit for %r", text)
            lat, lng = cached.split(",")
            return GeoPoint(float(lat), float(lng))

        point = await self._lookup(text)
        await self._cache_set(key, f"{point.lat},{point.lng}")
        return point

    async def _cache_get(self, key: str) -> Optional[str]:
        if self.redis is None:
            return None
        try:
            return await self.redis.get(key)
        except RedisError as exc:
            logger.warning("Geocode cache read failed, querying upstream: %s", exc)
            return None

    async def _cache_set(self, key: str, value: str) -> None:
        if self.redis is None:
            return
        try:
            await self.redis.set(key, value, ex=self.cache_ttl)
        except RedisError as exc:
            logger.warning("Geocode cache write failed: %s", exc)

    async def _lookup(self, text: str) -> GeoPoint:
        try:
            response = await self.client.get(
                f"{self.base_url}/search",
                params={"q": text, "format": "json", "limit": 1},
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
            results = response.json()
        except httpx.HTTPError as exc:
            raise GeocodeError(text, f"geocoding service error: {exc}") from exc
        except ValueError as exc:
            raise GeocodeError(text, "invalid geocoding response") from exc

        if not results:
            raise GeocodeError(text, "not found")
        try:
            point = GeoPoint(float(results[0]["lat"]), float(results[0]["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodeError(text, "invalid geocoding response") from exc

        logger.info("Geocoded %r -> %.4f, %.4f", text, point.lat, point.lng)
        return point
