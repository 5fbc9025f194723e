"""
FastAPI application factory.

* Registers routes for rides and admin.
* Opens / closes the shared HTTP client (geocoding) and the Redis pool
  via lifespan events.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ridematch.api.middleware import limiter
from ridematch.api.routes import admin, rides
from ridematch.config import settings
from ridematch.infrastructure.redis_client import close_redis

logging.basicConfig(level=logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the outbound HTTP client on startup; release pools on shutdown."""
    app.state.http_client = httpx.AsyncClient(
        timeout=settings.geocoder_timeout_seconds
    )
    yield
    await app.state.http_client.aclose()
    await close_redis()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Ride Match Search API",
        description=(
            "Finds posted rides whose route covers a passenger's journey, "
            "in the right direction, and prices the matched segment.  "
            "Rides without a usable route are returned as fallback results."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(rides.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
