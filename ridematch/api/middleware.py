"""Shared slowapi rate limiter, keyed by client address."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from ridematch.config import settings

limiter = Limiter(key_func=get_remote_address)

# applied per route with ``@limiter.limit(RATE_LIMIT)``
RATE_LIMIT = settings.rate_limit
