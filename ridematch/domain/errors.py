"""
Error taxonomy for the search engine.

Query-level errors (``GeocodeError``) abort a search.  Candidate-level
errors (``DecodeError``, ``InvalidRouteError``) are contained by the
orchestrator and reported in ``SearchResult.errors``.
"""


class RideMatchError(Exception):
    """Base class for every error raised by the engine."""


class GeocodeError(RideMatchError):
    """Raised when a place name cannot be resolved to coordinates."""

    def __init__(self, query: str, reason: str = "not found"):
        self.query = query
        self.reason = reason
        super().__init__(f"Could not geocode {query!r}: {reason}")


class DecodeError(RideMatchError):
    """Raised when an encoded polyline is malformed."""


class InvalidRouteError(RideMatchError):
    """Raised when a route lacks the data a computation requires."""


class SearchCancelled(Exception):
    """The caller abandoned the search before classification finished."""
