"""
Segment Fare Engine  (Strategy Pattern)
=======================================

Fare for a partial-route booking
--------------------------------
* **fixed**:  the driver's declared seat price, whatever sub-segment matched.
* **per_km**: ``per_km_rate x segment_km``, prorated strictly by the matched
  segment length, never by the full route.

Marketplace split
-----------------
* Platform fee = base x 8 %, plus 18 % GST on it, deducted from the driver.
* Passenger service fee = flat 10 INR, plus 18 % GST on it, added on top.

All amounts are ``Decimal``.  Complexity: O(1) per calculation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Decimal

from .entities import FareBreakdown, Route, RouteMatch
from .enums import PricingMode
from .errors import InvalidRouteError

_CENT = Decimal("0.01")
_METERS_PER_KM = Decimal(1000)


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


# ── Strategy hierarchy ────────────────────────────────────────────────


class FareStrategy(ABC):
    @abstractmethod
    def calculate(self, route: Route, route_match: RouteMatch) -> Decimal: ...


class FixedFare(FareStrategy):
    def calculate(self, route: Route, route_match: RouteMatch) -> Decimal:
        return route.base_fare_per_seat


class PerKmFare(FareStrategy):
    def calculate(self, route: Route, route_match: RouteMatch) -> Decimal:
        if route.total_distance_meters <= 0:
            raise InvalidRouteError(
                "per_km fare needs a positive total route distance"
            )
        if route.per_km_rate is None:
            raise InvalidRouteError("per_km fare needs a per_km_rate")
        segment_km = Decimal(route_match.segment_distance_meters) / _METERS_PER_KM
        return route.per_km_rate * segment_km


STRATEGIES: dict[PricingMode, FareStrategy] = {
    PricingMode.FIXED: FixedFare(),
    PricingMode.PER_KM: PerKmFare(),
}


def compute_segment_fare(route: Route, route_match: RouteMatch) -> Decimal:
    """Fare owed for the matched segment of *route*."""
    return STRATEGIES[PricingMode(route.pricing_mode)].calculate(route, route_match)


# ── Engine facade ─────────────────────────────────────────────────────


class PricingEngine:
    """Fee split applied on top of a segment fare, used by the API layer."""

    def __init__(
        self,
        platform_fee_rate: Decimal = Decimal("0.08"),
        gst_rate: Decimal = Decimal("0.18"),
        passenger_service_fee: Decimal = Decimal("10"),
    ):
        self.platform_fee_rate = Decimal(platform_fee_rate)
        self.gst_rate = Decimal(gst_rate)
        self.passenger_service_fee = Decimal(passenger_service_fee)

    def breakdown(self, base_fare: Decimal) -> FareBreakdown:
        base = _money(Decimal(base_fare))
        platform_fee = _money(base * self.platform_fee_rate)
        gst_on_platform_fee = _money(platform_fee * self.gst_rate)
        service_fee = _money(self.passenger_service_fee)
        gst_on_service_fee = _money(service_fee * self.gst_rate)
        return FareBreakdown(
            base_fare=base,
            platform_fee=platform_fee,
            gst_on_platform_fee=gst_on_platform_fee,
            driver_net=base - platform_fee - gst_on_platform_fee,
            passenger_service_fee=service_fee,
            gst_on_service_fee=gst_on_service_fee,
            passenger_total=base + service_fee + gst_on_service_fee,
        )
