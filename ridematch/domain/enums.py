"""Domain enumerations."""

import enum


class PricingMode(str, enum.Enum):
    FIXED = "fixed"
    PER_KM = "per_km"


class MatchType(str, enum.Enum):
    CONNECTED = "connected"
    OTHER = "other"


class VehicleType(str, enum.Enum):
    HATCHBACK = "Hatchback"
    SEDAN = "Sedan"
    SUV = "SUV"
    MUV = "MUV"
    BIKE = "Bike"


class Amenity(str, enum.Enum):
    AC = "ac"
    LUGGAGE = "luggage"
    MUSIC = "music"
    PETS = "pets"
    SMOKING = "smoking"
    WOMEN_ONLY = "women_only"
    CHILD_SEAT = "child_seat"


class SearchErrorKind(str, enum.Enum):
    DECODE = "decode"
    INVALID_ROUTE = "invalid_route"
