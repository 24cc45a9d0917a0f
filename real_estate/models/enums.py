"""Enumeration types for lot entities."""

from enum import Enum


class LotStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    SOLD = "SOLD"


class Feature(str, Enum):
    """Add-on features; each member carries its display name and fixed cost."""

    POOL = "pool"
    LANDSCAPING = "landscaping"
    FENCING = "fencing"

    @property
    def display_name(self) -> str:
        return _FEATURE_NAMES[self]

    @property
    def cost(self) -> float:
        return _FEATURE_COSTS[self]


_FEATURE_NAMES = {
    Feature.POOL: "Swimming Pool",
    Feature.LANDSCAPING: "Premium Landscaping",
    Feature.FENCING: "Perimeter Fencing",
}

_FEATURE_COSTS = {
    Feature.POOL: 25000.0,
    Feature.LANDSCAPING: 12000.0,
    Feature.FENCING: 8000.0,
}
