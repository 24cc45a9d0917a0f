"""Pure functions for building and inspecting lot decorator chains.

Nothing here holds state besides the static alias tables. Every function
takes a chain head and returns either a new head or information read by
walking the chain structurally; description text is never parsed.
"""

from __future__ import annotations

import re
from typing import Any, Iterator

from real_estate.exceptions import ValidationError
from real_estate.models.enums import Feature, LotStatus
from real_estate.models.lot import (
    BLOCK_RANGE,
    LOT_NUMBER_RANGE,
    FeatureDecorator,
    LotRecord,
    LotView,
    StatusDecorator,
    iter_chain,
)

FEATURE_ALIASES: dict[str, Feature] = {
    **{f.value: f for f in Feature},
    **{f.display_name.lower(): f for f in Feature},
}

STATUS_ALIASES: dict[str, LotStatus] = {
    "sell": LotStatus.SOLD,
    "sold": LotStatus.SOLD,
    "reserve": LotStatus.RESERVED,
    "reserved": LotStatus.RESERVED,
    "available": LotStatus.AVAILABLE,
}

# SOLD is terminal
ALLOWED_TRANSITIONS: dict[LotStatus, frozenset[LotStatus]] = {
    LotStatus.AVAILABLE: frozenset({LotStatus.RESERVED, LotStatus.SOLD}),
    LotStatus.RESERVED: frozenset({LotStatus.SOLD}),
    LotStatus.SOLD: frozenset(),
}


def validate_lot_values(block: Any, lot_number: Any, size: Any, price: Any) -> tuple[int, int, float, float]:
    """Coerce and range-check raw lot values.

    Raises
    ------
    ValidationError
        Listing every violated constraint.
    """
    try:
        block_value, lot_value = float(block), float(lot_number)
        size, price = float(size), float(price)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            "Invalid input: Please enter numeric values for block, lot number, size, and price"
        ) from e

    violations = []
    if not block_value.is_integer():
        violations.append("Block number must be a whole number")
    elif int(block_value) not in BLOCK_RANGE:
        violations.append("Block number must be between 1 and 5")
    if not lot_value.is_integer():
        violations.append("Lot number must be a whole number")
    elif int(lot_value) not in LOT_NUMBER_RANGE:
        violations.append("Lot number must be between 1 and 20")
    if not size > 0:
        violations.append("Size must be positive")
    if not price > 0:
        violations.append("Price must be positive")
    if violations:
        raise ValidationError(violations)
    return int(block_value), int(lot_value), size, price


def normalize_feature(key: str | Feature) -> Feature:
    """Resolve a feature key (``"Pool"``, ``"swimming pool"``...) to a Feature.

    Raises
    ------
    ValidationError
        If the key names no known feature.
    """
    if isinstance(key, Feature):
        return key
    feature = FEATURE_ALIASES.get(str(key).strip().lower())
    if feature is None:
        raise ValidationError(f"Unknown feature: {key}")
    return feature


def normalize_status(key: str | LotStatus) -> LotStatus:
    """Resolve a status key or alias (``"sell"``, ``"reserved"``...) to a LotStatus.

    Raises
    ------
    ValidationError
        If the key names no known status.
    """
    if isinstance(key, LotStatus):
        return key
    status = STATUS_ALIASES.get(str(key).strip().lower())
    if status is None:
        raise ValidationError(f"Unknown status: {key}")
    return status


def can_transition(current: LotStatus, target: LotStatus) -> bool:
    """True if moving from ``current`` to ``target`` is a real, legal change."""
    return target in ALLOWED_TRANSITIONS[current]


def create_basic_lot(block: int, lot_number: int, size: float, price: float) -> LotRecord:
    """Create an undecorated, AVAILABLE lot."""
    return LotRecord(block=block, lot_number=lot_number, size=size, base_price=price)


def add_feature(view: LotView, feature_key: str | Feature) -> LotView:
    """Return ``view`` with the feature on top, or ``view`` itself if already present."""
    feature = normalize_feature(feature_key)
    if has_feature(view, feature):
        return view
    return FeatureDecorator(view, feature)


def change_status(view: LotView, status_key: str | LotStatus) -> LotView:
    """Return ``view`` with a new effective status.

    Returns ``view`` itself when the status is unchanged or the transition is
    not allowed (e.g. reserving a SOLD lot); callers detect refusal with
    :func:`can_transition`.
    """
    target = normalize_status(status_key)
    if not can_transition(view.status(), target):
        return view
    return StatusDecorator(view, target)


def unwrap_base(view: LotView) -> LotRecord | None:
    """Walk to the root of the chain."""
    for current in iter_chain(view):
        if isinstance(current, LotRecord):
            return current
    return None


def iter_features(view: LotView) -> Iterator[FeatureDecorator]:
    """Yield feature decorators from the head of the chain downwards."""
    for current in iter_chain(view):
        if isinstance(current, FeatureDecorator):
            yield current


def features(view: LotView) -> list[Feature]:
    """Features in the order they were applied."""
    return [d.feature for d in reversed(list(iter_features(view)))]


def feature_names(view: LotView) -> list[str]:
    """Display names of the features, in the order they were applied."""
    return [f.display_name for f in features(view)]


def has_feature(view: LotView, feature: str | Feature) -> bool:
    """Structural check for a feature anywhere in the chain."""
    wanted = normalize_feature(feature)
    return any(d.feature is wanted for d in iter_features(view))


def total_feature_cost(view: LotView) -> float:
    """Sum of the additional costs of every feature on the chain."""
    return sum(d.additional_cost for d in iter_features(view))


def parse_features(text: str | None) -> list[Feature]:
    """Parse a free-form feature list such as a CSV ``Features`` cell.

    Accepts display names or keys joined by commas, semicolons or spaces
    (``"Swimming Pool, Perimeter Fencing"`` or ``"Pool Fencing"``). Features
    are returned in the order they appear; unknown words are ignored.
    """
    if not text:
        return []
    found: list[tuple[int, Feature]] = []
    for feature in Feature:
        pattern = rf"\b(?:{re.escape(feature.display_name)}|{re.escape(feature.value)})\b"
        match = re.search(pattern, text, flags=re.IGNORECASE)
        if match:
            found.append((match.start(), feature))
    return [feature for _, feature in sorted(found)]
