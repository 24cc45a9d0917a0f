"""Lot record and the decorator variants layered on top of it.

A lot view is an immutable singly-linked chain::

    LotRecord <- FeatureDecorator <- StatusDecorator <- FeatureDecorator ...

Only the root ``LotRecord`` carries identity, size and base price. Each
decorator wraps exactly one view and overrides one concern: a
``StatusDecorator`` replaces the effective status, a ``FeatureDecorator``
adds a feature's cost and name. Changing a lot means building a new head,
the wrapped views are shared and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from real_estate.models.enums import Feature, LotStatus

BLOCK_RANGE = range(1, 6)
LOT_NUMBER_RANGE = range(1, 21)


def lot_id(block: int, lot_number: int) -> str:
    """Canonical lot identifier, e.g. ``"Lot3 7"``."""
    return f"Lot{block} {lot_number}"


def _render(record: LotRecord, status: LotStatus, feature_names: list[str]) -> str:
    text = (
        f"Lot {record.block}-{record.lot_number} ({record.size} sqm)"
        f" - ${record.base_price} - Status: {status.value}"
    )
    for name in feature_names:
        text += f" + {name}"
    return text


@dataclass(frozen=True)
class LotRecord:
    """Undecorated lot: identity, size and base price."""

    block: int
    lot_number: int
    size: float  # Square meters
    base_price: float
    base_status: LotStatus = LotStatus.AVAILABLE

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", float(self.size))
        object.__setattr__(self, "base_price", float(self.base_price))
        object.__setattr__(self, "base_status", LotStatus(self.base_status))

    @property
    def id(self) -> str:
        return lot_id(self.block, self.lot_number)

    def description(self) -> str:
        return _render(self, self.base_status, [])

    def price(self) -> float:
        return self.base_price

    def status(self) -> LotStatus:
        return self.base_status


@dataclass(frozen=True)
class StatusDecorator:
    """Overrides the effective status of the wrapped view."""

    inner: LotView = field(repr=False)
    target: LotStatus

    def __post_init__(self) -> None:
        object.__setattr__(self, "target", LotStatus(self.target))

    def description(self) -> str:
        chain = list(iter_chain(self.inner))
        names = [v.feature.display_name for v in reversed(chain) if isinstance(v, FeatureDecorator)]
        return _render(chain[-1], self.target, names)

    def price(self) -> float:
        return self.inner.price()

    def status(self) -> LotStatus:
        return self.target


@dataclass(frozen=True)
class FeatureDecorator:
    """Adds one feature's cost and name to the wrapped view."""

    inner: LotView = field(repr=False)
    feature: Feature

    def __post_init__(self) -> None:
        object.__setattr__(self, "feature", Feature(self.feature))

    @property
    def feature_name(self) -> str:
        return self.feature.display_name

    @property
    def additional_cost(self) -> float:
        return self.feature.cost

    def description(self) -> str:
        return f"{self.inner.description()} + {self.feature_name}"

    def price(self) -> float:
        return self.inner.price() + self.additional_cost

    def status(self) -> LotStatus:
        return self.inner.status()


LotView = Union[LotRecord, StatusDecorator, FeatureDecorator]


def iter_chain(view: LotView) -> Iterator[LotView]:
    """Yield every view from the head of the chain down to the record."""
    current: LotView | None = view
    while current is not None:
        yield current
        current = current.inner if isinstance(current, (StatusDecorator, FeatureDecorator)) else None
