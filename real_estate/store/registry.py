"""Authoritative in-memory lot registry with cached search."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterator

from real_estate import factory
from real_estate.config import RealEstateConfig
from real_estate.exceptions import (
    DuplicateLotError,
    IllegalTransitionError,
    LotNotFoundError,
    ValidationError,
)
from real_estate.factory import validate_lot_values
from real_estate.generators.templates import LotTemplateGenerator
from real_estate.models.criteria import SearchCriteria
from real_estate.models.enums import Feature, LotStatus
from real_estate.models.lot import BLOCK_RANGE, LOT_NUMBER_RANGE, LotRecord, LotView
from real_estate.store.cache import SearchCache
from real_estate.store.persistence import PersistenceStore

logger = logging.getLogger(__name__)

PREMIUM_PRICE = 250000.0

NAMED_PREDICATES: dict[str, Callable[[LotView], bool]] = {
    "available": lambda lot: lot.status() is LotStatus.AVAILABLE,
    "reserved": lambda lot: lot.status() is LotStatus.RESERVED,
    "sold": lambda lot: lot.status() is LotStatus.SOLD,
    "with_pool": lambda lot: factory.has_feature(lot, Feature.POOL),
    "premium": lambda lot: lot.price() > PREMIUM_PRICE,
}


def default_inventory() -> Iterator[LotRecord]:
    """Seed grid: 5 blocks x 20 lots with deterministic size and price."""
    for block in BLOCK_RANGE:
        for lot_number in LOT_NUMBER_RANGE:
            yield factory.create_basic_lot(
                block,
                lot_number,
                size=200 + 20 * block + 5 * lot_number,
                price=100000 + 15000 * block + 2500 * lot_number,
            )


class LotRegistry:
    """Owns the id -> lot view map and every mutation of it.

    Each mutation replaces one map entry under the registry lock, then clears
    the search cache. The two steps are not atomic; a concurrent search may
    see a stale cached result until the cache is cleared or the entry expires.

    Parameters
    ----------
    config : RealEstateConfig | None
        Cache sizing and data file location.
    store : PersistenceStore | None
        Overrides the store built from ``config``.
    cache : SearchCache | None
        Overrides the cache built from ``config``.
    """

    def __init__(
        self,
        config: RealEstateConfig | None = None,
        store: PersistenceStore | None = None,
        cache: SearchCache[SearchCriteria, list[LotView]] | None = None,
    ) -> None:
        self.config = config or RealEstateConfig()
        self.store = store or PersistenceStore.from_config(self.config.storage)
        self.cache: SearchCache[SearchCriteria, list[LotView]] = (
            cache if cache is not None else SearchCache.from_config(self.config.cache)
        )
        self._lots: dict[str, LotView] = {}
        self._lock = threading.RLock()
        # Number of full inventory scans performed by search()
        self.scan_count = 0

    def __len__(self) -> int:
        return len(self._lots)

    def __contains__(self, lot_id: object) -> bool:
        return lot_id in self._lots

    def initialize(self) -> None:
        """Load persisted lots, or seed the default grid when there are none."""
        loaded = self.store.load()
        with self._lock:
            self._lots.clear()
            if loaded:
                self._lots.update(loaded)
                logger.info("Initialized registry with %d persisted lots", len(loaded))
            else:
                for record in default_inventory():
                    self._lots[record.id] = record
                logger.info("Initialized registry with %d default lots", len(self._lots))
        self.cache.clear()

    def add_lot(self, block: Any, lot_number: Any, size: Any, price: Any) -> LotRecord:
        """Insert a new AVAILABLE lot.

        Raises
        ------
        ValidationError
            If any value is out of range or not numeric.
        DuplicateLotError
            If the block/lot number pair is taken.
        """
        block, lot_number, size, price = validate_lot_values(block, lot_number, size, price)
        record = factory.create_basic_lot(block, lot_number, size, price)
        self.add_view(record)
        return record

    def add_view(self, view: LotView) -> LotView:
        """Insert a prebuilt chain (e.g. from a template) under its record's id."""
        record = factory.unwrap_base(view)
        if record is None:
            raise ValidationError("Chain has no base lot record")
        validate_lot_values(record.block, record.lot_number, record.size, record.base_price)

        with self._lock:
            if record.id in self._lots:
                raise DuplicateLotError(f"Lot already exists with this block and lot number: {record.id}")
            self._lots[record.id] = view
        self.cache.clear()
        logger.info("Added lot %s", record.id, extra={"lot_id": record.id})
        return view

    def add_from_template(
        self,
        template_name: str,
        block: Any,
        lot_number: Any,
        generator: LotTemplateGenerator | None = None,
    ) -> LotView:
        """Insert a lot generated from a named template.

        Parameters
        ----------
        template_name : str
            One of :meth:`LotTemplateGenerator.template_names`.
        block, lot_number : Any
            Slot for the new lot, validated like :meth:`add_lot`.
        generator : LotTemplateGenerator | None
            Seeded generator to draw from (a fresh unseeded one by default).

        Raises
        ------
        ValidationError
            If the template or slot is invalid.
        DuplicateLotError
            If the block/lot number pair is taken.
        """
        block, lot_number, _, _ = validate_lot_values(block, lot_number, 1, 1)
        generator = generator or LotTemplateGenerator()
        return self.add_view(generator.create(template_name, block, lot_number))

    def get(self, lot_id: str) -> LotView:
        """Return the current view for ``lot_id``.

        Raises
        ------
        LotNotFoundError
            If no lot has that id.
        """
        view = self._lots.get(lot_id)
        if view is None:
            raise LotNotFoundError(f"Lot not found with ID: {lot_id}")
        return view

    def find(self, lot_id: str) -> LotView | None:
        return self._lots.get(lot_id)

    def change_status(self, lot_id: str, target: str | LotStatus) -> LotView:
        """Move a lot to ``target`` (aliases such as ``"sell"`` are accepted).

        Setting the current status again is a no-op.

        Raises
        ------
        LotNotFoundError
            If no lot has that id.
        ValidationError
            If ``target`` names no status.
        IllegalTransitionError
            If the transition is not allowed, e.g. reserving a SOLD lot.
        """
        status = factory.normalize_status(target)
        with self._lock:
            current = self.get(lot_id)
            effective = current.status()
            if status is effective:
                return current
            if not factory.can_transition(effective, status):
                raise IllegalTransitionError(
                    f"Cannot change lot {lot_id} to {status.value}. Current status: {effective.value}"
                )
            updated = factory.change_status(current, status)
            self._lots[lot_id] = updated
        self.cache.clear()
        logger.info(
            "Lot %s status changed %s -> %s",
            lot_id,
            effective.value,
            status.value,
            extra={"lot_id": lot_id, "status": status.value},
        )
        return updated

    def sell(self, lot_id: str) -> LotView:
        return self.change_status(lot_id, LotStatus.SOLD)

    def reserve(self, lot_id: str) -> LotView:
        return self.change_status(lot_id, LotStatus.RESERVED)

    def add_feature(self, lot_id: str, feature_key: str | Feature) -> LotView:
        """Add a feature to a lot; adding one it already has changes nothing.

        Raises
        ------
        LotNotFoundError
            If no lot has that id.
        ValidationError
            If ``feature_key`` names no feature.
        """
        feature = factory.normalize_feature(feature_key)
        with self._lock:
            current = self.get(lot_id)
            updated = factory.add_feature(current, feature)
            if updated is current:
                return current
            self._lots[lot_id] = updated
        self.cache.clear()
        logger.info(
            "Added %s to lot %s",
            feature.display_name,
            lot_id,
            extra={"lot_id": lot_id, "feature": feature.value},
        )
        return updated

    def search(self, criteria: SearchCriteria | None = None, **filters: Any) -> list[LotView]:
        """Return lots matching every given filter.

        Accepts a :class:`SearchCriteria` or its fields as keyword arguments.
        Results for equal criteria are served from the search cache.
        """
        if criteria is None:
            criteria = SearchCriteria(**filters)
        elif filters:
            raise TypeError("Pass either a SearchCriteria or keyword filters, not both")
        return list(self.cache.get_or_compute(criteria, lambda: self._scan(criteria)))

    def get_by_predicate(self, name: str) -> list[LotView]:
        """Lots matching a named predicate; unknown names match nothing."""
        predicate = NAMED_PREDICATES.get(name.strip().lower().replace("withpool", "with_pool"))
        if predicate is None:
            logger.warning("Unknown predicate: %s", name)
            return []
        return [lot for lot in self.get_all() if predicate(lot)]

    def get_all(self) -> list[LotView]:
        """Snapshot of every current view, in insertion order."""
        with self._lock:
            return list(self._lots.values())

    def snapshot(self) -> dict[str, LotView]:
        with self._lock:
            return dict(self._lots)

    def summary(self) -> dict[str, int]:
        """Return counts per effective status and in total."""
        counts = {status.value.lower(): 0 for status in LotStatus}
        lots = self.get_all()
        for lot in lots:
            counts[lot.status().value.lower()] += 1
        counts["total"] = len(lots)
        return counts

    def save(self) -> bool:
        """Persist the current map; False if the write failed."""
        return self.store.save(self.snapshot())

    def close(self) -> bool:
        """Save and drop cached searches."""
        saved = self.save()
        self.cache.clear()
        return saved

    def _scan(self, criteria: SearchCriteria) -> list[LotView]:
        with self._lock:
            self.scan_count += 1
        logger.debug("Scanning inventory for %s", criteria)
        return [lot for lot in self.get_all() if _matches(lot, criteria)]


def _matches(lot: LotView, criteria: SearchCriteria) -> bool:
    record = factory.unwrap_base(lot)
    if record is None:
        return False
    if criteria.block is not None and record.block != criteria.block:
        return False
    if criteria.min_size is not None and record.size < criteria.min_size:
        return False
    if criteria.max_size is not None and record.size > criteria.max_size:
        return False
    price = lot.price()
    if criteria.min_price is not None and price < criteria.min_price:
        return False
    if criteria.max_price is not None and price > criteria.max_price:
        return False
    if criteria.status is not None and lot.status().value != criteria.status:
        return False
    return True
