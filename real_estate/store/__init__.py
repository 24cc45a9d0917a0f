"""Lot registry, search cache and persistence."""

from real_estate.store.cache import SearchCache
from real_estate.store.persistence import PersistenceStore
from real_estate.store.registry import LotRegistry, default_inventory

__all__ = ["LotRegistry", "PersistenceStore", "SearchCache", "default_inventory"]
