"""Bounded, time-expiring memoization for search results."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Generic, Hashable, TypeVar

from real_estate.config import CacheConfig

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class _Entry(Generic[V]):
    value: V
    stored_at: float


@dataclass
class _Inflight:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class SearchCache(Generic[K, V]):
    """Thread-safe LRU cache with time-based expiration.

    An entry read after ``ttl_seconds`` is treated as absent. When the cache
    holds more than ``max_entries`` the least recently used entry is dropped.
    :meth:`get_or_compute` runs at most one computation at a time for a given
    key; callers racing on the same key wait and reuse the stored result,
    while computations for other keys proceed independently.

    Parameters
    ----------
    max_entries : int
        Capacity (default 50).
    ttl_seconds : float
        Time to live for each entry (default 30 seconds).
    clock : Callable[[], float]
        Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        max_entries: int = 50,
        ttl_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._data: OrderedDict[K, _Entry[V]] = OrderedDict()
        self._inflight: dict[K, _Inflight] = {}
        self._lock = threading.Lock()
        # Bumped by clear(); results computed under an older generation are discarded
        self._generation = 0
        self.hits = 0
        self.misses = 0

    @classmethod
    def from_config(cls, config: CacheConfig) -> "SearchCache[K, V]":
        """Build a cache sized from configuration."""
        return cls(max_entries=config.max_entries, ttl_seconds=config.ttl_seconds)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def get(self, key: K) -> V | None:
        """Return the fresh value for ``key`` or None."""
        with self._lock:
            return self._get_locked(key)

    def put(self, key: K, value: V) -> None:
        """Store ``value`` under ``key``, evicting the LRU entry if needed."""
        with self._lock:
            self._put_locked(key, value)

    def invalidate(self, key: K) -> None:
        """Drop a single entry."""
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        """Drop every entry, including results still being computed."""
        with self._lock:
            self._data.clear()
            self._generation += 1

    def get_or_compute(self, key: K, compute: Callable[[], V]) -> V:
        """Return the cached value for ``key``, computing it once if absent or expired."""
        with self._lock:
            value = self._get_locked(key)
            if value is not None:
                self.hits += 1
                return value
            inflight = self._inflight.setdefault(key, _Inflight())
            inflight.users += 1

        try:
            with inflight.lock:
                with self._lock:
                    # Another caller may have filled the entry while we waited
                    value = self._get_locked(key)
                    if value is not None:
                        self.hits += 1
                        return value
                    self.misses += 1
                    generation = self._generation

                value = compute()

                with self._lock:
                    if generation == self._generation:
                        self._put_locked(key, value)
                    else:
                        logger.debug("Discarding result computed before invalidation: %s", key)
                return value
        finally:
            with self._lock:
                inflight.users -= 1
                if inflight.users == 0:
                    self._inflight.pop(key, None)

    def _get_locked(self, key: K) -> V | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            del self._data[key]
            return None
        self._data.move_to_end(key)
        return entry.value

    def _put_locked(self, key: K, value: V) -> None:
        self._data[key] = _Entry(value=value, stored_at=self._clock())
        self._data.move_to_end(key)
        while len(self._data) > self.max_entries:
            evicted, _ = self._data.popitem(last=False)
            logger.debug("Evicted search cache entry: %s", evicted)
