"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from real_estate.config import CacheConfig, RealEstateConfig, StorageConfig
from real_estate.models.lot import LotRecord
from real_estate.store.registry import LotRegistry


class FakeClock:
    """Manually advanced time source for cache tests."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def clock() -> FakeClock:
    """Fake monotonic clock starting at zero."""
    return FakeClock()


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """Data file location inside a per-test directory."""
    return tmp_path / "real_estate_data.dat"


@pytest.fixture
def config(data_file: Path) -> RealEstateConfig:
    """Configuration pointing at the per-test data file."""
    return RealEstateConfig(
        cache=CacheConfig(max_entries=50, expiration_ms=30_000),
        storage=StorageConfig(data_file=data_file),
    )


@pytest.fixture
def registry(config: RealEstateConfig) -> LotRegistry:
    """Registry seeded with the default 5 x 20 inventory."""
    registry = LotRegistry(config)
    registry.initialize()
    return registry


@pytest.fixture
def empty_registry(config: RealEstateConfig) -> LotRegistry:
    """Registry with no lots."""
    return LotRegistry(config)


@pytest.fixture
def sample_lot() -> LotRecord:
    """Plain AVAILABLE lot in block 1."""
    return LotRecord(block=1, lot_number=1, size=250.0, base_price=150000.0)
