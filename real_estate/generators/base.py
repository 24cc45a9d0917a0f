"""Base generator class for lot generators."""

from __future__ import annotations

import random
from abc import ABC
from typing import Sequence, TypeVar

from faker import Faker

T = TypeVar("T")


class BaseGenerator(ABC):
    """Base class for all lot generators.

    Holds one seeded Faker instance. Every draw goes through
    ``self.fake.random`` so that two generators built with the same seed
    produce the same lots, independent of the global ``random`` state.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_US``).
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_US",
    ) -> None:
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)

    @property
    def rng(self) -> random.Random:
        """Random source shared with the Faker instance."""
        return self.fake.random

    def draw_rounded(self, low: float, high: float, step: float) -> float:
        """Uniform draw in ``[low, high]`` snapped to a multiple of ``step``.

        The result stays inside the bounds when they are multiples of ``step``.
        """
        value = round(self.rng.uniform(low, high) / step) * step
        return float(round(min(max(value, low), high), 6))

    def choose_weighted(self, options: Sequence[T], weights: Sequence[float]) -> T:
        """Pick one option with the given relative weights."""
        return self.rng.choices(options, weights=weights, k=1)[0]
