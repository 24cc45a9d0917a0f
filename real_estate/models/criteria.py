"""Search criteria value type, also used as the search cache key."""

from __future__ import annotations

from dataclasses import dataclass

from real_estate.exceptions import ValidationError
from real_estate.models.enums import LotStatus
from real_estate.models.lot import BLOCK_RANGE


@dataclass(frozen=True)
class SearchCriteria:
    """Optional filter bounds; ``None`` means the filter is not applied.

    Instances are normalized on construction (numbers to ``float``, status to
    its canonical upper-case value) so that field-for-field equal criteria
    compare and hash equal.
    """

    min_size: float | None = None
    max_size: float | None = None
    min_price: float | None = None
    max_price: float | None = None
    block: int | None = None
    status: str | LotStatus | None = None

    def __post_init__(self) -> None:
        violations = []
        for name in ("min_size", "max_size", "min_price", "max_price"):
            value = getattr(self, name)
            if value is None:
                continue
            try:
                object.__setattr__(self, name, float(value))
            except (TypeError, ValueError):
                violations.append(f"{name} must be numeric, got {value!r}")

        if self.block is not None:
            try:
                block = float(self.block)
            except (TypeError, ValueError):
                violations.append(f"Block number must be a whole number, got {self.block!r}")
            else:
                if not block.is_integer():
                    violations.append(f"Block number must be a whole number, got {self.block!r}")
                elif int(block) not in BLOCK_RANGE:
                    violations.append("Block number must be between 1 and 5")
                else:
                    object.__setattr__(self, "block", int(block))

        if self.status is not None:
            if isinstance(self.status, LotStatus):
                normalized = self.status.value
            else:
                normalized = str(self.status).strip().upper()
            if normalized not in LotStatus.__members__:
                violations.append(f"Unknown status: {self.status}")
            object.__setattr__(self, "status", normalized)

        if violations:
            raise ValidationError(violations)

        # Every set bound is a float from here on
        if self.min_size is not None and self.max_size is not None and self.min_size > self.max_size:
            violations.append("Minimum size must not exceed maximum size")
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            violations.append("Minimum price must not exceed maximum price")

        if violations:
            raise ValidationError(violations)

    def is_empty(self) -> bool:
        """True when no filter is set."""
        return all(
            getattr(self, name) is None
            for name in ("min_size", "max_size", "min_price", "max_price", "block", "status")
        )
