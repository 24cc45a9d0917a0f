"""Domain models for the lot inventory."""

from real_estate.models.criteria import SearchCriteria
from real_estate.models.enums import Feature, LotStatus
from real_estate.models.lot import (
    BLOCK_RANGE,
    LOT_NUMBER_RANGE,
    FeatureDecorator,
    LotRecord,
    LotView,
    StatusDecorator,
    iter_chain,
    lot_id,
)

__all__ = [
    "BLOCK_RANGE",
    "LOT_NUMBER_RANGE",
    "Feature",
    "FeatureDecorator",
    "LotRecord",
    "LotStatus",
    "LotView",
    "SearchCriteria",
    "StatusDecorator",
    "iter_chain",
    "lot_id",
]
