"""Shared serialization utilities for lot chains."""

from datetime import datetime
from enum import Enum
from typing import Any

from real_estate import factory
from real_estate.exceptions import ValidationError
from real_estate.models.enums import LotStatus
from real_estate.models.lot import LotRecord, LotView


def view_to_dict(view: LotView) -> dict[str, Any]:
    """Flatten a chain into its record fields, ordered features and effective status."""
    record = factory.unwrap_base(view)
    if record is None:
        raise ValidationError("Chain has no base lot record")
    return {
        "id": record.id,
        "block": record.block,
        "lot_number": record.lot_number,
        "size": record.size,
        "base_price": record.base_price,
        "base_status": record.base_status.value,
        "features": [f.value for f in factory.features(view)],
        "status": view.status().value,
        "price": view.price(),
    }


def view_from_dict(data: dict[str, Any]) -> LotView:
    """Rebuild a chain from :func:`view_to_dict` output.

    The record is restored with its base status, features are re-applied in
    order and a status decorator is added when the effective status differs.

    Raises
    ------
    ValidationError
        If a field is missing, malformed or out of range.
    """
    try:
        block, lot_number, size, base_price = factory.validate_lot_values(
            data["block"], data["lot_number"], data["size"], data["base_price"]
        )
        record = LotRecord(
            block=block,
            lot_number=lot_number,
            size=size,
            base_price=base_price,
            base_status=LotStatus(data.get("base_status", LotStatus.AVAILABLE.value)),
        )
        view: LotView = record
        for key in data.get("features", []):
            view = factory.add_feature(view, key)
        status = LotStatus(data.get("status", record.base_status.value))
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Malformed lot entry: {e}") from e

    if status != view.status():
        view = factory.change_status(view, status)
    return view


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value
