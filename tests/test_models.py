"""Tests for lot records, decorators, enums and search criteria."""

import dataclasses

import pytest

from real_estate.exceptions import ValidationError
from real_estate.models import (
    Feature,
    FeatureDecorator,
    LotRecord,
    LotStatus,
    SearchCriteria,
    StatusDecorator,
    iter_chain,
    lot_id,
)


class TestEnums:
    """Tests for enum types."""

    def test_lot_status_values(self) -> None:
        """Test status values are upper-case strings."""
        assert LotStatus.AVAILABLE.value == "AVAILABLE"
        assert LotStatus.RESERVED.value == "RESERVED"
        assert LotStatus.SOLD.value == "SOLD"
        assert LotStatus("SOLD") is LotStatus.SOLD

    def test_feature_display_names(self) -> None:
        """Test feature display names."""
        assert Feature.POOL.display_name == "Swimming Pool"
        assert Feature.LANDSCAPING.display_name == "Premium Landscaping"
        assert Feature.FENCING.display_name == "Perimeter Fencing"

    def test_feature_costs(self) -> None:
        """Test feature costs."""
        assert Feature.POOL.cost == 25000.0
        assert Feature.LANDSCAPING.cost == 12000.0
        assert Feature.FENCING.cost == 8000.0


class TestLotRecord:
    """Tests for LotRecord."""

    def test_id_format(self, sample_lot: LotRecord) -> None:
        """Test canonical id."""
        assert sample_lot.id == "Lot1 1"
        assert lot_id(3, 17) == "Lot3 17"

    def test_defaults(self, sample_lot: LotRecord) -> None:
        """Test a new record is available and undecorated."""
        assert sample_lot.status() is LotStatus.AVAILABLE
        assert sample_lot.price() == 150000.0

    def test_description(self, sample_lot: LotRecord) -> None:
        """Test the base description format."""
        assert sample_lot.description() == "Lot 1-1 (250.0 sqm) - $150000.0 - Status: AVAILABLE"

    def test_numbers_coerced_to_float(self) -> None:
        """Test integer size and price become floats."""
        record = LotRecord(block=2, lot_number=3, size=300, base_price=200000)

        assert isinstance(record.size, float)
        assert isinstance(record.base_price, float)

    def test_frozen(self, sample_lot: LotRecord) -> None:
        """Test records cannot be mutated."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample_lot.base_price = 1.0  # type: ignore[misc]


class TestDecorators:
    """Tests for the decorator chain."""

    def test_feature_adds_cost_and_name(self, sample_lot: LotRecord) -> None:
        """Test a feature decorator layers price and description."""
        view = FeatureDecorator(sample_lot, Feature.POOL)

        assert view.price() == 175000.0
        assert view.status() is LotStatus.AVAILABLE
        assert view.feature_name == "Swimming Pool"
        assert view.additional_cost == 25000.0
        assert view.description() == sample_lot.description() + " + Swimming Pool"

    def test_status_overrides_status_only(self, sample_lot: LotRecord) -> None:
        """Test a status decorator changes status but not price."""
        view = StatusDecorator(sample_lot, LotStatus.SOLD)

        assert view.status() is LotStatus.SOLD
        assert view.price() == sample_lot.price()
        assert view.description() == "Lot 1-1 (250.0 sqm) - $150000.0 - Status: SOLD"

    def test_status_above_features(self, sample_lot: LotRecord) -> None:
        """Test status rendered once with features listed after it."""
        view = StatusDecorator(
            FeatureDecorator(FeatureDecorator(sample_lot, Feature.POOL), Feature.FENCING),
            LotStatus.RESERVED,
        )

        assert view.price() == 150000.0 + 25000.0 + 8000.0
        assert view.description() == (
            "Lot 1-1 (250.0 sqm) - $150000.0 - Status: RESERVED"
            " + Swimming Pool + Perimeter Fencing"
        )

    def test_description_independent_of_layer_order(self, sample_lot: LotRecord) -> None:
        """Test status below or above a feature renders the same text."""
        status_first = FeatureDecorator(StatusDecorator(sample_lot, LotStatus.SOLD), Feature.POOL)
        feature_first = StatusDecorator(FeatureDecorator(sample_lot, Feature.POOL), LotStatus.SOLD)

        assert status_first.description() == feature_first.description()
        assert status_first.price() == feature_first.price()

    def test_decoration_leaves_inner_unchanged(self, sample_lot: LotRecord) -> None:
        """Test wrapping never mutates the wrapped view."""
        before = sample_lot.description()
        FeatureDecorator(sample_lot, Feature.LANDSCAPING)
        StatusDecorator(sample_lot, LotStatus.SOLD)

        assert sample_lot.description() == before
        assert sample_lot.status() is LotStatus.AVAILABLE

    def test_iter_chain(self, sample_lot: LotRecord) -> None:
        """Test iteration from head to record."""
        pooled = FeatureDecorator(sample_lot, Feature.POOL)
        head = StatusDecorator(pooled, LotStatus.SOLD)

        assert list(iter_chain(head)) == [head, pooled, sample_lot]
        assert list(iter_chain(sample_lot)) == [sample_lot]

    def test_feature_coerced_from_value(self, sample_lot: LotRecord) -> None:
        """Test decorators accept raw enum values."""
        view = FeatureDecorator(sample_lot, "fencing")  # type: ignore[arg-type]

        assert view.feature is Feature.FENCING


class TestSearchCriteria:
    """Tests for SearchCriteria."""

    def test_empty(self) -> None:
        """Test no filters."""
        assert SearchCriteria().is_empty()
        assert not SearchCriteria(block=1).is_empty()

    def test_normalization_makes_equal_keys(self) -> None:
        """Test equivalent criteria compare and hash equal."""
        a = SearchCriteria(min_size=250, status="sold")
        b = SearchCriteria(min_size=250.0, status=" SOLD ")

        assert a == b
        assert hash(a) == hash(b)
        assert a.status == "SOLD"

    def test_invalid_block(self) -> None:
        """Test block outside 1..5."""
        with pytest.raises(ValidationError, match="Block number must be between 1 and 5"):
            SearchCriteria(block=6)

    def test_unknown_status(self) -> None:
        """Test unknown status name."""
        with pytest.raises(ValidationError, match="Unknown status"):
            SearchCriteria(status="pending")

    def test_inverted_ranges(self) -> None:
        """Test min greater than max reports both violations."""
        with pytest.raises(ValidationError) as exc_info:
            SearchCriteria(min_size=500, max_size=100, min_price=3, max_price=1)

        assert len(exc_info.value.violations) == 2

    def test_status_enum_member(self) -> None:
        """Test a LotStatus member normalizes to its value."""
        criteria = SearchCriteria(status=LotStatus.SOLD)

        assert criteria.status == "SOLD"
        assert criteria == SearchCriteria(status="sold")

    def test_whole_float_block(self) -> None:
        """Test an integral float block is accepted as an int."""
        assert SearchCriteria(block=2.0).block == 2

    def test_fractional_block(self) -> None:
        """Test a fractional block is rejected, not truncated."""
        with pytest.raises(ValidationError, match="whole number"):
            SearchCriteria(block=2.7)

    def test_non_numeric_values(self) -> None:
        """Test non-numeric bounds raise ValidationError."""
        with pytest.raises(ValidationError, match="Block number must be a whole number"):
            SearchCriteria(block="x")
        with pytest.raises(ValidationError, match="min_size must be numeric"):
            SearchCriteria(min_size="big")
