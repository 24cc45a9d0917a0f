"""Tests for PersistenceStore."""

import json
from pathlib import Path

from real_estate import factory
from real_estate.config import RealEstateConfig, StorageConfig
from real_estate.models import LotStatus, LotView
from real_estate.store.persistence import FORMAT_VERSION, PersistenceStore
from real_estate.store.registry import LotRegistry


def _sample_lots() -> dict[str, LotView]:
    plain = factory.create_basic_lot(1, 1, 225, 117500)
    sold = factory.change_status(factory.add_feature(factory.create_basic_lot(2, 5, 325, 142500), "pool"), "sell")
    reserved = factory.add_feature(
        factory.change_status(factory.create_basic_lot(3, 7, 295, 162500), "reserve"), "fencing"
    )
    return {"Lot1 1": plain, "Lot2 5": sold, "Lot3 7": reserved}


class TestPersistenceStore:
    """Tests for save and load."""

    def test_from_config(self, data_file: Path) -> None:
        """Test default backup path."""
        store = PersistenceStore.from_config(StorageConfig(data_file=data_file))

        assert store.data_file == data_file
        assert store.backup_path == data_file.with_suffix(".bak")

    def test_load_missing_file(self, data_file: Path) -> None:
        """Test a missing file yields an empty map."""
        store = PersistenceStore(data_file)

        assert not store.exists()
        assert store.load() == {}

    def test_round_trip(self, data_file: Path) -> None:
        """Test price, status, features and description survive save/load."""
        store = PersistenceStore(data_file)
        lots = _sample_lots()

        assert store.save(lots) is True
        loaded = store.load()

        assert set(loaded) == set(lots)
        for lot_id, view in lots.items():
            restored = loaded[lot_id]
            assert restored.price() == view.price()
            assert restored.status() is view.status()
            assert restored.description() == view.description()
            assert factory.features(restored) == factory.features(view)

    def test_document_format(self, data_file: Path) -> None:
        """Test the written JSON document."""
        PersistenceStore(data_file).save(_sample_lots())

        document = json.loads(data_file.read_text(encoding="utf-8"))

        assert document["version"] == FORMAT_VERSION
        assert "saved_at" in document
        sold = next(entry for entry in document["lots"] if entry["id"] == "Lot2 5")
        assert sold["features"] == ["pool"]
        assert sold["status"] == "SOLD"
        assert sold["base_price"] == 142500.0
        assert sold["price"] == 167500.0

    def test_backup_created_on_second_save(self, data_file: Path) -> None:
        """Test the previous file is kept as a backup."""
        store = PersistenceStore(data_file)
        store.save({"Lot1 1": factory.create_basic_lot(1, 1, 225, 117500)})
        first = data_file.read_text(encoding="utf-8")

        store.save(_sample_lots())

        assert store.backup_path.exists()
        assert store.backup_path.read_text(encoding="utf-8") == first
        assert len(store.load()) == 3

    def test_custom_backup_file(self, tmp_path: Path) -> None:
        """Test an explicit backup location."""
        store = PersistenceStore(tmp_path / "lots.dat", tmp_path / "old" / "lots.backup")
        (tmp_path / "old").mkdir()
        store.save(_sample_lots())
        store.save(_sample_lots())

        assert (tmp_path / "old" / "lots.backup").exists()

    def test_corrupt_file(self, data_file: Path) -> None:
        """Test unreadable JSON yields an empty map."""
        data_file.write_text("{not json", encoding="utf-8")

        assert PersistenceStore(data_file).load() == {}

    def test_wrong_version(self, data_file: Path) -> None:
        """Test an unknown format version is rejected."""
        data_file.write_text(json.dumps({"version": 99, "lots": []}), encoding="utf-8")

        assert PersistenceStore(data_file).load() == {}

    def test_malformed_entry(self, data_file: Path) -> None:
        """Test an entry missing fields rejects the whole file."""
        document = {"version": FORMAT_VERSION, "lots": [{"block": 1}]}
        data_file.write_text(json.dumps(document), encoding="utf-8")

        assert PersistenceStore(data_file).load() == {}

    def test_mismatched_id(self, data_file: Path) -> None:
        """Test an id inconsistent with block and lot number is rejected."""
        document = {
            "version": FORMAT_VERSION,
            "lots": [{"id": "Lot4 4", "block": 1, "lot_number": 1, "size": 225, "base_price": 117500}],
        }
        data_file.write_text(json.dumps(document), encoding="utf-8")

        assert PersistenceStore(data_file).load() == {}

    def test_save_failure_returns_false(self, tmp_path: Path) -> None:
        """Test a write error is reported, not raised."""
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = PersistenceStore(blocker / "lots.dat")

        assert store.save(_sample_lots()) is False

    def test_loaded_status_defaults(self, data_file: Path) -> None:
        """Test entries without status fields load as AVAILABLE."""
        document = {
            "version": FORMAT_VERSION,
            "lots": [{"block": 2, "lot_number": 2, "size": 250, "base_price": 145000}],
        }
        data_file.write_text(json.dumps(document), encoding="utf-8")

        loaded = PersistenceStore(data_file).load()

        assert loaded["Lot2 2"].status() is LotStatus.AVAILABLE

    def test_out_of_range_entry(self, data_file: Path) -> None:
        """Test an entry violating lot constraints rejects the whole file."""
        document = {
            "version": FORMAT_VERSION,
            "lots": [
                {"block": 1, "lot_number": 1, "size": 225, "base_price": 117500},
                {"id": "Lot9 99", "block": 9, "lot_number": 99, "size": -5, "base_price": -1},
            ],
        }
        data_file.write_text(json.dumps(document), encoding="utf-8")

        assert PersistenceStore(data_file).load() == {}

    def test_out_of_range_file_reseeds_registry(self, config: RealEstateConfig, data_file: Path) -> None:
        """Test a registry falls back to the seed grid on an out-of-range file."""
        document = {
            "version": FORMAT_VERSION,
            "lots": [{"block": 2, "lot_number": 3.5, "size": 250, "base_price": 145000}],
        }
        data_file.write_text(json.dumps(document), encoding="utf-8")
        registry = LotRegistry(config)

        registry.initialize()

        assert len(registry) == 100
