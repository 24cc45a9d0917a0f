"""File persistence for the id -> lot view map."""

from __future__ import annotations

import json
import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

from real_estate.config import StorageConfig
from real_estate.exceptions import PersistenceError, ValidationError
from real_estate.factory import unwrap_base
from real_estate.models.lot import LotView
from real_estate.sinks.serialization import serialize_value, view_from_dict, view_to_dict

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class PersistenceStore:
    """Save and load the whole lot map as one JSON document.

    Load failures never propagate: a missing file yields an empty map, an
    unreadable or malformed one is logged and also yields an empty map, so
    the caller falls back to the default inventory. Save failures are logged
    and reported as ``False``.
    """

    def __init__(self, data_file: str | Path, backup_file: str | Path | None = None) -> None:
        """Initialize persistence store.

        Parameters
        ----------
        data_file : str | Path
            Data file location.
        backup_file : str | Path | None
            Where the previous data file is copied before each save.
            Defaults to the data file with a ``.bak`` suffix.
        """
        self.data_file = Path(data_file)
        self.backup_path = Path(backup_file) if backup_file else self.data_file.with_suffix(".bak")

    @classmethod
    def from_config(cls, config: StorageConfig) -> "PersistenceStore":
        return cls(config.data_file, config.backup_path)

    def exists(self) -> bool:
        return self.data_file.exists()

    def save(self, lots: Mapping[str, LotView]) -> bool:
        """Write a snapshot of ``lots``, backing up the previous file first."""
        try:
            self._write(lots)
        except PersistenceError as e:
            logger.error("Error saving lots: %s", e)
            return False
        logger.info("Saved %d lots to %s", len(lots), self.data_file, extra={"path": self.data_file})
        return True

    def load(self) -> dict[str, LotView]:
        """Read the map back; empty when the file is absent or unusable."""
        if not self.data_file.exists():
            logger.info("No data file at %s", self.data_file)
            return {}

        try:
            lots = self._read()
        except PersistenceError as e:
            logger.warning("Data file %s is unusable, starting fresh: %s", self.data_file, e)
            return {}

        logger.info("Loaded %d lots from %s", len(lots), self.data_file, extra={"path": self.data_file})
        return lots

    def _write(self, lots: Mapping[str, LotView]) -> None:
        if self.data_file.exists():
            try:
                shutil.copyfile(self.data_file, self.backup_path)
            except OSError as e:
                logger.warning("Could not create backup before saving: %s", e)

        document = {
            "version": FORMAT_VERSION,
            "saved_at": serialize_value(datetime.now()),
            "lots": [view_to_dict(view) for view in lots.values()],
        }

        tmp_path = self.data_file.with_name(self.data_file.name + ".tmp")
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.data_file)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise PersistenceError(f"Cannot write {self.data_file}: {e}") from e

    def _read(self) -> dict[str, LotView]:
        try:
            with open(self.data_file, encoding="utf-8") as f:
                document: Any = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read {self.data_file}: {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get("lots"), list):
            raise PersistenceError("Data file format is invalid")
        if document.get("version") != FORMAT_VERSION:
            raise PersistenceError(f"Unsupported data file version: {document.get('version')}")

        lots: dict[str, LotView] = {}
        for entry in document["lots"]:
            if not isinstance(entry, dict):
                raise PersistenceError("Data file format is invalid")
            try:
                view = view_from_dict(entry)
            except ValidationError as e:
                raise PersistenceError(str(e)) from e
            record_id = entry.get("id")
            if record_id is not None and record_id != _base_id(view):
                raise PersistenceError(f"Lot id {record_id} does not match its block and lot number")
            lots[_base_id(view)] = view
        return lots


def _base_id(view: LotView) -> str:
    record = unwrap_base(view)
    return record.id if record is not None else ""
