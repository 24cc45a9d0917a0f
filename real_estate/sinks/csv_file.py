"""CSV sink for exporting and importing lot inventories."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable

from real_estate import factory
from real_estate.exceptions import RealEstateError, ValidationError
from real_estate.models.enums import LotStatus
from real_estate.models.lot import LotView, lot_id

if TYPE_CHECKING:
    from real_estate.store.registry import LotRegistry

logger = logging.getLogger(__name__)

HEADER = ["ID", "Block", "LotNumber", "Size", "Price", "Status", "Features"]
REQUIRED_COLUMNS = ("Block", "LotNumber", "Size", "Price")
BATCH_SIZE = 500

ProgressCallback = Callable[[int, int], None]


@dataclass
class ImportResult:
    """Outcome of a CSV import."""

    imported_count: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class CsvFileSink:
    """Write lot views to CSV and read them back into a registry."""

    def __init__(self, batch_size: int = BATCH_SIZE) -> None:
        """Initialize CSV sink.

        Parameters
        ----------
        batch_size : int
            Rows processed between progress callbacks.
        """
        self.batch_size = batch_size
        self._counts: dict[str, int] = {}

    def export(
        self,
        lots: Iterable[LotView],
        path: str | Path,
        progress: ProgressCallback | None = None,
    ) -> bool:
        """Export lots to ``path``; False if the file could not be written.

        Price is the effective (decorated) price, Features the ordered
        display names joined by ``", "``.
        """
        rows = [to_row(lot) for lot in lots]
        file_path = Path(path)
        try:
            with open(file_path, "w", encoding="utf-8", newline="") as f:
                writer = csv.writer(f)
                writer.writerow(HEADER)
                for start in range(0, len(rows), self.batch_size):
                    writer.writerows(rows[start : start + self.batch_size])
                    if progress:
                        progress(min(start + self.batch_size, len(rows)), len(rows))
        except OSError as e:
            logger.error("Failed to export to CSV %s: %s", file_path, e)
            return False

        self._counts[str(file_path)] = len(rows)
        logger.info("Exported %d lots to CSV: %s", len(rows), file_path)
        return True

    def import_into(
        self,
        path: str | Path,
        registry: LotRegistry,
        progress: ProgressCallback | None = None,
    ) -> ImportResult:
        """Import lots from ``path`` into ``registry``.

        Each row needs Block, LotNumber, Size and Price. The base lot is added
        first, then Status and Features are applied. Price is read as the
        effective price, so the listed features' costs are subtracted to get
        the base price. A failing row is reported as ``"Line N: message"`` and
        the import continues.
        """
        result = ImportResult()
        file_path = Path(path)
        try:
            with open(file_path, encoding="utf-8", newline="") as f:
                rows = list(csv.DictReader(f))
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            logger.error("Failed to import from CSV %s: %s", file_path, e)
            result.errors.append(f"File error: {e}")
            return result

        for index, row in enumerate(rows):
            line_number = index + 2  # header is line 1
            try:
                self._import_row(row, registry)
                result.imported_count += 1
            except RealEstateError as e:
                result.errors.append(f"Line {line_number}: {e}")

            done = index + 1
            if progress and (done % self.batch_size == 0 or done == len(rows)):
                progress(done, len(rows))

        logger.info(
            "Imported %d lots from CSV with %d errors",
            result.imported_count,
            len(result.errors),
        )
        return result

    def _import_row(self, row: dict[str, str | None], registry: LotRegistry) -> None:
        missing = [col for col in REQUIRED_COLUMNS if not (row.get(col) or "").strip()]
        if missing:
            raise ValidationError(f"Not enough fields (missing {', '.join(missing)})")

        features = factory.parse_features(row.get("Features"))
        try:
            # Price column is the effective price; strip feature costs to get the base
            base_price = float(row["Price"]) - sum(f.cost for f in features)
        except ValueError as e:
            raise ValidationError(f"Invalid price: {row['Price']}") from e

        # Blank status cell means AVAILABLE
        status_text = (row.get("Status") or "").strip()
        status = factory.normalize_status(status_text) if status_text else LotStatus.AVAILABLE

        record = registry.add_lot(row["Block"], row["LotNumber"], row["Size"], base_price)
        new_id = lot_id(record.block, record.lot_number)

        if status is not LotStatus.AVAILABLE:
            registry.change_status(new_id, status)

        for feature in features:
            registry.add_feature(new_id, feature)

    def close(self) -> None:
        """Log a summary of exported files."""
        for file_path, count in self._counts.items():
            logger.info("  %s: %d records", file_path, count)


def to_row(lot: LotView) -> list[str]:
    """CSV row for one lot view."""
    record = factory.unwrap_base(lot)
    if record is None:
        raise ValueError("Chain has no base lot record")
    return [
        record.id,
        str(record.block),
        str(record.lot_number),
        f"{record.size:.2f}",
        f"{lot.price():.2f}",
        lot.status().value,
        ", ".join(factory.feature_names(lot)),
    ]
