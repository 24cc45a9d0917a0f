"""Console sink and plain-text reports for lot views."""

from typing import Iterable

from real_estate import factory
from real_estate.models.lot import LotView

REPORT_TITLE = "REAL ESTATE PROPERTY REPORT"


def format_report(lots: Iterable[LotView]) -> str:
    """Tabular inventory report using the effective price and status."""
    lots = list(lots)
    if not lots:
        return "No lots available in the system."

    lines = [
        REPORT_TITLE,
        "=" * 30,
        f"{'ID':<10} {'Block':<8} {'Lot#':<8} {'Size(sqm)':<10} {'Price($)':<15} {'Status':<10}",
        "-" * 54,
    ]
    for lot in lots:
        record = factory.unwrap_base(lot)
        if record is None:
            lines.append(lot.description())
            continue
        lines.append(
            f"{record.id:<10} {record.block:<8d} {record.lot_number:<8d} "
            f"{record.size:<10.2f} {lot.price():<15.2f} {lot.status().value:<10}"
        )
    lines.append("")
    lines.append(f"Total Properties: {len(lots)}")
    return "\n".join(lines)


def format_search_results(lots: Iterable[LotView], title: str) -> str:
    """One description per line under ``title``."""
    lots = list(lots)
    if not lots:
        return "No lots found matching your criteria."

    lines = [title, "=" * 30]
    lines.extend(lot.description() for lot in lots)
    lines.append("")
    lines.append(f"Total Properties Found: {len(lots)}")
    return "\n".join(lines)


class ConsoleSink:
    """Print lot reports to stdout."""

    def __init__(self, max_records: int | None = None) -> None:
        """Initialize console sink.

        Parameters
        ----------
        max_records : int | None
            Maximum lots printed per call (None for all).
        """
        self.max_records = max_records
        self._counts: dict[str, int] = {}

    def write_report(self, lots: list[LotView]) -> None:
        """Print the inventory report."""
        print(format_report(self._limit(lots)))
        self._count(REPORT_TITLE, len(lots))

    def write_results(self, title: str, lots: list[LotView]) -> None:
        """Print search results under a title."""
        print(format_search_results(self._limit(lots), title))
        if self.max_records and len(lots) > self.max_records:
            print(f"... and {len(lots) - self.max_records} more lots")
        self._count(title, len(lots))

    def close(self) -> None:
        """Print summary."""
        print(f"\n{'='*60}")
        print("Console Sink Summary")
        print("=" * 60)
        for title, count in self._counts.items():
            print(f"  {title}: {count} lots")

    def _limit(self, lots: list[LotView]) -> list[LotView]:
        return lots[: self.max_records] if self.max_records else lots

    def _count(self, title: str, count: int) -> None:
        self._counts[title] = self._counts.get(title, 0) + count
