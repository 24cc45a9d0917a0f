"""Output sinks for exporting and reporting lot data."""

from real_estate.sinks.console import ConsoleSink
from real_estate.sinks.csv_file import CsvFileSink, ImportResult

__all__ = ["ConsoleSink", "CsvFileSink", "ImportResult"]
