#!/usr/bin/env python3
"""Generate a sample CSV inventory for import testing.

Every free slot of the 5 x 20 grid (or the first ``--count`` slots) gets a
lot drawn from a random template, with a random status.

Usage:
    python scripts/generate_sample_data.py local/sample_lots.csv --seed 42
"""

import argparse
import itertools
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from real_estate.generators.templates import LotTemplateGenerator
from real_estate.logging import setup_logging
from real_estate.models.lot import BLOCK_RANGE, LOT_NUMBER_RANGE
from real_estate.sinks.csv_file import CsvFileSink

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a sample lot CSV")
    parser.add_argument("output", type=Path)
    parser.add_argument("--count", type=int, default=None, help="Number of slots (default: all 100)")
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    setup_logging()

    slots = list(itertools.product(BLOCK_RANGE, LOT_NUMBER_RANGE))
    if args.count is not None:
        slots = slots[: args.count]

    generator = LotTemplateGenerator(seed=args.seed)
    lots = list(generator.generate_inventory(slots))

    args.output.parent.mkdir(parents=True, exist_ok=True)
    if not CsvFileSink().export(lots, args.output):
        return 1
    logger.info("Wrote %d sample lots to %s", len(lots), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
