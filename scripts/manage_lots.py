#!/usr/bin/env python3
"""Command-line shell for the lot inventory.

Loads the inventory (or seeds the default 5 x 20 grid), runs one command and
saves on exit for commands that change lots.

Usage:
    python scripts/manage_lots.py report
    python scripts/manage_lots.py add 1 1 250 150000
    python scripts/manage_lots.py sell "Lot1 1"
    python scripts/manage_lots.py feature "Lot2 5" pool
    python scripts/manage_lots.py search --min-price 200000 --status sold
    python scripts/manage_lots.py export lots.csv
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from real_estate.config import RealEstateConfig
from real_estate.exceptions import RealEstateError
from real_estate.generators.templates import LotTemplateGenerator
from real_estate.logging import setup_logging
from real_estate.models.criteria import SearchCriteria
from real_estate.sinks.console import ConsoleSink, format_search_results
from real_estate.sinks.csv_file import CsvFileSink
from real_estate.store.registry import NAMED_PREDICATES, LotRegistry

logger = logging.getLogger(__name__)

READ_ONLY_COMMANDS = {"report", "list", "show", "search", "summary", "export", "templates"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage the real-estate lot inventory")
    parser.add_argument("--config", type=Path, help="Properties file (cache.size, data.file, ...)")
    parser.add_argument("--data-file", type=Path, help="Override data.file")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--no-save", action="store_true", help="Do not save changes on exit")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("report", help="Print the inventory report")
    sub.add_parser("summary", help="Print counts per status")
    sub.add_parser("templates", help="List lot templates")

    p = sub.add_parser("list", help="List lots, optionally by a named predicate")
    p.add_argument("--predicate", choices=sorted(NAMED_PREDICATES))

    p = sub.add_parser("show", help="Show one lot")
    p.add_argument("lot_id")

    p = sub.add_parser("add", help="Add a lot")
    p.add_argument("block")
    p.add_argument("lot_number")
    p.add_argument("size")
    p.add_argument("price")

    p = sub.add_parser("add-template", help="Add a lot generated from a template")
    p.add_argument("template", choices=LotTemplateGenerator.template_names())
    p.add_argument("block", type=int)
    p.add_argument("lot_number", type=int)
    p.add_argument("--seed", type=int)

    for name in ("sell", "reserve"):
        p = sub.add_parser(name, help=f"{name.capitalize()} a lot")
        p.add_argument("lot_id")

    p = sub.add_parser("status", help="Change a lot's status (sell, reserve, ...)")
    p.add_argument("lot_id")
    p.add_argument("status")

    p = sub.add_parser("feature", help="Add a feature (pool, fencing, landscaping)")
    p.add_argument("lot_id")
    p.add_argument("feature")

    p = sub.add_parser("search", help="Search lots")
    p.add_argument("--min-size", type=float)
    p.add_argument("--max-size", type=float)
    p.add_argument("--min-price", type=float)
    p.add_argument("--max-price", type=float)
    p.add_argument("--block", type=int)
    p.add_argument("--status")

    p = sub.add_parser("export", help="Export lots to CSV")
    p.add_argument("path", type=Path)

    p = sub.add_parser("import", help="Import lots from CSV")
    p.add_argument("path", type=Path)

    return parser


def load_config(args: argparse.Namespace) -> RealEstateConfig:
    config = RealEstateConfig.from_properties(args.config) if args.config else RealEstateConfig.from_env()
    if args.data_file:
        config.storage.data_file = args.data_file
        config.storage.backup_file = None
    if args.log_level:
        config.log_level = args.log_level
    return config


def run_command(args: argparse.Namespace, registry: LotRegistry) -> None:
    """Execute one parsed command against ``registry``."""
    console = ConsoleSink()
    command = args.command

    if command == "report":
        console.write_report(registry.get_all())
    elif command == "summary":
        for key, count in registry.summary().items():
            print(f"{key:<10} {count}")
    elif command == "templates":
        for name in LotTemplateGenerator.template_names():
            print(name)
    elif command == "list":
        if args.predicate:
            console.write_results(f"Lots matching '{args.predicate}'", registry.get_by_predicate(args.predicate))
        else:
            console.write_results("All Lots", registry.get_all())
    elif command == "show":
        print(f"Lot found:\n{registry.get(args.lot_id).description()}")
    elif command == "add":
        record = registry.add_lot(args.block, args.lot_number, args.size, args.price)
        print(f"Lot added successfully:\n{record.description()}")
    elif command == "add-template":
        view = registry.add_from_template(
            args.template, args.block, args.lot_number, LotTemplateGenerator(seed=args.seed)
        )
        print(f"Lot added successfully:\n{view.description()}")
    elif command == "sell":
        print(f"Lot has been sold:\n{registry.sell(args.lot_id).description()}")
    elif command == "reserve":
        print(f"Lot has been reserved:\n{registry.reserve(args.lot_id).description()}")
    elif command == "status":
        print(registry.change_status(args.lot_id, args.status).description())
    elif command == "feature":
        print(registry.add_feature(args.lot_id, args.feature).description())
    elif command == "search":
        criteria = SearchCriteria(
            min_size=args.min_size,
            max_size=args.max_size,
            min_price=args.min_price,
            max_price=args.max_price,
            block=args.block,
            status=args.status,
        )
        print(format_search_results(registry.search(criteria), "Search Results"))
    elif command == "export":
        if not CsvFileSink().export(registry.get_all(), args.path):
            raise SystemExit(f"Failed to export to {args.path}")
        print(f"Exported {len(registry)} lots to {args.path}")
    elif command == "import":
        result = CsvFileSink().import_into(
            args.path,
            registry,
            progress=lambda done, total: logger.info("Imported %d/%d rows", done, total),
        )
        print(f"Imported {result.imported_count} lots")
        for error in result.errors:
            print(f"  {error}")


def main() -> int:
    args = build_parser().parse_args()
    config = load_config(args)
    setup_logging(level=config.log_level, log_file=config.log_file)

    registry = LotRegistry(config)
    registry.initialize()

    try:
        run_command(args, registry)
    except RealEstateError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command not in READ_ONLY_COMMANDS and not args.no_save:
        if not registry.close():
            logger.warning("Changes could not be saved to %s", config.storage.data_file)
            return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
