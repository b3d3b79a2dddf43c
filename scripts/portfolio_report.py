#!/usr/bin/env python3
"""Print the dashboard report for a portfolio file.

Accepts either a backup file or the application's storage file; both
carry a ``properties`` array.
"""

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from imob_control.analytics import SelectionFilter, aggregate_filter
from imob_control.config import AppConfig
from imob_control.exceptions import StorageError
from imob_control.logging import setup_logging
from imob_control.report import render_report
from imob_control.storage import read_backup

logger = logging.getLogger(__name__)


def parse_day(value: str) -> date:
    """Accept ``YYYY-MM-DD`` or ``DD/MM/YYYY``."""
    for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise argparse.ArgumentTypeError(f"invalid date: {value!r}")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Print the portfolio dashboard report")
    parser.add_argument("file", type=Path, help="Backup or storage JSON file")
    parser.add_argument(
        "--property",
        action="append",
        default=[],
        dest="property_ids",
        help="Property id to include (repeatable, default: all)",
    )
    parser.add_argument("--start", type=parse_day, help="Period start date")
    parser.add_argument("--end", type=parse_day, help="Period end date")
    parser.add_argument(
        "--max-records",
        type=int,
        default=None,
        help="Maximum rows in the record table (default: all)",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    args = parser.parse_args()

    config = AppConfig.from_env()
    setup_logging(args.log_level or config.log_level)

    try:
        properties = read_backup(args.file)
    except StorageError as e:
        logger.error("%s", e)
        sys.exit(1)

    selection = SelectionFilter(frozenset(args.property_ids), args.start, args.end)
    result = aggregate_filter(properties, selection)
    print(
        render_report(
            result,
            max_records=args.max_records,
            filtered_start=args.start,
            filtered_end=args.end,
        )
    )


if __name__ == "__main__":
    main()
