#!/usr/bin/env python3
"""Generate a demo portfolio and write it as a backup file.

The file can be restored in the application or fed to
``portfolio_report.py``.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from imob_control.config import AppConfig
from imob_control.generators import PortfolioGenerator
from imob_control.logging import setup_logging
from imob_control.storage import write_backup

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate a sample portfolio backup")
    parser.add_argument(
        "--properties",
        type=int,
        default=4,
        help="Number of properties to generate (default: 4)",
    )
    parser.add_argument(
        "--months",
        type=int,
        default=6,
        help="Months of history per property (default: 6)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the backup file (default: IMOB_BACKUP_DIR or backups)",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    args = parser.parse_args()

    config = AppConfig.from_env()
    setup_logging(args.log_level or config.log_level)

    generator = PortfolioGenerator(
        num_properties=args.properties,
        months=args.months,
        seed=args.seed,
    )
    properties = generator.generate()
    path = write_backup(properties, args.output_dir or config.backup.backup_dir)

    records = sum(len(p.rental_history) for p in properties)
    logger.info("Wrote %d properties and %d records to %s", len(properties), records, path)


if __name__ == "__main__":
    main()
