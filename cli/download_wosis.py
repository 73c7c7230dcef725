#!/usr/bin/env python3
"""Download and extract a WoSIS snapshot"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.constants import DATA_DIR, DEFAULT_SNAPSHOT
from src.downloader.wosis import WosisDownloader, WosisTable
from src.downloader.wosis.models import parse_snapshot, properties_for_table


def setup_logging(debug: bool):
    """Setup logging configuration"""
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def list_tables():
    """List the tables shipped in a snapshot"""
    logging.info("Snapshot tables:")
    for table in WosisTable:
        logging.info(f"  * {table.code}: {table.description}")


def list_properties():
    """List measured soil properties per layer table"""
    for table in (WosisTable.PHYSICAL, WosisTable.CHEMICAL):
        logging.info(f"Properties in {table.code}:")
        for prop in properties_for_table(table):
            logging.info(f"  * {prop.code}: {prop.description}")


def main(argv=None):
    """Main function to download the WoSIS snapshot"""
    parser = argparse.ArgumentParser(description="Download a WoSIS soil profile snapshot")

    parser.add_argument(
        "--snapshot",
        type=str,
        default=DEFAULT_SNAPSHOT,
        help=f"Snapshot release as <year>_<Month> (default: {DEFAULT_SNAPSHOT})",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=DATA_DIR,
        help=f"Base data directory (default: {DATA_DIR})",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Download and extract again even if files exist",
    )
    parser.add_argument(
        "--list-tables", action="store_true", help="List snapshot tables"
    )
    parser.add_argument(
        "--list-properties", action="store_true", help="List measured properties"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    setup_logging(args.debug)

    if args.list_tables:
        list_tables()
        return

    if args.list_properties:
        list_properties()
        return

    snapshot = parse_snapshot(args.snapshot)
    logging.info(f"Acquiring WoSIS snapshot {snapshot.release}")

    downloader = WosisDownloader(args.data_dir, snapshot)
    snapshot_dir = downloader.acquire(force=args.force)
    logging.info(f"Snapshot available in {snapshot_dir}")


if __name__ == "__main__":
    main()
