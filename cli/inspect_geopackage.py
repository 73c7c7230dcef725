#!/usr/bin/env python3
"""List and scan the tables of the snapshot GeoPackage"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.constants import DATA_DIR, DEFAULT_SNAPSHOT
from src.downloader.wosis import WosisDownloader
from src.downloader.wosis.models import parse_snapshot
from src.processing.wosis.geopackage import list_feature_layers, list_tables, read_table


def setup_logging(debug: bool):
    """Setup logging configuration"""
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def main(argv=None):
    parser = argparse.ArgumentParser(description="Inspect the WoSIS GeoPackage")
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
    parser.add_argument("--table", type=str, help="Table to scan (default: list tables)")
    parser.add_argument(
        "--limit", type=int, default=10, help="Rows to show when scanning (default: 10)"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    setup_logging(args.debug)

    snapshot = parse_snapshot(args.snapshot)
    downloader = WosisDownloader(args.data_dir, snapshot)
    gpkg_path = downloader.acquire() / snapshot.geopackage_name

    if not args.table:
        features = set(list_feature_layers(gpkg_path))
        logging.info(f"Tables in {gpkg_path.name}:")
        for table in list_tables(gpkg_path):
            marker = " (features)" if table in features else ""
            logging.info(f"  * {table}{marker}")
        return

    df = read_table(gpkg_path, args.table, limit=args.limit)
    print(df.to_string(index=False))


if __name__ == "__main__":
    main()
