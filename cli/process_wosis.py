#!/usr/bin/env python3
"""Join WoSIS profiles to their layers and write tables, summaries and maps"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from cli.base_process_cli import run_processor_cli
from src.processing.wosis.config import WosisConfig
from src.processing.wosis.processor import WosisProcessor
from src.downloader.wosis.models import WosisProperty


def add_wosis_arguments(parser):
    """Add WoSIS-specific arguments"""
    parser.add_argument(
        "--countries",
        nargs="+",
        help="Country names or ISO codes to keep (default: all)",
    )
    parser.add_argument(
        "--properties",
        nargs="+",
        choices=[prop.code for prop in WosisProperty],
        help="Properties to extract into tidy tables (default: none)",
    )
    parser.add_argument(
        "--keep-unmatched",
        action="store_true",
        help="Keep profiles without layers, with empty layer fields",
    )
    parser.add_argument(
        "--no-plots", action="store_true", help="Skip rendering figures"
    )
    parser.add_argument(
        "--force-download",
        action="store_true",
        help="Download and extract the snapshot again",
    )


def parse_wosis_arguments(args):
    """Parse WoSIS-specific arguments and return config kwargs"""
    return {
        "countries": args.countries or [],
        "properties": args.properties or [],
        "keep_unmatched": args.keep_unmatched,
        "make_plots": not args.no_plots,
        "force_download": args.force_download,
    }


def main(argv=None):
    run_processor_cli(
        description="Process the WoSIS snapshot into joined profile/layer tables",
        config_class=WosisConfig,
        processor_class=WosisProcessor,
        add_custom_args_func=add_wosis_arguments,
        parse_custom_args_func=parse_wosis_arguments,
        success_message="WoSIS processing completed successfully!",
        argv=argv,
    )


if __name__ == "__main__":
    main()
