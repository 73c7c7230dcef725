#!/usr/bin/env python3
"""Base CLI functionality for data processors"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.constants import (
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_SNAPSHOT,
    OUTPUT_FORMAT_CSV,
    OUTPUT_FORMAT_PARQUET,
)


def create_base_process_parser(description: str) -> argparse.ArgumentParser:
    """Create base argument parser with common processing options"""
    parser = argparse.ArgumentParser(description=description)

    parser.add_argument(
        "--snapshot",
        type=str,
        default=DEFAULT_SNAPSHOT,
        help=f"Snapshot release as <year>_<Month> (default: {DEFAULT_SNAPSHOT})",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Base data directory (default: ./data)",
    )
    parser.add_argument(
        "--output-format",
        choices=[OUTPUT_FORMAT_CSV, OUTPUT_FORMAT_PARQUET],
        default=DEFAULT_OUTPUT_FORMAT,
        help=f"Output file format (default: {DEFAULT_OUTPUT_FORMAT})",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser


def setup_logging(debug: bool):
    """Setup logging configuration"""
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def run_processor_cli(
    description: str,
    config_class: Any,
    processor_class: Any,
    add_custom_args_func: Optional[Any] = None,
    parse_custom_args_func: Optional[Any] = None,
    success_message: str = "Processing completed successfully!",
    argv: Optional[list] = None,
):
    """Run a processor CLI with flexible functionality

    Args:
        description: CLI description
        config_class: Configuration class to instantiate
        processor_class: Processor class to instantiate
        add_custom_args_func: Function to add custom arguments to parser
        parse_custom_args_func: Function to parse custom arguments and return config kwargs
        success_message: Message to display on successful completion
        argv: Arguments to parse (default: sys.argv)
    """
    parser = create_base_process_parser(description)

    # Add custom arguments if function provided
    if add_custom_args_func:
        add_custom_args_func(parser)

    args = parser.parse_args(argv)

    setup_logging(args.debug)

    try:
        # Base configuration
        config_kwargs = {
            "snapshot": args.snapshot,
            "output_format": args.output_format,
            "debug": args.debug,
            "data_dir": args.data_dir,
        }

        # Parse custom arguments if function provided
        if parse_custom_args_func:
            custom_kwargs = parse_custom_args_func(args)
            config_kwargs.update(custom_kwargs)

        config = config_class(**config_kwargs)

        # Create and run processor
        processor = processor_class(config)
        output_files = processor.process_with_validation()

        logger = logging.getLogger(__name__)
        logger.info(success_message)
        logger.info(f"Generated {len(output_files)} output files:")
        for file_path in output_files:
            logger.info(f"  {file_path}")

    except Exception as e:
        logger = logging.getLogger(__name__)
        logger.error(f"Processing failed: {e}")
        if args.debug:
            import traceback

            traceback.print_exc()
        sys.exit(1)
