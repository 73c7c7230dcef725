#!/usr/bin/env python3
"""Main CLI entry point for wosis-snapshot

This allows running CLI commands via:
    python -m cli download_wosis --help
    python -m cli process_wosis --help
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

COMMANDS = {
    "download_wosis": "Download and extract a WoSIS snapshot",
    "process_wosis": "Join profiles to layers and write tables, summaries and maps",
    "inspect_geopackage": "List or scan the tables of the snapshot GeoPackage",
}


def print_usage():
    print("Usage: python -m cli <command> [args...]")
    print("\nAvailable commands:")
    for command, description in COMMANDS.items():
        print(f"  {command:<20} {description}")
    print("\nFor help on a specific command:")
    print("  python -m cli <command> --help")


def main():
    """Main CLI dispatcher"""
    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    command = sys.argv[1]
    # Remove the command from sys.argv so the subcommand can parse its own args
    sys.argv = [sys.argv[0]] + sys.argv[2:]

    if command == "download_wosis":
        from cli.download_wosis import main as download_main

        download_main()
    elif command == "process_wosis":
        from cli.process_wosis import main as process_main

        process_main()
    elif command == "inspect_geopackage":
        from cli.inspect_geopackage import main as inspect_main

        inspect_main()
    else:
        print(f"Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
