"""
SummarizedExperiment CLI - Command-line access to experiment bundles.

Commands:
    summarizedexperiment info        - Describe a bundle
    summarizedexperiment subset      - Select rows/columns into a new bundle
    summarizedexperiment combine     - Bind bundles along rows or columns
    summarizedexperiment import-csv  - Build a bundle from a features x samples CSV
"""

import argparse
import logging
import sys
from typing import Optional, List

from summarizedexperiment import __version__


def main(args: Optional[List[str]] = None) -> int:
    """Main CLI dispatcher for summarizedexperiment."""
    parser = argparse.ArgumentParser(
        prog="summarizedexperiment",
        description="Inspect, subset and combine SummarizedExperiment bundles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  info        Describe a bundle (shape, assays, names, metadata)
  subset      Select rows/columns into a new bundle
  combine     Bind bundles along rows or columns
  import-csv  Build a bundle from a features x samples CSV

Examples:
  summarizedexperiment import-csv --input counts.csv --column-data samples.csv --output data/raw
  summarizedexperiment subset --input data/raw --row-positions 0:100 --output data/top100
  summarizedexperiment combine --axis columns --output data/all data/batch1 data/batch2
  summarizedexperiment info data/all
        """
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Import and register subcommands
    from summarizedexperiment.cli import info, subset, combine, import_csv
    info.register_parser(subparsers)
    subset.register_parser(subparsers)
    combine.register_parser(subparsers)
    import_csv.register_parser(subparsers)

    parsed_args = parser.parse_args(args)

    if parsed_args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Keep the raw argv so subcommands can tell explicit flags from defaults
    parsed_args.cli_args = list(sys.argv[1:] if args is None else args)

    # Dispatch to subcommand
    return parsed_args.func(parsed_args)


if __name__ == "__main__":
    sys.exit(main())
