"""
summarizedexperiment combine command - Bind bundles along rows or columns.

Usage:
    summarizedexperiment combine --axis columns --output data/all data/batch1 data/batch2
"""

import argparse
import logging
import sys
from pathlib import Path

from summarizedexperiment.core.combine import bind_columns, bind_rows
from summarizedexperiment.core.errors import ExperimentError
from summarizedexperiment.io import load_experiment, write_experiment

logger = logging.getLogger(__name__)


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the combine subcommand."""
    parser = subparsers.add_parser(
        "combine",
        help="Bind bundles along rows or columns",
        description=(
            "Concatenate bundles in the given order. With --axis rows the "
            "column metadata must agree across inputs (and vice versa)."
        )
    )
    parser.add_argument("inputs", type=Path, nargs="+",
                        help="Bundle directories, in output order")
    parser.add_argument("--output", "-o", type=Path, required=True,
                        help="Output bundle directory")
    parser.add_argument("--axis", choices=["rows", "columns"], default="rows",
                        help="Axis to bind along (default: rows)")
    parser.add_argument("--no-check", action="store_true",
                        help="Skip content comparison of the fixed axis (structural checks still run)")
    parser.set_defaults(func=run_combine)


def run_combine(args: argparse.Namespace) -> int:
    """Execute the combine command; 1 on any input or container error."""
    bind = bind_rows if args.axis == "rows" else bind_columns
    try:
        experiments = [load_experiment(path) for path in args.inputs]
        combined = bind(*experiments, check=not args.no_check)
        write_experiment(combined, args.output)
    except (ExperimentError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info("Bound %d bundles along %s", len(experiments), args.axis)
    print(f"{combined.n_rows} rows x {combined.n_columns} columns written to {args.output}")
    return 0
