"""
summarizedexperiment import-csv command - Build a bundle from a CSV matrix.

Usage:
    summarizedexperiment import-csv --input counts.csv --output data/raw \\
        --column-data samples.csv --assay-name counts
"""

import argparse
import sys
from pathlib import Path

from summarizedexperiment.core.errors import ExperimentError
from summarizedexperiment.io import load_csv_experiment, write_experiment


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the import-csv subcommand."""
    parser = subparsers.add_parser(
        "import-csv",
        help="Build a bundle from a features x samples CSV",
    )
    parser.add_argument("--input", "-i", type=Path, required=True,
                        help="Matrix CSV (first column = row IDs, header = column IDs)")
    parser.add_argument("--output", "-o", type=Path, required=True,
                        help="Output bundle directory")
    parser.add_argument("--assay-name", default="counts",
                        help="Name of the imported assay (default: counts)")
    parser.add_argument("--row-data", type=Path, default=None,
                        help="Per-row metadata CSV (first column = row IDs)")
    parser.add_argument("--column-data", type=Path, default=None,
                        help="Per-column metadata CSV (first column = column IDs)")
    parser.set_defaults(func=run_import_csv)


def run_import_csv(args: argparse.Namespace) -> int:
    """Execute the import-csv command; 1 on any input or container error."""
    try:
        experiment = load_csv_experiment(
            args.input,
            assay_name=args.assay_name,
            row_data=args.row_data,
            column_data=args.column_data,
        )
        write_experiment(experiment, args.output)
    except (ExperimentError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{experiment.n_rows} rows x {experiment.n_columns} columns written to {args.output}")
    return 0
