"""
summarizedexperiment info command - Describe a bundle.

Usage:
    summarizedexperiment info data/raw
"""

import argparse
import sys
from pathlib import Path

from summarizedexperiment.core.errors import ExperimentError
from summarizedexperiment.io import load_experiment


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the info subcommand."""
    parser = subparsers.add_parser(
        "info",
        help="Describe a bundle (shape, assays, names, metadata)",
    )
    parser.add_argument("input", type=Path, help="Bundle directory")
    parser.set_defaults(func=run_info)


def run_info(args: argparse.Namespace) -> int:
    """Print a summary of a bundle; 1 if it cannot be loaded."""
    try:
        experiment = load_experiment(args.input)
    except (ExperimentError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(experiment)
    for name in experiment.assay_names:
        matrix = experiment.assay(name, with_dimnames=False)
        print(f"  assay '{name}': {type(matrix).__name__}, dtype={matrix.dtype}")
    for key, value in experiment.metadata.items():
        print(f"  metadata '{key}': {value!r}")
    return 0
