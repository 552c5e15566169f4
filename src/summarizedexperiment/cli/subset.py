"""
summarizedexperiment subset command - Select rows/columns into a new bundle.

Rows and columns can be chosen by name or by position; a YAML/JSON config
with the same keys can supply any of them, and explicit flags win.

Usage:
    summarizedexperiment subset --input data/raw --output data/top \\
        --rows FEATURE_1,FEATURE_7 --column-positions 0:4
    summarizedexperiment subset --config subset.yaml --output data/other
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Union

from summarizedexperiment.cli.config import explicit_arg_names, load_config, merge_config_with_args
from summarizedexperiment.core.errors import ExperimentError
from summarizedexperiment.io import load_experiment, write_experiment

logger = logging.getLogger(__name__)


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the subset subcommand."""
    parser = subparsers.add_parser(
        "subset",
        help="Select rows/columns into a new bundle",
        description=(
            "Restrict a bundle to chosen rows and columns. Names and positions "
            "are resolved exactly as SummarizedExperiment.subset does; every "
            "unknown name or out-of-range position is reported."
        )
    )

    parser.add_argument("--input", "-i", type=Path, default=None,
                        help="Input bundle directory")
    parser.add_argument("--output", "-o", type=Path, default=None,
                        help="Output bundle directory")
    parser.add_argument("--config", "-c", type=Path, default=None,
                        help="YAML/JSON config with the same keys (CLI flags win)")

    rows = parser.add_mutually_exclusive_group()
    rows.add_argument("--rows", default=None,
                      help="Comma-separated row names")
    rows.add_argument("--row-positions", default=None,
                      help="Comma-separated row positions or start:stop")

    columns = parser.add_mutually_exclusive_group()
    columns.add_argument("--columns", default=None,
                         help="Comma-separated column names")
    columns.add_argument("--column-positions", default=None,
                         help="Comma-separated column positions or start:stop")

    parser.set_defaults(func=run_subset)


def parse_names(value: Union[str, List[Any], None]) -> Optional[List[str]]:
    """``"a,b"`` or ``["a", "b"]`` -> ``["a", "b"]``; None stays None."""
    if value is None:
        return None
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return [str(v) for v in value]


def parse_positions(value: Union[str, int, List[Any], None]) -> Union[slice, List[int], None]:
    """
    Parse a position selector.

    Examples:
        >>> parse_positions("0:5")
        slice(0, 5, None)
        >>> parse_positions("3,1,1")
        [3, 1, 1]
        >>> parse_positions(":")
        slice(None, None, None)

    Raises:
        ValueError: If the value is not integers or a start:stop range
    """
    if value is None:
        return None
    if isinstance(value, int):
        return [value]
    if not isinstance(value, str):
        return [int(v) for v in value]

    text = value.strip()
    try:
        if ":" in text:
            start, _, stop = text.partition(":")
            return slice(int(start) if start.strip() else None,
                         int(stop) if stop.strip() else None)
        return [int(v) for v in text.split(",") if v.strip()]
    except ValueError as e:
        raise ValueError(
            f"Invalid position selector '{value}': use comma-separated integers or start:stop"
        ) from e


def _selector(names: Any, positions: Any, axis: str) -> Any:
    if names is not None and positions is not None:
        raise ValueError(f"Give either {axis} names or {axis} positions, not both")
    if names is not None:
        return parse_names(names)
    return parse_positions(positions)


def run_subset(args: argparse.Namespace) -> int:
    """Execute the subset command; 1 on any input or container error."""
    try:
        if args.config is not None:
            config = load_config(args.config)
            args = merge_config_with_args(config, args, getattr(args, "cli_args", None))
            # A flag on the command line replaces its alternative from the config
            explicit = explicit_arg_names(getattr(args, "cli_args", None))
            if "row_positions" in explicit:
                args.rows = None
            if "rows" in explicit:
                args.row_positions = None
            if "column_positions" in explicit:
                args.columns = None
            if "columns" in explicit:
                args.column_positions = None

        if args.input is None or args.output is None:
            raise ValueError("--input and --output are required (on the command line or in --config)")

        rows = _selector(args.rows, args.row_positions, "row")
        columns = _selector(args.columns, args.column_positions, "column")

        experiment = load_experiment(args.input)
        selected = experiment.subset(rows, columns)
        write_experiment(selected, args.output)
    except (ExperimentError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info("Subset %s -> %s written to %s", experiment.shape, selected.shape, args.output)
    print(f"{selected.n_rows} rows x {selected.n_columns} columns written to {args.output}")
    return 0
