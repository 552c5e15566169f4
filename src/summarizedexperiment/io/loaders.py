"""
Loaders that build SummarizedExperiment containers from files.

Two sources are supported:

1. Bundles written by write_experiment (manifest + CSV/NPZ files)
2. A single features x samples CSV, the format expression matrices usually
   arrive in, optionally joined with row/column metadata CSVs

Example CSV:
```
"","CTRL_001","CASE_002"
"ENSG00000000003",612,1056
"ENSG00000000005",0,1
```

Engineering Design:
    - Loaders only produce inputs for the SummarizedExperiment constructor;
      all invariants are enforced there
    - Clear validation messages for malformed files
    - Recoverable data issues (duplicate IDs, NaN values, unmatched
      metadata) are reported with UserWarning, not silently fixed

Examples:
    >>> from pathlib import Path
    >>> from summarizedexperiment.io.loaders import load_csv_experiment, load_experiment
    >>>
    >>> se = load_csv_experiment(Path("counts.csv"), column_data=Path("samples.csv"))
    >>> print(f"Loaded {se.n_rows} features x {se.n_columns} samples")
    >>>
    >>> se = load_experiment(Path("results/filtered"))
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
import scipy.sparse as sp
import yaml

from summarizedexperiment.core.experiment import SummarizedExperiment
from summarizedexperiment.io.writers import BUNDLE_FORMAT, BUNDLE_VERSION, MANIFEST_NAME

__all__ = ['load_experiment', 'load_csv_experiment']

logger = logging.getLogger(__name__)


def _read_manifest(path: Path) -> dict[str, Any]:
    manifest_path = path / MANIFEST_NAME
    if not manifest_path.exists():
        raise FileNotFoundError(f"Bundle manifest not found: {manifest_path}")
    try:
        with open(manifest_path, "r") as f:
            manifest = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in bundle manifest {manifest_path}: {e}") from e

    if not isinstance(manifest, dict):
        raise ValueError(f"Bundle manifest must contain a mapping at top level: {manifest_path}")
    if manifest.get("format") != BUNDLE_FORMAT:
        raise ValueError(
            f"Not a {BUNDLE_FORMAT} manifest (format={manifest.get('format')!r}): {manifest_path}"
        )
    if manifest.get("version", 0) > BUNDLE_VERSION:
        raise ValueError(
            f"Bundle version {manifest['version']} is newer than supported version {BUNDLE_VERSION}"
        )
    return manifest


def _read_ids(path: Path) -> pd.Index:
    """
    First CSV column as text, exactly as written.

    read_csv infers a type for the index column and treats "NA" as missing,
    which would turn "001", "NA" and "1.0" into 1.0, NaN and 1.0.
    """
    ids = pd.read_csv(path, usecols=[0], dtype=str, keep_default_na=False).iloc[:, 0]
    return pd.Index(ids.to_numpy(dtype=object), dtype=object)


def _read_table(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Bundle table not found: {path}")
    table = pd.read_csv(path, index_col=0)
    table.index = _read_ids(path)
    return table


def load_experiment(path: Path) -> SummarizedExperiment:
    """
    Load a bundle directory written by write_experiment.

    Args:
        path: Bundle directory

    Returns:
        SummarizedExperiment equal to the one written (extensions excepted)

    Raises:
        FileNotFoundError: If the directory, manifest or a listed file is missing
        ValueError: If the manifest is malformed or from a newer version
        InvalidStateError: If the files disagree with each other
    """
    if not isinstance(path, Path):
        path = Path(path)
    if not path.is_dir():
        raise FileNotFoundError(f"Bundle directory not found: {path}")

    manifest = _read_manifest(path)

    row_table = _read_table(path / "row_data.csv")
    column_table = _read_table(path / "column_data.csv")
    row_names = row_table.index.tolist() if manifest.get("row_names") else None
    column_names = column_table.index.tolist() if manifest.get("column_names") else None

    assays = {}
    for entry in manifest.get("assays") or []:
        file = path / entry["file"]
        if not file.exists():
            raise FileNotFoundError(f"Assay file for '{entry['name']}' not found: {file}")
        if entry.get("storage") == "sparse":
            assays[entry["name"]] = sp.load_npz(file)
        else:
            assays[entry["name"]] = pd.read_csv(file, index_col=0).to_numpy()

    experiment = SummarizedExperiment(
        assays=assays,
        row_data=row_table.reset_index(drop=True),
        column_data=column_table.reset_index(drop=True),
        row_names=row_names,
        column_names=column_names,
        metadata=manifest.get("metadata") or {},
    )

    expected = tuple(manifest.get("shape", experiment.shape))
    if experiment.shape != expected:
        raise ValueError(f"Bundle shape {experiment.shape} does not match manifest shape {expected}")

    logger.info(
        "Loaded %d x %d experiment with %d assay(s) from %s",
        experiment.n_rows, experiment.n_columns, len(assays), path,
    )
    return experiment


def _read_metadata(source: Path | pd.DataFrame | None, names: pd.Index, label: str) -> pd.DataFrame | None:
    """Align a metadata table (CSV path or DataFrame keyed by name) to ``names``."""
    if source is None:
        return None
    if isinstance(source, pd.DataFrame):
        table = source.copy()
    else:
        source = Path(source)
        if not source.exists():
            raise FileNotFoundError(f"{label} file not found: {source}")
        table = pd.read_csv(source, index_col=0)
        table.index = _read_ids(source)
    table.index = table.index.astype(str)
    if table.index.duplicated().any():
        raise ValueError(f"{label} contains duplicate IDs: {table.index[table.index.duplicated()].tolist()[:5]}")

    n_unmatched = int((~names.isin(table.index)).sum())
    if n_unmatched:
        warnings.warn(
            f"{n_unmatched} of {len(names)} IDs have no entry in {label}; "
            "their metadata will be missing (NaN).",
            UserWarning,
        )
    return table.reindex(names).reset_index(drop=True)


def load_csv_experiment(
    path: Path,
    assay_name: str = "counts",
    row_data: Path | pd.DataFrame | None = None,
    column_data: Path | pd.DataFrame | None = None,
) -> SummarizedExperiment:
    """
    Load a features x samples CSV into a one-assay container.

    Expected CSV format:
    - First column: row (feature) IDs, header may be empty
    - Remaining columns: column (sample) IDs with numerical values

    Args:
        path: Path to the CSV file
        assay_name: Name given to the loaded assay
        row_data: Optional per-row metadata (CSV path or DataFrame), first
            column / index = row IDs
        column_data: Optional per-column metadata, first column / index =
            column IDs

    Returns:
        SummarizedExperiment with row/column names from the CSV labels

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the CSV is empty or contains non-numeric values
    """
    if not isinstance(path, Path):
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")

    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")

    try:
        df = pd.read_csv(path, index_col=0)
    except pd.errors.EmptyDataError as e:
        raise ValueError(f"CSV file is empty: {path}") from e

    if df.shape[1] == 0:
        raise ValueError(f"CSV contains no samples (columns): {path}")

    df.index = _read_ids(path)
    df.columns = df.columns.astype(str)

    # Check for duplicate feature IDs
    if df.index.duplicated().any():
        n_duplicates = df.index.duplicated().sum()
        warnings.warn(
            f"Found {n_duplicates} duplicate row IDs. "
            "Using first occurrence of each.",
            UserWarning
        )
        df = df[~df.index.duplicated(keep='first')]

    # Check for duplicate sample IDs
    if df.columns.duplicated().any():
        n_duplicates = df.columns.duplicated().sum()
        warnings.warn(
            f"Found {n_duplicates} duplicate column IDs. "
            "Using first occurrence of each.",
            UserWarning
        )
        df = df.loc[:, ~df.columns.duplicated(keep='first')]

    non_numeric = [col for col in df.columns if not pd.api.types.is_numeric_dtype(df[col])]
    if non_numeric:
        examples = []
        for col in non_numeric[:5]:
            bad = pd.to_numeric(df[col], errors="coerce").isna() & df[col].notna()
            row = bad.idxmax()
            examples.append(f"row '{row}', column '{col}': {df.at[row, col]!r}")
        raise ValueError(
            "CSV contains non-numeric values:\n" +
            "\n".join(f"  - {x}" for x in examples) +
            ("\n  ..." if len(non_numeric) > 5 else "")
        )

    data = df.to_numpy()

    if np.issubdtype(data.dtype, np.floating) and np.isnan(data).any():
        n_nan = int(np.isnan(data).sum())
        warnings.warn(
            f"Found {n_nan:,} NaN values ({100 * n_nan / data.size:.2f}% of data).",
            UserWarning
        )

    experiment = SummarizedExperiment(
        assays={assay_name: data},
        row_data=_read_metadata(row_data, df.index, "row_data"),
        column_data=_read_metadata(column_data, df.columns, "column_data"),
        row_names=df.index,
        column_names=df.columns,
    )
    logger.info("Loaded %d rows x %d columns from %s", experiment.n_rows, experiment.n_columns, path)
    return experiment
