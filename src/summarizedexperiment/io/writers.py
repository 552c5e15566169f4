"""
Bundle writer for SummarizedExperiment containers.

A bundle is a directory that any CSV-aware tool (R, Excel, pandas) can open:

    bundle/
        manifest.yaml         shape, assay list, name flags, metadata bag
        row_data.csv          per-row metadata, first column = row names
        column_data.csv       per-column metadata, first column = column names
        assays/000.csv        dense assay, labelled with row/column names
        assays/001.npz        sparse assay (scipy.sparse.save_npz)

Engineering Design:
    - Assay files are numbered; their names live in the manifest, so any
      assay name is safe on any filesystem
    - The manifest is written last and atomically: a directory with a
      manifest is a complete bundle
    - Lazily backed assays are materialized as dense CSV
    - Extensions are not persisted (a UserWarning says so)

Examples:
    >>> from pathlib import Path
    >>> from summarizedexperiment.io.writers import write_experiment
    >>>
    >>> write_experiment(se, Path("results/filtered"))
    >>> sorted(p.name for p in Path("results/filtered").iterdir())
    ['assays', 'column_data.csv', 'manifest.yaml', 'row_data.csv']
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path

import numpy as np
import pandas as pd
import scipy.sparse as sp

from summarizedexperiment.core.experiment import SummarizedExperiment
from summarizedexperiment.utils.fileio import atomic_write_yaml

__all__ = ['write_experiment', 'BUNDLE_FORMAT', 'BUNDLE_VERSION', 'MANIFEST_NAME']

logger = logging.getLogger(__name__)

BUNDLE_FORMAT = "summarizedexperiment-bundle"
BUNDLE_VERSION = 1
MANIFEST_NAME = "manifest.yaml"


def _labels(names: pd.Index | None, extent: int) -> pd.Index:
    return names if names is not None else pd.RangeIndex(extent)


def write_experiment(experiment: SummarizedExperiment, path: Path) -> Path:
    """
    Write a container to a bundle directory.

    Args:
        experiment: Container to write
        path: Bundle directory (created if missing; existing files with the
            same names are overwritten)

    Returns:
        Path of the written manifest

    Raises:
        TypeError: If experiment is not a SummarizedExperiment
        ValueError: If the metadata bag is not YAML-serializable
        OSError: If the directory is not writable
    """
    if not isinstance(experiment, SummarizedExperiment):
        raise TypeError(f"experiment must be SummarizedExperiment, got {type(experiment)}")

    if not isinstance(path, Path):
        path = Path(path)

    if experiment.extensions:
        warnings.warn(
            f"Extensions {[e.name for e in experiment.extensions]} are not persisted "
            "in bundles and will be missing when the bundle is loaded.",
            UserWarning,
        )

    assay_dir = path / "assays"
    assay_dir.mkdir(parents=True, exist_ok=True)

    row_labels = _labels(experiment.row_names, experiment.n_rows)
    column_labels = _labels(experiment.column_names, experiment.n_columns)

    entries = []
    for i, name in enumerate(experiment.assay_names):
        matrix = experiment.assay(name, with_dimnames=False)
        if sp.issparse(matrix):
            file = assay_dir / f"{i:03d}.npz"
            sp.save_npz(file, matrix)
            storage = "sparse"
        else:
            file = assay_dir / f"{i:03d}.csv"
            pd.DataFrame(np.asarray(matrix), index=row_labels, columns=column_labels).to_csv(file)
            storage = "dense"
        entries.append({"name": name, "file": file.relative_to(path).as_posix(), "storage": storage})
        logger.debug("Wrote assay '%s' (%s) to %s", name, storage, file)

    row_data = experiment.row_data
    row_data.index = row_labels
    row_data.to_csv(path / "row_data.csv")

    column_data = experiment.column_data
    column_data.index = column_labels
    column_data.to_csv(path / "column_data.csv")

    manifest = {
        "format": BUNDLE_FORMAT,
        "version": BUNDLE_VERSION,
        "shape": [experiment.n_rows, experiment.n_columns],
        "assays": entries,
        "row_names": experiment.row_names is not None,
        "column_names": experiment.column_names is not None,
        "metadata": experiment.metadata,
    }
    manifest_path = path / MANIFEST_NAME
    atomic_write_yaml(manifest_path, manifest)

    logger.info(
        "Wrote %d x %d experiment with %d assay(s) to %s",
        experiment.n_rows, experiment.n_columns, len(entries), path,
    )
    return manifest_path
