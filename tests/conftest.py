"""
Pytest configuration and shared fixtures for container tests.

This module provides test data generators and shared fixtures for all test suites.
"""

import numpy as np
import pandas as pd
import pytest
import scipy.sparse as sp
from pathlib import Path

from summarizedexperiment import SummarizedExperiment


def generate_experiment(
    n_rows: int = 10,
    n_columns: int = 7,
    row_names: bool = True,
    column_names: bool = False,
    sparse: bool = False,
    seed: int = 42
) -> SummarizedExperiment:
    """
    Generate a small container with realistic properties.

    Args:
        n_rows: Number of features
        n_columns: Number of samples
        row_names: If True, rows are named FEATURE_1 .. FEATURE_n
        column_names: If True, columns are named SAMPLE_1 .. SAMPLE_n
        sparse: If True, add a CSR "sparse" assay next to "counts"
        seed: Random seed for reproducibility

    Returns:
        SummarizedExperiment with a "counts" assay, row_data column "yay"
        and column_data column "whee"
    """
    rng = np.random.RandomState(seed)

    # Poisson counts, like a small RNA-seq matrix
    counts = rng.poisson(lam=5, size=(n_rows, n_columns))

    assays = {"counts": counts}
    if sparse:
        dropout = rng.rand(n_rows, n_columns) < 0.7
        assays["sparse"] = sp.csr_matrix(np.where(dropout, 0.0, counts.astype(float)))

    row_data = pd.DataFrame({"yay": np.arange(n_rows)})
    column_data = pd.DataFrame({"whee": [chr(ord("a") + i % 26) for i in range(n_columns)]})

    return SummarizedExperiment(
        assays=assays,
        row_data=row_data,
        column_data=column_data,
        row_names=[f"FEATURE_{i}" for i in range(1, n_rows + 1)] if row_names else None,
        column_names=[f"SAMPLE_{i}" for i in range(1, n_columns + 1)] if column_names else None,
        metadata={"study": "synthetic"},
    )


@pytest.fixture
def se():
    """10 x 7 container: counts assay, row_data 'yay', column_data 'whee', named rows."""
    return generate_experiment()


@pytest.fixture
def named_se():
    """10 x 7 container with both row and column names."""
    return generate_experiment(column_names=True)


@pytest.fixture
def sparse_se():
    """10 x 7 container with a dense and a CSR assay."""
    return generate_experiment(column_names=True, sparse=True)


def save_counts_csv(experiment: SummarizedExperiment, path: Path) -> Path:
    """
    Save the counts assay as a features x samples CSV.

    Args:
        experiment: Container with row and column names
        path: Output CSV path
    """
    experiment.assay("counts").to_csv(path)
    return path
