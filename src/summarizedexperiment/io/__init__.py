"""
I/O module for reading and writing SummarizedExperiment containers.

Key Functions:
    - load_csv_experiment: Build a container from a features x samples CSV
    - write_experiment: Write a container to a bundle directory
    - load_experiment: Read a bundle directory back

Design Philosophy:
    - Plain, tool-agnostic files (CSV, NPZ, YAML manifest)
    - Clear validation messages for malformed data
    - Sparse assays stay sparse on disk

Examples:
    >>> from summarizedexperiment.io import load_csv_experiment, write_experiment, load_experiment
    >>> from pathlib import Path
    >>>
    >>> se = load_csv_experiment(Path("raw_counts.csv"))
    >>> write_experiment(se[:100], Path("results/top100"))
    >>> assert load_experiment(Path("results/top100")) == se[:100]
"""

from summarizedexperiment.io.loaders import load_csv_experiment, load_experiment
from summarizedexperiment.io.writers import write_experiment

__all__ = ['load_csv_experiment', 'load_experiment', 'write_experiment']
