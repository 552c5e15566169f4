"""
SummarizedExperiment - Synchronized containers for rectangular experimental data

Assay matrices paired with row and column metadata, kept aligned through
subsetting, subset assignment and row/column binding. Designed for genomics
and proteomics count/intensity matrices.
"""

__version__ = "0.1.0"

from summarizedexperiment.core.experiment import SummarizedExperiment
from summarizedexperiment.core.combine import bind_rows, bind_columns
from summarizedexperiment.core.extensions import AxisRole, Extension, SlotExtension

__all__ = [
    "SummarizedExperiment",
    "bind_rows",
    "bind_columns",
    "AxisRole",
    "Extension",
    "SlotExtension",
]
