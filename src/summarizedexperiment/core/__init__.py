"""
Core data structures for synchronized experiment containers.

This module provides the foundational types that all other modules build upon:

1. SummarizedExperiment: Assays + row/column metadata + names, kept in sync
2. Extension / SlotExtension: Auxiliary per-row/per-column structures that
   follow the container through subset, assignment and binding
3. bind_rows / bind_columns: Concatenation along one axis
4. Error taxonomy: one exception class per violated constraint

Design Philosophy:
    - Immutability: All operations return new instances (functional style)
    - Validation: Every public constructor/setter ends in validate()
    - Composition: Extensions are composed, not inherited
    - Storage-agnostic: Dense, sparse or lazily backed matrices

Examples:
    >>> from summarizedexperiment.core import SummarizedExperiment, bind_rows
    >>>
    >>> se = SummarizedExperiment(assays={"counts": counts})
    >>> top = se[:5]
    >>> bind_rows(top, se[5:]) == se
    True
"""

from summarizedexperiment.core.errors import (
    ExperimentError,
    NotFoundError,
    ShapeMismatchError,
    LengthMismatchError,
    DuplicateNameError,
    IndexOutOfBoundsError,
    UnknownNameError,
    IncompatibleStructureError,
    InvalidStateError,
)
from summarizedexperiment.core.extensions import AxisRole, Extension, Slot, SlotExtension
from summarizedexperiment.core.experiment import SummarizedExperiment
from summarizedexperiment.core.combine import bind_rows, bind_columns
from summarizedexperiment.core.selectors import resolve_selector, resolve_names

__all__ = [
    'SummarizedExperiment',
    'bind_rows',
    'bind_columns',
    'AxisRole',
    'Extension',
    'Slot',
    'SlotExtension',
    'resolve_selector',
    'resolve_names',
    'ExperimentError',
    'NotFoundError',
    'ShapeMismatchError',
    'LengthMismatchError',
    'DuplicateNameError',
    'IndexOutOfBoundsError',
    'UnknownNameError',
    'IncompatibleStructureError',
    'InvalidStateError',
]
