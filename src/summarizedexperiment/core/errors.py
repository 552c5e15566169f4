"""
Exception taxonomy for SummarizedExperiment containers.

Every error raised by the container derives from ExperimentError, and also from
the closest builtin (ValueError, IndexError, LookupError) so callers that only
know the standard hierarchy can still catch them.

Examples:
    >>> from summarizedexperiment.core.errors import InvalidStateError
    >>> try:
    ...     se = SummarizedExperiment(assays={"counts": bad_matrix}, row_data=table)
    ... except InvalidStateError as e:
    ...     for message in e.messages:
    ...         print(message)
"""

from __future__ import annotations

from typing import Iterable, Sequence

__all__ = [
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


class ExperimentError(Exception):
    """Base class for all container errors."""


class NotFoundError(ExperimentError, LookupError):
    """Raised when an assay, extension or slot is not present."""


class ShapeMismatchError(ExperimentError, ValueError):
    """Raised when a matrix or table disagrees with the container dimensions."""


class LengthMismatchError(ExperimentError, ValueError):
    """Raised when a name vector, mask or replacement has the wrong length."""


class DuplicateNameError(ExperimentError, ValueError):
    """Raised when names that must be unique are not."""


class IndexOutOfBoundsError(ExperimentError, IndexError):
    """
    Raised when a selector references positions outside an axis.

    Attributes:
        axis: "row" or "column"
        offending: Every index (or name) that failed to resolve
    """

    def __init__(self, message: str, axis: str, offending: Sequence = ()):
        super().__init__(message)
        self.axis = axis
        self.offending = list(offending)


class UnknownNameError(IndexOutOfBoundsError):
    """Raised when a name-based selector contains names that do not exist."""


class IncompatibleStructureError(ExperimentError, ValueError):
    """Raised when containers cannot be combined or assigned into one another."""


class InvalidStateError(ExperimentError, ValueError):
    """
    Aggregated validity failure.

    Carries every violation found by SummarizedExperiment.validate(), not just
    the first one.
    """

    def __init__(self, messages: Iterable[str]):
        self.messages = list(messages)
        joined = "\n".join(f"  - {m}" for m in self.messages)
        super().__init__(f"invalid SummarizedExperiment:\n{joined}")
