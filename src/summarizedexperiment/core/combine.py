"""
Binding SummarizedExperiments along rows or columns.

bind_rows stacks containers vertically: row-aligned structures are
concatenated in input order, column-aligned structures must agree across
inputs and are taken from the first one. bind_columns is the mirror image.

All fields of the result are accumulated first and the result is validated
exactly once, so no half-combined container is ever observable.

Examples:
    >>> from summarizedexperiment import bind_rows, bind_columns
    >>> stacked = bind_rows(se[:5], se[5:])
    >>> stacked == se
    True
    >>> bind_rows(se, other_with_different_column_data)
    Traceback (most recent call last):
    ...
    IncompatibleStructureError: per-column values are not compatible: column_data differs (input 0 vs input 1)
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import numpy as np

from summarizedexperiment.core import matrix as mx
from summarizedexperiment.core.errors import IncompatibleStructureError
from summarizedexperiment.core.experiment import SummarizedExperiment
from summarizedexperiment.core.extensions import ROW, COLUMN

__all__ = ['bind_rows', 'bind_columns']

logger = logging.getLogger(__name__)

_AXIS_ATTRS = {
    ROW: ("_row_data", "_row_names", "_n_rows"),
    COLUMN: ("_column_data", "_column_names", "_n_columns"),
}


def _other(axis: str) -> str:
    return COLUMN if axis == ROW else ROW


def _fixed_axis_problems(
    experiments: Sequence[SummarizedExperiment],
    axis: str,
    check: bool,
) -> list[str]:
    """Collect every reason the inputs cannot be bound along ``axis``."""
    fixed = _other(axis)
    table_attr, names_attr, extent_attr = _AXIS_ATTRS[fixed]
    along_table_attr = _AXIS_ATTRS[axis][0]
    first = experiments[0]
    problems: list[str] = []

    for i, other in enumerate(experiments[1:], start=1):
        pair = f"(input 0 vs input {i})"
        if getattr(other, extent_attr) != getattr(first, extent_attr):
            problems.append(
                f"number of {fixed}s differs: {getattr(first, extent_attr)} vs "
                f"{getattr(other, extent_attr)} {pair}"
            )
            continue
        if set(other._assays) != set(first._assays):
            problems.append(
                f"assay names differ: {first.assay_names} vs {other.assay_names} {pair}"
            )
        mine, theirs = getattr(first, along_table_attr), getattr(other, along_table_attr)
        if set(mine.columns) != set(theirs.columns):
            label = along_table_attr.lstrip("_")
            problems.append(
                f"{label} columns differ: {list(mine.columns)} vs {list(theirs.columns)} {pair}"
            )
        if list(other._extensions) != list(first._extensions):
            problems.append(
                f"extensions differ: {list(first._extensions)} vs {list(other._extensions)} {pair}"
            )
        else:
            for name, ext in first._extensions.items():
                problems.extend(
                    f"extension '{name}': {m} {pair}"
                    for m in ext.compatible([other._extensions[name]], axis, check_content=check)
                )

        if not check:
            continue
        if not getattr(first, table_attr).equals(getattr(other, table_attr)):
            problems.append(f"{table_attr.lstrip('_')} differs {pair}")
        first_names, other_names = getattr(first, names_attr), getattr(other, names_attr)
        if (first_names is None) != (other_names is None) or (
            first_names is not None and not np.array_equal(first_names, other_names)
        ):
            problems.append(f"{fixed} names differ {pair}")

    return problems


def _bound_names(experiments: Sequence[SummarizedExperiment], axis: str) -> np.ndarray | None:
    _, names_attr, extent_attr = _AXIS_ATTRS[axis]
    # Empty inputs carry no names to disagree about.
    contributing = [e for e in experiments if getattr(e, extent_attr) > 0] or list(experiments[:1])
    named = [getattr(e, names_attr) is not None for e in contributing]
    if not any(named):
        return None
    if not all(named):
        raise IncompatibleStructureError(
            f"{axis} names are present on some inputs but not others"
        )
    return np.concatenate([getattr(e, names_attr) for e in contributing])


def _bind(experiments: Sequence[Any], axis: str, check: bool) -> SummarizedExperiment:
    if not experiments:
        raise ValueError("at least one SummarizedExperiment is required")
    for e in experiments:
        if not isinstance(e, SummarizedExperiment):
            raise TypeError(f"can only bind SummarizedExperiment objects, got {type(e)}")

    first = experiments[0]
    if len(experiments) == 1:
        return first.copy()

    problems = _fixed_axis_problems(experiments, axis, check)
    if problems:
        label = "per-column" if axis == ROW else "per-row"
        raise IncompatibleStructureError(
            f"{label} values are not compatible: " + "; ".join(problems)
        )

    table_attr, _, extent_attr = _AXIS_ATTRS[axis]
    dim = 0 if axis == ROW else 1
    columns = list(getattr(first, table_attr).columns)

    logger.debug(
        "Binding %d experiments along %ss (%s)",
        len(experiments), axis, ", ".join(str(e.shape) for e in experiments),
    )

    metadata: dict[str, Any] = {}
    for e in experiments:
        for key, value in e._metadata.items():
            metadata.setdefault(key, value)

    fields = {
        extent_attr.lstrip("_"): sum(getattr(e, extent_attr) for e in experiments),
        "assays": {
            name: mx.concat([e._assays[name] for e in experiments], dim=dim)
            for name in first._assays
        },
        table_attr.lstrip("_"): mx.concat(
            [getattr(e, table_attr).loc[:, columns] for e in experiments]
        ),
        _AXIS_ATTRS[axis][1].lstrip("_"): _bound_names(experiments, axis),
        "metadata": metadata,
        "extensions": {
            name: ext.combine([e._extensions[name] for e in experiments[1:]], axis)
            for name, ext in first._extensions.items()
        },
    }
    return first._replace(validate=True, **fields)


def bind_rows(*experiments: SummarizedExperiment, check: bool = True) -> SummarizedExperiment:
    """
    Stack containers along rows (columns held fixed).

    Args:
        *experiments: Containers in output order
        check: Compare column_data, column names and column-fixed extension
            slots by content. Structural checks (column count, assay names,
            row_data columns, extension layout) always run.

    Returns:
        New container of the first input's type

    Raises:
        IncompatibleStructureError: "per-column values are not compatible",
            listing every differing structure
        ValueError: If no containers are given
    """
    return _bind(experiments, ROW, check)


def bind_columns(*experiments: SummarizedExperiment, check: bool = True) -> SummarizedExperiment:
    """Stack containers along columns (rows held fixed); mirror of bind_rows."""
    return _bind(experiments, COLUMN, check)
