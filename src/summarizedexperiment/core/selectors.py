"""
Selector resolution for subsetting and subset assignment.

A selector picks rows or columns of a container. Whatever its form, it is
resolved to a concrete integer position array before any structure is touched,
so every row-aligned (or column-aligned) structure receives exactly the same
positions.

Accepted selector forms:
    - None, Ellipsis, slice          all positions, or a slice of them
    - int / numpy integer            a single position (negative counts from end)
    - str                            a single name
    - sequence / array of ints       positions (duplicates and reordering allowed)
    - sequence / array of bools      mask, must match the axis length
    - sequence / Index of str        names, resolved against the axis names
    - pandas Series                  its values, index ignored

Examples:
    >>> resolve_selector([4, 3, 2, 1, 0], extent=5, names=None, axis="row")
    array([4, 3, 2, 1, 0])
    >>> resolve_names(["FEATURE_1", "FEATURE_999"], ["FEATURE_1", "FEATURE_2"], "row")
    Traceback (most recent call last):
    ...
    UnknownNameError: row index out of bounds: 'FEATURE_999'
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
import pandas as pd

from summarizedexperiment.core.errors import (
    IndexOutOfBoundsError,
    LengthMismatchError,
    UnknownNameError,
)

__all__ = ['resolve_selector', 'resolve_names', 'resolve_positions']


def _describe(values: Sequence[Any]) -> str:
    return ", ".join(repr(v) for v in values)


def resolve_names(
    requested: Sequence[str],
    available: Sequence[str] | None,
    axis: str,
) -> np.ndarray:
    """
    Map names to positions along ``axis``.

    Args:
        requested: Names to look up, in the order the caller wants them
        available: Current names of the axis (None if the axis is unnamed)
        axis: "row" or "column", used in error messages

    Returns:
        Integer position array, one entry per requested name

    Raises:
        UnknownNameError: listing every requested name that does not exist
    """
    requested = [str(n) for n in requested]
    if available is None:
        raise UnknownNameError(
            f"{axis} index out of bounds: {_describe(requested)} "
            f"(the {axis}s have no names)",
            axis=axis,
            offending=requested,
        )
    positions = pd.Index(available).get_indexer(requested)
    missing = [name for name, pos in zip(requested, positions) if pos < 0]
    if missing:
        raise UnknownNameError(
            f"{axis} index out of bounds: {_describe(missing)}",
            axis=axis,
            offending=missing,
        )
    return positions.astype(np.intp)


def resolve_positions(positions: Sequence[int], extent: int, axis: str) -> np.ndarray:
    """
    Bounds-check integer positions; negative values count from the end.

    Raises:
        IndexOutOfBoundsError: listing every position outside ``[-extent, extent)``
    """
    arr = np.asarray(positions, dtype=np.int64).reshape(-1)
    bad = arr[(arr >= extent) | (arr < -extent)]
    if bad.size:
        raise IndexOutOfBoundsError(
            f"{axis} index out of bounds: {_describe(bad.tolist())} "
            f"(the container has {extent} {axis}s)",
            axis=axis,
            offending=bad.tolist(),
        )
    arr = np.where(arr < 0, arr + extent, arr)
    return arr.astype(np.intp)


def resolve_selector(
    selector: Any,
    extent: int,
    names: Sequence[str] | None,
    axis: str,
) -> np.ndarray:
    """
    Resolve any selector form to an integer position array.

    Args:
        selector: See module docstring for accepted forms
        extent: Length of the axis being selected
        names: Current names of the axis, or None
        axis: "row" or "column"

    Returns:
        numpy intp array of positions into the axis

    Raises:
        IndexOutOfBoundsError: position outside the axis
        UnknownNameError: name not present on the axis
        LengthMismatchError: boolean mask of the wrong length
        TypeError: unsupported selector type
    """
    if selector is None or selector is Ellipsis:
        return np.arange(extent, dtype=np.intp)

    if isinstance(selector, slice):
        return np.arange(extent, dtype=np.intp)[selector]

    if isinstance(selector, str):
        return resolve_names([selector], names, axis)

    if isinstance(selector, (bool, np.bool_)):
        raise TypeError(f"a single boolean is not a valid {axis} selector")

    if isinstance(selector, (int, np.integer)):
        return resolve_positions([int(selector)], extent, axis)

    if isinstance(selector, pd.Series):
        selector = selector.to_numpy()

    if isinstance(selector, range):
        return resolve_positions(list(selector), extent, axis)

    values = np.asarray(list(selector) if not hasattr(selector, "dtype") else selector)
    if values.ndim != 1:
        raise TypeError(f"{axis} selector must be one-dimensional, got shape {values.shape}")

    if values.size == 0:
        return np.zeros(0, dtype=np.intp)

    if values.dtype == bool:
        if len(values) != extent:
            raise LengthMismatchError(
                f"logical {axis} selector has length {len(values)}, "
                f"expected {extent}"
            )
        return np.flatnonzero(values).astype(np.intp)

    if np.issubdtype(values.dtype, np.integer):
        return resolve_positions(values, extent, axis)

    if values.dtype.kind in ("U", "S", "O"):
        if all(isinstance(v, (str, np.str_)) for v in values):
            return resolve_names(values.tolist(), names, axis)
        if all(isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in values):
            return resolve_positions(values.astype(np.int64), extent, axis)

    raise TypeError(
        f"unsupported {axis} selector of type {type(selector).__name__} "
        f"(dtype {values.dtype})"
    )
