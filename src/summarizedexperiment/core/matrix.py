"""
Storage-agnostic helpers for the structures a SummarizedExperiment keeps in sync.

The container never cares what backs an assay or an auxiliary slot. It only
needs to query shapes, take positions along a dimension, overwrite a block,
concatenate, and compare. This module implements those five verbs for:

    - numpy arrays (1D or 2D)
    - scipy.sparse matrices and arrays (2D, format preserved)
    - pandas DataFrame / Series (positional, first dimension only)
    - duck-typed arrays exposing ``shape`` and numpy-style slicing
      (e.g. memory-mapped or lazily loaded stores)

Engineering Design:
    - Pure functions: inputs are never modified, results are new objects
    - Positions are always integer numpy arrays (already resolved selectors)
    - Tables are stored with a default RangeIndex; results keep that invariant
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import numpy as np
import pandas as pd
import scipy.linalg
import scipy.sparse as sp

__all__ = [
    'is_table',
    'shape_of',
    'extent',
    'as_matrix',
    'as_vector',
    'detached',
    'take',
    'take2d',
    'overwrite',
    'concat',
    'block_diag',
    'equals',
    'to_frame',
]

logger = logging.getLogger(__name__)


def is_table(x: Any) -> bool:
    """True for pandas DataFrame / Series."""
    return isinstance(x, (pd.DataFrame, pd.Series))


def shape_of(x: Any) -> tuple[int, ...]:
    """Shape of any supported structure; plain sequences are one-dimensional."""
    shape = getattr(x, "shape", None)
    if shape is None:
        return (len(x),)
    return tuple(int(s) for s in shape)


def extent(x: Any, dim: int = 0) -> int:
    """Length of ``x`` along ``dim``."""
    return shape_of(x)[dim]


def as_matrix(x: Any) -> Any:
    """
    Normalize an assay matrix for storage.

    DataFrames and nested sequences become numpy arrays. numpy and sparse
    inputs are copied, so later writes by the caller never reach the
    container. Duck-typed arrays are kept as they are so lazily backed
    stores stay lazy.
    """
    if isinstance(x, pd.DataFrame):
        return x.to_numpy(copy=True)
    if isinstance(x, np.ndarray) or sp.issparse(x):
        return x.copy()
    if hasattr(x, "shape") and hasattr(x, "__getitem__"):
        return x
    return np.asarray(x)


def as_vector(x: Any) -> Any:
    """Normalize a per-row/per-column value (positional index for tables)."""
    if is_table(x):
        return x.reset_index(drop=True)
    if isinstance(x, (list, tuple)):
        return np.asarray(x)
    if isinstance(x, np.ndarray) or sp.issparse(x):
        return x.copy()
    return x


def detached(x: Any) -> Any:
    """Copy of a stored structure safe to hand out (lazy stores are returned as is)."""
    if is_table(x) or isinstance(x, np.ndarray) or sp.issparse(x):
        return x.copy()
    return x


def take(x: Any, positions: np.ndarray, dim: int = 0) -> Any:
    """
    Select ``positions`` along dimension ``dim``.

    Duplicates and reordering are honoured, empty ``positions`` yield a
    zero-length result along ``dim``.
    """
    positions = np.asarray(positions, dtype=np.intp)

    if is_table(x):
        if dim != 0:
            raise ValueError("tables can only be indexed along their first dimension")
        return x.iloc[positions].reset_index(drop=True)

    if isinstance(x, np.ndarray):
        return np.take(x, positions, axis=dim)

    if sp.issparse(x):
        fmt = x.format
        if dim == 0:
            return x.tocsr()[positions, :].asformat(fmt)
        return x.tocsc()[:, positions].asformat(fmt)

    index: list[Any] = [slice(None)] * len(shape_of(x))
    index[dim] = positions
    return x[tuple(index)]


def take2d(x: Any, rows: np.ndarray, columns: np.ndarray) -> Any:
    """Select a ``rows`` x ``columns`` block from a 2D structure."""
    if isinstance(x, np.ndarray):
        return x[np.ix_(np.asarray(rows, dtype=np.intp), np.asarray(columns, dtype=np.intp))]
    return take(take(x, rows, 0), columns, 1)


def _dense(value: Any) -> np.ndarray:
    if sp.issparse(value):
        return value.toarray()
    if is_table(value):
        return value.to_numpy()
    return np.asarray(value)


def overwrite(x: Any, positions: Sequence[np.ndarray], value: Any) -> Any:
    """
    Return a copy of ``x`` whose block at ``positions`` is replaced by ``value``.

    ``positions`` holds one integer array per dimension of ``x``. ``value``
    must have shape ``tuple(len(p) for p in positions)``. When a position
    repeats, the last corresponding element of ``value`` wins.
    """
    positions = [np.asarray(p, dtype=np.intp) for p in positions]
    if any(len(p) == 0 for p in positions):
        return x.copy() if hasattr(x, "copy") else x

    if is_table(x):
        (rows,) = positions
        incoming = value.reset_index(drop=True)
        if isinstance(x, pd.DataFrame):
            incoming = incoming.loc[:, list(x.columns)]
        combined = pd.concat([x, incoming], ignore_index=True)
        order = np.arange(len(x))
        order[rows] = len(x) + np.arange(len(rows))
        result = combined.iloc[order].reset_index(drop=True)
        if isinstance(x, pd.Series):
            result.name = x.name
        return result

    if sp.issparse(x):
        dense_value = _dense(value)
        dtype = np.result_type(x.dtype, dense_value.dtype)
        out = x.tolil(copy=True).astype(dtype)
        out[np.ix_(*positions)] = dense_value
        return out.asformat(x.format)

    if not isinstance(x, np.ndarray):
        logger.debug("Materializing %s backed structure for assignment", type(x).__name__)
    base = np.asarray(x)
    dense_value = _dense(value)
    out = base.astype(np.result_type(base.dtype, dense_value.dtype), copy=True)
    out[np.ix_(*positions)] = dense_value
    return out


def concat(xs: Sequence[Any], dim: int = 0) -> Any:
    """Concatenate structures along ``dim``; sparse inputs keep the first sparse format."""
    xs = list(xs)
    nonempty = [x for x in xs if shape_of(x)[dim] > 0]
    if nonempty:
        xs = nonempty
    if len(xs) == 1:
        return xs[0].copy() if hasattr(xs[0], "copy") else xs[0]

    if all(is_table(x) for x in xs):
        if dim != 0:
            raise ValueError("tables can only be concatenated along their first dimension")
        result = pd.concat(xs, axis=0, ignore_index=True)
        if isinstance(xs[0], pd.Series):
            result.name = xs[0].name
        return result

    sparse_inputs = [x for x in xs if sp.issparse(x)]
    if sparse_inputs:
        fmt = sparse_inputs[0].format
        blocks = [x if sp.issparse(x) else sp.csr_matrix(_dense(x)) for x in xs]
        stacked = sp.vstack(blocks) if dim == 0 else sp.hstack(blocks)
        return stacked.asformat(fmt)

    return np.concatenate([_dense(x) for x in xs], axis=dim)


def block_diag(xs: Sequence[Any]) -> Any:
    """Block-diagonal combination of square-by-axis matrices, zero fill off the diagonal."""
    xs = list(xs)
    nonempty = [x for x in xs if shape_of(x)[0] > 0]
    if nonempty:
        xs = nonempty
    if len(xs) == 1:
        return xs[0].copy() if hasattr(xs[0], "copy") else xs[0]
    sparse_inputs = [x for x in xs if sp.issparse(x)]
    if sparse_inputs:
        return sp.block_diag(xs, format=sparse_inputs[0].format)
    return scipy.linalg.block_diag(*[_dense(x) for x in xs])


def equals(a: Any, b: Any) -> bool:
    """
    Content equality across storage kinds.

    Tables compare with ``DataFrame.equals``; sparse matrices compare by their
    non-zero difference; everything else by ``np.array_equal`` with NaN == NaN.
    """
    if a is b:
        return True
    if is_table(a) or is_table(b):
        if type(a) is not type(b):
            return False
        return a.equals(b)
    if shape_of(a) != shape_of(b):
        return False
    if sp.issparse(a) or sp.issparse(b):
        diff = sp.csr_matrix(a) != sp.csr_matrix(b)
        return diff.nnz == 0
    left, right = np.asarray(a), np.asarray(b)
    try:
        return bool(np.array_equal(left, right, equal_nan=True))
    except TypeError:
        return bool(np.array_equal(left, right))


def to_frame(x: Any, index: Sequence[str] | None, columns: Sequence[str] | None) -> pd.DataFrame:
    """Wrap a 2D matrix as a labelled DataFrame owning its data (sparse stays sparse-backed)."""
    index = pd.Index(index) if index is not None else None
    columns = pd.Index(columns) if columns is not None else None
    if sp.issparse(x):
        return pd.DataFrame.sparse.from_spmatrix(x.copy(), index=index, columns=columns)
    return pd.DataFrame(np.array(x), index=index, columns=columns)
