"""
Core data structure for rectangular experimental data.

SummarizedExperiment keeps one or more equally-shaped assay matrices in step
with a row metadata table, a column metadata table, optional row/column names,
a free-form metadata bag, and any number of extensions carrying auxiliary
per-row/per-column structures.

Biological Context:
    Assays share their dimensions:
    - Rows = features (genes, proteins, transcripts, genomic intervals)
    - Columns = samples (patients, cells, conditions)
    - Several assays per experiment (raw counts, normalized values, ...)

    Every subset, replacement or concatenation has to move all of those
    structures together, otherwise a gene annotation ends up attached to the
    wrong gene. The container enforces that once, so analysis code never does.

Engineering Design:
    - Immutable: setters and operations return new instances
    - Validated: construction and every public setter end in validate()
    - Aggregated errors: validate() reports every violation in one pass
    - Storage-agnostic: dense, sparse or lazily backed assays
    - Composable: extensions ride along through subset/assign/bind

Examples:
    >>> import numpy as np
    >>> import pandas as pd
    >>> from summarizedexperiment import SummarizedExperiment
    >>>
    >>> se = SummarizedExperiment(
    ...     assays={"counts": np.random.poisson(5, size=(10, 7))},
    ...     row_data=pd.DataFrame({"yay": np.arange(10)}),
    ...     column_data=pd.DataFrame({"whee": list("abcdefg")}),
    ...     row_names=[f"FEATURE_{i}" for i in range(1, 11)],
    ... )
    >>> se[:5].shape
    (5, 7)
    >>> se[["FEATURE_3", "FEATURE_1"]].row_names.tolist()
    ['FEATURE_3', 'FEATURE_1']
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Mapping, Sequence

import numpy as np
import pandas as pd
import scipy.sparse as sp

from summarizedexperiment.core import matrix as mx
from summarizedexperiment.core.errors import (
    DuplicateNameError,
    IncompatibleStructureError,
    InvalidStateError,
    LengthMismatchError,
    NotFoundError,
    ShapeMismatchError,
)
from summarizedexperiment.core.extensions import ROW, COLUMN, AxisRole, Extension, SlotExtension
from summarizedexperiment.core.selectors import resolve_selector

__all__ = ['SummarizedExperiment']

logger = logging.getLogger(__name__)

_FIELDS = (
    'assays', 'row_data', 'column_data', 'row_names', 'column_names',
    'metadata', 'extensions', 'n_rows', 'n_columns',
)


def _as_names(names: Any) -> np.ndarray | None:
    if names is None:
        return None
    return np.array([str(n) for n in names], dtype=object)


def _duplicates(names: np.ndarray) -> list[str]:
    index = pd.Index(names)
    return index[index.duplicated()].unique().tolist()


def _split_table(table: Any, label: str) -> tuple[pd.DataFrame | None, np.ndarray | None]:
    """Positional copy of a metadata table, plus names taken from a labelled index."""
    if table is None:
        return None, None
    if isinstance(table, pd.Series):
        table = table.to_frame()
    elif not isinstance(table, pd.DataFrame):
        try:
            table = pd.DataFrame(table)
        except (TypeError, ValueError) as e:
            raise TypeError(f"{label} must be a pandas DataFrame, got {type(table)}") from e
    names = None
    if len(table.index) and not pd.api.types.is_integer_dtype(table.index):
        names = _as_names(table.index)
    return table.reset_index(drop=True), names


def _names_equal(a: np.ndarray | None, b: np.ndarray | None) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return len(a) == len(b) and bool(np.all(a == b))


def _is_array(x: Any) -> bool:
    return isinstance(x, (np.ndarray, pd.DataFrame, pd.Series)) or sp.issparse(x)


def _values_equal(left: Any, right: Any) -> bool:
    """Equality for free-form metadata values; arrays compare by content and NaN == NaN."""
    if left is right:
        return True
    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        return set(left) == set(right) and all(_values_equal(v, right[k]) for k, v in left.items())
    if isinstance(left, (list, tuple)) or isinstance(right, (list, tuple)):
        if type(left) is not type(right) or len(left) != len(right):
            return False
        return all(_values_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, pd.Index) or isinstance(right, pd.Index):
        return isinstance(left, pd.Index) and isinstance(right, pd.Index) and left.equals(right)
    if _is_array(left) or _is_array(right):
        return _is_array(left) and _is_array(right) and mx.equals(left, right)
    if isinstance(left, (float, np.floating)) and isinstance(right, (float, np.floating)):
        if np.isnan(left) and np.isnan(right):
            return True
    return bool(np.all(left == right))


def _metadata_equal(a: Mapping[str, Any], b: Mapping[str, Any]) -> bool:
    return _values_equal(dict(a), dict(b))


class SummarizedExperiment:
    """
    Assays + row/column metadata + names, kept synchronized.

    Attributes:
        shape: (n_rows, n_columns)
        assay_names: Ordered, unique assay names
        row_data: Per-row metadata (DataFrame with n_rows rows)
        column_data: Per-column metadata (DataFrame with n_columns rows)
        row_names / column_names: pandas Index of unique names, or None
        metadata: Free-form dictionary
        extensions: Auxiliary structure holders (see core.extensions)

    Shape Invariants:
        - every assay has shape (n_rows, n_columns)
        - len(row_data) == n_rows, len(column_data) == n_columns
        - names, when present, are unique and length-matched
        - every extension validates against (n_rows, n_columns)
    """

    def __init__(
        self,
        assays: Mapping[str, Any] | None = None,
        row_data: pd.DataFrame | None = None,
        column_data: pd.DataFrame | None = None,
        row_names: Sequence[str] | None = None,
        column_names: Sequence[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
        extensions: Sequence[Extension] = (),
    ):
        """
        Build and validate a container.

        Args:
            assays: Mapping of assay name to 2D matrix (numpy, scipy.sparse,
                DataFrame, or any object with ``shape`` and 2D slicing)
            row_data: Per-row table; defaults to an empty table. A string
                index supplies row names when ``row_names`` is omitted.
            column_data: Per-column table, same conventions as ``row_data``
            row_names: Unique row names, or None
            column_names: Unique column names, or None
            metadata: Free-form dictionary
            extensions: Auxiliary structure holders, unique by name

        Raises:
            TypeError: If arguments have the wrong container types
            InvalidStateError: Listing every violated invariant
        """
        if assays is None:
            assays = {}
        if not isinstance(assays, Mapping):
            raise TypeError(f"assays must be a mapping of name to matrix, got {type(assays)}")
        if metadata is not None and not isinstance(metadata, Mapping):
            raise TypeError(f"metadata must be a mapping, got {type(metadata)}")

        stored = {name: mx.as_matrix(m) for name, m in assays.items()}
        row_table, inferred_row_names = _split_table(row_data, "row_data")
        column_table, inferred_column_names = _split_table(column_data, "column_data")
        if row_names is None:
            row_names = inferred_row_names
        if column_names is None:
            column_names = inferred_column_names
        row_names = _as_names(row_names)
        column_names = _as_names(column_names)

        n_rows = self._infer_extent(stored, 0, row_names, row_table)
        n_columns = self._infer_extent(stored, 1, column_names, column_table)

        self._n_rows = n_rows
        self._n_columns = n_columns
        self._assays = stored
        self._row_data = row_table if row_table is not None else pd.DataFrame(index=pd.RangeIndex(n_rows))
        self._column_data = column_table if column_table is not None else pd.DataFrame(index=pd.RangeIndex(n_columns))
        self._row_names = row_names
        self._column_names = column_names
        self._metadata = copy.deepcopy(dict(metadata or {}))
        self._extensions = self._index_extensions(extensions)

        self._check_validity()

    @staticmethod
    def _infer_extent(assays: Mapping[str, Any], dim: int, names: np.ndarray | None,
                      table: pd.DataFrame | None) -> int:
        for m in assays.values():
            shape = mx.shape_of(m)
            if len(shape) == 2:
                return shape[dim]
            break
        if names is not None:
            return len(names)
        if table is not None:
            return len(table)
        return 0

    @staticmethod
    def _index_extensions(extensions: Sequence[Extension]) -> dict[str, Extension]:
        indexed: dict[str, Extension] = {}
        for ext in extensions:
            if not isinstance(ext, Extension):
                raise TypeError(f"extensions must be Extension instances, got {type(ext)}")
            if ext.name in indexed:
                raise DuplicateNameError(f"duplicate extension name '{ext.name}'")
            indexed[ext.name] = ext
        return indexed

    # ------------------------------------------------------------------
    # Validity
    # ------------------------------------------------------------------

    def validate(self) -> list[str]:
        """
        Re-check every invariant.

        Returns:
            List of violation messages (empty list = valid)

        Examples:
            >>> problems = se.validate()
            >>> if problems:
            ...     print("\\n".join(problems))
        """
        messages: list[str] = []
        n_rows, n_columns = self._n_rows, self._n_columns

        for name, m in self._assays.items():
            if not isinstance(name, str) or not name:
                messages.append(f"assay names must be non-empty strings, got {name!r}")
            shape = mx.shape_of(m)
            if len(shape) != 2:
                messages.append(f"assay '{name}' must be 2-dimensional, got shape {shape}")
            elif shape != (n_rows, n_columns):
                messages.append(
                    f"assay '{name}' has shape {shape}, expected ({n_rows}, {n_columns})"
                )

        if len(self._row_data) != n_rows:
            messages.append(f"row_data has {len(self._row_data)} rows, expected {n_rows}")
        if len(self._column_data) != n_columns:
            messages.append(f"column_data has {len(self._column_data)} rows, expected {n_columns}")

        for axis, names, extent in ((ROW, self._row_names, n_rows),
                                    (COLUMN, self._column_names, n_columns)):
            if names is None:
                continue
            if len(names) != extent:
                messages.append(f"{axis} names have length {len(names)}, expected {extent}")
            dupes = _duplicates(names)
            if dupes:
                messages.append(f"{axis} names must be unique, duplicated: {dupes}")

        for ext in self._extensions.values():
            messages.extend(f"extension '{ext.name}': {m}" for m in ext.validate(n_rows, n_columns))

        return messages

    def _check_validity(self) -> None:
        messages = self.validate()
        if messages:
            raise InvalidStateError(messages)

    def _replace(self, validate: bool = True, **fields: Any) -> SummarizedExperiment:
        """
        Copy of this container with some fields swapped.

        ``validate=False`` is the fast path for multi-step internal updates
        that are checked once at the end by the caller.
        """
        new = copy.copy(self)
        for key, value in fields.items():
            if key not in _FIELDS:
                raise AttributeError(f"unknown field '{key}'")
            setattr(new, f"_{key}", value)
        if validate:
            new._check_validity()
        return new

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    @property
    def shape(self) -> tuple[int, int]:
        """Container dimensions (n_rows, n_columns)."""
        return (self._n_rows, self._n_columns)

    @property
    def n_rows(self) -> int:
        return self._n_rows

    @property
    def n_columns(self) -> int:
        return self._n_columns

    # ------------------------------------------------------------------
    # Assays
    # ------------------------------------------------------------------

    @property
    def assay_names(self) -> list[str]:
        return list(self._assays)

    @property
    def assays(self) -> dict[str, Any]:
        """Ordered name -> matrix mapping; every matrix is a copy."""
        return {name: mx.detached(m) for name, m in self._assays.items()}

    def _assay_key(self, key: str | int) -> str:
        if isinstance(key, (bool, np.bool_)):
            raise TypeError("assay key must be a name or an integer position")
        if isinstance(key, (int, np.integer)):
            names = self.assay_names
            if not -len(names) <= key < len(names):
                raise NotFoundError(
                    f"assay index {key} out of range for {len(names)} assay(s)"
                )
            return names[key]
        if isinstance(key, str):
            if key not in self._assays:
                raise NotFoundError(
                    f"assay '{key}' not found; available: {self.assay_names}"
                )
            return key
        raise TypeError(f"assay key must be a name or an integer position, got {type(key)}")

    def assay(self, key: str | int = 0, with_dimnames: bool = True) -> Any:
        """
        Get one assay.

        Args:
            key: Assay name or position
            with_dimnames: If True, return a DataFrame labelled with the
                current row/column names. If False, return a copy of the
                stored matrix (numpy or scipy.sparse, as stored).

        Raises:
            NotFoundError: If the name or position does not exist
        """
        m = self._assays[self._assay_key(key)]
        if not with_dimnames:
            return mx.detached(m)
        return mx.to_frame(m, self._row_names, self._column_names)

    def set_assay(self, key: str | int, matrix: Any) -> SummarizedExperiment:
        """
        Replace or add one assay.

        A new name appends an assay; an existing name or position replaces it.

        Raises:
            ShapeMismatchError: If ``matrix`` is not (n_rows, n_columns)
            NotFoundError: If ``key`` is an out-of-range position
        """
        name = key if isinstance(key, str) else self._assay_key(key)
        matrix = mx.as_matrix(matrix)
        shape = mx.shape_of(matrix)
        if shape != self.shape:
            raise ShapeMismatchError(
                f"assay '{name}' has shape {shape}, expected {self.shape}"
            )
        assays = dict(self._assays)
        assays[name] = matrix
        return self._replace(assays=assays)

    def set_assays(self, assays: Mapping[str, Any]) -> SummarizedExperiment:
        """Replace all assays at once."""
        stored = {name: mx.as_matrix(m) for name, m in assays.items()}
        bad = {name: mx.shape_of(m) for name, m in stored.items() if mx.shape_of(m) != self.shape}
        if bad:
            details = ", ".join(f"'{name}' {shape}" for name, shape in bad.items())
            raise ShapeMismatchError(f"assay shapes must be {self.shape}, got {details}")
        return self._replace(assays=stored)

    def set_assay_names(self, names: Sequence[str]) -> SummarizedExperiment:
        """Rename assays positionally."""
        names = list(names)
        if len(names) != len(self._assays):
            raise LengthMismatchError(
                f"got {len(names)} assay names for {len(self._assays)} assay(s)"
            )
        dupes = _duplicates(np.array(names, dtype=object))
        if dupes:
            raise DuplicateNameError(f"assay names must be unique, duplicated: {dupes}")
        return self._replace(assays=dict(zip(names, self._assays.values())))

    def remove_assay(self, key: str | int) -> SummarizedExperiment:
        name = self._assay_key(key)
        return self._replace(assays={k: v for k, v in self._assays.items() if k != name})

    # ------------------------------------------------------------------
    # Row / column metadata
    # ------------------------------------------------------------------

    def _labelled(self, table: pd.DataFrame, names: np.ndarray | None) -> pd.DataFrame:
        table = table.copy()
        if names is not None:
            table.index = pd.Index(names)
        return table

    @property
    def row_data(self) -> pd.DataFrame:
        """Per-row metadata, indexed by row names when present."""
        return self._labelled(self._row_data, self._row_names)

    @property
    def column_data(self) -> pd.DataFrame:
        """Per-column metadata, indexed by column names when present."""
        return self._labelled(self._column_data, self._column_names)

    def _checked_table(self, table: Any, extent: int, label: str) -> pd.DataFrame:
        if table is None:
            return pd.DataFrame(index=pd.RangeIndex(extent))
        table, _ = _split_table(table, label)
        if len(table) != extent:
            raise ShapeMismatchError(f"{label} has {len(table)} rows, expected {extent}")
        return table

    def set_row_data(self, row_data: pd.DataFrame | None) -> SummarizedExperiment:
        """
        Replace per-row metadata (matched by position; names are unchanged).

        Raises:
            ShapeMismatchError: If the table does not have n_rows rows
        """
        return self._replace(row_data=self._checked_table(row_data, self._n_rows, "row_data"))

    def set_column_data(self, column_data: pd.DataFrame | None) -> SummarizedExperiment:
        """Replace per-column metadata; see set_row_data."""
        return self._replace(
            column_data=self._checked_table(column_data, self._n_columns, "column_data")
        )

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    @property
    def row_names(self) -> pd.Index | None:
        return None if self._row_names is None else pd.Index(self._row_names)

    @property
    def column_names(self) -> pd.Index | None:
        return None if self._column_names is None else pd.Index(self._column_names)

    def _checked_names(self, names: Any, extent: int, axis: str) -> np.ndarray | None:
        names = _as_names(names)
        if names is None:
            return None
        if len(names) != extent:
            raise LengthMismatchError(
                f"{axis} names have length {len(names)}, expected {extent}"
            )
        dupes = _duplicates(names)
        if dupes:
            raise DuplicateNameError(f"{axis} names must be unique, duplicated: {dupes}")
        return names

    def set_row_names(self, names: Sequence[str] | None) -> SummarizedExperiment:
        """
        Replace row names (None removes them).

        Raises:
            LengthMismatchError: If len(names) != n_rows
            DuplicateNameError: If names repeat
        """
        return self._replace(row_names=self._checked_names(names, self._n_rows, ROW))

    def set_column_names(self, names: Sequence[str] | None) -> SummarizedExperiment:
        """Replace column names; see set_row_names."""
        return self._replace(column_names=self._checked_names(names, self._n_columns, COLUMN))

    # ------------------------------------------------------------------
    # Metadata bag
    # ------------------------------------------------------------------

    @property
    def metadata(self) -> dict[str, Any]:
        """Deep copy of the free-form metadata bag."""
        return copy.deepcopy(self._metadata)

    def set_metadata(self, metadata: Mapping[str, Any]) -> SummarizedExperiment:
        if not isinstance(metadata, Mapping):
            raise TypeError(f"metadata must be a mapping, got {type(metadata)}")
        return self._replace(metadata=copy.deepcopy(dict(metadata)))

    # ------------------------------------------------------------------
    # Extensions
    # ------------------------------------------------------------------

    @property
    def extensions(self) -> tuple[Extension, ...]:
        return tuple(self._extensions.values())

    def get_extension(self, name: str) -> Extension:
        if name not in self._extensions:
            raise NotFoundError(
                f"extension '{name}' not found; available: {list(self._extensions)}"
            )
        return self._extensions[name]

    def set_extension(self, extension: Extension) -> SummarizedExperiment:
        """
        Add or replace an extension (keyed by its name) and re-validate.

        Raises:
            InvalidStateError: If the extension's structures do not fit
        """
        if not isinstance(extension, Extension):
            raise TypeError(f"expected an Extension, got {type(extension)}")
        extensions = dict(self._extensions)
        extensions[extension.name] = extension
        return self._replace(extensions=extensions)

    def remove_extension(self, name: str) -> SummarizedExperiment:
        self.get_extension(name)
        return self._replace(
            extensions={k: v for k, v in self._extensions.items() if k != name}
        )

    def _slot_owner(self, slot_name: str) -> SlotExtension | None:
        for ext in self._extensions.values():
            if isinstance(ext, SlotExtension) and slot_name in ext:
                return ext
        return None

    def get_slot(self, slot_name: str) -> Any:
        """Value of an auxiliary slot held by any SlotExtension."""
        owner = self._slot_owner(slot_name)
        if owner is None:
            raise NotFoundError(f"slot '{slot_name}' not found")
        return owner.get(slot_name)

    def set_slot(
        self,
        slot_name: str,
        value: Any,
        role: AxisRole | None = None,
        extension: str = "slots",
    ) -> SummarizedExperiment:
        """
        Set an auxiliary slot and re-validate.

        An existing slot keeps its extension (and role, unless ``role`` is
        given). A new slot needs a ``role`` and is added to the SlotExtension
        called ``extension``, which is created if missing.

        Raises:
            ValueError: If a new slot has no role
            InvalidStateError: If the value does not fit the container
        """
        owner = self._slot_owner(slot_name)
        if owner is None:
            if role is None:
                raise ValueError(f"slot '{slot_name}' is new; an AxisRole is required")
            owner = self._extensions.get(extension, SlotExtension(extension))
            if not isinstance(owner, SlotExtension):
                raise TypeError(f"extension '{extension}' does not hold slots")
        return self.set_extension(owner.with_slot(slot_name, value, role))

    # ------------------------------------------------------------------
    # Subsetting
    # ------------------------------------------------------------------

    def _resolve(self, rows: Any, columns: Any) -> tuple[np.ndarray, np.ndarray]:
        return (
            resolve_selector(rows, self._n_rows, self._row_names, ROW),
            resolve_selector(columns, self._n_columns, self._column_names, COLUMN),
        )

    def subset(self, rows: Any = None, columns: Any = None) -> SummarizedExperiment:
        """
        Restrict to chosen rows and/or columns.

        Args:
            rows: Row selector (None = all). Positions, boolean mask, names,
                slice, or a single position/name. Duplicates and reordering
                are allowed.
            columns: Column selector, same forms

        Returns:
            New container with every row- and column-aligned structure
            restricted to the same positions

        Raises:
            IndexOutOfBoundsError: Positions outside the axis (all listed)
            UnknownNameError: Names not on the axis (all listed)
            LengthMismatchError: Boolean mask of the wrong length

        Examples:
            >>> se.subset(rows=[4, 3, 2, 1, 0])              # reversed rows
            >>> se.subset(columns=se.column_data["whee"] == "a")
            >>> se[["FEATURE_1", "FEATURE_2"], :3]
        """
        rows, columns = self._resolve(rows, columns)
        return self._subset_positions(rows, columns)

    def _subset_positions(self, rows: np.ndarray, columns: np.ndarray) -> SummarizedExperiment:
        logger.debug("Subsetting %s to %d rows x %d columns", self.shape, len(rows), len(columns))
        return self._replace(
            n_rows=len(rows),
            n_columns=len(columns),
            assays={name: mx.take2d(m, rows, columns) for name, m in self._assays.items()},
            row_data=mx.take(self._row_data, rows),
            column_data=mx.take(self._column_data, columns),
            row_names=None if self._row_names is None else self._row_names[rows],
            column_names=None if self._column_names is None else self._column_names[columns],
            extensions={name: ext.subset(rows, columns) for name, ext in self._extensions.items()},
        )

    def __getitem__(self, key: Any) -> SummarizedExperiment:
        if isinstance(key, tuple):
            if len(key) == 1:
                return self.subset(key[0])
            if len(key) == 2:
                return self.subset(key[0], key[1])
            raise IndexError(f"expected at most 2 selectors, got {len(key)}")
        return self.subset(key)

    # ------------------------------------------------------------------
    # Subset assignment
    # ------------------------------------------------------------------

    def _check_replacement(self, rows: np.ndarray, columns: np.ndarray,
                           replacement: SummarizedExperiment) -> None:
        expected = (len(rows), len(columns))
        if replacement.shape != expected:
            zero_rows = replacement.n_rows == 0 and len(rows) > 0
            zero_columns = replacement.n_columns == 0 and len(columns) > 0
            if zero_rows or zero_columns:
                raise LengthMismatchError("replacement has length zero")
            raise LengthMismatchError(
                f"replacement has shape {replacement.shape}, selection has shape {expected}"
            )
        if set(replacement._assays) != set(self._assays):
            raise IncompatibleStructureError(
                f"assay names are not compatible: {self.assay_names} vs {replacement.assay_names}"
            )
        for label, mine, theirs in (("row_data", self._row_data, replacement._row_data),
                                    ("column_data", self._column_data, replacement._column_data)):
            if set(mine.columns) != set(theirs.columns):
                raise IncompatibleStructureError(
                    f"{label} columns are not compatible: "
                    f"{list(mine.columns)} vs {list(theirs.columns)}"
                )
        if set(replacement._extensions) != set(self._extensions):
            raise IncompatibleStructureError(
                f"extensions are not compatible: "
                f"{list(self._extensions)} vs {list(replacement._extensions)}"
            )

    def assign_subset(self, rows: Any, columns: Any, replacement: SummarizedExperiment) -> SummarizedExperiment:
        """
        Overwrite a rectangular region with another container's structures.

        Selectors resolve exactly as in subset(). Assay blocks, row_data rows,
        column_data rows, names and extension slots at the selected positions
        are overwritten by position. The metadata bag gains replacement keys
        that are not already present.

        Args:
            rows: Row selector (None = all rows)
            columns: Column selector (None = all columns)
            replacement: Container of shape (len(rows), len(columns)) with the
                same assay names, table columns and extensions

        Returns:
            New validated container

        Raises:
            LengthMismatchError: Replacement shape differs from the selection
                ("replacement has length zero" for an empty replacement)
            IncompatibleStructureError: Assays/columns/extensions differ
            InvalidStateError: Result violates an invariant (e.g. duplicate names)
        """
        if not isinstance(replacement, SummarizedExperiment):
            raise TypeError(f"replacement must be a SummarizedExperiment, got {type(replacement)}")
        rows, columns = self._resolve(rows, columns)
        self._check_replacement(rows, columns, replacement)
        logger.debug("Assigning %s into %d rows x %d columns", replacement.shape, len(rows), len(columns))

        def _names(mine: np.ndarray | None, theirs: np.ndarray | None, positions: np.ndarray):
            if mine is None or theirs is None or len(positions) == 0:
                return mine
            out = mine.copy()
            out[positions] = theirs
            return out

        metadata = dict(self._metadata)
        for key, value in replacement._metadata.items():
            metadata.setdefault(key, value)

        return self._replace(
            assays={
                name: mx.overwrite(m, (rows, columns), replacement._assays[name])
                for name, m in self._assays.items()
            },
            row_data=mx.overwrite(self._row_data, (rows,), replacement._row_data),
            column_data=mx.overwrite(self._column_data, (columns,), replacement._column_data),
            row_names=_names(self._row_names, replacement._row_names, rows),
            column_names=_names(self._column_names, replacement._column_names, columns),
            metadata=metadata,
            extensions={
                name: ext.assign(rows, columns, replacement._extensions[name])
                for name, ext in self._extensions.items()
            },
        )

    # ------------------------------------------------------------------
    # Combination
    # ------------------------------------------------------------------

    def bind_rows(self, *others: SummarizedExperiment, check: bool = True) -> SummarizedExperiment:
        """Stack ``others`` below this container; see combine.bind_rows."""
        from summarizedexperiment.core.combine import bind_rows
        return bind_rows(self, *others, check=check)

    def bind_columns(self, *others: SummarizedExperiment, check: bool = True) -> SummarizedExperiment:
        """Place ``others`` to the right of this container; see combine.bind_columns."""
        from summarizedexperiment.core.combine import bind_columns
        return bind_columns(self, *others, check=check)

    # ------------------------------------------------------------------
    # Copy / equality / display
    # ------------------------------------------------------------------

    def copy(self, deep: bool = True) -> SummarizedExperiment:
        """
        Create a copy of this container.

        Args:
            deep: If True, copy every matrix, table and extension. If False,
                share them; getters hand out copies, so neither container
                can change the other.
        """
        if not deep:
            return self._replace(validate=False)
        return self._replace(
            validate=False,
            assays={k: (m.copy() if hasattr(m, "copy") else m) for k, m in self._assays.items()},
            row_data=self._row_data.copy(deep=True),
            column_data=self._column_data.copy(deep=True),
            row_names=None if self._row_names is None else self._row_names.copy(),
            column_names=None if self._column_names is None else self._column_names.copy(),
            metadata=copy.deepcopy(self._metadata),
            extensions={k: ext.copy() for k, ext in self._extensions.items()},
        )

    def equals(self, other: Any) -> bool:
        """Content equality over every synchronized structure."""
        if not isinstance(other, SummarizedExperiment):
            return False
        if self.shape != other.shape or self.assay_names != other.assay_names:
            return False
        if not all(mx.equals(m, other._assays[k]) for k, m in self._assays.items()):
            return False
        if not (self._row_data.equals(other._row_data)
                and self._column_data.equals(other._column_data)):
            return False
        if not (_names_equal(self._row_names, other._row_names)
                and _names_equal(self._column_names, other._column_names)):
            return False
        if not _metadata_equal(self._metadata, other._metadata):
            return False
        if list(self._extensions) != list(other._extensions):
            return False
        return all(ext.equals(other._extensions[k]) for k, ext in self._extensions.items())

    def __eq__(self, other: Any) -> bool:
        return self.equals(other)

    __hash__ = None

    @staticmethod
    def _preview(names: np.ndarray | None) -> str:
        if names is None:
            return "None"
        if len(names) == 0:
            return "(0)"
        if len(names) <= 4:
            return f"({len(names)}) " + " ".join(names)
        return f"({len(names)}) {names[0]} {names[1]} ... {names[-2]} {names[-1]}"

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"{type(self).__name__}({self._n_rows} rows × {self._n_columns} columns)\n"
            f"  assays({len(self._assays)}): {' '.join(self._assays)}\n"
            f"  row_names: {self._preview(self._row_names)}\n"
            f"  row_data columns({self._row_data.shape[1]}): {' '.join(map(str, self._row_data.columns))}\n"
            f"  column_names: {self._preview(self._column_names)}\n"
            f"  column_data columns({self._column_data.shape[1]}): {' '.join(map(str, self._column_data.columns))}\n"
            f"  metadata({len(self._metadata)}): {' '.join(map(str, self._metadata))}\n"
            f"  extensions({len(self._extensions)}): {' '.join(self._extensions)}"
        )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return self.__repr__()
