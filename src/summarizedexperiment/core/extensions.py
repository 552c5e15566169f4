"""
Auxiliary structures that travel with a SummarizedExperiment.

A derived container often needs more than assays and row/column tables: a
per-row vector, a feature-by-feature distance matrix, a cell-to-gene mapping.
Rather than subclassing and re-implementing subsetting, assignment and binding
for every new field, such structures are packaged as an Extension. The
container composes any number of extensions and drives them from its own
operations:

    validate(n_rows, n_columns)       -> list of violation messages
    subset(rows, columns)             -> new extension at the given positions
    assign(rows, columns, replacement)-> new extension with a block overwritten
    combine(others, axis)             -> new extension bound along an axis
    compatible(others, axis)          -> messages for fixed-axis mismatches
    equals(other)                     -> content equality

Every structure is classified by an AxisRole that names the container axis
bound to each of its own dimensions. That classification alone decides how a
structure is subset, assigned and combined, which is what SlotExtension
implements generically.

Examples:
    >>> import numpy as np
    >>> from summarizedexperiment.core.extensions import AxisRole, SlotExtension
    >>> ext = SlotExtension("annotations", {
    ...     "gc_content": (AxisRole.ROW, np.random.rand(10)),
    ...     "distances": (AxisRole.ROW_BY_ROW, np.zeros((10, 10))),
    ... })
    >>> se = se.set_extension(ext)
    >>> se[:5].get_slot("distances").shape
    (5, 5)
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence

import numpy as np

from summarizedexperiment.core import matrix as mx
from summarizedexperiment.core.errors import IncompatibleStructureError, NotFoundError

__all__ = ['ROW', 'COLUMN', 'AxisRole', 'Extension', 'Slot', 'SlotExtension']

ROW = "row"
COLUMN = "column"


class AxisRole(Enum):
    """
    Which container axis each dimension of an auxiliary structure follows.

    Attributes:
        ROW: length n_rows (per-row vector or table)
        COLUMN: length n_columns
        ROW_BY_ROW: n_rows x n_rows
        COLUMN_BY_COLUMN: n_columns x n_columns
        ROW_BY_COLUMN: n_rows x n_columns
        COLUMN_BY_ROW: n_columns x n_rows

    Under binding along an axis:
        - no dimension on that axis: fixed, content must match across
          inputs (COLUMN and COLUMN_BY_COLUMN under bind_rows)
        - one dimension on it: concatenated along that dimension, so a
          ROW_BY_COLUMN slot grows under bind_rows instead of being compared
        - both dimensions on it: block-diagonal with zero fill (ROW_BY_ROW
          under bind_rows)
    """

    ROW = ("row",)
    COLUMN = ("column",)
    ROW_BY_ROW = ("row", "row")
    COLUMN_BY_COLUMN = ("column", "column")
    ROW_BY_COLUMN = ("row", "column")
    COLUMN_BY_ROW = ("column", "row")

    @property
    def axes(self) -> tuple[str, ...]:
        """Container axis for each leading dimension of the structure."""
        return self.value

    def is_fixed_under(self, axis: str) -> bool:
        """True when binding along ``axis`` leaves this structure unchanged."""
        return axis not in self.value

    def expected_shape(self, n_rows: int, n_columns: int) -> tuple[int, ...]:
        return tuple(n_rows if a == ROW else n_columns for a in self.value)


class Extension(ABC):
    """
    Capability interface for structures kept in sync with a container.

    Implementations must be pure: every method returns a new extension and
    leaves ``self`` untouched. ``rows`` and ``columns`` arguments are already
    resolved integer position arrays.

    Attributes:
        name: Key under which the container stores this extension
    """

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def validate(self, n_rows: int, n_columns: int) -> list[str]:
        """Return one message per structure that disagrees with the dimensions."""

    @abstractmethod
    def subset(self, rows: np.ndarray, columns: np.ndarray) -> Extension:
        """Restrict every structure to the given positions."""

    @abstractmethod
    def assign(self, rows: np.ndarray, columns: np.ndarray, replacement: Extension) -> Extension:
        """Overwrite the block at ``rows``/``columns`` with ``replacement``'s structures."""

    @abstractmethod
    def combine(self, others: Sequence[Extension], axis: str) -> Extension:
        """Bind ``self`` followed by ``others`` along ``axis``."""

    def compatible(self, others: Sequence[Extension], axis: str, check_content: bool = True) -> list[str]:
        """
        Check that ``others`` can be bound to ``self`` along ``axis``.

        Returns:
            Messages naming each incompatible structure (empty = compatible)
        """
        return []

    @abstractmethod
    def equals(self, other: Extension) -> bool:
        """Content equality."""

    def copy(self) -> Extension:
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


@dataclass(frozen=True)
class Slot:
    """A single auxiliary structure and its axis role."""
    role: AxisRole
    value: Any


def _positions_for(role: AxisRole, value: Any, rows: np.ndarray, columns: np.ndarray) -> list[np.ndarray]:
    # Trailing dimensions not bound to an axis are kept whole.
    positions = [rows if a == ROW else columns for a in role.axes]
    shape = mx.shape_of(value)
    if not mx.is_table(value):
        positions += [np.arange(s, dtype=np.intp) for s in shape[len(role.axes):]]
    return positions


class SlotExtension(Extension):
    """
    Named collection of axis-classified slots.

    Handles any mix of per-row, per-column and two-axis structures. Values may
    be numpy arrays, scipy sparse matrices, or (for ROW / COLUMN roles) pandas
    Series/DataFrames and plain sequences. One-dimensional roles accept
    arrays with trailing dimensions, e.g. an n_rows x k embedding; only the
    leading dimension follows the container.

    Examples:
        >>> ext = SlotExtension("slots", {"size_factor": (AxisRole.COLUMN, [1.0, 0.8, 1.2])})
        >>> ext.get("size_factor")
        array([1. , 0.8, 1.2])
        >>> ext.role("size_factor")
        <AxisRole.COLUMN: ('column',)>
    """

    def __init__(self, name: str = "slots", slots: Mapping[str, Slot | tuple[AxisRole, Any]] | None = None) -> None:
        super().__init__(name)
        self._slots: dict[str, Slot] = {}
        for slot_name, entry in (slots or {}).items():
            if not isinstance(entry, Slot):
                role, value = entry
                entry = Slot(role=AxisRole(role), value=value)
            self._slots[slot_name] = Slot(entry.role, self._normalize(entry.role, entry.value))

    @staticmethod
    def _normalize(role: AxisRole, value: Any) -> Any:
        if len(role.axes) == 1:
            return mx.as_vector(value)
        return mx.as_matrix(value)

    @property
    def slot_names(self) -> list[str]:
        return list(self._slots)

    def __contains__(self, slot_name: str) -> bool:
        return slot_name in self._slots

    def get(self, slot_name: str) -> Any:
        if slot_name not in self._slots:
            raise NotFoundError(f"slot '{slot_name}' not found in extension '{self.name}'")
        return mx.detached(self._slots[slot_name].value)

    def role(self, slot_name: str) -> AxisRole:
        if slot_name not in self._slots:
            raise NotFoundError(f"slot '{slot_name}' not found in extension '{self.name}'")
        return self._slots[slot_name].role

    def with_slot(self, slot_name: str, value: Any, role: AxisRole | None = None) -> SlotExtension:
        """Return a copy with ``slot_name`` added or replaced (role kept if omitted)."""
        if role is None:
            role = self.role(slot_name)
        slots = dict(self._slots)
        slots[slot_name] = Slot(AxisRole(role), value)
        return SlotExtension(self.name, slots)

    def without_slot(self, slot_name: str) -> SlotExtension:
        self.role(slot_name)
        slots = {k: v for k, v in self._slots.items() if k != slot_name}
        return SlotExtension(self.name, slots)

    def validate(self, n_rows: int, n_columns: int) -> list[str]:
        messages = []
        for slot_name, slot in self._slots.items():
            expected = slot.role.expected_shape(n_rows, n_columns)
            shape = mx.shape_of(slot.value)
            if len(shape) < len(expected):
                messages.append(
                    f"slot '{slot_name}' ({slot.role.name}) must have at least "
                    f"{len(expected)} dimension(s), got shape {shape}"
                )
            elif shape[:len(expected)] != expected:
                messages.append(
                    f"slot '{slot_name}' ({slot.role.name}) has shape {shape}, "
                    f"expected leading dimensions {expected}"
                )
        return messages

    def subset(self, rows: np.ndarray, columns: np.ndarray) -> SlotExtension:
        slots = {}
        for slot_name, slot in self._slots.items():
            value = slot.value
            for dim, axis in enumerate(slot.role.axes):
                value = mx.take(value, rows if axis == ROW else columns, dim)
            slots[slot_name] = Slot(slot.role, value)
        return SlotExtension(self.name, slots)

    def _require_same_slots(self, other: Extension) -> SlotExtension:
        if not isinstance(other, SlotExtension):
            raise IncompatibleStructureError(
                f"extension '{self.name}' cannot be combined with {type(other).__name__}"
            )
        mine = {k: s.role for k, s in self._slots.items()}
        theirs = {k: s.role for k, s in other._slots.items()}
        if mine != theirs:
            raise IncompatibleStructureError(
                f"extension '{self.name}' slots are not compatible: "
                f"{sorted(mine)} vs {sorted(theirs)}"
            )
        return other

    def assign(self, rows: np.ndarray, columns: np.ndarray, replacement: Extension) -> SlotExtension:
        replacement = self._require_same_slots(replacement)
        slots = {}
        for slot_name, slot in self._slots.items():
            positions = _positions_for(slot.role, slot.value, rows, columns)
            value = mx.overwrite(slot.value, positions, replacement._slots[slot_name].value)
            slots[slot_name] = Slot(slot.role, value)
        return SlotExtension(self.name, slots)

    def compatible(self, others: Sequence[Extension], axis: str, check_content: bool = True) -> list[str]:
        messages = []
        for other in others:
            try:
                self._require_same_slots(other)
            except IncompatibleStructureError as e:
                messages.append(str(e))
                continue
            if not check_content:
                continue
            for slot_name, slot in self._slots.items():
                if not slot.role.is_fixed_under(axis):
                    continue
                if not mx.equals(slot.value, other._slots[slot_name].value):
                    messages.append(f"slot '{slot_name}' ({slot.role.name}) differs")
        return messages

    def combine(self, others: Sequence[Extension], axis: str) -> SlotExtension:
        others = [self._require_same_slots(o) for o in others]
        slots = {}
        for slot_name, slot in self._slots.items():
            values = [slot.value] + [o._slots[slot_name].value for o in others]
            bound = [dim for dim, a in enumerate(slot.role.axes) if a == axis]
            if not bound:
                value = mx.concat(values[:1])
            elif len(bound) == 1:
                value = mx.concat(values, dim=bound[0])
            else:
                value = mx.block_diag(values)
            slots[slot_name] = Slot(slot.role, value)
        return SlotExtension(self.name, slots)

    def equals(self, other: Extension) -> bool:
        if not isinstance(other, SlotExtension) or other.name != self.name:
            return False
        if list(self._slots) != list(other._slots):
            return False
        return all(
            slot.role == other._slots[k].role and mx.equals(slot.value, other._slots[k].value)
            for k, slot in self._slots.items()
        )

    def __repr__(self) -> str:
        parts = ", ".join(f"{k}: {s.role.name}{mx.shape_of(s.value)}" for k, s in self._slots.items())
        return f"SlotExtension(name={self.name!r}, slots={{{parts}}})"
