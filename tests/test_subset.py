"""
Tests for subsetting: every aligned structure follows the same positions.
"""

import numpy as np
import pandas as pd
import pytest
import scipy.sparse as sp

from summarizedexperiment import AxisRole
from summarizedexperiment.core.errors import (
    IndexOutOfBoundsError,
    LengthMismatchError,
    UnknownNameError,
)

from conftest import generate_experiment


class TestSubsetScenarios:
    """The canonical 10 x 7 scenarios."""

    def test_first_five_rows(self, se):
        """Row subset restricts row structures and leaves columns alone."""
        top = se.subset(range(5))
        assert top.shape == (5, 7)
        assert top.assay("counts").shape == (5, 7)
        assert top.row_data["yay"].tolist() == [0, 1, 2, 3, 4]
        assert top.column_data.equals(se.column_data)
        assert top.row_names.tolist() == [f"FEATURE_{i}" for i in range(1, 6)]

    def test_zero_rows(self, se):
        """A zero-length selection is a valid container."""
        none = se.subset([])
        assert none.shape == (0, 7)
        assert none.validate() == []
        assert none.assay("counts", with_dimnames=False).shape == (0, 7)
        assert len(none.row_names) == 0

    def test_reversed_rows(self, se):
        five = se[:5]
        reversed_ = five[[4, 3, 2, 1, 0]]
        counts = five.assay("counts", with_dimnames=False)
        np.testing.assert_array_equal(reversed_.assay("counts", with_dimnames=False), counts[::-1])
        assert reversed_.row_data["yay"].tolist() == [4, 3, 2, 1, 0]
        assert reversed_.row_names[0] == "FEATURE_5"

    def test_unknown_name(self, se):
        with pytest.raises(UnknownNameError, match="FEATURE_999"):
            se[["FEATURE_1", "FEATURE_999"]]


class TestSubsetForms:
    """Indexing syntax and selector forms."""

    def test_getitem_two_axes(self, named_se):
        sub = named_se[["FEATURE_2", "FEATURE_1"], :3]
        assert sub.shape == (2, 3)
        assert sub.column_names.tolist() == ["SAMPLE_1", "SAMPLE_2", "SAMPLE_3"]

    def test_duplicated_positions(self, se):
        """Repeated positions duplicate data; names would then clash."""
        unnamed = se.set_row_names(None)
        doubled = unnamed[[0, 0, 1]]
        assert doubled.row_data["yay"].tolist() == [0, 0, 1]

    def test_duplicate_names_rejected_after_subset(self, se):
        with pytest.raises(ValueError, match="unique"):
            se[[0, 0]]

    def test_mask_from_column_data(self, se):
        sub = se[:, se.column_data["whee"].isin(["a", "c"])]
        assert sub.column_data["whee"].tolist() == ["a", "c"]

    def test_single_position(self, se):
        assert se[3].shape == (1, 7)

    def test_too_many_selectors(self, se):
        with pytest.raises(IndexError, match="at most 2"):
            se[0, 0, 0]

    def test_out_of_bounds_columns(self, se):
        with pytest.raises(IndexOutOfBoundsError, match="column index out of bounds: 7"):
            se[:, [0, 7]]

    def test_mask_length(self, se):
        with pytest.raises(LengthMismatchError):
            se[[True, False]]

    def test_original_untouched(self, se):
        se[:2]
        assert se.shape == (10, 7)


class TestSubsetRoundTrip:
    """Reading back a subset equals indexing every structure directly."""

    @pytest.mark.parametrize("rows,columns", [
        ([5, 4, 3, 2, 1], [0, 6]),
        ([9], [3, 3, 1]),
        ([], [0, 1]),
    ])
    def test_positions_applied_everywhere(self, rows, columns):
        se = generate_experiment(row_names=False, sparse=True)
        sub = se.subset(rows, columns)
        counts = se.assay("counts", with_dimnames=False)
        np.testing.assert_array_equal(
            sub.assay("counts", with_dimnames=False), counts[np.ix_(rows, columns)]
        )
        sparse = sub.assay("sparse", with_dimnames=False)
        assert sp.issparse(sparse) and sparse.format == "csr"
        np.testing.assert_array_equal(
            sparse.toarray(),
            se.assay("sparse", with_dimnames=False).toarray()[np.ix_(rows, columns)],
        )
        assert sub.row_data["yay"].tolist() == se.row_data["yay"].iloc[rows].tolist()
        assert sub.column_data["whee"].tolist() == se.column_data["whee"].iloc[columns].tolist()


class TestSubsetSlots:
    """Extension slots follow their axis role."""

    def test_roles(self, se):
        se = (
            se.set_slot("gc", np.linspace(0, 1, 10), AxisRole.ROW)
            .set_slot("size_factor", pd.Series(np.ones(7)), AxisRole.COLUMN)
            .set_slot("dist", np.arange(100).reshape(10, 10), AxisRole.ROW_BY_ROW)
            .set_slot("mask", np.zeros((10, 7), dtype=bool), AxisRole.ROW_BY_COLUMN)
            .set_slot("embedding", np.zeros((7, 10)), AxisRole.COLUMN_BY_ROW)
        )
        sub = se[[2, 0], [1, 2, 3]]
        assert sub.get_slot("gc").shape == (2,)
        assert len(sub.get_slot("size_factor")) == 3
        np.testing.assert_array_equal(sub.get_slot("dist"), [[22, 20], [2, 0]])
        assert sub.get_slot("mask").shape == (2, 3)
        assert sub.get_slot("embedding").shape == (3, 2)
