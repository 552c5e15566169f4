"""
Tests for subset assignment.
"""

import numpy as np
import pandas as pd
import pytest
import scipy.sparse as sp

from summarizedexperiment import AxisRole
from summarizedexperiment.core.errors import (
    IncompatibleStructureError,
    InvalidStateError,
    LengthMismatchError,
)


class TestAssignScenarios:
    """Replacement-size edge cases."""

    def test_empty_into_empty_is_noop(self, se):
        """Assigning a zero-size replacement into a zero-size selection changes nothing."""
        assert se.assign_subset([], [], se[[], []]) == se

    def test_empty_into_nonempty_fails(self, se):
        with pytest.raises(LengthMismatchError, match="replacement has length zero"):
            se.assign_subset([1], [1], se[[], []])

    def test_shape_mismatch(self, se):
        with pytest.raises(LengthMismatchError, match=r"selection has shape \(2, 7\)"):
            se.assign_subset([0, 1], None, se[:3])


class TestAssignValues:
    """Values land at the selected positions, everything else is unchanged."""

    def test_assay_block_overwritten(self, se):
        block = se[[8, 9], [0, 1]].set_row_names(None)
        updated = se.assign_subset([0, 1], [5, 6], block)
        counts = se.assay("counts", with_dimnames=False)
        result = updated.assay("counts", with_dimnames=False)
        np.testing.assert_array_equal(result[np.ix_([0, 1], [5, 6])], counts[np.ix_([8, 9], [0, 1])])
        np.testing.assert_array_equal(result[2:], counts[2:])
        np.testing.assert_array_equal(se.assay("counts", with_dimnames=False), counts)

    def test_tables_overwritten(self, se):
        replacement = se[[9], [6]]
        updated = se.set_row_names(None).assign_subset([0], [0], replacement.set_row_names(None))
        assert updated.row_data["yay"].tolist() == [9] + list(range(1, 10))
        assert updated.column_data["whee"].tolist()[:2] == ["g", "b"]

    def test_names_overwritten(self, named_se):
        replacement = named_se[["FEATURE_10"], :].set_row_names(["NEW"])
        updated = named_se.assign_subset([0], None, replacement)
        assert updated.row_names[0] == "NEW"

    def test_duplicate_names_after_assignment(self, named_se):
        """Assigning an existing name to another position breaks uniqueness."""
        with pytest.raises(InvalidStateError, match="row names must be unique"):
            named_se.assign_subset([0], None, named_se[["FEATURE_2"], :])

    def test_by_name_and_mask(self, named_se):
        mask = named_se.column_data["whee"] == "a"
        replacement = named_se[["FEATURE_3"], mask].set_row_names(["X"]).set_column_names(["Y"])
        updated = named_se.assign_subset("FEATURE_1", mask, replacement)
        assert updated.row_names[0] == "X"
        assert updated.column_names[0] == "Y"

    def test_dtype_promotion(self, se):
        """Float replacement values are not truncated into an integer assay."""
        replacement = se[[0], [0]].set_assay("counts", np.array([[0.5]]))
        updated = se.assign_subset([0], [0], replacement)
        assert updated.assay("counts", with_dimnames=False)[0, 0] == 0.5

    def test_sparse_assay(self, sparse_se):
        replacement = sparse_se[["FEATURE_1"], :].set_assay("sparse", sp.csr_matrix(np.full((1, 7), 9.0)))
        updated = sparse_se.assign_subset(["FEATURE_1"], None, replacement)
        result = updated.assay("sparse", with_dimnames=False)
        assert sp.issparse(result) and result.format == "csr"
        assert result.toarray()[0].tolist() == [9.0] * 7

    def test_metadata_merged(self, se):
        replacement = se[[0], :].set_metadata({"study": "other", "batch": 2})
        updated = se.assign_subset([0], None, replacement)
        assert updated.metadata == {"study": "synthetic", "batch": 2}


class TestAssignCompatibility:
    """Replacement must carry the same structures."""

    def test_different_assays(self, se):
        replacement = se[[0], :].set_assay("other", np.zeros((1, 7)))
        with pytest.raises(IncompatibleStructureError, match="assay names"):
            se.assign_subset([0], None, replacement)

    def test_different_table_columns(self, se):
        replacement = se[[0], :].set_row_data(pd.DataFrame({"nope": [1]}))
        with pytest.raises(IncompatibleStructureError, match="row_data columns"):
            se.assign_subset([0], None, replacement)

    def test_slots_assigned(self, se):
        se = se.set_slot("dist", np.zeros((10, 10)), AxisRole.ROW_BY_ROW)
        replacement = se[[0, 1], :].set_row_names(None).set_slot("dist", np.ones((2, 2)))
        updated = se.assign_subset([3, 4], None, replacement)
        dist = updated.get_slot("dist")
        assert dist[np.ix_([3, 4], [3, 4])].sum() == 4
        assert dist.sum() == 4
