"""
Tests for SummarizedExperiment construction, validity and accessors.
"""

import numpy as np
import pandas as pd
import pytest
import scipy.sparse as sp

from summarizedexperiment import AxisRole, SummarizedExperiment
from summarizedexperiment.core.errors import (
    DuplicateNameError,
    ExperimentError,
    InvalidStateError,
    LengthMismatchError,
    NotFoundError,
    ShapeMismatchError,
)

from conftest import generate_experiment


class TestConstruction:
    """Dimension inference and validity at construction time."""

    def test_dimensions_agree(self, se):
        """Every structure has the container's dimensions."""
        assert se.shape == (10, 7)
        assert se.n_rows == se.assay("counts").shape[0] == len(se.row_data)
        assert se.n_columns == se.assay("counts").shape[1] == len(se.column_data)
        assert se.validate() == []

    def test_empty_container(self):
        """No arguments gives a valid 0 x 0 container."""
        empty = SummarizedExperiment()
        assert empty.shape == (0, 0)
        assert empty.assay_names == []
        assert empty.row_names is None

    def test_dimensions_from_tables_without_assays(self):
        """Without assays, table lengths decide the dimensions."""
        se = SummarizedExperiment(
            row_data=pd.DataFrame({"a": range(4)}),
            column_data=pd.DataFrame({"b": range(3)}),
        )
        assert se.shape == (4, 3)

    def test_names_from_table_index(self):
        """A string index on row_data supplies row names."""
        se = SummarizedExperiment(
            assays={"counts": np.zeros((2, 2))},
            row_data=pd.DataFrame({"a": [1, 2]}, index=["g1", "g2"]),
        )
        assert se.row_names.tolist() == ["g1", "g2"]
        assert se.column_names is None

    def test_dataframe_assay_is_stored_as_array(self):
        """DataFrame assays are normalized to numpy."""
        se = SummarizedExperiment(assays={"counts": pd.DataFrame(np.ones((2, 3)))})
        assert isinstance(se.assay("counts", with_dimnames=False), np.ndarray)

    def test_all_violations_reported(self):
        """InvalidStateError carries every violated invariant."""
        with pytest.raises(InvalidStateError) as excinfo:
            SummarizedExperiment(
                assays={"counts": np.zeros((3, 2)), "other": np.zeros((2, 2))},
                row_data=pd.DataFrame({"a": range(5)}),
                column_names=["x", "x"],
            )
        messages = excinfo.value.messages
        assert any("assay 'other' has shape (2, 2)" in m for m in messages)
        assert any("row_data has 5 rows" in m for m in messages)
        assert any("column names must be unique" in m for m in messages)

    def test_non_2d_assay_rejected(self):
        with pytest.raises(InvalidStateError, match="must be 2-dimensional"):
            SummarizedExperiment(
                assays={"counts": np.zeros((3, 2)), "vec": np.zeros(3)},
            )

    def test_assays_must_be_mapping(self):
        with pytest.raises(TypeError, match="assays must be a mapping"):
            SummarizedExperiment(assays=[np.zeros((2, 2))])

    def test_errors_share_base_class(self):
        """Container errors are also standard Python exceptions."""
        assert issubclass(InvalidStateError, ExperimentError)
        assert issubclass(InvalidStateError, ValueError)
        assert issubclass(NotFoundError, LookupError)


class TestAssays:
    """Assay getters and setters."""

    def test_assay_by_name_and_position(self, se):
        by_name = se.assay("counts", with_dimnames=False)
        by_position = se.assay(0, with_dimnames=False)
        np.testing.assert_array_equal(by_name, by_position)

    def test_assay_with_dimnames(self, se):
        """with_dimnames=True labels the matrix with the current names."""
        frame = se.assay("counts")
        assert isinstance(frame, pd.DataFrame)
        assert frame.index.tolist() == [f"FEATURE_{i}" for i in range(1, 11)]

    def test_sparse_assay_stays_sparse(self, sparse_se):
        assert sp.issparse(sparse_se.assay("sparse", with_dimnames=False))
        assert sparse_se.assay("sparse").shape == (10, 7)

    def test_missing_assay(self, se):
        with pytest.raises(NotFoundError, match="assay 'logcounts' not found"):
            se.assay("logcounts")
        with pytest.raises(NotFoundError, match="out of range"):
            se.assay(3)

    def test_set_assay_returns_new_container(self, se):
        """Setters never modify the original."""
        updated = se.set_assay("logcounts", np.log1p(se.assay("counts", with_dimnames=False)))
        assert updated.assay_names == ["counts", "logcounts"]
        assert se.assay_names == ["counts"]

    def test_set_assay_wrong_shape(self, se):
        with pytest.raises(ShapeMismatchError, match=r"expected \(10, 7\)"):
            se.set_assay("counts", np.zeros((7, 10)))

    def test_set_assay_by_position_replaces(self, se):
        updated = se.set_assay(0, np.zeros((10, 7)))
        assert updated.assay_names == ["counts"]
        assert updated.assay("counts", with_dimnames=False).sum() == 0

    def test_set_assay_names(self, se):
        renamed = se.set_assay_names(["raw"])
        assert renamed.assay_names == ["raw"]
        with pytest.raises(LengthMismatchError):
            se.set_assay_names(["a", "b"])

    def test_set_assays_checks_every_shape(self, se):
        with pytest.raises(ShapeMismatchError, match="'bad'"):
            se.set_assays({"good": np.zeros((10, 7)), "bad": np.zeros((2, 2))})

    def test_remove_assay(self, se):
        assert se.remove_assay("counts").assay_names == []


class TestMetadataTables:
    """row_data / column_data getters and setters."""

    def test_row_data_indexed_by_names(self, se):
        assert se.row_data.index[0] == "FEATURE_1"
        assert se.row_data["yay"].tolist() == list(range(10))

    def test_column_data_positional_without_names(self, se):
        assert se.column_data.index.tolist() == list(range(7))

    def test_getter_returns_copy(self, se):
        """Mutating a returned table leaves the container untouched."""
        table = se.row_data
        table["yay"] = -1
        assert se.row_data["yay"].tolist() == list(range(10))

    def test_set_row_data_wrong_length(self, se):
        with pytest.raises(ShapeMismatchError, match="row_data has 3 rows, expected 10"):
            se.set_row_data(pd.DataFrame({"x": range(3)}))

    def test_set_column_data_none_resets(self, se):
        assert se.set_column_data(None).column_data.shape == (7, 0)


class TestNames:
    """Row/column name setters."""

    def test_set_row_names(self, se):
        renamed = se.set_row_names([f"G{i}" for i in range(10)])
        assert renamed.row_names[0] == "G0"

    def test_remove_names(self, se):
        assert se.set_row_names(None).row_names is None

    def test_duplicate_names(self, se):
        with pytest.raises(DuplicateNameError, match="duplicated"):
            se.set_column_names(["a"] * 7)

    def test_wrong_length(self, se):
        with pytest.raises(LengthMismatchError, match="length 3, expected 7"):
            se.set_column_names(["a", "b", "c"])


class TestCopyEquality:
    """Copies, equality and display."""

    def test_copy_equals_original(self, se):
        clone = se.copy()
        assert clone == se
        assert clone.assay("counts", with_dimnames=False) is not se.assay("counts", with_dimnames=False)

    def test_different_metadata_not_equal(self, se):
        assert se != se.set_metadata({"study": "other"})

    def test_not_hashable(self, se):
        with pytest.raises(TypeError):
            hash(se)

    def test_repr(self, se):
        text = repr(se)
        assert text.startswith("SummarizedExperiment(10 rows × 7 columns)")
        assert "assays(1): counts" in text
        assert "FEATURE_1 FEATURE_2 ... FEATURE_9 FEATURE_10" in text

    def test_subclass_preserved(self):
        """Operations return the caller's type."""

        class CountsExperiment(SummarizedExperiment):
            pass

        base = generate_experiment()
        derived = CountsExperiment(
            assays=base.assays, row_data=base.row_data, column_data=base.column_data
        )
        assert type(derived[:3]) is CountsExperiment
        assert type(derived.set_metadata({})) is CountsExperiment


class TestIsolation:
    """Containers never share mutable state with callers or with each other."""

    def test_input_array_mutation_ignored(self):
        counts = np.zeros((2, 2))
        se = SummarizedExperiment(assays={"counts": counts})
        counts[0, 0] = 99
        assert se.assay("counts", with_dimnames=False)[0, 0] == 0

    def test_input_sparse_mutation_ignored(self):
        counts = sp.csr_matrix(np.eye(3))
        se = SummarizedExperiment(assays={"counts": counts})
        counts.data[:] = 5
        assert se.assay("counts", with_dimnames=False).sum() == 3

    def test_returned_matrix_mutation_ignored(self, se):
        before = se.assay("counts", with_dimnames=False).copy()
        se.assay("counts", with_dimnames=False)[:] = -1
        se.assays["counts"][0, 0] = -1
        frame = se.assay("counts")
        frame.iloc[0, 0] = -1
        np.testing.assert_array_equal(se.assay("counts", with_dimnames=False), before)

    def test_sibling_containers_independent(self, se):
        """A container derived by a setter does not expose the original's arrays."""
        renamed = se.set_row_names(None)
        renamed.assay("counts", with_dimnames=False)[0, 0] = 1000
        assert se.assay("counts", with_dimnames=False)[0, 0] != 1000

    def test_metadata_mutation_ignored(self, se):
        genes = ["TP53"]
        tagged = se.set_metadata({"genes": genes})
        genes.append("MYC")
        tagged.metadata["genes"].append("KRAS")
        assert tagged.metadata == {"genes": ["TP53"]}

    def test_slot_mutation_ignored(self, se):
        gc = np.zeros(10)
        se = se.set_slot("gc", gc, AxisRole.ROW)
        gc[:] = 1
        se.get_slot("gc")[:] = 2
        assert se.get_slot("gc").sum() == 0


class TestMetadataEquality:
    """Equality over free-form metadata values."""

    def test_index_values(self, se):
        tagged = se.set_metadata({"genes": pd.Index(["a", "b"])})
        assert tagged == tagged.copy()
        assert tagged != se.set_metadata({"genes": pd.Index(["a", "c"])})

    def test_nan_equals_nan(self, se):
        tagged = se.set_metadata({"threshold": float("nan")})
        assert tagged == tagged.copy()

    def test_containers_holding_arrays(self, se):
        tagged = se.set_metadata({"runs": [np.arange(3), np.ones(2)], "qc": {"scores": np.array([0.5, np.nan])}})
        assert tagged == tagged.copy()
        changed = se.set_metadata({"runs": [np.arange(3), np.zeros(2)], "qc": {"scores": np.array([0.5, np.nan])}})
        assert tagged != changed

    def test_array_against_scalar(self, se):
        assert se.set_metadata({"x": np.arange(3)}) != se.set_metadata({"x": 3})

    def test_key_order_ignored(self, se):
        assert se.set_metadata({"a": 1, "b": 2}) == se.set_metadata({"b": 2, "a": 1})
