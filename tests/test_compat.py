"""Tests for matrix input compatibility (NumPy, scipy.sparse, pandas, Polars)."""

import numpy as np
import pandas as pd
import pytest
import scipy.sparse as sp

from sgl_logit._compat import _ensure_matrix


class TestEnsureMatrix:
    """Tests for the _ensure_matrix converter."""

    def test_numpy_passthrough(self):
        a = np.zeros((3, 2))
        assert _ensure_matrix(a) is a  # exact same object, no copy

    def test_sparse_passthrough(self):
        m = sp.csr_matrix(np.eye(3))
        assert _ensure_matrix(m) is m

    def test_sparse_array_passthrough(self):
        m = sp.coo_array(np.eye(3))
        assert _ensure_matrix(m) is m

    def test_matrix_subclass_viewed_as_ndarray(self):
        m = np.asmatrix([[1.0, 0.0, 1.0], [0.0, 1.0, 1.0]])
        result = _ensure_matrix(m)
        assert type(result) is np.ndarray
        np.testing.assert_array_equal(result * result, [[1, 0, 1], [0, 1, 1]])

    def test_sparse_todense_result_is_plain(self):
        result = _ensure_matrix(sp.csr_matrix(np.eye(2)).todense())
        assert type(result) is np.ndarray

    def test_pandas_converted(self):
        df = pd.DataFrame({"a": [1, 0, 1], "b": [0, 0, 1]})
        result = _ensure_matrix(df)
        assert isinstance(result, np.ndarray)
        np.testing.assert_array_equal(result, [[1, 0], [0, 0], [1, 1]])

    def test_rejects_one_dimensional(self):
        with pytest.raises(ValueError, match="two-dimensional"):
            _ensure_matrix(np.zeros(4), name="Y")

    def test_rejects_invalid_type(self):
        with pytest.raises(TypeError, match="must be a NumPy array"):
            _ensure_matrix([[1, 0], [0, 1]])

    def test_error_includes_name(self):
        with pytest.raises(TypeError, match="'X'"):
            _ensure_matrix({"a": 1}, name="X")


class TestPolars:
    """Polars inputs are converted at the boundary."""

    @pytest.fixture()
    def pl(self):
        return pytest.importorskip("polars")

    def test_polars_converted(self, pl):
        result = _ensure_matrix(pl.DataFrame({"a": [1, 0, 1], "b": [0, 1, 1]}))
        assert isinstance(result, np.ndarray)
        np.testing.assert_array_equal(result, [[1, 0], [0, 1], [1, 1]])

    def test_polars_lazyframe_collected_and_converted(self, pl):
        lf = pl.DataFrame({"a": [1.0, 0.0]}).lazy()
        result = _ensure_matrix(lf)
        np.testing.assert_array_equal(result, [[1.0], [0.0]])

    def test_polars_response_end_to_end(self, pl):
        from sgl_logit import LogitLoss

        loss = LogitLoss(pl.DataFrame({"y1": [1, 0], "y2": [0, 1]}), backend="numpy")
        np.testing.assert_allclose(loss.gradients(), [[-0.5, 0.5], [0.5, -0.5]])
