"""Tests for the clipped logistic link."""

import math

import numpy as np
import pytest

from sgl_logit._backends import resolve_backend
from sgl_logit.link import (
    EXP_CLIP_BOUND,
    clip_exponent,
    count_clipped,
    to_probability,
    zero_probability,
)

# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def rng():
    return np.random.default_rng(42)


@pytest.fixture(params=["numpy", "jax"])
def backend(request):
    if request.param == "jax":
        pytest.importorskip("jax")
    return request.param


# ------------------------------------------------------------------ #
# clip_exponent
# ------------------------------------------------------------------ #


class TestClipExponent:
    def test_truncates_to_bound(self):
        x = np.array([-100.0, -5.0, 0.0, 5.0, 100.0])
        np.testing.assert_array_equal(
            clip_exponent(x, bound=10.0), [-10.0, -5.0, 0.0, 5.0, 10.0]
        )

    def test_default_bound(self):
        assert clip_exponent(1e6) == EXP_CLIP_BOUND
        assert clip_exponent(-1e6) == -EXP_CLIP_BOUND

    def test_input_not_modified(self):
        x = np.array([1e3, -1e3])
        clip_exponent(x)
        np.testing.assert_array_equal(x, [1e3, -1e3])

    def test_largest_safe_bound_accepted(self):
        clip_exponent(0.0, bound=36.0)

    @pytest.mark.parametrize("bound", [0.0, -1.0, math.inf, math.nan])
    def test_rejects_non_positive_or_non_finite(self, bound):
        with pytest.raises(ValueError, match="positive and finite"):
            clip_exponent(0.0, bound=bound)

    @pytest.mark.parametrize("bound", [40.0, 800.0])
    def test_rejects_bound_that_saturates(self, bound):
        with pytest.raises(ValueError, match="too large"):
            clip_exponent(0.0, bound=bound)

    def test_count_clipped(self):
        x = np.array([[-31.0, 0.0], [30.0, 1e9]])
        assert count_clipped(x) == 2
        assert count_clipped(x, bound=0.5) == 3


# ------------------------------------------------------------------ #
# to_probability
# ------------------------------------------------------------------ #


class TestToProbability:
    @pytest.mark.parametrize(
        "magnitude", [0.0, 1.0, 10.0, 30.0, 36.8, 100.0, 709.0, 710.0, 1e6, 1e300]
    )
    def test_strictly_inside_unit_interval(self, magnitude, backend):
        lp = np.array([[magnitude, -magnitude]])
        p = to_probability(lp, backend=backend)
        assert np.all(np.isfinite(p))
        assert np.all(p > 0.0)
        assert np.all(p < 1.0)

    def test_adversarial_random_magnitudes(self, rng, backend):
        scale = 10.0 ** rng.uniform(-3, 300, size=(50, 4))
        lp = rng.standard_normal((50, 4)) * scale
        p = to_probability(lp, backend=backend)
        assert np.all((p > 0.0) & (p < 1.0))

    def test_matches_sigmoid_in_safe_range(self, rng, backend):
        lp = rng.uniform(-20, 20, size=(30, 3))
        np.testing.assert_allclose(
            to_probability(lp, backend=backend), 1.0 / (1.0 + np.exp(-lp)), rtol=1e-12
        )

    def test_symmetry(self, rng):
        lp = rng.uniform(-25, 25, size=(10, 2))
        np.testing.assert_allclose(
            to_probability(lp, backend="numpy") + to_probability(-lp, backend="numpy"),
            1.0,
            rtol=1e-12,
        )

    def test_monotone(self):
        lp = np.linspace(-40, 40, 401).reshape(-1, 1)
        p = to_probability(lp, backend="numpy").ravel()
        assert np.all(np.diff(p) >= 0.0)

    def test_zero_predictor_gives_half(self, backend):
        np.testing.assert_array_equal(to_probability(np.zeros((2, 3)), backend=backend), 0.5)

    def test_shape_preserved(self, rng):
        lp = rng.standard_normal((7, 3))
        assert to_probability(lp, backend="numpy").shape == (7, 3)

    @pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
    def test_rejects_non_finite(self, bad):
        lp = np.array([[0.0, bad]])
        with pytest.raises(ValueError, match="non-finite"):
            to_probability(lp, backend="numpy")

    def test_accepts_backend_instance(self):
        be = resolve_backend("numpy")
        np.testing.assert_array_equal(to_probability(np.zeros((1, 1)), backend=be), 0.5)

    def test_custom_bound(self):
        p = to_probability(np.array([[100.0]]), bound=1.0, backend="numpy")
        np.testing.assert_allclose(p, math.e / (1.0 + math.e))

    def test_input_not_modified(self):
        lp = np.array([[1e3, -1e3]])
        to_probability(lp, backend="numpy")
        np.testing.assert_array_equal(lp, [[1e3, -1e3]])


# ------------------------------------------------------------------ #
# zero_probability
# ------------------------------------------------------------------ #


class TestZeroProbability:
    def test_constant_half(self):
        p = zero_probability((4, 2))
        assert p.shape == (4, 2)
        assert p.dtype == np.float64
        np.testing.assert_array_equal(p, 0.5)

    def test_equals_link_at_zero(self):
        np.testing.assert_array_equal(
            zero_probability((3, 3)), to_probability(np.zeros((3, 3)), backend="numpy")
        )
