"""Tests for the objective registry and the four representation pairs."""

import itertools
import math

import numpy as np
import pytest
import scipy.sparse as sp

import sgl_logit.loss as loss_mod
from sgl_logit import (
    LogitData,
    LogitLoss,
    ObjectiveType,
    logit,
    logit_spx,
    logit_spx_spy,
    logit_spy,
    register_objective,
    resolve_objective,
)

# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #

_BUILTINS = {
    "logit": ("dense", "dense"),
    "logit_spx": ("sparse", "dense"),
    "logit_spy": ("dense", "sparse"),
    "logit_spx_spy": ("sparse", "sparse"),
}


@pytest.fixture()
def arrays():
    rng = np.random.default_rng(11)
    X = rng.standard_normal((30, 5))
    X[rng.uniform(size=X.shape) < 0.6] = 0.0
    Y = (rng.uniform(size=(30, 2)) < 0.4).astype(float)
    beta = rng.standard_normal((5, 2))
    return X, Y, beta


def _data(X, Y, design, response):
    return LogitData.from_arrays(
        sp.csr_matrix(X) if design == "sparse" else X,
        sp.csr_matrix(Y) if response == "sparse" else Y,
    )


@pytest.fixture()
def restore_registry(monkeypatch):
    monkeypatch.setattr(loss_mod, "_OBJECTIVES", dict(loss_mod._OBJECTIVES))


# ------------------------------------------------------------------ #
# Registry
# ------------------------------------------------------------------ #


class TestBuiltins:
    @pytest.mark.parametrize("name", sorted(_BUILTINS))
    def test_registered(self, name):
        objective = resolve_objective(name)
        assert isinstance(objective, ObjectiveType)
        assert (objective.design, objective.response) == _BUILTINS[name]

    def test_module_level_names(self):
        assert resolve_objective("logit") is logit
        assert resolve_objective("logit_spx") is logit_spx
        assert resolve_objective("logit_spy") is logit_spy
        assert resolve_objective("logit_spx_spy") is logit_spx_spy

    def test_instance_passthrough(self):
        assert resolve_objective(logit_spy) is logit_spy


class TestResolveObjective:
    @pytest.mark.parametrize(
        ("design", "response"), list(itertools.product(["dense", "sparse"], repeat=2))
    )
    def test_auto_matches_representations(self, arrays, design, response):
        X, Y, _ = arrays
        objective = resolve_objective("auto", _data(X, Y, design, response))
        assert (objective.design, objective.response) == (design, response)

    def test_auto_requires_data(self):
        with pytest.raises(ValueError, match="requires 'data'"):
            resolve_objective("auto")

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown objective 'probit'"):
            resolve_objective("probit")

    def test_auto_without_match(self, arrays, restore_registry):
        X, Y, _ = arrays
        loss_mod._OBJECTIVES.clear()
        with pytest.raises(ValueError, match="No registered objective"):
            resolve_objective("auto", _data(X, Y, "dense", "dense"))


class TestRegisterObjective:
    def test_register_alias(self, arrays, restore_registry):
        X, Y, _ = arrays
        alias = register_objective("logit_dense_alias", "dense", "dense")
        assert resolve_objective("logit_dense_alias") is alias
        assert isinstance(alias(_data(X, Y, "dense", "dense")), LogitLoss)

    def test_rejects_unknown_representation(self, restore_registry):
        with pytest.raises(ValueError, match="Unknown response representation"):
            register_objective("bad", "dense", "banded")


# ------------------------------------------------------------------ #
# Building evaluators
# ------------------------------------------------------------------ #


class TestObjectiveCall:
    @pytest.mark.parametrize("name", sorted(_BUILTINS))
    def test_builds_matching_evaluator(self, arrays, name):
        X, Y, _ = arrays
        design, response = _BUILTINS[name]
        loss = resolve_objective(name)(_data(X, Y, design, response), backend="numpy")
        assert isinstance(loss, LogitLoss)
        assert loss.representations == (design, response)
        assert loss.shape == Y.shape

    def test_rejects_mismatched_data(self, arrays):
        X, Y, _ = arrays
        with pytest.raises(ValueError, match="expects a dense design and a sparse"):
            logit_spy(_data(X, Y, "dense", "dense"))

    def test_all_instantiations_agree(self, arrays):
        X, Y, beta = arrays
        lp = X @ beta
        results = []
        for name, (design, response) in _BUILTINS.items():
            loss = resolve_objective(name)(_data(X, Y, design, response), backend="numpy")
            loss.set_lp(lp)
            results.append(
                (
                    loss.sum_values(),
                    loss.gradients(),
                    np.vstack([loss.hessians(i) for i in range(loss.n_variables)]),
                )
            )
        ref_value, ref_grad, ref_hess = results[0]
        for value, grad, hess in results[1:]:
            assert math.isclose(value, ref_value, rel_tol=1e-12)
            np.testing.assert_allclose(grad, ref_grad, rtol=1e-14)
            np.testing.assert_array_equal(hess, ref_hess)

    def test_from_data_records_design(self, arrays):
        X, Y, _ = arrays
        loss = LogitLoss.from_data(_data(X, Y, "sparse", "dense"), backend="numpy")
        assert loss.design_representation == "sparse"
