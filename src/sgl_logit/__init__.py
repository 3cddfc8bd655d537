"""sgl_logit — Logistic loss evaluator for sparse group lasso solvers.

Turns the linear predictor of a multi-response logistic model into the
quantities a proximal or Newton-type optimiser needs at every
iteration: probabilities, the negative log-likelihood, its gradient
and a diagonal Hessian approximation.  Dense and sparse (scipy.sparse)
design and response matrices are supported in all four combinations,
with optional JAX kernels for the element-wise work.

Public API:
    .. autosummary::
        LogitLoss
        ObjectiveType
        logit
        logit_spx
        logit_spy
        logit_spx_spy
        register_objective
        resolve_objective
        LogitData
        MatrixData
        MultiResponse
        LogitResponse
        responses_from_lp
        EvaluatorStats
        EXP_CLIP_BOUND
        clip_exponent
        to_probability
        zero_probability
        get_backend
        set_backend
        get_validate_response
        set_validate_response
"""

from ._config import (
    get_backend,
    get_validate_response,
    set_backend,
    set_validate_response,
)
from ._context import EvaluatorStats
from ._results import LogitResponse, responses_from_lp
from .data import LogitData, MatrixData, MultiResponse
from .link import EXP_CLIP_BOUND, clip_exponent, to_probability, zero_probability
from .loss import (
    LogitLoss,
    ObjectiveType,
    logit,
    logit_spx,
    logit_spx_spy,
    logit_spy,
    register_objective,
    resolve_objective,
)

__all__ = [
    "LogitLoss",
    "ObjectiveType",
    "logit",
    "logit_spx",
    "logit_spy",
    "logit_spx_spy",
    "register_objective",
    "resolve_objective",
    "LogitData",
    "MatrixData",
    "MultiResponse",
    "LogitResponse",
    "responses_from_lp",
    "EvaluatorStats",
    "EXP_CLIP_BOUND",
    "clip_exponent",
    "to_probability",
    "zero_probability",
    "get_backend",
    "set_backend",
    "get_validate_response",
    "set_validate_response",
]

__version__ = "0.1.0"
