"""Multi-response logistic loss evaluator and its objective registry.

:class:`LogitLoss` is the per-iteration numeric kernel a sparse group
lasso solver calls for a multivariate logistic model.  For a 0/1
response ``Y`` of shape ``(n, K)`` and the current probabilities
``P = σ(η)`` it provides:

* the loss      ``L = -Σ [Y ⊙ log P - Y ⊙ log(1 - P) + log(1 - P)]``
* the gradient  ``G = -(Y - P)ᵀ``                  shape ``(K, n)``
* the Hessian   ``H = (P - P²)ᵀ``  (diagonal part)  shape ``(K, n)``

The loss is the negative Bernoulli log-likelihood with the two
``Y``-weighted terms grouped as ``Y ⊙ (log P - log(1 - P))`` so that
only the stored entries of a sparse ``Y`` contribute to that sum.

Caching
~~~~~~~
The Hessian and the loss value are computed lazily and memoised.  Each
cache is a single optional value (``None`` means "stale"), so there
is no separate validity flag that could disagree with it.  Both caches
are cleared by :meth:`LogitLoss.set_lp` and :meth:`LogitLoss.set_lp_zero`
unconditionally, whether or not the probabilities changed.  Those two
methods are the only way to change the probability matrix, which is
private, and the cached Hessian is handed out read-only, so a stale
read cannot happen.

Per-evaluator state machine::

    (constructed) ──► Clean ◄──────── set_lp / set_lp_zero (from any state)
                        │  compute_hessians / hessians     ──► +Hessian
                        │  sum_values                      ──► +Loss

Representations
~~~~~~~~~~~~~~~
The evaluator is generic over the storage of the design matrix and of
the response matrix.  Four objective types are registered, one per
(design, response) combination, mirroring the names used by the
surrounding objective framework:

=================  ==========  ==========
Objective          Design      Response
=================  ==========  ==========
``logit``          dense       dense
``logit_spx``      sparse      dense
``logit_spy``      dense       sparse
``logit_spx_spy``  sparse      sparse
=================  ==========  ==========

Only the response side changes the arithmetic (see
:mod:`sgl_logit.representations`); the design side is recorded so that
a data package is matched to the objective type declared for it.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np

from ._backends import BackendProtocol, resolve_backend
from ._config import get_validate_response
from ._context import EvaluatorStats
from ._typing import MatrixLike
from .data import LogitData
from .link import (
    EXP_CLIP_BOUND,
    clip_exponent,
    count_clipped,
    to_probability,
    zero_probability,
)
from .representations import DENSE, SPARSE, ResponseAdapter, adapt_response

logger = logging.getLogger(__name__)

_REPRESENTATIONS = (DENSE, SPARSE)


def _require_finite(values: np.ndarray | float, what: str) -> None:
    if not np.all(np.isfinite(values)):
        msg = f"Non-finite value(s) in {what}."
        raise FloatingPointError(msg)


class LogitLoss:
    """Stateful logistic loss evaluator for one optimisation run.

    Construct once per run, bound to a fixed response matrix; then,
    each iteration, set the linear predictor and read any of
    :meth:`sum_values`, :meth:`gradients` and :meth:`hessians`.

    The evaluator is not thread-safe.  Independent runs must use
    independent instances.

    Args:
        response: 0/1 response matrix ``(n_samples, n_responses)``,
            dense or sparse.  Referenced, never modified.
        design_representation: Storage of the design matrix the
            linear predictor is formed from (``"dense"`` or
            ``"sparse"``).
        backend: Backend name or instance for the element-wise
            kernels; ``None`` uses the configured default.
        bound: Clip bound of the logistic link.
        validate: Check the 0/1 response invariant at construction;
            ``None`` uses :func:`~sgl_logit.get_validate_response`.

    Attributes:
        hessian_type: Always ``"diagonal"``.  Only the per-sample
            curvature ``p(1 - p)`` is provided; cross terms are
            ignored.
        stats: Work counters (:class:`~sgl_logit._context.EvaluatorStats`).

    Raises:
        ValueError: If the response is empty, or fails validation, or
            *design_representation* is unknown.
        TypeError: If the response is not a supported matrix type.
    """

    hessian_type: ClassVar[str] = "diagonal"

    def __init__(
        self,
        response: MatrixLike,
        *,
        design_representation: str = DENSE,
        backend: str | BackendProtocol | None = None,
        bound: float = EXP_CLIP_BOUND,
        validate: bool | None = None,
    ) -> None:
        if design_representation not in _REPRESENTATIONS:
            msg = (
                f"Unknown design representation {design_representation!r}.  "
                f"Choose from: {list(_REPRESENTATIONS)}."
            )
            raise ValueError(msg)

        self._response: ResponseAdapter = adapt_response(response)
        n_samples, n_responses = self._response.shape
        if n_samples == 0 or n_responses == 0:
            msg = (
                "Response matrix must have at least one sample and one "
                f"response, got shape {self._response.shape}."
            )
            raise ValueError(msg)

        if validate is None:
            validate = get_validate_response()
        if validate:
            self._response.validate()

        # Validate the bound once here rather than on the first update.
        clip_exponent(0.0, bound)
        self._bound = bound

        self._backend: BackendProtocol = (
            backend if isinstance(backend, BackendProtocol) else resolve_backend(backend)
        )
        self.design_representation = design_representation
        self.stats = EvaluatorStats()

        self._prob: np.ndarray = zero_probability(self.shape)
        self._hessian: np.ndarray | None = None
        self._loss: float | None = None

        logger.debug(
            "LogitLoss bound to %s response %s (design %s, backend %s).",
            self._response.representation,
            self.shape,
            design_representation,
            self._backend.name,
        )

    @classmethod
    def from_data(cls, data: LogitData, **kwargs: Any) -> LogitLoss:
        """Build an evaluator bound to the response part of *data*."""
        return cls(
            data.response.response,
            design_representation=data.design.representation,
            **kwargs,
        )

    # ---- Shape and state -------------------------------------------

    @property
    def shape(self) -> tuple[int, int]:
        """``(n_samples, n_responses)``."""
        return self._response.shape

    @property
    def n_samples(self) -> int:
        return self.shape[0]

    @property
    def n_variables(self) -> int:
        """Number of responses, i.e. of Hessian rows."""
        return self.shape[1]

    @property
    def representations(self) -> tuple[str, str]:
        """``(design_representation, response_representation)``."""
        return self.design_representation, self._response.representation

    @property
    def backend_name(self) -> str:
        return self._backend.name

    @property
    def hessian_is_current(self) -> bool:
        return self._hessian is not None

    @property
    def loss_is_current(self) -> bool:
        return self._loss is not None

    def _invalidate(self) -> None:
        self._hessian = None
        self._loss = None

    def __repr__(self) -> str:
        design, response = self.representations
        return (
            f"{type(self).__name__}(shape={self.shape}, design={design!r}, "
            f"response={response!r}, backend={self.backend_name!r})"
        )

    # ---- Linear predictor ------------------------------------------

    def set_lp(self, lp: np.ndarray) -> None:
        """Replace the linear predictor and clear both caches.

        Args:
            lp: Linear predictor of shape ``(n_samples, n_responses)``.
                Read, not retained.

        Raises:
            ValueError: On a shape mismatch or a non-finite entry.
        """
        lp = np.asarray(lp, dtype=np.float64)
        if lp.shape != self.shape:
            msg = f"Linear predictor has shape {lp.shape}, expected {self.shape}."
            raise ValueError(msg)

        prob = to_probability(lp, bound=self._bound, backend=self._backend)

        self._prob = prob
        self._invalidate()
        self.stats.n_lp_updates += 1
        self.stats.n_clipped = count_clipped(lp, self._bound)
        if self.stats.n_clipped:
            logger.debug(
                "Clipped %d linear predictor entries to ±%g.",
                self.stats.n_clipped,
                self._bound,
            )

    def set_lp_zero(self) -> None:
        """Set an all-zero linear predictor (probabilities 0.5)."""
        self._prob = zero_probability(self.shape)
        self._invalidate()
        self.stats.n_lp_updates += 1
        self.stats.n_clipped = 0

    # ---- Derived quantities ----------------------------------------

    def gradients(self) -> np.ndarray:
        """Gradient of the loss w.r.t. the linear predictor, ``-(Y - P)ᵀ``.

        Recomputed on every call.

        Returns:
            Array of shape ``(n_responses, n_samples)``.
        """
        grad = np.ascontiguousarray(-self._response.residual(self._prob).T)
        _require_finite(grad, "gradient")
        return grad

    def compute_hessians(self) -> None:
        """Fill the Hessian cache if it is stale; otherwise do nothing."""
        if self._hessian is not None:
            return
        hessian = np.ascontiguousarray(self._backend.variance(self._prob).T)
        _require_finite(hessian, "Hessian")
        hessian.flags.writeable = False
        self._hessian = hessian
        self.stats.n_hessian_computations += 1
        logger.debug("Hessian diagonal recomputed for %d responses.", self.n_variables)

    def hessians(self, i: int) -> np.ndarray:
        """Diagonal Hessian of response *i*: ``p - p²`` per sample.

        Computes the Hessian cache first if needed.

        Args:
            i: Response index, ``0 <= i < n_responses``.

        Returns:
            Read-only array of shape ``(n_samples,)``.

        Raises:
            IndexError: If *i* is out of range.
        """
        i = operator.index(i)
        if not 0 <= i < self.n_variables:
            msg = f"Response index {i} out of range for {self.n_variables} responses."
            raise IndexError(msg)
        self.compute_hessians()
        return self._hessian[i]

    def sum_values(self) -> float:
        """Negative log-likelihood summed over all samples and responses.

        Memoised until the next predictor update.

        Raises:
            FloatingPointError: If the sum is not finite.
        """
        if self._loss is not None:
            return self._loss
        log_odds, log_comp = self._backend.log_terms(self._prob)
        value = -(self._response.inner(log_odds) + float(np.sum(log_comp)))
        _require_finite(value, "loss value")
        self._loss = value
        self.stats.n_loss_computations += 1
        logger.debug("Loss value recomputed: %.6g.", value)
        return value


# ------------------------------------------------------------------ #
# Objective registry
# ------------------------------------------------------------------ #
#
# The objective framework is generic over the storage of both the
# design matrix and the response matrix, so each combination is a
# distinct, named objective type.  Rather than four hand-written
# subclasses, a single ``ObjectiveType`` records the pair it accepts
# and builds a ``LogitLoss`` for matching data.


@dataclass(frozen=True)
class ObjectiveType:
    """A (design, response) representation pair bound to ``LogitLoss``.

    Calling the objective type on a :class:`~sgl_logit.data.LogitData`
    package returns an evaluator bound to its response.

    Attributes:
        name: Registry key (e.g. ``"logit_spy"``).
        design: ``"dense"`` or ``"sparse"``.
        response: ``"dense"`` or ``"sparse"``.
    """

    name: str
    design: str
    response: str

    def accepts(self, data: LogitData) -> bool:
        return data.representations == (self.design, self.response)

    def __call__(self, data: LogitData, **kwargs: Any) -> LogitLoss:
        """Build a :class:`LogitLoss` for *data*.

        Raises:
            ValueError: If *data* does not have this type's
                representations.
        """
        if not self.accepts(data):
            design, response = data.representations
            msg = (
                f"Objective {self.name!r} expects a {self.design} design and a "
                f"{self.response} response, got {design} and {response}."
            )
            raise ValueError(msg)
        return LogitLoss.from_data(data, **kwargs)


_OBJECTIVES: dict[str, ObjectiveType] = {}


def register_objective(name: str, design: str, response: str) -> ObjectiveType:
    """Register an objective type under *name* and return it.

    Raises:
        ValueError: If either representation is unknown.
    """
    for role, rep in (("design", design), ("response", response)):
        if rep not in _REPRESENTATIONS:
            msg = (
                f"Unknown {role} representation {rep!r}.  "
                f"Choose from: {list(_REPRESENTATIONS)}."
            )
            raise ValueError(msg)
    objective = ObjectiveType(name, design, response)
    _OBJECTIVES[name] = objective
    return objective


def resolve_objective(
    objective: str | ObjectiveType = "auto",
    data: LogitData | None = None,
) -> ObjectiveType:
    """Resolve a name or instance to a registered :class:`ObjectiveType`.

    ``"auto"`` picks the objective whose representations match *data*.

    Raises:
        ValueError: If *objective* is ``"auto"`` without *data*, if no
            registered objective matches, or if the name is unknown.
    """
    if isinstance(objective, ObjectiveType):
        return objective
    if objective == "auto":
        if data is None:
            msg = "resolve_objective() requires 'data' when objective='auto'."
            raise ValueError(msg)
        for candidate in _OBJECTIVES.values():
            if candidate.accepts(data):
                return candidate
        msg = f"No registered objective accepts representations {data.representations}."
        raise ValueError(msg)

    if objective not in _OBJECTIVES:
        available = ", ".join(sorted(_OBJECTIVES)) or "(none registered)"
        msg = f"Unknown objective {objective!r}.  Available objectives: {available}."
        raise ValueError(msg)
    return _OBJECTIVES[objective]


# ------------------------------------------------------------------ #
# Register built-in objectives
# ------------------------------------------------------------------ #

logit = register_objective("logit", DENSE, DENSE)
logit_spx = register_objective("logit_spx", SPARSE, DENSE)
logit_spy = register_objective("logit_spy", DENSE, SPARSE)
logit_spx_spy = register_objective("logit_spx_spy", SPARSE, SPARSE)
