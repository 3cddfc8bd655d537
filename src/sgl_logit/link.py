"""Logistic link with a truncated-exponential safeguard.

Maps a linear predictor to probabilities strictly inside (0, 1):

    p = exp(c(x)) / (1 + exp(c(x))),   c(x) = clip(x, -b, b)

Why the clip
~~~~~~~~~~~~
A naive ``exp`` overflows to ``inf`` for ``x > ~709`` and
``inf / (1 + inf)`` is NaN.  Long before that, for ``x > ~36.7``, the
quotient rounds to exactly ``1.0`` in float64, and the loss term
``log(1 - p)`` becomes ``-inf``.  Symmetrically, for very negative
``x`` the probability underflows towards ``0`` and ``log(p)``
diverges.  Truncating the exponent argument to ``[-b, b]`` with
``b = EXP_CLIP_BOUND`` keeps every probability in
``[σ(-b), σ(b)] ⊂ (0, 1)``, so every downstream logarithm is finite.

The bound is a named, validated constant rather than an inline
literal: :func:`clip_exponent` rejects any bound for which
``σ(b)`` would round to one.

Fail fast
~~~~~~~~~
Non-finite predictors are rejected with ``ValueError`` before any
arithmetic: clipping would otherwise turn ``+inf`` into a plausible
looking probability and hide an optimiser bug, and NaN would survive
the clip and poison the loss.  The result of the transform is then
checked again and a ``FloatingPointError`` is raised if any entry
escaped (0, 1).
"""

from __future__ import annotations

import math

import numpy as np

from ._backends import BackendProtocol, resolve_backend

__all__ = [
    "EXP_CLIP_BOUND",
    "clip_exponent",
    "count_clipped",
    "to_probability",
    "zero_probability",
]

EXP_CLIP_BOUND: float = 30.0
"""Symmetric bound applied to the exponent argument of the logistic link.

At ``b = 30`` the extreme probabilities are ``σ(±30) ≈ 1 ± 9.4e-14``
away from the boundary, far from float64 rounding to 0 or 1, while the
truncation changes the loss by less than ``1e-13`` per entry.
"""


def _check_bound(bound: float) -> None:
    """Reject bounds for which the clipped link can reach 0 or 1."""
    if not (math.isfinite(bound) and bound > 0):
        msg = f"Clip bound must be positive and finite, got {bound!r}."
        raise ValueError(msg)
    try:
        ex = math.exp(bound)
    except OverflowError:
        ex = math.inf
    # inf / inf is NaN, which fails the comparison as well.
    if not ex / (1.0 + ex) < 1.0:
        msg = (
            f"Clip bound {bound!r} is too large: exp(b) / (1 + exp(b)) "
            "rounds to 1.0 in float64."
        )
        raise ValueError(msg)


def clip_exponent(
    x: np.ndarray | float, bound: float = EXP_CLIP_BOUND
) -> np.ndarray:
    """Truncate the exponent argument to ``[-bound, bound]``.

    Args:
        x: Linear predictor values (any shape).
        bound: Positive clip bound.

    Returns:
        A new float64 array; *x* is not modified.

    Raises:
        ValueError: If *bound* is not positive and finite, or is so
            large that the clipped link would round to 1.0.
    """
    _check_bound(bound)
    return np.clip(np.asarray(x, dtype=np.float64), -bound, bound)


def count_clipped(x: np.ndarray, bound: float = EXP_CLIP_BOUND) -> int:
    """Number of entries of *x* that :func:`clip_exponent` would truncate."""
    return int(np.count_nonzero(np.abs(x) > bound))


def to_probability(
    lp: np.ndarray,
    *,
    bound: float = EXP_CLIP_BOUND,
    backend: str | BackendProtocol | None = None,
) -> np.ndarray:
    """Map a linear predictor to probabilities strictly inside (0, 1).

    Args:
        lp: Linear predictor (any shape, typically
            ``(n_samples, n_responses)``).
        bound: Clip bound for the exponent argument.
        backend: Backend name, backend instance, or ``None`` for the
            configured default.

    Returns:
        Float64 array of the same shape as *lp*.

    Raises:
        ValueError: If *lp* contains NaN or ±inf.
        FloatingPointError: If the transform produced an entry outside
            the open interval (0, 1).
    """
    lp = np.asarray(lp, dtype=np.float64)
    if not np.all(np.isfinite(lp)):
        n_bad = int(np.count_nonzero(~np.isfinite(lp)))
        msg = f"Linear predictor contains {n_bad} non-finite value(s)."
        raise ValueError(msg)

    if not isinstance(backend, BackendProtocol):
        backend = resolve_backend(backend)

    prob = backend.logistic(clip_exponent(lp, bound))

    if not (np.all(np.isfinite(prob)) and np.all(prob > 0.0) and np.all(prob < 1.0)):
        msg = "Logistic link produced probabilities outside the open interval (0, 1)."
        raise FloatingPointError(msg)
    return prob


def zero_probability(shape: tuple[int, ...]) -> np.ndarray:
    """Probabilities at an all-zero linear predictor: the constant 0.5."""
    return np.full(shape, 0.5, dtype=np.float64)
