"""Backend abstraction layer for the element-wise loss kernels.

Each backend implements the :class:`BackendProtocol` interface, which
defines the dense element-wise operations the evaluator needs on every
iteration: the logistic transform of an (already clipped) linear
predictor, the Bernoulli variance ``p - p²`` and the two log terms of
the negative log-likelihood.  :class:`~sgl_logit.loss.LogitLoss`
dispatches to the resolved backend instead of testing for JAX at every
call site.

Resolution follows the policy set by :mod:`._config`:

1. Programmatic override via :func:`~sgl_logit.set_backend`.
2. ``SGL_LOGIT_BACKEND`` environment variable.
3. Auto-detection: ``"jax"`` if importable, else ``"numpy"``.

When ``"jax"`` is explicitly requested but JAX is not installed, an
:class:`ImportError` is raised; explicit requests are never silently
degraded.  Only the ``"auto"`` policy falls back from JAX to NumPy.

Sparse response handling never reaches a backend: the probability
matrix and everything derived from it are always dense, and the
response-side combination is owned by :mod:`sgl_logit.representations`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

from .._config import get_backend

# ------------------------------------------------------------------ #
# BackendProtocol
# ------------------------------------------------------------------ #


@runtime_checkable
class BackendProtocol(Protocol):
    """Interface that every compute backend must implement.

    All methods accept dense ``float64`` NumPy arrays and return dense
    ``float64`` NumPy arrays of the same shape.

    Attributes:
        name: Short identifier (e.g. ``"numpy"``, ``"jax"``).
    """

    @property
    def name(self) -> str: ...

    @property
    def is_available(self) -> bool:
        """Whether the backend's dependencies are importable."""
        ...

    def logistic(self, x: np.ndarray) -> np.ndarray:
        """Return ``exp(x) / (1 + exp(x))`` element-wise.

        *x* must already be clipped to a range where the quotient is
        finite and strictly inside (0, 1).
        """
        ...

    def variance(self, prob: np.ndarray) -> np.ndarray:
        """Return the Bernoulli variance ``prob - prob²`` element-wise."""
        ...

    def log_terms(self, prob: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(log(p) - log(1 - p), log(1 - p))`` element-wise."""
        ...


# ------------------------------------------------------------------ #
# Backend resolution
# ------------------------------------------------------------------ #

# One instance per backend name.
_BACKEND_CACHE: dict[str, BackendProtocol] = {}


def resolve_backend(name: str | None = None) -> BackendProtocol:
    """Return a :class:`BackendProtocol` instance for *name*.

    Args:
        name: ``"numpy"``, ``"jax"``, or ``None`` for the policy default
            from :func:`~sgl_logit._config.get_backend`.

    Returns:
        A backend instance.

    Raises:
        ImportError: If ``"jax"`` is explicitly requested but JAX
            is not installed.
        ValueError: If *name* is not a recognised backend.
    """
    if name is None:
        name = get_backend()
    name = name.strip().lower()

    if name in _BACKEND_CACHE:
        return _BACKEND_CACHE[name]

    if name == "numpy":
        from ._numpy import NumpyBackend

        backend: BackendProtocol = NumpyBackend()

    elif name == "jax":
        from ._jax import JaxBackend

        jax_backend = JaxBackend()
        if not jax_backend.is_available:
            msg = (
                "Backend 'jax' was explicitly requested but JAX is "
                "not installed.  Install JAX (`pip install jax`) or "
                "use set_backend('numpy')."
            )
            raise ImportError(msg)
        backend = jax_backend

    else:
        msg = f"Unknown backend {name!r}.  Choose 'numpy' or 'jax'."
        raise ValueError(msg)

    _BACKEND_CACHE[name] = backend
    return backend
