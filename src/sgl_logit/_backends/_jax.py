"""JAX-accelerated backend for the element-wise loss kernels.

Wraps JIT-compiled versions of the logistic transform, the Bernoulli
variance and the log terms behind the
:class:`~sgl_logit._backends.BackendProtocol` interface.

NumPy ↔ JAX boundary convention
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
All public methods accept NumPy arrays and return NumPy arrays:

* **Inbound:** ``jnp.asarray(x, dtype=jnp.float64)``.  The float64
  cast is explicit because JAX defaults to float32.
* **Outbound:** ``np.asarray(result)`` — zero-copy on CPU, a
  device-to-host transfer on GPU.  Arrays exported from JAX may be
  read-only; the evaluator never writes into kernel results.

Float64 rationale
~~~~~~~~~~~~~~~~~
With float32 the logistic transform saturates to exactly 1.0 for
predictors above ~17, which would make ``log(1 - p)`` infinite.  The
clip bound used by :mod:`sgl_logit.link` assumes float64.

Graceful degradation
~~~~~~~~~~~~~~~~~~~~
If JAX is not installed, :class:`JaxBackend` can still be instantiated
but ``is_available`` returns ``False`` and
:func:`~sgl_logit._backends.resolve_backend` raises ``ImportError``
when this backend is explicitly requested.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

try:
    import jax

    # Enable 64-bit floating point before any array creation.
    jax.config.update("jax_enable_x64", True)

    import jax.numpy as jnp
    from jax import jit

    _CAN_IMPORT_JAX = True
except ImportError:
    _CAN_IMPORT_JAX = False


if _CAN_IMPORT_JAX:

    @jit
    def _logistic(x: jnp.ndarray) -> jnp.ndarray:
        ex = jnp.exp(x)
        return ex / (1.0 + ex)

    @jit
    def _variance(prob: jnp.ndarray) -> jnp.ndarray:
        return prob - jnp.square(prob)

    @jit
    def _log_terms(prob: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
        log_comp = jnp.log1p(-prob)
        return jnp.log(prob) - log_comp, log_comp


@dataclass(frozen=True)
class JaxBackend:
    """JAX compute backend.

    Each kernel is compiled once per input shape; an optimisation run
    keeps the shape fixed, so compilation happens on the first
    iteration only.

    The frozen dataclass has no mutable state and is safe to cache in
    ``_BACKEND_CACHE``.
    """

    @property
    def name(self) -> str:
        return "jax"

    @property
    def is_available(self) -> bool:  # noqa: PLR6301
        return _CAN_IMPORT_JAX

    def logistic(self, x: np.ndarray) -> np.ndarray:
        return np.asarray(_logistic(jnp.asarray(x, dtype=jnp.float64)))

    def variance(self, prob: np.ndarray) -> np.ndarray:
        return np.asarray(_variance(jnp.asarray(prob, dtype=jnp.float64)))

    def log_terms(self, prob: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        log_odds, log_comp = _log_terms(jnp.asarray(prob, dtype=jnp.float64))
        return np.asarray(log_odds), np.asarray(log_comp)
