"""NumPy backend (always available).

Plain vectorised ``numpy`` ufuncs.  Every kernel allocates its result;
none of them writes into its argument, so the evaluator's probability
matrix is never modified behind its back.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class NumpyBackend:
    """NumPy compute backend.

    The class is a frozen dataclass with no instance state; it exists
    solely to namespace the kernels behind the :class:`BackendProtocol`
    interface, and is safe to cache in ``_BACKEND_CACHE``.
    """

    @property
    def name(self) -> str:
        return "numpy"

    @property
    def is_available(self) -> bool:  # noqa: PLR6301
        return True

    def logistic(self, x: np.ndarray) -> np.ndarray:
        """``exp(x) / (1 + exp(x))`` on a pre-clipped argument."""
        ex = np.exp(x)
        return ex / (1.0 + ex)

    def variance(self, prob: np.ndarray) -> np.ndarray:
        """``p - p²``."""
        return prob - np.square(prob)

    def log_terms(self, prob: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """``(log p - log(1 - p), log(1 - p))``.

        ``log1p(-p)`` keeps full precision for probabilities near zero,
        where ``1 - p`` would round to one.
        """
        log_comp = np.log1p(-prob)
        return np.log(prob) - log_comp, log_comp
