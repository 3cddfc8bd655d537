"""Dense and sparse response representations.

The probability matrix, the gradient and the Hessian are always dense:
the logistic link maps every zero predictor to 0.5, so there is no
sparsity left to exploit after it.  The only place where storage
matters is where the response ``Y`` meets a dense matrix:

* the residual ``Y - P`` (gradient), and
* the weighted sum ``Σ Y ⊙ W`` (loss, with ``W = log P - log(1 - P)``).

Both are expressed through the :class:`ResponseAdapter` protocol.  The
contract is "visit every position of the dense operand; where ``Y``
stores a value combine with it, elsewhere combine with an implicit
zero".  :class:`DenseResponse` does this with broadcasting,
:class:`SparseResponse` touches only the stored entries of a CSR
matrix, so its cost is ``O(nnz)`` on top of the dense ``O(n·K)``.

The design matrix is never read by the evaluator; its representation
only selects which of the four registered objective types applies (see
:mod:`sgl_logit.loss`).
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import numpy as np
import scipy.sparse as sp

from ._compat import _ensure_matrix, _find_stack_level
from ._typing import MatrixLike

logger = logging.getLogger(__name__)

DENSE = "dense"
SPARSE = "sparse"


def representation_of(matrix: MatrixLike) -> str:
    """Return ``"sparse"`` for scipy.sparse inputs, ``"dense"`` for ndarrays.

    Raises:
        TypeError: For any other type.
    """
    if sp.issparse(matrix):
        return SPARSE
    if isinstance(matrix, np.ndarray):
        return DENSE
    msg = (
        "Expected a NumPy array or scipy.sparse matrix, "
        f"got {type(matrix).__name__}."
    )
    raise TypeError(msg)


def _check_binary(values: np.ndarray) -> None:
    if not np.all((values == 0) | (values == 1)):
        msg = "Response matrix must contain only 0/1 values."
        raise ValueError(msg)


# ------------------------------------------------------------------ #
# ResponseAdapter protocol
# ------------------------------------------------------------------ #


@runtime_checkable
class ResponseAdapter(Protocol):
    """Representation-agnostic view of a 0/1 response matrix.

    Attributes:
        representation: ``"dense"`` or ``"sparse"``.
        shape: ``(n_samples, n_responses)``.
    """

    @property
    def representation(self) -> str: ...

    @property
    def shape(self) -> tuple[int, int]: ...

    def residual(self, prob: np.ndarray) -> np.ndarray:
        """Return the dense matrix ``Y - prob``."""
        ...

    def inner(self, weights: np.ndarray) -> float:
        """Return ``Σ Y ⊙ weights`` over all positions."""
        ...

    def validate(self) -> None:
        """Raise ``ValueError`` unless every entry of ``Y`` is 0 or 1."""
        ...


# ------------------------------------------------------------------ #
# Dense
# ------------------------------------------------------------------ #


@dataclass(frozen=True, eq=False)
class DenseResponse:
    """Response held as a 2-D NumPy array (by reference, never copied)."""

    response: np.ndarray

    @property
    def representation(self) -> str:
        return DENSE

    @property
    def shape(self) -> tuple[int, int]:
        return self.response.shape

    def residual(self, prob: np.ndarray) -> np.ndarray:
        return self.response - prob

    def inner(self, weights: np.ndarray) -> float:
        return float(np.sum(self.response * weights))

    def validate(self) -> None:
        _check_binary(self.response)


# ------------------------------------------------------------------ #
# Sparse
# ------------------------------------------------------------------ #
#
# The coordinates of the stored entries are expanded once from the CSR
# index arrays.  Duplicate coordinates are legal in an unsorted CSR
# matrix and represent the sum of their values, so the residual uses
# ``np.add.at`` (unbuffered) and the inner product a plain dot over
# stored values.  Both accumulate duplicates correctly without
# canonicalising the caller's matrix in place.


@dataclass(frozen=True, eq=False)
class SparseResponse:
    """Response held as a CSR matrix.

    A CSR input is referenced, not copied.  Other sparse formats are
    converted once at construction; :func:`adapt_response` warns about
    the copy before handing them over.
    """

    response: MatrixLike
    _rows: np.ndarray = field(init=False, repr=False)
    _cols: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        response = self.response
        if response.format != "csr":
            response = response.tocsr()
            object.__setattr__(self, "response", response)
        n_rows = response.shape[0]
        rows = np.repeat(np.arange(n_rows), np.diff(response.indptr))
        object.__setattr__(self, "_rows", rows)
        object.__setattr__(self, "_cols", np.asarray(response.indices))
        logger.debug(
            "Sparse response %s with %d stored entries.", response.shape, response.nnz
        )

    @property
    def representation(self) -> str:
        return SPARSE

    @property
    def shape(self) -> tuple[int, int]:
        return self.response.shape

    def residual(self, prob: np.ndarray) -> np.ndarray:
        out = -np.asarray(prob, dtype=np.float64)
        np.add.at(out, (self._rows, self._cols), self.response.data)
        return out

    def inner(self, weights: np.ndarray) -> float:
        return float(np.dot(self.response.data, weights[self._rows, self._cols]))

    def validate(self) -> None:
        canonical = self.response.copy()
        canonical.sum_duplicates()
        _check_binary(canonical.data)


def adapt_response(response: MatrixLike) -> ResponseAdapter:
    """Wrap a response matrix in the adapter matching its storage.

    Accepts anything :func:`~sgl_logit._compat._ensure_matrix` does
    (NumPy, scipy.sparse, pandas, Polars).  Sparse inputs not in CSR
    format are converted with a ``UserWarning`` attributed to the
    first caller outside this package.
    """
    response = _ensure_matrix(response, name="Y")
    if representation_of(response) == SPARSE:
        if response.format != "csr":
            warnings.warn(
                f"Sparse response in {response.format.upper()} format is "
                "converted to CSR.  Pass a CSR matrix to avoid the copy.",
                UserWarning,
                stacklevel=_find_stack_level(),
            )
        return SparseResponse(response)
    return DenseResponse(response)
