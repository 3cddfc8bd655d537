"""Data packages binding a design matrix and a multi-response matrix.

The objective framework hands each loss a two-part data package: the
design matrix (consumed upstream, where the linear predictor is
formed) and the response matrix (consumed by the loss).  Both parts
may be dense or sparse independently, which is what selects one of the
four objective types registered in :mod:`sgl_logit.loss`.

Packages are frozen: the matrices they carry are referenced, never
copied, and must not be modified by the caller while an evaluator is
bound to them.
"""

from __future__ import annotations

from dataclasses import dataclass

from ._compat import DataFrameLike, _ensure_matrix
from ._typing import MatrixLike
from .representations import representation_of


@dataclass(frozen=True, eq=False)
class MatrixData:
    """Design matrix ``X`` of shape ``(n_samples, n_features)``."""

    X: MatrixLike

    @property
    def n_samples(self) -> int:
        return self.X.shape[0]

    @property
    def n_features(self) -> int:
        return self.X.shape[1]

    @property
    def representation(self) -> str:
        return representation_of(self.X)


@dataclass(frozen=True, eq=False)
class MultiResponse:
    """Response matrix ``Y`` of shape ``(n_samples, n_responses)``."""

    response: MatrixLike

    @property
    def n_samples(self) -> int:
        return self.response.shape[0]

    @property
    def n_responses(self) -> int:
        return self.response.shape[1]

    @property
    def representation(self) -> str:
        return representation_of(self.response)


@dataclass(frozen=True, eq=False)
class LogitData:
    """Design and response data for a multi-response logistic objective.

    Attributes:
        design: The design matrix part.
        response: The 0/1 response matrix part.

    Raises:
        ValueError: If the two parts disagree on the number of samples.
    """

    design: MatrixData
    response: MultiResponse

    def __post_init__(self) -> None:
        if self.design.n_samples != self.response.n_samples:
            msg = (
                f"Design matrix has {self.design.n_samples} samples but the "
                f"response matrix has {self.response.n_samples}."
            )
            raise ValueError(msg)

    @property
    def n_samples(self) -> int:
        return self.design.n_samples

    @property
    def n_responses(self) -> int:
        return self.response.n_responses

    @property
    def representations(self) -> tuple[str, str]:
        """``(design_representation, response_representation)``."""
        return self.design.representation, self.response.representation

    @classmethod
    def from_arrays(
        cls,
        X: MatrixLike | DataFrameLike,
        Y: MatrixLike | DataFrameLike,
    ) -> LogitData:
        """Build a package from NumPy, scipy.sparse, pandas or Polars inputs."""
        return cls(
            MatrixData(_ensure_matrix(X, name="X")),
            MultiResponse(_ensure_matrix(Y, name="Y")),
        )
