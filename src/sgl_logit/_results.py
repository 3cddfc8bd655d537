"""Typed result objects for fitted logistic models.

Once the solver has converged, the reporting layer needs, for every
sample, the fitted linear predictors (the *link*) and the matching
probabilities.  :class:`LogitResponse` carries one sample's values and
provides:

* **Attribute access** — ``r.link``, ``r.prob``.
* **Dict-like access** — ``r["prob"]``, ``r.get("link")``,
  ``"prob" in r``.
* **Serialisation** — ``.to_dict()`` returns ``{"link": [...],
  "prob": [...]}`` with NumPy types converted to native Python, and
  ``.to_frame()`` a pandas ``DataFrame`` with one row per response.

Results are frozen: they are a snapshot of a completed fit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np
import pandas as pd

from .link import to_probability

# ------------------------------------------------------------------ #
# Serialisation helper
# ------------------------------------------------------------------ #


def _numpy_to_python(obj: Any) -> Any:
    """Recursively convert NumPy scalars/arrays to Python-native types."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, (np.integer, np.bool_)):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, dict):
        return {k: _numpy_to_python(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        converted = [_numpy_to_python(item) for item in obj]
        return type(obj)(converted)
    return obj


# ------------------------------------------------------------------ #
# Dict-compatibility mixin
# ------------------------------------------------------------------ #


class _DictAccessMixin:
    """Dict-like access convenience for result dataclasses.

    Subclasses list the keys exported by :meth:`to_dict` in
    ``_DICT_KEYS``; each key is an attribute or property.
    """

    _DICT_KEYS: ClassVar[tuple[str, ...]] = ()

    def __getitem__(self, key: str) -> Any:
        """Attribute lookup via bracket syntax."""
        if key not in self._DICT_KEYS:
            raise KeyError(key)
        return getattr(self, key)

    def get(self, key: str, default: Any = None) -> Any:
        """Attribute lookup with a fallback default."""
        if key not in self._DICT_KEYS:
            return default
        return getattr(self, key)

    def __contains__(self, key: object) -> bool:
        """Membership test: ``"key" in result``."""
        return key in self._DICT_KEYS

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain, JSON-serialisable dictionary."""
        return {key: _numpy_to_python(getattr(self, key)) for key in self._DICT_KEYS}


# ------------------------------------------------------------------ #
# LogitResponse
# ------------------------------------------------------------------ #


@dataclass(frozen=True, eq=False)
class LogitResponse(_DictAccessMixin):
    """Fitted link and probability for one sample across all responses.

    Attributes:
        link: Linear predictors ``(n_responses,)``.
    """

    _DICT_KEYS: ClassVar[tuple[str, ...]] = ("link", "prob")

    link: np.ndarray

    def __post_init__(self) -> None:
        link = np.array(self.link, dtype=np.float64)
        if link.ndim != 1:
            msg = f"'link' must be one-dimensional, got shape {link.shape}."
            raise ValueError(msg)
        link.flags.writeable = False
        object.__setattr__(self, "link", link)

    @property
    def prob(self) -> np.ndarray:
        """Probabilities ``σ(link)`` via the clipped logistic link."""
        return to_probability(self.link, backend="numpy")

    def to_frame(self) -> pd.DataFrame:
        """One row per response with ``link`` and ``prob`` columns."""
        return pd.DataFrame({"link": self.link, "prob": self.prob})


def responses_from_lp(lp: np.ndarray) -> list[LogitResponse]:
    """Split a fitted ``(n_samples, n_responses)`` predictor into per-sample results.

    Raises:
        ValueError: If *lp* is not two-dimensional.
    """
    lp = np.asarray(lp, dtype=np.float64)
    if lp.ndim != 2:
        msg = f"Linear predictor must be two-dimensional, got shape {lp.shape}."
        raise ValueError(msg)
    return [LogitResponse(row) for row in lp]
