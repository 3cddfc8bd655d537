"""Input compatibility layer for matrix-like data.

Evaluators and data packages operate on two storage forms only: a
2-D ``numpy.ndarray`` or a ``scipy.sparse`` matrix/array.  This module
converts what a loader typically hands over (pandas DataFrames and,
when installed, Polars DataFrames/LazyFrames) into one of those forms
at the boundary so that internal code never branches on frame types.

Polars is **not** a required dependency.  If it is not installed, only
NumPy, SciPy and pandas inputs are recognised.
"""

from __future__ import annotations

import inspect
import os
from typing import TYPE_CHECKING, TypeAlias

import numpy as np
import pandas as pd
import scipy.sparse as sp

from ._typing import MatrixLike

if TYPE_CHECKING:
    import polars as pl

    DataFrameLike: TypeAlias = pd.DataFrame | pl.DataFrame | pl.LazyFrame
else:
    DataFrameLike: TypeAlias = pd.DataFrame

# Polars is optional.
try:
    import polars as pl

    _HAS_POLARS = True
except ImportError:
    _HAS_POLARS = False


def _ensure_matrix(
    obj: MatrixLike | DataFrameLike, *, name: str = "input"
) -> MatrixLike:
    """Return *obj* as a 2-D ``ndarray`` or a ``scipy.sparse`` matrix.

    Accepted types:
        * ``numpy.ndarray`` — returned as-is when already 2-D.  Subclasses
          such as ``numpy.matrix`` are viewed as plain arrays.
        * ``scipy.sparse`` matrix or array — returned as-is.
        * ``pandas.DataFrame`` — converted via ``.to_numpy()``.
        * ``polars.DataFrame`` / ``polars.LazyFrame`` — collected then
          converted via ``.to_numpy()``.

    Args:
        obj: The matrix-like object.
        name: Label used in error messages (e.g. ``"X"`` or ``"Y"``).

    Returns:
        A 2-D ``ndarray`` or a ``scipy.sparse`` matrix.

    Raises:
        TypeError: If *obj* is not a recognised matrix type.
        ValueError: If a dense input is not two-dimensional.
    """
    if sp.issparse(obj):
        return obj

    if isinstance(obj, pd.DataFrame):
        obj = obj.to_numpy()
    elif _HAS_POLARS and isinstance(obj, pl.LazyFrame):
        obj = obj.collect().to_numpy()
    elif _HAS_POLARS and isinstance(obj, pl.DataFrame):
        obj = obj.to_numpy()

    if not isinstance(obj, np.ndarray):
        raise TypeError(
            f"'{name}' must be a NumPy array, a scipy.sparse matrix or a "
            "pandas DataFrame"
            + (" or Polars DataFrame/LazyFrame" if _HAS_POLARS else "")
            + f", got {type(obj).__name__}."
        )
    # np.matrix overloads `*` as a matrix product.
    obj = np.asarray(obj)
    if obj.ndim != 2:
        msg = f"'{name}' must be two-dimensional, got shape {obj.shape}."
        raise ValueError(msg)
    return obj


_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__)) + os.sep


def _find_stack_level() -> int:
    """Return the ``stacklevel`` of the first frame outside the package.

    Meant to be called from the function that issues the warning, so
    that the warning points at user code however deep the library call
    chain is.
    """
    frame = inspect.currentframe()
    level = 1
    try:
        # Level 1 is the caller, i.e. the warning site.
        frame = frame.f_back if frame is not None else None
        while frame is not None:
            filename = os.path.abspath(frame.f_code.co_filename)
            if not filename.startswith(_PACKAGE_DIR):
                break
            frame = frame.f_back
            level += 1
    finally:
        del frame
    return level
