"""Runtime configuration for the sgl_logit package.

Two settings are exposed:

* **Backend** — whether the element-wise kernels (logistic link,
  Bernoulli variance, log terms) run through JAX or NumPy.
* **Response validation** — whether evaluators check that every
  response entry is exactly 0 or 1 when they are constructed.

Resolution order for the backend (first match wins):
    1. Programmatic override via :func:`set_backend`.
    2. The ``SGL_LOGIT_BACKEND`` environment variable.
    3. Auto-detection: ``"jax"`` if JAX is importable, else ``"numpy"``.

Resolution order for response validation:
    1. Programmatic override via :func:`set_validate_response`.
    2. The ``SGL_LOGIT_VALIDATE`` environment variable
       (``1/true/yes/on`` or ``0/false/no/off``).
    3. ``__debug__`` — on, unless Python runs with ``-O``.

Examples:
    Force the NumPy kernels from the shell::

        export SGL_LOGIT_BACKEND=numpy

    Skip the 0/1 check for a trusted loader::

        import sgl_logit
        sgl_logit.set_validate_response(False)
"""

from __future__ import annotations

import os

_VALID_BACKENDS = {"jax", "numpy", "auto"}

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}

# Sentinels indicating "no programmatic override has been set".
_backend_override: str | None = None
_validate_override: bool | None = None


def _jax_is_available() -> bool:
    """Return ``True`` if JAX can be imported."""
    try:
        import jax  # noqa: F401

        return True
    except ImportError:
        return False


def get_backend() -> str:
    """Return the active backend name (``"jax"`` or ``"numpy"``).

    Returns:
        ``"jax"`` or ``"numpy"``.
    """
    if _backend_override is not None and _backend_override != "auto":
        return _backend_override

    env = os.environ.get("SGL_LOGIT_BACKEND", "").strip().lower()
    if env in ("jax", "numpy"):
        return env

    return "jax" if _jax_is_available() else "numpy"


def set_backend(name: str) -> None:
    """Override the backend selection.

    Args:
        name: One of ``"jax"``, ``"numpy"``, or ``"auto"``
            (case-insensitive).  ``"auto"`` restores the default
            resolution order.

    Raises:
        ValueError: If *name* is not a recognised backend.
    """
    global _backend_override
    normalised = name.strip().lower()
    if normalised not in _VALID_BACKENDS:
        raise ValueError(
            f"Unknown backend '{name}'. Choose from: {sorted(_VALID_BACKENDS)}"
        )
    _backend_override = normalised


def get_validate_response() -> bool:
    """Return whether evaluators validate the 0/1 response invariant."""
    if _validate_override is not None:
        return _validate_override

    env = os.environ.get("SGL_LOGIT_VALIDATE", "").strip().lower()
    if env in _TRUE_STRINGS:
        return True
    if env in _FALSE_STRINGS:
        return False

    return __debug__


def set_validate_response(flag: bool | None) -> None:
    """Override response validation.

    Args:
        flag: ``True`` or ``False`` to force the setting, ``None`` to
            restore the default resolution order.
    """
    global _validate_override
    _validate_override = None if flag is None else bool(flag)
