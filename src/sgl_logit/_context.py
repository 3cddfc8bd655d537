"""Evaluation counters — mutable accumulator attached to each evaluator.

An :class:`EvaluatorStats` instance travels with a
:class:`~sgl_logit.loss.LogitLoss` for the whole optimisation run and
counts the work the evaluator actually did.  It answers questions the
numeric results cannot: did the second ``sum_values()`` call hit the
cache, how many predictor entries were truncated by the link, how
often was the Hessian rebuilt.

Lifecycle::

    ┌──────────────────────────────────────────────┐
    │  loss = LogitLoss(Y)                         │
    │  ├─ loss.stats = EvaluatorStats()            │
    │  for each iteration:                         │
    │  │   ├─ loss.set_lp(lp)                      │
    │  │   │   ├─ stats.n_lp_updates += 1          │
    │  │   │   └─ stats.n_clipped = …              │
    │  │   ├─ loss.hessians(i)  (first call only)  │
    │  │   │   └─ stats.n_hessian_computations += 1│
    │  │   └─ loss.sum_values() (first call only)  │
    │  │       └─ stats.n_loss_computations += 1   │
    └──────────────────────────────────────────────┘
"""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass
class EvaluatorStats:
    """Work counters for one evaluator instance.

    All counters start at zero and only ever increase, except
    ``n_clipped`` which describes the most recent predictor update.
    """

    n_lp_updates: int = 0
    """Calls to ``set_lp`` and ``set_lp_zero``."""

    n_hessian_computations: int = 0
    """Times the Hessian cache was (re)filled."""

    n_loss_computations: int = 0
    """Times the loss value cache was (re)filled."""

    n_clipped: int = 0
    """Predictor entries truncated by the link on the last update."""

    def reset(self) -> None:
        """Set every counter back to zero."""
        for f in fields(self):
            setattr(self, f.name, 0)
