"""SolveContext — the normalized input every controller reads during one solve.

Built once per ``Simplex.solve()`` call by ``normalize_inputs`` and never
mutated afterwards. Controllers look each other up through ``lookup`` so
cross-references stay plain (kind, index) pairs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from simplex.engine.controllers import Controller, ControllerRef


@dataclass
class SolveContext:
    """Normalized slider state shared by every controller in one solve."""

    # Clamped signed slider values
    values: NDArray[np.float64] = field(default_factory=lambda: np.zeros(0))
    # max(value, 0): the positive half consumed by combos
    positive_values: NDArray[np.float64] = field(default_factory=lambda: np.zeros(0))
    # clamp(raw, -max, max)
    clamped: NDArray[np.float64] = field(default_factory=lambda: np.zeros(0))
    # raw < 0: the slider is in its negative half
    inverses: NDArray[np.bool_] = field(default_factory=lambda: np.zeros(0, dtype=bool))

    exact_solve: bool = False
    eps: float = 1e-6

    # Resolves a (kind, index) reference to the owning controller
    lookup: Callable[["ControllerRef"], "Controller"] | None = None

    def directional(self, slider: int, target: float) -> float:
        """Activation of ``slider`` toward the sign of ``target``; 0 when it points the other way."""
        if target > 0:
            return float(self.positive_values[slider])
        if self.inverses[slider]:
            return float(abs(self.clamped[slider]))
        return 0.0


def normalize_inputs(
    raw: NDArray[np.float64] | list[float],
    max_value: float = 1.0,
    exact_solve: bool = False,
    eps: float = 1e-6,
) -> SolveContext:
    """Split a raw slider vector into the value/positive/clamped/inverse arrays."""
    raw_arr = np.asarray(raw, dtype=np.float64)
    clamped = np.clip(raw_arr, -max_value, max_value)
    return SolveContext(
        values=clamped.copy(),
        positive_values=np.maximum(clamped, 0.0),
        clamped=clamped,
        inverses=raw_arr < 0.0,
        exact_solve=exact_solve,
        eps=eps,
    )
