"""Solver configuration — numeric tolerances and solve mode."""

from __future__ import annotations

from dataclasses import dataclass

from simplex.utils.math_helpers import EPS, ULPS


@dataclass
class SolverConfig:
    """Controls tolerances and combo matching strictness."""

    # Absolute tolerance for weight sums and point comparisons
    eps: float = EPS
    # Units-in-the-last-place tolerance for point comparisons
    ulps: int = ULPS

    # Slider inputs are clamped to [-max_value, max_value]
    max_value: float = 1.0

    # Exact combos fire only at full activation with no higher-order overlap
    exact_solve: bool = False
