"""Math helpers — tolerant comparisons, spline basis. No engine imports."""

from __future__ import annotations

import math

EPS = 1e-6
ULPS = 4


def nearly_equal(a: float, b: float, eps: float = EPS, ulps: int = ULPS) -> bool:
    """True when a and b are within eps absolutely, or within ulps units in the last place."""
    diff = abs(a - b)
    if diff <= eps:
        return True
    return diff <= ulps * math.ulp(max(abs(a), abs(b)))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def catmull_rom_basis(x: float) -> tuple[float, float, float, float]:
    """Uniform Catmull-Rom weights for the four control points around a segment.

    x is the local parameter in [0, 1] between the second and third points.
    The weights always sum to 1.
    """
    x2 = x * x
    x3 = x2 * x
    return (
        0.5 * (-x3 + 2.0 * x2 - x),
        0.5 * (3.0 * x3 - 5.0 * x2 + 2.0),
        0.5 * (-3.0 * x3 + 4.0 * x2 + x),
        0.5 * (x3 - x2),
    )
