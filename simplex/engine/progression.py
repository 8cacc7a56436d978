"""Progression — maps one scalar control value onto weights across several shapes.

Linear:  -1 → Frown, 0 → rest, 1 → Smile at t=-0.5 gives Frown 0.5.
Spline:  uniform Catmull-Rom through the four nearest control points,
         with the endpoint repeated past each end of the sequence.
"""

from __future__ import annotations

import bisect
import enum
from dataclasses import dataclass, field

from simplex.engine.shapes import Shape
from simplex.utils.math_helpers import catmull_rom_basis, clamp


class Interp(str, enum.Enum):
    LINEAR = "linear"
    SPLINE = "spline"


@dataclass
class Progression:
    """Ordered (shape, position) pairs plus an interpolation mode.

    A ``None`` shape is a placeholder (usually the rest pose). It takes part
    in the interpolation but is never emitted.
    """

    name: str
    pairs: list[tuple[Shape | None, float]] = field(default_factory=list)
    interp: Interp = Interp.SPLINE

    def __post_init__(self) -> None:
        # sorted() is stable, so equal positions keep their document order
        self.pairs = sorted(self.pairs, key=lambda p: p[1])
        self.interp = Interp(self.interp)
        times = self.times
        for lo, hi in zip(times, times[1:]):
            if hi <= lo:
                raise ValueError(f"Progression {self.name!r} has duplicate position {hi}")

    @property
    def times(self) -> list[float]:
        return [t for _, t in self.pairs]

    def get_output(self, t: float, multiplier: float = 1.0) -> list[tuple[Shape, float]]:
        if not self.pairs:
            return []
        if len(self.pairs) == 1:
            return self._emit([(0, 1.0)], multiplier)
        if self.interp is Interp.SPLINE:
            return self._emit(self._spline_weights(t), multiplier)
        return self._emit(self._linear_weights(t), multiplier)

    def _interval(self, t: float) -> int:
        """Index i with times[i] <= t < times[i+1], clamped to the valid segments."""
        i = bisect.bisect_right(self.times, t) - 1
        return int(clamp(i, 0, len(self.pairs) - 2))

    def _linear_weights(self, t: float) -> list[tuple[int, float]]:
        times = self.times
        if t <= times[0]:
            return [(0, 1.0)]
        if t >= times[-1]:
            return [(len(times) - 1, 1.0)]

        i = self._interval(t)
        x = (t - times[i]) / (times[i + 1] - times[i])
        if x == 0.0:
            return [(i, 1.0)]
        return [(i, 1.0 - x), (i + 1, x)]

    def _spline_weights(self, t: float) -> list[tuple[int, float]]:
        times = self.times
        last = len(times) - 1
        t = clamp(t, times[0], times[-1])

        i = self._interval(t)
        x = (t - times[i]) / (times[i + 1] - times[i])
        points = (max(i - 1, 0), i, i + 1, min(i + 2, last))

        merged: dict[int, float] = {}
        for idx, w in zip(points, catmull_rom_basis(x)):
            merged[idx] = merged.get(idx, 0.0) + w
        return [(idx, w) for idx, w in merged.items() if w != 0.0]

    def _emit(self, weights: list[tuple[int, float]], multiplier: float) -> list[tuple[Shape, float]]:
        out: list[tuple[Shape, float]] = []
        for idx, w in weights:
            shape = self.pairs[idx][0]
            if shape is not None:
                out.append((shape, multiplier * w))
        return out
