"""Controller variants — Slider, Combo, Traversal, Floater.

Every controller owns a value and a multiplier that are overwritten on
each solve, and projects them through a (possibly shared) Progression
into the output accumulator. The variant set is closed; ``Stage`` doubles
as the variant tag and the evaluation order.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from simplex.engine.context import SolveContext
from simplex.engine.progression import Progression


class Stage(enum.IntEnum):
    SLIDER = 0
    COMBO = 1
    TRAVERSAL = 2
    FLOATER = 3


class ControllerRef(NamedTuple):
    """Stable (kind, index) reference into one of the orchestrator's collections."""

    kind: Stage
    index: int


@dataclass(eq=False)
class Controller:
    name: str
    index: int
    progression: Progression
    enabled: bool = True
    value: float = 0.0
    multiplier: float = 1.0

    stage = Stage.SLIDER

    @property
    def ref(self) -> ControllerRef:
        return ControllerRef(self.stage, self.index)

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled

    def clear_value(self) -> None:
        self.value = 0.0
        self.multiplier = 1.0

    def solve(self, accumulator: NDArray[np.float64]) -> None:
        """Add this controller's shape weights into ``accumulator``."""
        if not self.enabled:
            return
        for shape, weight in self.progression.get_output(self.value, self.multiplier):
            accumulator[shape.index] += weight


@dataclass(eq=False)
class Slider(Controller):
    stage = Stage.SLIDER

    def store_value(self, ctx: SolveContext) -> None:
        self.clear_value()
        if self.enabled:
            self.value = float(ctx.values[self.index])


@dataclass(eq=False)
class Combo(Controller):
    """Corrective that fires when all its sliders sit in their target directions."""

    # (slider index, target) with target = ±1
    state: list[tuple[int, float]] = field(default_factory=list)
    # (slider index, sign) pairs of strictly larger combos containing this one
    overlap: list[tuple[int, float]] = field(default_factory=list)

    stage = Stage.COMBO

    def store_value(self, ctx: SolveContext) -> None:
        self.clear_value()
        if not self.enabled or not self.state:
            return
        if ctx.exact_solve:
            self.value = self._exact_value(ctx)
        else:
            self.value = self._product_value(ctx)

    def _product_value(self, ctx: SolveContext) -> float:
        value = 1.0
        for slider, target in self.state:
            contribution = ctx.directional(slider, target)
            if contribution == 0.0:
                return 0.0
            value *= min(contribution / abs(target), 1.0)
        return value

    def _exact_value(self, ctx: SolveContext) -> float:
        for slider, target in self.state:
            if ctx.directional(slider, target) < abs(target) - ctx.eps:
                return 0.0
        for slider, sign in self.overlap:
            if ctx.directional(slider, sign) >= 1.0 - ctx.eps:
                return 0.0
        return 1.0


@dataclass(eq=False)
class Traversal(Controller):
    """Re-routes another controller's activation through its own progression."""

    progress_ref: ControllerRef = ControllerRef(Stage.SLIDER, 0)
    multiplier_ref: ControllerRef = ControllerRef(Stage.SLIDER, 0)
    progress_flip: bool = False
    multiplier_flip: bool = False

    stage = Stage.TRAVERSAL

    @property
    def dependencies(self) -> list[ControllerRef]:
        return [self.progress_ref, self.multiplier_ref]

    def store_value(self, ctx: SolveContext) -> None:
        self.clear_value()
        if not self.enabled:
            return
        if ctx.lookup is None:
            raise RuntimeError(f"Traversal {self.name!r} solved without a controller lookup")
        progress = ctx.lookup(self.progress_ref).value
        multiplier = ctx.lookup(self.multiplier_ref).value
        self.value = -progress if self.progress_flip else progress
        self.multiplier = -multiplier if self.multiplier_flip else multiplier


@dataclass(eq=False)
class Floater(Controller):
    """Corrective placed inside a multi-slider region; its TriSpace supplies the value."""

    # (slider index, target) with at least one |target| inside (0, 1)
    state: list[tuple[int, float]] = field(default_factory=list)

    stage = Stage.FLOATER

    @property
    def space_key(self) -> tuple[tuple[int, ...], tuple[float, ...]]:
        """(sliders, signs); floaters sharing this key share a TriSpace."""
        ordered = sorted(self.state)
        return (
            tuple(s for s, _ in ordered),
            tuple(1.0 if t > 0 else -1.0 for _, t in ordered),
        )

    @property
    def point(self) -> tuple[float, ...]:
        """Location inside the TriSpace's unit hypercube, in slider order."""
        return tuple(abs(t) for _, t in sorted(self.state))

    def store_value(self, ctx: SolveContext) -> None:
        # Written by the orchestrator from the owning TriSpace's result
        pass
