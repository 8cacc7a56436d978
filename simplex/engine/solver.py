"""Simplex orchestrator — parses a system, builds the controller graph, solves it.

Solve order: sliders → combos → traversals (dependency order) → floaters
(via their TriSpaces), then every controller projects through its
progression into one output vector sized to the shape count.

A parse failure is recorded on the instance (``has_parse_error``,
``parse_error``, ``parse_error_offset``) instead of raised, and leaves the
graph empty and unbuilt. Solving an unbuilt graph or passing the wrong
number of slider values raises immediately.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator
from typing import Any

import numpy as np
from numpy.typing import NDArray

from simplex.engine.config import SolverConfig
from simplex.engine.context import SolveContext, normalize_inputs
from simplex.engine.controllers import (
    Combo,
    Controller,
    ControllerRef,
    Floater,
    Slider,
    Stage,
    Traversal,
)
from simplex.engine.progression import Interp, Progression
from simplex.engine.shapes import Shape
from simplex.engine.trispace import TriSpace
from simplex.models.schema import ComboEntry, SimplexDocument
from simplex.schema.parser import SchemaError, is_floater, parse_document

logger = logging.getLogger(__name__)


class Simplex:
    """A built corrective-shape system: slider values in, shape weights out."""

    def __init__(self, text: str | bytes | None = None, config: SolverConfig | None = None) -> None:
        # Own copy, since set_exact_solve mutates it
        self.config = dataclasses.replace(config) if config is not None else SolverConfig()

        self.built = False
        self.loaded = False
        self.has_parse_error = False
        self.parse_error = ""
        self.parse_error_offset = 0

        # Host data keyed by shape index; never read by the solver
        self._user_data: dict[int, Any] = {}
        self._reset()

        if text is not None:
            self.parse_json(text)

    def _reset(self) -> None:
        self.system_name = ""
        self.shapes: list[Shape] = []
        self.progressions: list[Progression] = []
        self.sliders: list[Slider] = []
        self.combos: list[Combo] = []
        self.traversals: list[Traversal] = []
        self.floaters: list[Floater] = []
        self.spaces: list[TriSpace] = []
        self._traversal_order: list[Traversal] = []
        self._user_data.clear()

    # --- Construction ---

    def parse_json(self, text: str | bytes) -> bool:
        """Load and build a system. Returns False and records the error on failure."""
        self._reset()
        self.built = False
        self.loaded = False
        self.has_parse_error = False
        self.parse_error = ""
        self.parse_error_offset = 0

        try:
            self._load(parse_document(text))
            self.loaded = True
            self.build()
        except SchemaError as e:
            self._reset()
            self.loaded = False
            self.built = False
            self.has_parse_error = True
            self.parse_error = str(e)
            self.parse_error_offset = e.offset
            logger.warning("Simplex parse failed at byte %d: %s", e.offset, e)
            return False
        return True

    def _load(self, doc: SimplexDocument) -> None:
        self.system_name = doc.system_name
        self.shapes = [Shape(name=entry.name, index=i) for i, entry in enumerate(doc.shapes)]

        for entry in doc.progressions:
            pairs = [(None if s is None else self.shapes[s], t) for s, t in entry.pairs]
            self.progressions.append(Progression(entry.name, pairs, Interp(entry.interp)))

        for i, entry in enumerate(doc.sliders):
            self.sliders.append(
                Slider(entry.name, i, self.progressions[entry.prog], enabled=entry.enabled)
            )

        # Document combo indices may land in either collection
        combo_refs: list[ControllerRef] = []
        for entry in doc.combos:
            if is_floater(entry):
                combo_refs.append(self._add_floater(entry))
                continue
            combo = Combo(
                entry.name,
                len(self.combos),
                self.progressions[entry.prog],
                enabled=entry.enabled,
                state=[(s, 1.0 if t > 0 else -1.0) for s, t in entry.pairs],
            )
            self.combos.append(combo)
            combo_refs.append(combo.ref)
        floater_refs = [self._add_floater(entry) for entry in doc.floaters]

        def resolve(kind: str, index: int) -> ControllerRef:
            if kind == "slider":
                return ControllerRef(Stage.SLIDER, index)
            if kind == "combo":
                return combo_refs[index]
            if kind == "floater":
                return floater_refs[index]
            return ControllerRef(Stage.TRAVERSAL, index)

        for i, entry in enumerate(doc.traversals):
            self.traversals.append(
                Traversal(
                    entry.name,
                    i,
                    self.progressions[entry.prog],
                    enabled=entry.enabled,
                    progress_ref=resolve(entry.progress_type, entry.progress_control),
                    multiplier_ref=resolve(entry.multiplier_type, entry.multiplier_control),
                    progress_flip=entry.progress_flip,
                    multiplier_flip=entry.multiplier_flip,
                )
            )

    def _add_floater(self, entry: ComboEntry) -> ControllerRef:
        floater = Floater(
            entry.name,
            len(self.floaters),
            self.progressions[entry.prog],
            enabled=entry.enabled,
            state=list(entry.pairs),
        )
        self.floaters.append(floater)
        return floater.ref

    def build(self) -> None:
        """Resolve the static graph structure: combo overlaps, traversal order, TriSpaces."""
        if not self.loaded:
            raise RuntimeError("Cannot build a simplex system that has not been loaded")

        self._compute_overlaps()
        self._traversal_order = self._order_traversals()
        self.spaces = TriSpace.build_spaces(self.floaters, self.config.eps, self.config.ulps)
        self.built = True

        logger.info(
            "Built simplex system %r: %d shapes, %d sliders, %d combos, %d traversals, %d floaters in %d spaces",
            self.system_name,
            len(self.shapes),
            len(self.sliders),
            len(self.combos),
            len(self.traversals),
            len(self.floaters),
            len(self.spaces),
        )

    def _compute_overlaps(self) -> None:
        """Record, per combo, the extra (slider, sign) pairs of every combo that strictly contains it."""
        keys = [frozenset(c.state) for c in self.combos]
        for combo, key in zip(self.combos, keys):
            extra: set[tuple[int, float]] = set()
            for other in keys:
                if key < other:
                    extra |= other - key
            combo.overlap = sorted(extra)

    def _order_traversals(self) -> list[Traversal]:
        """Topological order of traversals so chained ones read already-solved sources."""
        in_degree = {t.index: 0 for t in self.traversals}
        dependents: dict[int, list[int]] = {t.index: [] for t in self.traversals}

        for trav in self.traversals:
            for ref in trav.dependencies:
                if ref.kind is Stage.FLOATER:
                    raise SchemaError(f"Traversal {trav.name!r} cannot be driven by a floater")
                if ref.kind is Stage.TRAVERSAL:
                    in_degree[trav.index] += 1
                    dependents[ref.index].append(trav.index)

        # Kahn's algorithm
        queue = sorted(i for i, d in in_degree.items() if d == 0)
        ordered: list[Traversal] = []
        while queue:
            idx = queue.pop(0)
            ordered.append(self.traversals[idx])
            for other in dependents[idx]:
                in_degree[other] -= 1
                if in_degree[other] == 0:
                    queue.append(other)
                    queue.sort()

        if len(ordered) != len(self.traversals):
            missing = sorted(t.name for t in self.traversals if in_degree[t.index] > 0)
            raise SchemaError(f"Circular traversal dependency among: {missing}")
        return ordered

    # --- Solving ---

    def controller(self, ref: ControllerRef) -> Controller:
        collections: dict[Stage, list[Any]] = {
            Stage.SLIDER: self.sliders,
            Stage.COMBO: self.combos,
            Stage.TRAVERSAL: self.traversals,
            Stage.FLOATER: self.floaters,
        }
        return collections[ref.kind][ref.index]

    def controllers(self) -> Iterator[Controller]:
        """Every controller, in solve order."""
        yield from self.sliders
        yield from self.combos
        yield from self._traversal_order
        yield from self.floaters

    def _rectify(self, values: NDArray[np.float64] | list[float]) -> SolveContext:
        raw = np.asarray(values, dtype=np.float64)
        if raw.ndim != 1 or raw.shape[0] != len(self.sliders):
            raise ValueError(
                f"Expected {len(self.sliders)} slider values, got shape {raw.shape}"
            )
        ctx = normalize_inputs(
            raw,
            max_value=self.config.max_value,
            exact_solve=self.config.exact_solve,
            eps=self.config.eps,
        )
        ctx.lookup = self.controller
        return ctx

    def solve(self, values: NDArray[np.float64] | list[float]) -> NDArray[np.float64]:
        """Slider values in, one weight per shape out (index-aligned with ``shapes``)."""
        if not self.built:
            reason = f": {self.parse_error}" if self.has_parse_error else ""
            raise RuntimeError(f"Simplex system is not built{reason}")

        ctx = self._rectify(values)

        for slider in self.sliders:
            slider.store_value(ctx)
        for combo in self.combos:
            combo.store_value(ctx)
        for trav in self._traversal_order:
            trav.store_value(ctx)
        for space in self.spaces:
            for idx, value in space.solve(ctx).items():
                floater = self.floaters[idx]
                floater.clear_value()
                if floater.enabled:
                    floater.value = value

        accumulator = np.zeros(len(self.shapes), dtype=np.float64)
        for ctrl in self.controllers():
            ctrl.solve(accumulator)
        return accumulator

    # --- Configuration & host boundary ---

    def set_exact_solve(self, exact: bool) -> None:
        self.config.exact_solve = exact

    def clear_values(self) -> None:
        for ctrl in self.controllers():
            ctrl.clear_value()

    def set_user_data(self, shape: Shape | int, data: Any) -> None:
        self._user_data[self._shape_index(shape)] = data

    def get_user_data(self, shape: Shape | int) -> Any:
        return self._user_data.get(self._shape_index(shape))

    def _shape_index(self, shape: Shape | int) -> int:
        index = shape.index if isinstance(shape, Shape) else int(shape)
        if not 0 <= index < len(self.shapes):
            raise IndexError(f"No shape with index {index}")
        return index

    def shape_weights(self, output: NDArray[np.float64]) -> dict[str, float]:
        """Pair shape names with a solve() result."""
        return {shape.name: float(output[shape.index]) for shape in self.shapes}
