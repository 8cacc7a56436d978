"""TriSpace — simplicial interpolation of floaters across a multi-slider region.

Floaters that share the same driving sliders and sign-region live in one
unit hypercube. The cube is split with the Freudenthal triangulation, then
each floater point is inserted as a new vertex by splitting every simplex
that contains it. At solve time the slider values are located inside one
refined simplex and its barycentric weights become the floater values.

The refinement runs once at build time; ``simplex_map`` keeps, for each
canonical simplex (an axis permutation), the refined child simplices as
tuples of vertex ids.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from simplex.engine.context import SolveContext
from simplex.engine.controllers import Floater
from simplex.utils.geometry import (
    barycentric,
    clamp_weights,
    contains,
    point_to_adjacent_simplices,
    point_to_simplex,
    points_match,
    simplex_corners,
)
from simplex.utils.math_helpers import EPS, ULPS

logger = logging.getLogger(__name__)

SpaceKey = tuple[tuple[int, ...], tuple[float, ...]]


@dataclass
class TriSpace:
    # Driving slider indices, ascending
    sliders: tuple[int, ...]
    # +1 / -1 per slider: the sign-region this space covers
    signs: tuple[float, ...]
    # Floater indices (into the orchestrator's floater list) and their points
    floaters: list[int] = field(default_factory=list)
    points: list[tuple[float, ...]] = field(default_factory=list)

    eps: float = EPS
    ulps: int = ULPS

    vertices: list[NDArray[np.float64]] = field(default_factory=list)
    # vertex id -> floater indices sitting on it; cube corners have none
    vertex_floaters: dict[int, list[int]] = field(default_factory=dict)
    simplex_map: dict[tuple[int, ...], list[tuple[int, ...]]] = field(default_factory=dict)

    @classmethod
    def build_spaces(
        cls, floaters: list[Floater], eps: float = EPS, ulps: int = ULPS
    ) -> list[TriSpace]:
        """Group floaters by shared sliders and sign-region, one triangulated space per group."""
        groups: dict[SpaceKey, list[Floater]] = {}
        for floater in floaters:
            groups.setdefault(floater.space_key, []).append(floater)

        spaces: list[TriSpace] = []
        for (sliders, signs), members in groups.items():
            space = cls(
                sliders=sliders,
                signs=signs,
                floaters=[f.index for f in members],
                points=[f.point for f in members],
                eps=eps,
                ulps=ulps,
            )
            space.triangulate()
            spaces.append(space)
        return spaces

    @property
    def dimension(self) -> int:
        return len(self.sliders)

    @property
    def simplex_count(self) -> int:
        return sum(len(children) for children in self.simplex_map.values())

    def triangulate(self) -> None:
        """Build the canonical cube triangulation and insert every floater point."""
        self.vertices.clear()
        self.vertex_floaters.clear()
        self.simplex_map.clear()

        for perm in itertools.permutations(range(self.dimension)):
            corners = simplex_corners(perm)
            self.simplex_map[perm] = [tuple(self._vertex_id(c) for c in corners)]

        for floater, point in zip(self.floaters, self.points):
            p = np.asarray(point, dtype=np.float64)
            existing = self._find_vertex(p)
            if existing is not None:
                logger.debug("Floater %d coincides with vertex %d, not re-inserted", floater, existing)
                self.vertex_floaters.setdefault(existing, []).append(floater)
                continue

            vid = len(self.vertices)
            self.vertices.append(p)
            self.vertex_floaters[vid] = [floater]
            for perm in point_to_adjacent_simplices(p, self.eps):
                self.simplex_map[perm] = self._split(self.simplex_map[perm], vid)

        logger.debug(
            "TriSpace sliders=%s signs=%s: %d floaters, %d simplices",
            self.sliders,
            self.signs,
            len(self.floaters),
            self.simplex_count,
        )

    def project(self, ctx: SolveContext) -> NDArray[np.float64]:
        """Slider values folded into this space's positive unit cube."""
        return np.array(
            [max(sign * float(ctx.values[s]), 0.0) for s, sign in zip(self.sliders, self.signs)],
            dtype=np.float64,
        )

    def vertex_weights(self, point: NDArray[np.float64]) -> list[tuple[int, float]]:
        """(vertex id, weight) for the refined simplex containing ``point``."""
        vid = self._find_vertex(point)
        if vid is not None:
            return [(vid, 1.0)]

        child, raw = self._locate(point)
        weights = clamp_weights(raw, self.eps)
        return [(v, float(w)) for v, w in zip(child, weights)]

    def solve(self, ctx: SolveContext) -> dict[int, float]:
        """Resolve every floater of this space: floater index -> value."""
        result = {f: 0.0 for f in self.floaters}
        point = self.project(ctx)
        # Every floater has strictly positive coordinates, so a zero axis leaves them all off
        if np.any(point <= 0.0):
            return result

        for vid, weight in self.vertex_weights(point):
            for floater in self.vertex_floaters.get(vid, ()):
                result[floater] += weight
        return result

    def _corners(self, simplex: tuple[int, ...]) -> NDArray[np.float64]:
        return np.array([self.vertices[v] for v in simplex])

    def _find_vertex(self, point: NDArray[np.float64]) -> int | None:
        for vid, vertex in enumerate(self.vertices):
            if points_match(vertex, point, self.eps, self.ulps):
                return vid
        return None

    def _vertex_id(self, point: NDArray[np.float64]) -> int:
        vid = self._find_vertex(point)
        if vid is None:
            vid = len(self.vertices)
            self.vertices.append(np.asarray(point, dtype=np.float64))
        return vid

    def _split(self, children: list[tuple[int, ...]], vid: int) -> list[tuple[int, ...]]:
        point = self.vertices[vid]
        out: list[tuple[int, ...]] = []
        for child in children:
            weights = barycentric(self._corners(child), point)
            if not contains(weights, self.eps):
                out.append(child)
                continue
            # Corners with no weight would give a flat child; skip them
            for j, w in enumerate(weights):
                if w > self.eps:
                    out.append(child[:j] + (vid,) + child[j + 1 :])
        return out

    def _locate(self, point: NDArray[np.float64]) -> tuple[tuple[int, ...], NDArray[np.float64]]:
        first, *rest = self.simplex_map[point_to_simplex(point)]
        best = (first, barycentric(self._corners(first), point))
        if contains(best[1], self.eps):
            return best
        # Float noise can leave the point just outside every child; take the least-violated one
        for child in rest:
            weights = barycentric(self._corners(child), point)
            if contains(weights, self.eps):
                return child, weights
            if weights.min() > best[1].min():
                best = (child, weights)
        return best
