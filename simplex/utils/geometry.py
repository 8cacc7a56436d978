"""Leaf-node simplex geometry helpers. No engine imports.

The unit hypercube [0, 1]^n is split with the Freudenthal (Kuhn)
triangulation: one simplex per permutation of the axes. A permutation
``perm`` walks from the origin to the all-ones corner, switching on axis
``perm[0]`` first, then ``perm[1]``, and so on.
"""

from __future__ import annotations

import itertools
import logging
import warnings

import numpy as np
from numpy.typing import NDArray
from scipy import linalg

from simplex.utils.math_helpers import EPS, ULPS, nearly_equal

logger = logging.getLogger(__name__)


def simplex_corners(perm: tuple[int, ...]) -> NDArray[np.float64]:
    """Corner points of the canonical simplex for an axis permutation, shape (n+1, n)."""
    n = len(perm)
    corners = np.zeros((n + 1, n), dtype=np.float64)
    for step, axis in enumerate(perm, start=1):
        corners[step:, axis] = 1.0
    return corners


def point_to_simplex(point: NDArray[np.float64]) -> tuple[int, ...]:
    """The canonical simplex containing ``point``: axes sorted by descending coordinate."""
    return tuple(sorted(range(len(point)), key=lambda i: (-point[i], i)))


def point_to_adjacent_simplices(
    point: NDArray[np.float64], eps: float = EPS
) -> list[tuple[int, ...]]:
    """Every canonical simplex that contains ``point``.

    Coordinates equal within eps put the point on a face shared by all the
    simplices that order those axes differently.
    """
    order = point_to_simplex(point)
    groups: list[list[int]] = []
    for axis in order:
        if groups and abs(point[groups[-1][-1]] - point[axis]) <= eps:
            groups[-1].append(axis)
        else:
            groups.append([axis])

    result: list[tuple[int, ...]] = []
    for combo in itertools.product(*(itertools.permutations(g) for g in groups)):
        result.append(tuple(axis for part in combo for axis in part))
    return result


def barycentric(corners: NDArray[np.float64], point: NDArray[np.float64]) -> NDArray[np.float64]:
    """Barycentric coordinates of ``point`` with respect to ``corners`` (k, n).

    Solves ``sum(w_i * c_i) = point`` with ``sum(w_i) = 1``. Singular or
    ill-conditioned systems fall back to least squares. The raw weights are
    returned; use :func:`clamp_weights` before treating them as a partition.
    """
    a = np.vstack([corners.T, np.ones(len(corners))])
    b = np.append(np.asarray(point, dtype=np.float64), 1.0)

    if a.shape[0] == a.shape[1]:
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("error", linalg.LinAlgWarning)
                return linalg.solve(a, b)
        except (linalg.LinAlgError, linalg.LinAlgWarning) as e:
            logger.debug("Degenerate simplex, using least squares: %s", e)

    weights, *_ = linalg.lstsq(a, b)
    return weights


def clamp_weights(weights: NDArray[np.float64], eps: float = EPS) -> NDArray[np.float64]:
    """Clamp weights to [0, 1] and renormalize them to sum to 1."""
    clamped = np.clip(weights, 0.0, 1.0)
    total = float(clamped.sum())
    if total <= eps:
        return clamped
    return clamped / total


def contains(weights: NDArray[np.float64], eps: float = EPS) -> bool:
    """True when raw barycentric weights place the point inside or on the simplex."""
    return bool(np.all(weights >= -eps))


def points_match(
    a: NDArray[np.float64], b: NDArray[np.float64], eps: float = EPS, ulps: int = ULPS
) -> bool:
    return all(nearly_equal(float(x), float(y), eps, ulps) for x, y in zip(a, b))
