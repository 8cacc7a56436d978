"""Tests for simplex geometry and math helpers."""

import math

import numpy as np
import pytest

from simplex.utils.geometry import (
    barycentric,
    clamp_weights,
    contains,
    point_to_adjacent_simplices,
    point_to_simplex,
    points_match,
    simplex_corners,
)
from simplex.utils.math_helpers import catmull_rom_basis, nearly_equal


def test_simplex_corners_walk_the_permutation():
    corners = simplex_corners((1, 0))
    assert corners.tolist() == [[0.0, 0.0], [0.0, 1.0], [1.0, 1.0]]
    assert simplex_corners((2, 0, 1))[2].tolist() == [1.0, 0.0, 1.0]


def test_point_to_simplex_sorts_descending():
    assert point_to_simplex(np.array([0.2, 0.9, 0.5])) == (1, 2, 0)


def test_point_to_simplex_contains_point():
    point = np.array([0.3, 0.7, 0.1])
    weights = barycentric(simplex_corners(point_to_simplex(point)), point)
    assert contains(weights)
    assert weights.sum() == pytest.approx(1.0)


def test_adjacent_simplices_on_shared_faces():
    assert point_to_adjacent_simplices(np.array([0.3, 0.7])) == [(1, 0)]
    assert sorted(point_to_adjacent_simplices(np.array([0.5, 0.5]))) == [(0, 1), (1, 0)]
    assert len(point_to_adjacent_simplices(np.array([0.4, 0.4, 0.4]))) == 6
    # Axis 2 is tied with axis 0 only
    assert sorted(point_to_adjacent_simplices(np.array([0.4, 0.9, 0.4 + 1e-9]))) == [(1, 0, 2), (1, 2, 0)]


def test_barycentric_of_centroid():
    corners = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
    weights = barycentric(corners, corners.mean(axis=0))
    assert weights == pytest.approx([1 / 3, 1 / 3, 1 / 3])


def test_barycentric_at_vertex():
    corners = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]])
    weights = barycentric(corners, np.array([1.0, 0.0]))
    assert weights == pytest.approx([0.0, 1.0, 0.0], abs=1e-12)


def test_barycentric_degenerate_falls_back_to_least_squares():
    # Collinear corners: the square system is singular
    corners = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]])
    point = np.array([1.0, 1.0])
    weights = barycentric(corners, point)
    assert weights.sum() == pytest.approx(1.0)
    assert weights @ corners == pytest.approx(point)


def test_clamp_weights():
    weights = clamp_weights(np.array([-1e-9, 0.5, 0.5000001]))
    assert weights.min() >= 0.0
    assert weights.max() <= 1.0
    assert weights.sum() == pytest.approx(1.0, abs=1e-12)


def test_contains_tolerance():
    assert contains(np.array([-1e-9, 0.5, 0.5]))
    assert not contains(np.array([-0.1, 0.6, 0.5]))


def test_nearly_equal_eps_and_ulps():
    assert nearly_equal(0.5, 0.5 + 1e-7)
    assert not nearly_equal(0.5, 0.5 + 1e-5)
    big = 1e10
    assert nearly_equal(big, big + 3 * math.ulp(big))
    assert not nearly_equal(big, big + 100 * math.ulp(big))


def test_points_match():
    assert points_match(np.array([0.5, 0.25]), np.array([0.5 + 1e-8, 0.25]))
    assert not points_match(np.array([0.5, 0.25]), np.array([0.5, 0.26]))


@pytest.mark.parametrize("x", [0.0, 0.1, 0.5, 0.9, 1.0])
def test_catmull_rom_basis_partition_of_unity(x):
    assert sum(catmull_rom_basis(x)) == pytest.approx(1.0)


def test_catmull_rom_basis_endpoints():
    assert catmull_rom_basis(0.0) == (0.0, 1.0, 0.0, 0.0)
    assert catmull_rom_basis(1.0) == (0.0, 0.0, 1.0, 0.0)
