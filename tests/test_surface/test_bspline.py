"""Tests for the B-spline kernel."""
import pytest
import numpy as np
from natural_elements.surface.bspline import (
    basis_matrix,
    clamped_uniform_knots,
    evaluate_pairs,
    evaluate_surface,
    insert_knot,
    knot_domain,
    refine,
    refit,
)


def _curve(knots, ctrl, degree, params):
    return basis_matrix(knots, degree, params) @ ctrl


class TestKnots:
    """Tests for knot vector helpers."""

    def test_clamped_uniform_knots(self):
        """Four quadratic points: one interior knot at 0.5."""
        knots = clamped_uniform_knots(4, 2)
        assert np.allclose(knots, [0, 0, 0, 0.5, 1, 1, 1])

    def test_knot_count(self):
        """Knot vector length is count + degree + 1."""
        for count in (3, 4, 7, 11):
            assert len(clamped_uniform_knots(count, 2)) == count + 3

    def test_domain(self):
        """Clamped knots span [0, 1]."""
        assert knot_domain(clamped_uniform_knots(7, 2), 2) == (0.0, 1.0)


class TestBasis:
    """Tests for basis evaluation."""

    def test_partition_of_unity(self):
        """Basis functions sum to one across the domain."""
        knots = clamped_uniform_knots(7, 2)
        params = np.linspace(0.0, 1.0, 41)
        basis = basis_matrix(knots, 2, params)
        assert basis.shape == (41, 7)
        assert np.allclose(basis.sum(axis=1), 1.0)

    def test_end_interpolation(self):
        """Clamped ends pick out the first and last control point."""
        knots = clamped_uniform_knots(5, 2)
        basis = basis_matrix(knots, 2, np.array([0.0, 1.0]))
        assert np.allclose(basis[0], [1, 0, 0, 0, 0])
        assert np.allclose(basis[1], [0, 0, 0, 0, 1])


class TestKnotInsertion:
    """Tests for exact refinement."""

    def test_insert_preserves_curve(self):
        """Inserting a knot leaves the curve unchanged."""
        rng = np.random.default_rng(0)
        ctrl = rng.normal(size=(6, 3))
        knots = clamped_uniform_knots(6, 2)
        params = np.linspace(0.0, 1.0, 57)

        new_knots, new_ctrl = insert_knot(knots, ctrl, 2, 0.4)
        assert new_ctrl.shape == (7, 3)
        assert len(new_knots) == len(knots) + 1
        assert np.allclose(_curve(knots, ctrl, 2, params),
                           _curve(new_knots, new_ctrl, 2, params))

    def test_insert_on_grid_rows(self):
        """Insertion works along axis 0 of a whole control grid."""
        rng = np.random.default_rng(1)
        ctrl = rng.normal(size=(5, 4, 3))
        knots = clamped_uniform_knots(5, 2)
        new_knots, new_ctrl = insert_knot(knots, ctrl, 2, 0.7)
        assert new_ctrl.shape == (6, 4, 3)

    def test_refine_to_count(self):
        """refine adds knots until the requested count."""
        rng = np.random.default_rng(2)
        ctrl = rng.normal(size=(4, 3))
        knots = clamped_uniform_knots(4, 2)
        params = np.linspace(0.0, 1.0, 33)

        new_knots, new_ctrl = refine(knots, ctrl, 2, 11)
        assert new_ctrl.shape[0] == 11
        assert np.all(np.diff(new_knots) >= 0)
        assert np.allclose(_curve(knots, ctrl, 2, params),
                           _curve(new_knots, new_ctrl, 2, params))

    def test_refine_keeps_constant_band(self):
        """Points in a band of equal values stay exactly equal."""
        ctrl = np.zeros((7, 1))
        ctrl[3] = 1.5
        knots = clamped_uniform_knots(7, 2)
        _, new_ctrl = refine(knots, ctrl, 2, 9)
        assert np.all(new_ctrl[:3] == 0.0)
        assert np.all(new_ctrl[-3:] == 0.0)


class TestRefit:
    """Tests for least-squares coarsening."""

    def test_refit_single_polynomial(self):
        """A single quadratic piece is recovered exactly on coarser knots."""
        bezier = np.array([[0.0, 0.0, 0.0], [1.0, 2.0, 0.5], [2.0, 0.0, 1.0]])
        knots = np.array([0, 0, 0, 1, 1, 1], dtype=float)
        fine_knots, fine_ctrl = refine(knots, bezier, 2, 8)

        coarse_knots, coarse_ctrl = refit(fine_knots, fine_ctrl, 2, 5)
        params = np.linspace(0.0, 1.0, 25)
        assert coarse_ctrl.shape == (5, 3)
        assert np.allclose(_curve(knots, bezier, 2, params),
                           _curve(coarse_knots, coarse_ctrl, 2, params),
                           atol=1e-9)


    def test_refit_raises_degree(self):
        """A straight segment refits exactly at a higher degree."""
        knots = np.array([0, 0, 0.5, 1, 1], dtype=float)
        line = np.array([[0.0, 0.0, 0.0], [1.0, 2.0, 0.0], [2.0, 4.0, 0.0]])

        new_knots, new_ctrl = refit(knots, line, 1, 5, new_degree=2)
        params = np.linspace(0.0, 1.0, 25)
        assert len(new_knots) == 5 + 2 + 1
        assert np.allclose(_curve(knots, line, 1, params),
                           _curve(new_knots, new_ctrl, 2, params),
                           atol=1e-9)

class TestSurfaceEvaluation:
    """Tests for tensor-product evaluation."""

    def test_corners(self):
        """Surface corners coincide with corner control points."""
        rng = np.random.default_rng(3)
        points = rng.normal(size=(5, 4, 3))
        ku = clamped_uniform_knots(5, 2)
        kv = clamped_uniform_knots(4, 2)
        corners = evaluate_surface(points, ku, kv, 2, 2,
                                   np.array([0.0, 1.0]), np.array([0.0, 1.0]))
        assert np.allclose(corners[0, 0], points[0, 0])
        assert np.allclose(corners[1, 1], points[-1, -1])
        assert np.allclose(corners[0, 1], points[0, -1])

    def test_pairs_match_grid(self):
        """Pairwise evaluation agrees with the grid diagonal."""
        rng = np.random.default_rng(4)
        points = rng.normal(size=(5, 5, 3))
        knots = clamped_uniform_knots(5, 2)
        params = np.linspace(0.0, 1.0, 9)
        grid = evaluate_surface(points, knots, knots, 2, 2, params, params)
        pairs = evaluate_pairs(points, knots, knots, 2, 2, params, params)
        assert np.allclose(pairs, grid[np.arange(9), np.arange(9)])
