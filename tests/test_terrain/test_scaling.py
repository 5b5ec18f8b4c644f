"""Tests for directional scaling."""
import pytest
import numpy as np
from natural_elements.errors import InvalidArgument
from natural_elements.terrain.scaling import DirectionalScaler, scale_1d, unit_vector


BASE = np.array([2.0, 1.5, -0.5])
Z = np.array([0.0, 0.0, 1.0])


class TestScale1D:
    """Tests for scale_1d."""

    def test_scales_along_axis_only(self, wavy_grid):
        """Offsets along the axis scale; the rest is untouched."""
        scaled = scale_1d(wavy_grid, BASE, Z, 3.0)
        assert np.allclose(scaled.points[..., :2], wavy_grid.points[..., :2])
        assert np.allclose(scaled.points[..., 2] - BASE[2],
                           3.0 * (wavy_grid.points[..., 2] - BASE[2]))

    def test_input_not_modified(self, wavy_grid):
        """scale_1d returns a new grid."""
        before = wavy_grid.points.copy()
        scale_1d(wavy_grid, BASE, Z, 2.0)
        assert np.array_equal(wavy_grid.points, before)

    @pytest.mark.parametrize("factor", [0.1, 0.37, 3.0, -2.0, 1e3])
    def test_reciprocal_round_trip(self, wavy_grid, factor):
        """Scaling by k then 1/k restores the grid."""
        direction = np.array([0.3, -1.0, 2.0])
        there = scale_1d(wavy_grid, BASE, direction, factor)
        back = scale_1d(there, BASE, direction, 1.0 / factor)
        assert np.allclose(back.points, wavy_grid.points, rtol=1e-9, atol=1e-9)

    def test_zero_factor_restores_original(self, flat_square):
        """Factor 0 returns the stored original whatever happened since."""
        grid = flat_square.rebuild(9, 9)
        grid.move_point(4, 4, (0.0, 0.0, 2.0))
        grid = scale_1d(grid, BASE, Z, 5.0)

        restored = scale_1d(grid, BASE, Z, 0.0)
        assert restored.count_u == 4
        assert np.array_equal(restored.points, flat_square.points)
        assert np.array_equal(restored.knots_u, flat_square.knots_u)

    def test_zero_direction(self, wavy_grid):
        """A zero direction is rejected unless the factor is 0."""
        with pytest.raises(InvalidArgument):
            scale_1d(wavy_grid, BASE, (0.0, 0.0, 0.0), 2.0)
        restored = scale_1d(wavy_grid, BASE, (0.0, 0.0, 0.0), 0.0)
        assert np.array_equal(restored.points, wavy_grid.original.points)

    def test_direction_length_ignored(self, wavy_grid):
        """Only the direction of the axis matters."""
        a = scale_1d(wavy_grid, BASE, (0.0, 0.0, 1.0), 2.0)
        b = scale_1d(wavy_grid, BASE, (0.0, 0.0, 25.0), 2.0)
        assert np.allclose(a.points, b.points)

    def test_oblique_direction(self, flat_square):
        """A diagonal axis stretches the square along the diagonal."""
        d = np.array([1.0, 1.0, 0.0])
        scaled = scale_1d(flat_square, (0.0, 0.0, 0.0), d, 2.0)
        corner = scaled.get_point(3, 3)
        assert np.allclose(corner, [20.0, 20.0, 0.0])
        off_axis = scaled.get_point(3, 0)
        # (10, 0) = along (5, 5) + orthogonal (5, -5)
        assert np.allclose(off_axis, [15.0, 5.0, 0.0])

    def test_non_finite_factor(self, wavy_grid):
        """Infinite factors are rejected."""
        with pytest.raises(InvalidArgument):
            scale_1d(wavy_grid, BASE, Z, np.inf)

    def test_keeps_original(self, wavy_grid):
        """Scaled grids share the original snapshot."""
        assert scale_1d(wavy_grid, BASE, Z, 2.0).original is wavy_grid.original


class TestUnitVector:
    """Tests for direction normalization."""

    def test_normalizes(self):
        """Result has unit length."""
        assert np.linalg.norm(unit_vector((3.0, 4.0, 0.0))) == pytest.approx(1.0)

    def test_wrong_shape(self):
        """Only 3-vectors are accepted."""
        with pytest.raises(InvalidArgument):
            unit_vector((1.0, 0.0))


class TestDirectionalScaler:
    """Tests for the fixed-axis scaler."""

    def test_scale_unscale(self, wavy_grid):
        """unscale undoes scale."""
        scaler = DirectionalScaler(BASE, Z)
        there = scaler.scale(wavy_grid, 4.2)
        back = scaler.unscale(there, 4.2)
        assert np.allclose(back.points, wavy_grid.points)

    def test_unscale_zero(self, flat_square):
        """After a zero scale, unscale keeps the original."""
        scaler = DirectionalScaler(BASE, Z)
        grid = flat_square.rebuild(7, 7)
        flat = scaler.scale(grid, 0.0)
        assert np.array_equal(scaler.unscale(flat, 0.0).points, flat_square.points)

    def test_zero_axis(self):
        """The scaler needs a usable axis."""
        with pytest.raises(InvalidArgument):
            DirectionalScaler(BASE, (0.0, 0.0, 0.0))
