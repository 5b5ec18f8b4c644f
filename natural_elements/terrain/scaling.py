"""
Directional (1-D) Scaling

Scales the component of every control point's offset from a base point
that lies along one axis, leaving the orthogonal part untouched.
"""
import numpy as np
from typing import Sequence

from ..errors import InvalidArgument
from ..surface.grid import SurfaceGrid


def unit_vector(direction: Sequence[float]) -> np.ndarray:
    """Normalize a direction, rejecting the zero vector."""
    d = np.asarray(direction, dtype=np.float64)
    if d.shape != (3,):
        raise InvalidArgument(f"direction must be a 3-vector, got shape {d.shape}")
    length = np.linalg.norm(d)
    if length == 0 or not np.isfinite(length):
        raise InvalidArgument("direction must be a finite, non-zero vector")
    return d / length


def scale_1d(
    grid: SurfaceGrid,
    base_point: Sequence[float],
    direction: Sequence[float],
    factor: float
) -> SurfaceGrid:
    """Scale a grid along one direction about a base point.

    Each control point p becomes base + orthogonal + factor * along, where
    along is the projection of (p - base) onto the direction. A factor of
    0 returns the grid's stored original instead.

    Args:
        grid: Input grid (not modified)
        base_point: Anchor of the scale
        direction: Scale axis (any non-zero length)
        factor: Scale factor along the axis

    Returns:
        New SurfaceGrid sharing the input's original snapshot
    """
    if factor == 0:
        return grid.restore_original()
    if not np.isfinite(factor):
        raise InvalidArgument(f"scale factor must be finite, got {factor}")

    d = unit_vector(direction)
    base = np.asarray(base_point, dtype=np.float64)

    offsets = grid.points - base
    along = (offsets @ d)[..., np.newaxis] * d

    scaled = grid.copy()
    scaled.points = (grid.points - along) + along * factor
    return scaled


class DirectionalScaler:
    """Scale about a fixed base point and axis.

    Attributes:
        base_point: Anchor of the scale (3,)
        direction: Unit scale axis (3,)
    """

    def __init__(self, base_point: Sequence[float], direction: Sequence[float]):
        self.base_point = np.asarray(base_point, dtype=np.float64)
        self.direction = unit_vector(direction)

    def scale(self, grid: SurfaceGrid, factor: float) -> SurfaceGrid:
        """Scale grid by factor along the bound axis about the bound base point."""
        return scale_1d(grid, self.base_point, self.direction, factor)

    def unscale(self, grid: SurfaceGrid, factor: float) -> SurfaceGrid:
        """Undo scale(grid, factor) by scaling with 1/factor.

        A zero factor already replaced the grid with its original, which
        is returned unchanged.
        """
        if factor == 0:
            return grid.restore_original()
        return scale_1d(grid, self.base_point, self.direction, 1.0 / factor)
