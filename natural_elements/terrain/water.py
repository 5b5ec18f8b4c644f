"""
Water Level Extraction

Intersects a terrain with a horizontal water plane and builds planar
water patches wherever the terrain dips below it. The terrain is
sampled into a height field over its parameter domain and contoured
with contourpy; contour vertices are mapped back onto the surface.
"""
import numpy as np
import structlog
from contourpy import FillType, LineType, contour_generator
from typing import List, Sequence, Tuple

from ..errors import GeometryUnavailable, InvalidArgument
from ..interfaces import IntersectionResult, WaterSurface
from ..surface.grid import SurfaceGrid
from .generator import Terrain
from .scaling import unit_vector

logger = structlog.get_logger()

DEFAULT_SAMPLES = 64
WATER_DIVISOR = 3.0


def water_level_from_pick(
    base_point: Sequence[float],
    picked_point: Sequence[float],
    vertical_axis: Sequence[float] = (0.0, 0.0, 1.0),
    divisor: float = WATER_DIVISOR
) -> float:
    """Water level for a picked point.

    The offset from the base point is divided by `divisor` for finer
    control and forced downward, so water never rises above the
    undisplaced terrain level.

    Args:
        base_point: Terrain base point
        picked_point: Point picked on the vertical line through the base
        vertical_axis: Terrain up direction
        divisor: Reduction applied to the picked offset

    Returns:
        Level relative to the base point (<= 0)
    """
    if divisor <= 0:
        raise InvalidArgument(f"divisor must be positive, got {divisor}")
    axis = unit_vector(vertical_axis)
    offset = np.asarray(picked_point, dtype=np.float64) - np.asarray(base_point, dtype=np.float64)
    return -abs(float(offset @ axis)) / divisor


def height_field(
    grid: SurfaceGrid,
    base_point: Sequence[float],
    vertical_axis: Sequence[float],
    samples: int = DEFAULT_SAMPLES
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Sample surface heights above the base point on a parameter grid.

    Returns:
        Tuple of (u_params, v_params, heights)
        - u_params: (samples,) u values
        - v_params: (samples,) v values
        - heights: (samples, samples) height at (u_i, v_j)
    """
    if samples < 2:
        raise InvalidArgument(f"samples must be >= 2, got {samples}")
    axis = unit_vector(vertical_axis)
    u = np.linspace(*grid.domain_u, samples)
    v = np.linspace(*grid.domain_v, samples)
    points = grid.evaluate(u, v)
    heights = (points - np.asarray(base_point, dtype=np.float64)) @ axis
    return u, v, heights


def _param_grid(u: np.ndarray, v: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    # contourpy wants x along columns, y along rows: columns are v, rows are u
    V, U = np.meshgrid(v, u)
    return V, U


def _to_surface(grid: SurfaceGrid, vu: np.ndarray) -> np.ndarray:
    return grid.point_at(vu[:, 1], vu[:, 0])


def _onto_plane(points: np.ndarray, base: np.ndarray, axis: np.ndarray, level: float) -> np.ndarray:
    heights = (points - base) @ axis
    return points - (heights - level)[:, np.newaxis] * axis


def intersect_with_level(
    grid: SurfaceGrid,
    base_point: Sequence[float],
    vertical_axis: Sequence[float],
    level: float,
    samples: int = DEFAULT_SAMPLES
) -> IntersectionResult:
    """Curves where the surface crosses the plane at `level` above base.

    Args:
        grid: Surface to intersect
        base_point: Reference point for heights
        vertical_axis: Plane normal
        level: Plane height relative to base_point
        samples: Height-field resolution per direction

    Returns:
        IntersectionResult with one polyline per contour line
    """
    u, v, heights = height_field(grid, base_point, vertical_axis, samples)
    V, U = _param_grid(u, v)

    gen = contour_generator(x=V, y=U, z=heights, line_type=LineType.Separate)
    lines = [line for line in gen.lines(level) if len(line) >= 2]
    if not lines:
        raise GeometryUnavailable(f"surface does not reach level {level:.4g}")

    curves = [_to_surface(grid, line) for line in lines]
    logger.debug("Level intersection", level=level, curves=len(curves))
    return IntersectionResult(curves=curves)


def _surfaces_below(
    grid: SurfaceGrid,
    base: np.ndarray,
    axis: np.ndarray,
    level: float,
    samples: int
) -> List[WaterSurface]:
    u, v, heights = height_field(grid, base, axis, samples)
    V, U = _param_grid(u, v)

    lower = min(float(heights.min()), level) - 1.0
    gen = contour_generator(x=V, y=U, z=heights, fill_type=FillType.OuterOffset)
    polygons, offsets = gen.filled(lower, level)

    surfaces = []
    for vu, offset in zip(polygons, offsets):
        rings = [
            _onto_plane(_to_surface(grid, vu[start:stop]), base, axis, level)
            for start, stop in zip(offset[:-1], offset[1:])
            if stop - start >= 3
        ]
        if not rings:
            continue
        surfaces.append(WaterSurface(level=level, boundary=rings[0], holes=rings[1:]))
    return surfaces


def water_surfaces(
    terrain: Terrain,
    level: float,
    samples: int = DEFAULT_SAMPLES
) -> List[WaterSurface]:
    """Planar water patches where the terrain lies at or below `level`.

    Each patch is an outer boundary plus holes for islands, lying in the
    water plane.

    Args:
        terrain: Terrain to flood
        level: Water height relative to terrain.base_point
        samples: Height-field resolution per direction

    Returns:
        List of WaterSurface
    """
    surfaces = _surfaces_below(
        terrain.surface, terrain.base_point, terrain.vertical_axis, level, samples
    )
    if not surfaces:
        raise GeometryUnavailable(f"terrain never dips below level {level:.4g}")

    logger.info("Water surfaces extracted",
                level=level,
                count=len(surfaces),
                area=sum(s.area() for s in surfaces))
    return surfaces


def preview_water_surfaces(
    terrain: Terrain,
    level: float,
    samples: int = DEFAULT_SAMPLES
) -> List[WaterSurface]:
    """water_surfaces for a live preview frame: nothing to show is not an error."""
    try:
        return water_surfaces(terrain, level, samples)
    except GeometryUnavailable as exc:
        logger.debug("No water surfaces for preview", level=level, reason=str(exc))
        return []
