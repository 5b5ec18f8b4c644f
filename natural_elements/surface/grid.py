"""
Control-Point Grid Surfaces

SurfaceGrid wraps the control net of a clamped B-spline surface and
keeps a frozen snapshot of the grid it was first built from.
"""
import operator
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np
import structlog

from ..errors import GeometryUnavailable, IndexOutOfRange, InvalidArgument
from ..interfaces import BoundingBox
from . import bspline

logger = structlog.get_logger()

MIN_POINT_COUNT = 4
DEFAULT_DEGREE = 2


def _frozen(array: np.ndarray) -> np.ndarray:
    out = np.array(array, dtype=np.float64, copy=True)
    out.flags.writeable = False
    return out


@dataclass(frozen=True, eq=False)
class GridSnapshot:
    """Immutable copy of a grid's control net and knots."""
    points: np.ndarray
    knots_u: np.ndarray
    knots_v: np.ndarray
    degree_u: int
    degree_v: int

    @classmethod
    def of(cls, points, knots_u, knots_v, degree_u, degree_v) -> "GridSnapshot":
        return cls(_frozen(points), _frozen(knots_u), _frozen(knots_v),
                   int(degree_u), int(degree_v))


@dataclass(eq=False)
class SurfaceGrid:
    """Control-point grid of a clamped tensor-product B-spline surface.

    Attributes:
        points: Control points (count_u, count_v, 3)
        knots_u: Knot vector in u (count_u + degree_u + 1,)
        knots_v: Knot vector in v (count_v + degree_v + 1,)
        degree_u: Polynomial degree in u
        degree_v: Polynomial degree in v
        original: Snapshot of the grid before any displacement; taken
            from the current grid when not supplied
    """
    points: np.ndarray
    knots_u: np.ndarray
    knots_v: np.ndarray
    degree_u: int = DEFAULT_DEGREE
    degree_v: int = DEFAULT_DEGREE
    original: Optional[GridSnapshot] = field(default=None, repr=False)

    def __post_init__(self):
        self.points = np.array(self.points, dtype=np.float64)
        self.knots_u = np.array(self.knots_u, dtype=np.float64)
        self.knots_v = np.array(self.knots_v, dtype=np.float64)

        if self.points.ndim != 3 or self.points.shape[2] != 3:
            raise InvalidArgument(
                f"points must have shape (count_u, count_v, 3), got {self.points.shape}"
            )
        for name, count, degree, knots in (
            ("u", self.points.shape[0], self.degree_u, self.knots_u),
            ("v", self.points.shape[1], self.degree_v, self.knots_v),
        ):
            if degree < 1:
                raise InvalidArgument(f"degree_{name} must be >= 1")
            if count < max(MIN_POINT_COUNT, degree + 1):
                raise InvalidArgument(
                    f"count_{name} must be >= {max(MIN_POINT_COUNT, degree + 1)}, got {count}"
                )
            if len(knots) != count + degree + 1:
                raise InvalidArgument(
                    f"knots_{name} should have {count + degree + 1} elements, got {len(knots)}"
                )
            if np.any(np.diff(knots) < 0):
                raise InvalidArgument(f"knots_{name} must be non-decreasing")

        if self.original is None:
            self.original = self.snapshot()

    # === Construction ===

    @classmethod
    def from_points(cls, points: Sequence, degree: int = DEFAULT_DEGREE) -> "SurfaceGrid":
        """Grid with clamped uniform knots over the given control net."""
        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 3:
            raise InvalidArgument("points must be a (count_u, count_v, 3) grid")
        count_u, count_v = points.shape[:2]
        if min(count_u, count_v) < degree + 1:
            raise InvalidArgument(
                f"count_u and count_v must be >= {max(MIN_POINT_COUNT, degree + 1)}"
            )
        return cls(
            points=points,
            knots_u=bspline.clamped_uniform_knots(count_u, degree),
            knots_v=bspline.clamped_uniform_knots(count_v, degree),
            degree_u=degree,
            degree_v=degree,
        )

    @classmethod
    def plane(
        cls,
        origin: Sequence[float] = (0.0, 0.0, 0.0),
        x_size: float = 1.0,
        y_size: float = 1.0,
        count: int = MIN_POINT_COUNT,
        degree: int = DEFAULT_DEGREE
    ) -> "SurfaceGrid":
        """Flat rectangle in the XY plane with its minimum corner at origin.

        Args:
            origin: Minimum corner of the rectangle
            x_size: Extent along X
            y_size: Extent along Y
            count: Control points per direction
            degree: Polynomial degree in both directions

        Returns:
            Planar SurfaceGrid
        """
        xs = np.linspace(0.0, x_size, count)
        ys = np.linspace(0.0, y_size, count)
        X, Y = np.meshgrid(xs, ys, indexing='ij')
        points = np.stack([X, Y, np.zeros_like(X)], axis=-1)
        points += np.asarray(origin, dtype=np.float64)
        return cls.from_points(points, degree)

    @classmethod
    def from_snapshot(cls, snap: GridSnapshot) -> "SurfaceGrid":
        """Writable grid restored from a snapshot; the snapshot stays its original."""
        return cls(
            points=snap.points.copy(),
            knots_u=snap.knots_u.copy(),
            knots_v=snap.knots_v.copy(),
            degree_u=snap.degree_u,
            degree_v=snap.degree_v,
            original=snap,
        )

    # === Properties ===

    @property
    def count_u(self) -> int:
        return self.points.shape[0]

    @property
    def count_v(self) -> int:
        return self.points.shape[1]

    @property
    def domain_u(self) -> Tuple[float, float]:
        return bspline.knot_domain(self.knots_u, self.degree_u)

    @property
    def domain_v(self) -> Tuple[float, float]:
        return bspline.knot_domain(self.knots_v, self.degree_v)

    # === Control point access ===

    def _check_index(self, u: int, v: int) -> Tuple[int, int]:
        try:
            u, v = operator.index(u), operator.index(v)
        except TypeError:
            raise IndexOutOfRange(
                f"control point indices must be integers, got ({u!r}, {v!r})"
            ) from None
        if not (0 <= u < self.count_u and 0 <= v < self.count_v):
            raise IndexOutOfRange(
                f"control point ({u}, {v}) outside grid "
                f"{self.count_u}x{self.count_v}"
            )
        return u, v

    def get_point(self, u: int, v: int) -> np.ndarray:
        """Location of control point (u, v)."""
        u, v = self._check_index(u, v)
        return self.points[u, v].copy()

    def set_point(self, u: int, v: int, point: Sequence[float]) -> None:
        """Overwrite the location of control point (u, v)."""
        u, v = self._check_index(u, v)
        self.points[u, v] = np.asarray(point, dtype=np.float64)

    def move_point(self, u: int, v: int, offset: Sequence[float]) -> None:
        """Translate control point (u, v) by offset."""
        self.set_point(u, v, self.get_point(u, v) + np.asarray(offset, dtype=np.float64))

    def control_points(self) -> Iterator[Tuple[int, int, np.ndarray]]:
        """Yield (u, v, location) for every control point, u-major."""
        for u in range(self.count_u):
            for v in range(self.count_v):
                yield u, v, self.points[u, v].copy()

    # === Geometry ===

    def snapshot(self) -> GridSnapshot:
        return GridSnapshot.of(self.points, self.knots_u, self.knots_v,
                               self.degree_u, self.degree_v)

    def copy(self) -> "SurfaceGrid":
        return SurfaceGrid(
            points=self.points.copy(),
            knots_u=self.knots_u.copy(),
            knots_v=self.knots_v.copy(),
            degree_u=self.degree_u,
            degree_v=self.degree_v,
            original=self.original,
        )

    def rebase(self) -> "SurfaceGrid":
        """Copy whose original snapshot is this grid's current state."""
        return SurfaceGrid(
            points=self.points.copy(),
            knots_u=self.knots_u.copy(),
            knots_v=self.knots_v.copy(),
            degree_u=self.degree_u,
            degree_v=self.degree_v,
        )

    def restore_original(self) -> "SurfaceGrid":
        """New grid equal to the stored original."""
        return SurfaceGrid.from_snapshot(self.original)

    def bounding_box(self) -> BoundingBox:
        """Axis-aligned box over the control points.

        Control points bound the surface (convex hull property), so this
        can be looser than the surface's true extent.
        """
        flat = self.points.reshape(-1, 3)
        return BoundingBox(flat.min(axis=0), flat.max(axis=0))

    def evaluate(self, u_params: Sequence[float], v_params: Sequence[float]) -> np.ndarray:
        """Surface points on the parameter grid u_params x v_params.

        Returns:
            Points (len(u_params), len(v_params), 3)
        """
        return bspline.evaluate_surface(
            self.points, self.knots_u, self.knots_v,
            self.degree_u, self.degree_v,
            np.asarray(u_params, dtype=np.float64),
            np.asarray(v_params, dtype=np.float64),
        )

    def point_at(self, u_params: Sequence[float], v_params: Sequence[float]) -> np.ndarray:
        """Surface points at matching parameter pairs (u_i, v_i).

        Returns:
            Points (len(u_params), 3)
        """
        return bspline.evaluate_pairs(
            self.points, self.knots_u, self.knots_v,
            self.degree_u, self.degree_v,
            np.atleast_1d(np.asarray(u_params, dtype=np.float64)),
            np.atleast_1d(np.asarray(v_params, dtype=np.float64)),
        )

    def sample(self, n_u: int, n_v: int) -> np.ndarray:
        """Surface points on a uniform n_u x n_v parameter grid."""
        u = np.linspace(*self.domain_u, n_u)
        v = np.linspace(*self.domain_v, n_v)
        return self.evaluate(u, v)

    def rebuild(
        self,
        count_u: int,
        count_v: int,
        degree: Optional[int] = None
    ) -> "SurfaceGrid":
        """Resample the control net to count_u x count_v points.

        Growing a direction at the same degree inserts knots, which leaves
        the shape exactly unchanged. Shrinking, or changing the degree,
        refits a uniform spline by least squares. The original snapshot
        carries over.

        Args:
            count_u: New number of control points in u
            count_v: New number of control points in v
            degree: Degree in both directions (default: keep each degree)

        Returns:
            New SurfaceGrid
        """
        degree_u = self.degree_u if degree is None else degree
        degree_v = self.degree_v if degree is None else degree
        if degree_u < 1 or degree_v < 1:
            raise InvalidArgument(f"rebuild degree must be >= 1, got {degree}")

        for name, count, target in (("u", count_u, degree_u),
                                    ("v", count_v, degree_v)):
            if count < max(MIN_POINT_COUNT, target + 1):
                raise InvalidArgument(
                    f"rebuild count_{name} must be >= {max(MIN_POINT_COUNT, target + 1)}, got {count}"
                )

        knots_u, points = self._resample_axis(
            self.knots_u, self.points, self.degree_u, count_u, degree_u)

        # Work along v by moving it to the front
        knots_v, moved = self._resample_axis(
            self.knots_v, np.swapaxes(points, 0, 1), self.degree_v, count_v, degree_v)
        points = np.swapaxes(moved, 0, 1)

        if not np.all(np.isfinite(points)):
            raise GeometryUnavailable(
                f"rebuild to {count_u}x{count_v} produced non-finite control points"
            )

        logger.debug("Surface rebuilt",
                     from_counts=(self.count_u, self.count_v),
                     to_counts=(count_u, count_v),
                     degrees=(degree_u, degree_v))

        return SurfaceGrid(
            points=np.ascontiguousarray(points),
            knots_u=knots_u,
            knots_v=knots_v,
            degree_u=degree_u,
            degree_v=degree_v,
            original=self.original,
        )

    @staticmethod
    def _resample_axis(knots, ctrl, degree, count, new_degree):
        if new_degree == degree and count >= ctrl.shape[0]:
            return bspline.refine(knots, ctrl, degree, count)
        return bspline.refit(knots, ctrl, degree, count, new_degree=new_degree)
