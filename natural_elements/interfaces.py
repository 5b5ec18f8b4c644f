"""Shared interface dataclasses passed between the surface kernel, terrain and scene."""
from dataclasses import dataclass, field
from typing import Any, List, Tuple
import numpy as np
from numpy.typing import NDArray


@dataclass
class BoundingBox:
    """Axis-aligned bounding box.

    Attributes:
        min_point: Minimum corner (3,)
        max_point: Maximum corner (3,)
    """
    min_point: NDArray[np.float64]
    max_point: NDArray[np.float64]

    @property
    def center(self) -> NDArray[np.float64]:
        return 0.5 * (self.min_point + self.max_point)

    @property
    def diagonal(self) -> NDArray[np.float64]:
        return self.max_point - self.min_point

    def point_at(self, tx: float, ty: float, tz: float) -> NDArray[np.float64]:
        """Point at normalized box coordinates (0 = min, 1 = max per axis)."""
        t = np.array([tx, ty, tz], dtype=np.float64)
        return self.min_point + t * self.diagonal

    def face_point(self, direction: NDArray[np.float64]) -> NDArray[np.float64]:
        """Point where the box's support plane in `direction` meets the
        line through the centre along `direction`.

        For direction (0, 0, -1) this is the centre of the bottom face.

        Args:
            direction: Unit vector

        Returns:
            Point on the box boundary (3,)
        """
        half = 0.5 * self.diagonal
        reach = float(np.dot(np.abs(direction), half))
        return self.center + reach * direction

    def contains(self, point: NDArray[np.float64], tol: float = 1e-9) -> bool:
        return bool(np.all(point >= self.min_point - tol) and
                    np.all(point <= self.max_point + tol))


@dataclass
class IntersectionResult:
    """Surface/plane intersection output.

    Attributes:
        curves: Polylines (N_i, 3) along the intersection
        points: Isolated intersection points (M, 3)
    """
    curves: List[NDArray[np.float64]]
    points: NDArray[np.float64] = field(
        default_factory=lambda: np.empty((0, 3))
    )

    @property
    def closed_curves(self) -> List[NDArray[np.float64]]:
        """Curves whose end point meets the start point."""
        return [c for c in self.curves
                if len(c) > 2 and np.allclose(c[0], c[-1])]


def _polygon_area(loop: NDArray[np.float64]) -> float:
    """Area of a planar 3-D polygon (Newell's method)."""
    closed = np.vstack([loop, loop[:1]])
    cross = np.cross(closed[:-1], closed[1:]).sum(axis=0)
    return 0.5 * float(np.linalg.norm(cross))


@dataclass
class WaterSurface:
    """Planar water patch bounded by a terrain/water-plane intersection.

    Attributes:
        level: Water height relative to the terrain base point
        boundary: Outer loop (N, 3) lying in the water plane
        holes: Inner loops (islands), each (M, 3)
    """
    level: float
    boundary: NDArray[np.float64]
    holes: List[NDArray[np.float64]] = field(default_factory=list)

    def area(self) -> float:
        """Planar area of the boundary minus its holes."""
        return _polygon_area(self.boundary) - sum(
            _polygon_area(h) for h in self.holes
        )


@dataclass
class SceneObject:
    """Object stored in a scene sink.

    Attributes:
        handle: Opaque identifier handed back to callers
        kind: "surface", "water" or "point"
        geometry: Stored geometry (SurfaceGrid, WaterSurface or point array)
        color: RGB display colour
    """
    handle: str
    kind: str
    geometry: Any
    color: Tuple[int, int, int] = (0, 0, 0)
