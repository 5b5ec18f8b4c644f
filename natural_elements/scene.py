"""In-memory scene document holding committed surfaces, water and points."""
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np
import structlog

from .errors import SceneError
from .interfaces import SceneObject, WaterSurface
from .surface.grid import SurfaceGrid

logger = structlog.get_logger()

Color = Tuple[int, int, int]


@dataclass
class Scene:
    """Scene document keyed by opaque handles.

    Callers only pass handles back; they never look inside them.
    """
    objects: Dict[str, SceneObject] = field(default_factory=dict)
    redraw_count: int = 0

    def _add(self, kind: str, geometry, color: Color) -> str:
        handle = uuid.uuid4().hex
        self.objects[handle] = SceneObject(
            handle=handle, kind=kind, geometry=geometry, color=tuple(color)
        )
        logger.debug("Scene object added", kind=kind, handle=handle)
        return handle

    def add_surface(self, grid: SurfaceGrid, color: Color = (0, 0, 0)) -> str:
        """Store a copy of grid and return its handle."""
        return self._add("surface", grid.copy(), color)

    def add_water(self, water: WaterSurface, color: Color = (0, 0, 255)) -> str:
        return self._add("water", water, color)

    def add_point(self, point, color: Color = (0, 0, 0)) -> str:
        return self._add("point", np.asarray(point, dtype=np.float64).copy(), color)

    def get(self, handle: str) -> SceneObject:
        try:
            return self.objects[handle]
        except KeyError:
            raise SceneError(f"no scene object with handle {handle!r}") from None

    def delete(self, handle: str) -> None:
        """Remove an object; unknown handles raise SceneError."""
        if handle not in self.objects:
            raise SceneError(f"cannot delete unknown handle {handle!r}")
        kind = self.objects.pop(handle).kind
        logger.debug("Scene object deleted", kind=kind, handle=handle)

    def of_kind(self, kind: str) -> List[SceneObject]:
        return [obj for obj in self.objects.values() if obj.kind == kind]

    def redraw(self) -> None:
        self.redraw_count += 1


def mark_control_points(scene: Scene, grid: SurfaceGrid, color: Color = (0, 0, 0)) -> List[str]:
    """Add every control point of grid to the scene as a point object."""
    return [scene.add_point(point, color) for _, _, point in grid.control_points()]
