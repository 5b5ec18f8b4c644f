"""Procedural terrain and water-level generation over B-spline control grids."""
from .config import TerrainConfig
from .errors import (
    GeometryUnavailable,
    IndexOutOfRange,
    InvalidArgument,
    SceneError,
    UserCancelled,
)
from .interfaces import BoundingBox, IntersectionResult, WaterSurface, SceneObject
from .surface import SurfaceGrid
from .terrain import Terrain, TerrainGenerator, DirectionalScaler, scale_1d

__all__ = [
    "TerrainConfig",
    "GeometryUnavailable",
    "IndexOutOfRange",
    "InvalidArgument",
    "SceneError",
    "UserCancelled",
    "BoundingBox",
    "IntersectionResult",
    "WaterSurface",
    "SceneObject",
    "SurfaceGrid",
    "Terrain",
    "TerrainGenerator",
    "DirectionalScaler",
    "scale_1d",
]
