"""Terrain generation, directional scaling and water-level modules."""
from .generator import (
    DECAY_RATE,
    EDGE_BUFFER,
    Terrain,
    TerrainGenerator,
    generate_terrain,
    point_count,
)
from .scaling import (
    DirectionalScaler,
    scale_1d,
)
from .water import (
    intersect_with_level,
    preview_water_surfaces,
    water_level_from_pick,
    water_surfaces,
)

__all__ = [
    'DECAY_RATE',
    'EDGE_BUFFER',
    'Terrain',
    'TerrainGenerator',
    'generate_terrain',
    'point_count',
    'DirectionalScaler',
    'scale_1d',
    'intersect_with_level',
    'preview_water_surfaces',
    'water_level_from_pick',
    'water_surfaces',
]
