"""Shared pytest fixtures for all test modules."""
import pytest
import numpy as np
from pathlib import Path

# Add repository root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from natural_elements.config import TerrainConfig
from natural_elements.scene import Scene
from natural_elements.surface.grid import SurfaceGrid
from natural_elements.terrain.generator import Terrain


# === Configuration Fixtures ===

@pytest.fixture
def default_config():
    """Standard command configuration."""
    return TerrainConfig()


@pytest.fixture
def test_config():
    """Seeded config with fewer generations for faster tests."""
    return TerrainConfig(generation_count=4, seed=1234, water_samples=48)


# === Surface Fixtures ===

@pytest.fixture
def flat_square():
    """Flat 10 x 10 square in the XY plane, 4 x 4 control points."""
    return SurfaceGrid.plane((0.0, 0.0, 0.0), 10.0, 10.0)


@pytest.fixture
def wavy_grid():
    """Non-planar 6 x 5 grid with reproducible heights."""
    rng = np.random.default_rng(99)
    xs = np.linspace(0.0, 5.0, 6)
    ys = np.linspace(0.0, 4.0, 5)
    X, Y = np.meshgrid(xs, ys, indexing='ij')
    Z = rng.uniform(-1.0, 1.0, X.shape)
    return SurfaceGrid.from_points(np.stack([X, Y, Z], axis=-1))


# === Terrain Fixtures ===

@pytest.fixture
def bowl_terrain(flat_square):
    """Terrain on the flat square with a 2-unit depression in the middle.

    The base point stays on the flat square (z = 0), so any negative
    water level up to about -1 floods the depression.
    """
    terrain = Terrain(flat_square, height=0.0)
    terrain.surface = terrain.surface.rebuild(9, 9)
    for u in range(3, 6):
        for v in range(3, 6):
            terrain.surface.move_point(u, v, (0.0, 0.0, -2.0))
    return terrain


# === Scene Fixtures ===

@pytest.fixture
def scene_with_square(flat_square):
    """Scene holding the flat square; returns (scene, handle)."""
    scene = Scene()
    handle = scene.add_surface(flat_square)
    return scene, handle
