"""End-to-end natural terrain command: terrain height, then water level."""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import structlog

from .config import TerrainConfig
from .errors import InvalidArgument, UserCancelled
from .interfaces import WaterSurface
from .scene import Scene
from .surface.grid import SurfaceGrid
from .terrain.generator import Terrain, TerrainGenerator
from .terrain.scaling import DirectionalScaler
from .terrain.water import preview_water_surfaces, water_level_from_pick, water_surfaces

logger = structlog.get_logger()


@dataclass
class WaterResult:
    """Committed water surfaces."""
    level: float
    surfaces: List[WaterSurface]
    handles: List[str] = field(default_factory=list)


@dataclass
class CommandResult:
    """Complete command results."""
    terrain: Terrain
    terrain_handle: str
    water: WaterResult


class NaturalTerrainCommand:
    """Drive the terrain command over a scene without an interactive host.

    Point picks arrive as plain 3-D points already constrained to the
    vertical line through the terrain base point.

    Typical use:
        command = NaturalTerrainCommand(scene, config)
        command.begin(surface_handle)
        command.preview_height(point)      # any number of frames
        command.commit_height(point)
        command.preview_water(point)       # any number of frames
        command.commit_water(point)
    """

    def __init__(self, scene: Scene, config: Optional[TerrainConfig] = None):
        self.config = config or TerrainConfig()
        errors = self.config.validate()
        if errors:
            raise InvalidArgument("; ".join(errors))

        self.scene = scene
        self.terrain: Optional[Terrain] = None
        self.terrain_handle: Optional[str] = None
        self._preview: Optional[Terrain] = None
        self._scaler: Optional[DirectionalScaler] = None
        self._source_deleted = False

    def _generator(self) -> TerrainGenerator:
        # Same seed for preview and final terrain so the committed shape
        # matches the last preview frame
        return TerrainGenerator(
            decay_rate=self.config.decay_rate,
            buffer=self.config.buffer,
            rng=self.config.seed,
        )

    def _new_terrain(self, grid: SurfaceGrid, height: float) -> Terrain:
        return Terrain(
            grid,
            height,
            vertical_axis=np.array(self.config.vertical_axis),
            decay_rate=self.config.decay_rate,
        )

    def _require(self, stage: str) -> Terrain:
        if self.terrain is None:
            raise InvalidArgument(f"{stage} called before begin()")
        return self.terrain

    # === Height ===

    def begin(self, surface_handle: str) -> Terrain:
        """Take the selected surface out of the scene and prepare previews."""
        obj = self.scene.get(surface_handle)
        if obj.kind != "surface":
            raise InvalidArgument(f"selected object is a {obj.kind}, not a surface")

        self.terrain = self._new_terrain(obj.geometry, 0.0)
        self.scene.delete(surface_handle)
        self._source_deleted = True

        self._preview = self._new_terrain(obj.geometry, self.config.reference_height)
        self._generator().generate(self._preview, self.config.generation_count)
        self._scaler = DirectionalScaler(self.terrain.base_point, self.terrain.vertical_axis)

        logger.info("Terrain command started",
                    base_point=self.terrain.base_point.tolist(),
                    generations=self.config.generation_count)
        return self.terrain

    def height_for(self, picked_point: Sequence[float]) -> float:
        terrain = self._require("height_for")
        return float(np.linalg.norm(np.asarray(picked_point, dtype=np.float64) - terrain.base_point))

    def preview_height(self, picked_point: Sequence[float]) -> SurfaceGrid:
        """Preview surface for a candidate height pick.

        The transient preview terrain is scaled along the vertical axis by
        height / reference_height; the stored preview is left untouched.
        """
        self._require("preview_height")
        if self._preview is None:
            raise InvalidArgument("height already committed")

        factor = self.height_for(picked_point) / self.config.reference_height
        return self._scaler.scale(self._preview.surface, factor)

    def commit_height(self, picked_point: Sequence[float]) -> Terrain:
        """Generate the final terrain at the picked height and add it to the scene."""
        terrain = self._require("commit_height")
        if self.terrain_handle is not None:
            raise InvalidArgument("height already committed")
        terrain.height = self.height_for(picked_point)
        self._generator().generate(terrain, self.config.generation_count)

        self.terrain_handle = self.scene.add_surface(terrain.surface, self.config.terrain_color)
        self._preview = None

        logger.info("Terrain committed", height=terrain.height, handle=self.terrain_handle)
        return terrain

    # === Water ===

    def water_level(self, picked_point: Sequence[float]) -> float:
        terrain = self._require("water_level")
        return water_level_from_pick(
            terrain.base_point, picked_point, terrain.vertical_axis,
            self.config.water_divisor,
        )

    def preview_water(self, picked_point: Sequence[float]) -> List[WaterSurface]:
        """Water surfaces for a candidate level; empty when there are none."""
        terrain = self._require("preview_water")
        return preview_water_surfaces(
            terrain, self.water_level(picked_point), self.config.water_samples
        )

    def commit_water(self, picked_point: Sequence[float]) -> WaterResult:
        """Add water surfaces at the picked level to the scene and redraw."""
        terrain = self._require("commit_water")
        if self.terrain_handle is None:
            raise InvalidArgument("commit_water called before commit_height()")

        level = self.water_level(picked_point)
        surfaces = water_surfaces(terrain, level, self.config.water_samples)
        handles = [self.scene.add_water(s, self.config.water_color) for s in surfaces]
        self.scene.redraw()

        logger.info("Water committed", level=level, surfaces=len(surfaces))
        return WaterResult(level=level, surfaces=surfaces, handles=handles)

    # === Cancellation ===

    def cancel(self) -> Optional[str]:
        """Abandon the command.

        If the selected surface was removed and no terrain was committed,
        the original surface goes back into the scene.

        Returns:
            Handle of the restored surface, or None
        """
        restored = None
        if self._source_deleted and self.terrain_handle is None:
            restored = self.scene.add_surface(self.terrain.original_surface)
            logger.info("Terrain command cancelled, surface restored", handle=restored)
        self._preview = None
        self._source_deleted = False
        return restored


def run_natural_terrain(
    scene: Scene,
    surface_handle: str,
    height_point: Optional[Sequence[float]],
    water_point: Optional[Sequence[float]],
    config: Optional[TerrainConfig] = None
) -> CommandResult:
    """
    Execute the complete terrain command.

    Args:
        scene: Scene holding the selected flat surface
        surface_handle: Handle of that surface
        height_point: Picked terrain height point (None = pick aborted)
        water_point: Picked water level point (None = pick aborted)
        config: Command configuration

    Returns:
        CommandResult with the terrain and its water surfaces
    """
    command = NaturalTerrainCommand(scene, config)
    command.begin(surface_handle)

    if height_point is None:
        command.cancel()
        raise UserCancelled("terrain height pick aborted")
    terrain = command.commit_height(height_point)

    # The committed terrain stays in the scene if the water pick is aborted
    if water_point is None:
        raise UserCancelled("water level pick aborted")
    water = command.commit_water(water_point)

    return CommandResult(
        terrain=terrain,
        terrain_handle=command.terrain_handle,
        water=water,
    )
