"""
Procedural Terrain Generation

Sculpts a surface's control net over successive generations. Each
generation rebuilds the grid two points denser and lifts or lowers every
interior control point by an amplitude that decays geometrically, so
detail gets finer and smaller while the edge band stays on the base
surface.
"""
import numpy as np
import structlog
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from ..errors import InvalidArgument
from ..surface.grid import DEFAULT_DEGREE, GridSnapshot, SurfaceGrid
from .scaling import scale_1d, unit_vector

logger = structlog.get_logger()

DECAY_RATE = 0.769
EDGE_BUFFER = 3
Z_AXIS = (0.0, 0.0, 1.0)

RandomSource = Union[None, int, np.random.Generator]


def point_count(generation: int) -> int:
    """Control points per direction after rebuilding for a generation."""
    return 2 * (generation + 1) + 5


def as_generator(rng: RandomSource) -> np.random.Generator:
    """Accept a Generator, an integer seed or None (fresh entropy)."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


@dataclass(eq=False)
class Terrain:
    """Terrain surface under construction.

    Attributes:
        surface: Current (possibly displaced) grid
        height: Target total relief
        vertical_axis: Displacement direction, normalized on construction
        decay_rate: Amplitude ratio between successive generations
        base_point: Support point of the initial bounding box in the
            downward direction; computed once, never updated
    """
    surface: SurfaceGrid
    height: float = 0.0
    vertical_axis: np.ndarray = field(default_factory=lambda: np.array(Z_AXIS))
    decay_rate: float = DECAY_RATE
    base_point: np.ndarray = field(init=False)
    _original: GridSnapshot = field(init=False, repr=False)

    def __post_init__(self):
        self.vertical_axis = unit_vector(self.vertical_axis)
        self.surface = self.surface.rebase()
        self._original = self.surface.original
        self.base_point = self.surface.bounding_box().face_point(-self.vertical_axis)

    @property
    def original_surface(self) -> SurfaceGrid:
        """Fresh copy of the surface the terrain was built from."""
        return SurfaceGrid.from_snapshot(self._original)

    def generate(self, generation_count: int = 1, rng: RandomSource = None) -> None:
        """Run the displacement generations in place (see TerrainGenerator)."""
        TerrainGenerator(decay_rate=self.decay_rate, rng=rng).generate(
            self, generation_count
        )

    def scale_1d(
        self,
        base_point: Sequence[float],
        direction: Sequence[float],
        factor: float
    ) -> None:
        """Replace the surface with its directional scale.

        A zero factor restores the original surface.
        """
        if factor == 0:
            self.surface = self.original_surface
            return
        self.surface = scale_1d(self.surface, base_point, direction, factor)

    def relief(self) -> np.ndarray:
        """Control point heights above the base point along the vertical axis.

        Returns:
            Heights (count_u, count_v)
        """
        return (self.surface.points - self.base_point) @ self.vertical_axis


class TerrainGenerator:
    """Recursive undulation generator.

    Attributes:
        decay_rate: Amplitude ratio between successive generations
        buffer: Rows/columns on every edge that are never displaced
        rng: Source of the per-point sign flips
    """

    def __init__(
        self,
        decay_rate: float = DECAY_RATE,
        buffer: int = EDGE_BUFFER,
        rng: RandomSource = None
    ):
        if buffer < 0:
            raise InvalidArgument(f"buffer must be >= 0, got {buffer}")
        self.decay_rate = decay_rate
        self.buffer = buffer
        self.rng = as_generator(rng)

    def generate(self, terrain: Terrain, generation_count: int) -> None:
        """Sculpt terrain.surface over generation_count generations.

        Generation g rebuilds the grid to point_count(g) per direction at
        degree 2 and moves every interior point by height * (1 - decay) * decay**g along
        the vertical axis. From the second generation on, each point's
        sign is flipped with probability 0.5.

        Args:
            terrain: Terrain to modify in place
            generation_count: Number of generations (0 leaves it unchanged)
        """
        if generation_count < 0:
            raise InvalidArgument(
                f"generation_count must be >= 0, got {generation_count}"
            )

        start_height = terrain.height * (1 - self.decay_rate)
        logger.info("Generating terrain",
                    generations=generation_count,
                    height=terrain.height)

        for gen in range(generation_count):
            count = point_count(gen)
            terrain.surface = terrain.surface.rebuild(count, count, degree=DEFAULT_DEGREE)

            amplitude = start_height * self.decay_rate ** gen
            self._displace_interior(terrain, gen, amplitude)

            logger.debug("Generation complete",
                         generation=gen,
                         point_count=count,
                         amplitude=amplitude)

        logger.info("Terrain generated",
                    count_u=terrain.surface.count_u,
                    count_v=terrain.surface.count_v)

    def _displace_interior(self, terrain: Terrain, gen: int, amplitude: float) -> None:
        grid = terrain.surface
        lo_u, hi_u = self.buffer, grid.count_u - self.buffer
        lo_v, hi_v = self.buffer, grid.count_v - self.buffer

        # Empty interior: nothing to move this generation
        if hi_u <= lo_u or hi_v <= lo_v:
            return

        shape = (hi_u - lo_u, hi_v - lo_v)
        heights = np.full(shape, amplitude)
        if gen != 0:
            flips = self.rng.random(shape) > 0.5
            heights[flips] = -amplitude

        grid.points[lo_u:hi_u, lo_v:hi_v] += heights[..., np.newaxis] * terrain.vertical_axis


def generate_terrain(
    terrain: Terrain,
    generation_count: int,
    rng: RandomSource = None
) -> Terrain:
    """Run TerrainGenerator on terrain and return it."""
    TerrainGenerator(decay_rate=terrain.decay_rate, rng=rng).generate(
        terrain, generation_count
    )
    return terrain
