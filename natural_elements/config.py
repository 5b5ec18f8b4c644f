"""Terrain command configuration management."""
from dataclasses import dataclass, asdict
from typing import List, Optional, Tuple, Union
from pathlib import Path
import yaml
import math


@dataclass
class TerrainConfig:
    """Configuration for the natural terrain command.

    Attributes:
        generation_count: Displacement generations for preview and final terrain
        decay_rate: Amplitude ratio between successive generations
        buffer: Edge rows/columns kept on the base surface
        reference_height: Height of the transient preview terrain
        water_divisor: Picked water offset is divided by this
        water_samples: Height-field resolution for water extraction
        vertical_axis: Terrain up direction
        seed: Random seed (None draws fresh entropy each run)
        terrain_color: RGB colour of the committed terrain
        water_color: RGB colour of committed water surfaces
    """

    # Generation
    generation_count: int = 10
    decay_rate: float = 0.769
    buffer: int = 3

    # Interactive preview
    reference_height: float = 5.0

    # Water
    water_divisor: float = 3.0
    water_samples: int = 64

    # Geometry
    vertical_axis: Tuple[float, float, float] = (0.0, 0.0, 1.0)

    # Reproducibility
    seed: Optional[int] = None

    # Display
    terrain_color: Tuple[int, int, int] = (34, 139, 34)  # forest green
    water_color: Tuple[int, int, int] = (0, 0, 255)

    def __post_init__(self):
        # YAML round-trips tuples as lists
        self.vertical_axis = tuple(float(c) for c in self.vertical_axis)
        self.terrain_color = tuple(int(c) for c in self.terrain_color)
        self.water_color = tuple(int(c) for c in self.water_color)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "TerrainConfig":
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        data = asdict(self)
        for key in ("vertical_axis", "terrain_color", "water_color"):
            data[key] = list(data[key])
        with open(path, 'w') as f:
            yaml.safe_dump(data, f, default_flow_style=False)

    def validate(self) -> List[str]:
        """Validate configuration parameters.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.generation_count < 0:
            errors.append("generation_count must be >= 0")

        if not (0 < self.decay_rate < 1):
            errors.append("decay_rate must be between 0 and 1")

        if self.buffer < 0:
            errors.append("buffer must be >= 0")

        if not (self.reference_height > 0 and math.isfinite(self.reference_height)):
            errors.append("reference_height must be positive")

        if not self.water_divisor > 0:
            errors.append("water_divisor must be positive")

        if self.water_samples < 2:
            errors.append("water_samples must be >= 2")

        if len(self.vertical_axis) != 3 or not any(self.vertical_axis):
            errors.append("vertical_axis must be a non-zero 3-vector")

        for name in ("terrain_color", "water_color"):
            color = getattr(self, name)
            if len(color) != 3 or not all(0 <= c <= 255 for c in color):
                errors.append(f"{name} must be three values in 0-255")

        return errors
