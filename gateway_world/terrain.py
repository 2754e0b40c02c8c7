# gateway_world/terrain.py

"""
================================================================================
HEIGHT FIELD
================================================================================
This module provides the HeightField class: a grid-free terrain surface that
can be queried at any real (x, z). Placement queries it off-grid for each
candidate position; ground-mesh construction samples it on a regular grid.

Data Contract:
---------------
- Inputs (on initialization):
    - max_height, base_frequency, octaves, persistence, lacunarity: fBm
      parameters. All have defaults from gateway_world.config.
- Public Methods:
    - height(x, z): Elevation at a single point.
    - height_grid(x_coords, z_coords): Elevation for arrays of coordinates.
    - ground_mesh(size, segments): Regular grid of vertices with normals.
- Side Effects: None.
- Invariants: Pure and deterministic. There is no seed; the same (x, z)
  always yields the same height, whatever the caller's state.
================================================================================
"""
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from . import noise


@dataclass(frozen=True)
class GroundMesh:
    """
    A regular grid of ground vertices.

    positions has shape (segments + 1, segments + 1, 3) holding world (x, y, z);
    normals has the same shape and holds unit vertex normals.
    """
    positions: np.ndarray
    normals: np.ndarray

    @property
    def vertex_count(self) -> int:
        return self.positions.shape[0] * self.positions.shape[1]


class HeightField:
    """Multi-octave value-noise terrain elevation."""

    def __init__(
        self,
        max_height: float = DEFAULTS.TERRAIN_MAX_HEIGHT,
        base_frequency: float = DEFAULTS.TERRAIN_BASE_FREQUENCY,
        octaves: int = DEFAULTS.TERRAIN_OCTAVES,
        persistence: float = DEFAULTS.TERRAIN_PERSISTENCE,
        lacunarity: float = DEFAULTS.TERRAIN_LACUNARITY,
    ):
        self.max_height = float(max_height)
        self.base_frequency = float(base_frequency)
        self.octaves = int(octaves)
        self.persistence = float(persistence)
        self.lacunarity = float(lacunarity)

    @classmethod
    def from_settings(cls, settings: dict) -> 'HeightField':
        """Builds a height field from a consolidated settings dictionary."""
        return cls(
            max_height=settings['terrain_max_height'],
            base_frequency=settings['terrain_base_frequency'],
            octaves=settings['terrain_octaves'],
            persistence=settings['terrain_persistence'],
            lacunarity=settings['terrain_lacunarity'],
        )

    def height(self, x: float, z: float) -> float:
        """Returns the terrain elevation at world coordinate (x, z)."""
        return noise.fbm_height(
            float(x), float(z),
            self.base_frequency, self.octaves,
            self.persistence, self.lacunarity, self.max_height
        )

    def height_grid(self, x_coords: np.ndarray, z_coords: np.ndarray) -> np.ndarray:
        """
        Returns elevations for arrays of coordinates.
        Inputs may have any matching shape; the output has that same shape.
        """
        x_arr = np.asarray(x_coords, dtype=np.float64)
        z_arr = np.asarray(z_coords, dtype=np.float64)
        if x_arr.shape != z_arr.shape:
            raise ValueError(f"Coordinate shapes differ: {x_arr.shape} vs {z_arr.shape}")

        # The compiled kernel works on 2D arrays only.
        x_2d = np.ascontiguousarray(x_arr.reshape(1, -1))
        z_2d = np.ascontiguousarray(z_arr.reshape(1, -1))
        heights = noise.fbm_height_grid(
            x_2d, z_2d,
            self.base_frequency, self.octaves,
            self.persistence, self.lacunarity, self.max_height
        )
        return heights.reshape(x_arr.shape)

    def get_coordinate_grid(self, size: float, segments: int) -> tuple[np.ndarray, np.ndarray]:
        """
        Generates the (x, z) grid of a size x size plane centred on the origin,
        split into segments x segments quads. Row index runs along z.
        """
        half = size / 2.0
        coords = np.linspace(-half, half, segments + 1)
        x_grid, z_grid = np.meshgrid(coords, coords)
        return x_grid, z_grid

    def ground_mesh(
        self,
        size: float = DEFAULTS.GROUND_SIZE,
        segments: int = DEFAULTS.GROUND_SEGMENTS
    ) -> GroundMesh:
        """
        Samples the height field on a regular grid and derives vertex normals
        from the surface gradient.
        """
        x_grid, z_grid = self.get_coordinate_grid(size, segments)
        y_grid = self.height_grid(x_grid, z_grid)

        # Gradient along rows (z) and columns (x), in world units.
        spacing = size / segments
        dy_dz, dy_dx = np.gradient(y_grid, spacing)

        # The normal of y = f(x, z) is (-df/dx, 1, -df/dz), normalized.
        normals = np.stack([-dy_dx, np.ones_like(y_grid), -dy_dz], axis=-1)
        normals /= np.linalg.norm(normals, axis=-1, keepdims=True)

        positions = np.stack([x_grid, y_grid, z_grid], axis=-1)
        return GroundMesh(positions=positions, normals=normals)
