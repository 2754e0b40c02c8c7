# gateway_world/generator.py

"""
================================================================================
CORE SCENE GENERATOR
================================================================================
This module contains the main SceneGenerator class, responsible for creating
and providing access to the static scene data: the terrain surface, the forest
and the mushroom patch around the gateway.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of scene parameters which can override
      the internal defaults. Expected keys include 'placement_seed',
      'tree_count', 'spread', 'terrain_octaves', etc.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - HeightField queries, a GroundMesh, and a GeneratedScene holding the
      forest and mushroom patch.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed and configuration, the output is deterministic.
================================================================================
"""

import logging
import time
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from . import forest
from . import mushrooms
from .errors import ConfigurationError
from .prng import SeededRandom, get_placement_prng
from .terrain import GroundMesh, HeightField


@dataclass(frozen=True)
class GeneratedScene:
    forest: forest.Forest
    mushrooms: mushrooms.MushroomPatch

    def batches(self) -> dict[str, np.ndarray]:
        """All render batches of the scene, keyed by batch name."""
        result = dict(self.forest.batches())
        result.update(self.mushrooms.batches())
        return result


class SceneGenerator:
    """
    Generates and manages the static data for one gateway scene.
    This class is backend-only and does not handle any visualization.
    """
    def __init__(self, config: dict, logger: logging.Logger):
        """
        Initializes the scene generator.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
        """
        self.logger = logger
        self.user_config = config
        self.logger.info("SceneGenerator initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'placement_seed': self.user_config.get('placement_seed', DEFAULTS.DEFAULT_PLACEMENT_SEED),
            'spawn_seed_offset': self.user_config.get('spawn_seed_offset', DEFAULTS.SPAWN_SEED_OFFSET),

            'tree_count': self.user_config.get('tree_count', DEFAULTS.TREE_COUNT),
            'mushroom_count': self.user_config.get('mushroom_count', DEFAULTS.MUSHROOM_COUNT),
            'spread': self.user_config.get('spread', DEFAULTS.SPREAD),
            'min_distance_trees': self.user_config.get('min_distance_trees', DEFAULTS.MIN_DISTANCE_FROM_CENTER_TREES),
            'min_distance_mushrooms': self.user_config.get('min_distance_mushrooms', DEFAULTS.MIN_DISTANCE_FROM_GATEWAY_CENTER),
            'mushroom_max_distance_factor': self.user_config.get('mushroom_max_distance_factor', DEFAULTS.MUSHROOM_MAX_DISTANCE_FACTOR),
            'max_placement_attempts': self.user_config.get('max_placement_attempts', DEFAULTS.MAX_PLACEMENT_ATTEMPTS),

            'ground_size': self.user_config.get('ground_size', DEFAULTS.GROUND_SIZE),
            'ground_segments': self.user_config.get('ground_segments', DEFAULTS.GROUND_SEGMENTS),
            'terrain_max_height': self.user_config.get('terrain_max_height', DEFAULTS.TERRAIN_MAX_HEIGHT),
            'terrain_base_frequency': self.user_config.get('terrain_base_frequency', DEFAULTS.TERRAIN_BASE_FREQUENCY),
            'terrain_octaves': self.user_config.get('terrain_octaves', DEFAULTS.TERRAIN_OCTAVES),
            'terrain_persistence': self.user_config.get('terrain_persistence', DEFAULTS.TERRAIN_PERSISTENCE),
            'terrain_lacunarity': self.user_config.get('terrain_lacunarity', DEFAULTS.TERRAIN_LACUNARITY),

            'light_orbit_radius': self.user_config.get('light_orbit_radius', DEFAULTS.LIGHT_ORBIT_RADIUS),
            'day_duration': self.user_config.get('day_duration', DEFAULTS.DAY_CYCLE_DURATION),
            'night_duration': self.user_config.get('night_duration', DEFAULTS.NIGHT_CYCLE_DURATION),
            'initial_is_daytime': self.user_config.get('initial_is_daytime', DEFAULTS.INITIAL_IS_DAYTIME),
            'initial_cycle_progress': self.user_config.get('initial_cycle_progress', DEFAULTS.INITIAL_CYCLE_PROGRESS),

            'max_spawned_mushrooms': self.user_config.get('max_spawned_mushrooms', DEFAULTS.MAX_SPAWNED_MUSHROOMS),
            'portal_position': list(self.user_config.get('portal_position', DEFAULTS.PORTAL_POSITION)),
        }

        self._validate_settings()

        # --- Public Properties for easy access ---
        self.seed = self.settings['placement_seed']
        self.height_field = HeightField.from_settings(self.settings)

        self.logger.info(f"SceneGenerator initialized with placement seed: {self.seed}")
        self.logger.info(
            f"Scatter region: spread {self.settings['spread']}, "
            f"{self.settings['tree_count']} trees, {self.settings['mushroom_count']} mushrooms"
        )

    def _validate_settings(self):
        """Rejects settings that could never produce a scene."""
        if self.settings['terrain_octaves'] < 1:
            raise ConfigurationError(f"terrain_octaves must be at least 1, got {self.settings['terrain_octaves']}")
        if self.settings['ground_segments'] < 1:
            raise ConfigurationError(f"ground_segments must be at least 1, got {self.settings['ground_segments']}")
        if self.settings['ground_size'] <= 0:
            raise ConfigurationError(f"ground_size must be positive, got {self.settings['ground_size']}")
        if self.settings['day_duration'] <= 0 or self.settings['night_duration'] <= 0:
            raise ConfigurationError(
                f"Cycle durations must be positive, got day={self.settings['day_duration']}, "
                f"night={self.settings['night_duration']}"
            )
        if self.settings['max_spawned_mushrooms'] < 1:
            raise ConfigurationError(
                f"max_spawned_mushrooms must be at least 1, got {self.settings['max_spawned_mushrooms']}"
            )

    def get_elevation(self, x_coords: np.ndarray, z_coords: np.ndarray) -> np.ndarray:
        """Terrain elevation for arrays of world coordinates."""
        return self.height_field.height_grid(x_coords, z_coords)

    def build_ground(self) -> GroundMesh:
        """Samples the terrain on the configured ground grid."""
        return self.height_field.ground_mesh(self.settings['ground_size'], self.settings['ground_segments'])

    def create_placement_prng(self) -> SeededRandom:
        return get_placement_prng(self.settings['placement_seed'])

    def create_spawn_prng(self) -> SeededRandom:
        return SeededRandom(self.settings['placement_seed'] + self.settings['spawn_seed_offset'])

    def generate_forest(self, prng: SeededRandom) -> forest.Forest:
        return forest.create_forest(
            prng, self.height_field,
            tree_count=self.settings['tree_count'],
            spread=self.settings['spread'],
            min_distance=self.settings['min_distance_trees'],
            max_attempts=self.settings['max_placement_attempts'],
            logger=self.logger,
        )

    def generate_mushrooms(self, prng: SeededRandom) -> mushrooms.MushroomPatch:
        return mushrooms.create_mushroom_patch(
            prng, self.height_field,
            mushroom_count=self.settings['mushroom_count'],
            spread=self.settings['spread'],
            min_distance=self.settings['min_distance_mushrooms'],
            max_distance_factor=self.settings['mushroom_max_distance_factor'],
            max_attempts=self.settings['max_placement_attempts'],
            logger=self.logger,
        )

    def generate(self, prng: SeededRandom = None) -> GeneratedScene:
        """
        Runs the one-shot placement pass: trees first, then mushrooms, both on
        one stream. A fresh placement stream is created when none is given.
        """
        start_time = time.time()
        prng = prng if prng is not None else self.create_placement_prng()

        scene_forest = self.generate_forest(prng)
        scene_mushrooms = self.generate_mushrooms(prng)

        end_time = time.time()
        self.logger.info(f"Scene generation complete in {end_time - start_time:.2f} seconds.")
        return GeneratedScene(forest=scene_forest, mushrooms=scene_mushrooms)
