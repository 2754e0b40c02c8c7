# gateway_world/runtime/world.py

"""
================================================================================
WORLD RUNTIME
================================================================================
This module provides the user-facing `World` class, the main interface for a
running gateway scene. It runs the one-shot generation pass and then owns the
per-tick state: the scene clock, the day/night cycle and the mushroom spawner.

Rendering stays with the caller: each update() returns a LightingState that
the renderer applies to its background, fog, lights and materials.
================================================================================
"""
import json
import logging
import os

from ..generator import GeneratedScene, SceneGenerator
from ..mushrooms import MushroomSpawner, SpawnedMushroom
from ..terrain import GroundMesh
from .clock import SceneClock
from .day_night_cycle import CyclePhase, DayNightCycle, LightingState

GENERATION_CONFIG_FILENAME = "generation_config.json"


class World:
    """
    The main runtime class for a gateway scene. Handles generation, time and lighting.
    """
    def __init__(self, config: dict, logger: logging.Logger = None):
        """
        Initializes the World and generates its static content.

        Args:
            config (dict): Scene parameters overriding the defaults.
            logger (logging.Logger, optional): Logger for the generator.
        """
        self.logger = logging.getLogger(__name__)
        self.logger.info("Initializing world...")

        # --- 1. Generate the Static Scene ---
        self.generator = SceneGenerator(config, logger or self.logger)
        self.settings = self.generator.settings
        self.height_field = self.generator.height_field
        self.scene: GeneratedScene = self.generator.generate()
        self._ground = None  # Built on demand

        # --- 2. Initialize Core Components (Rule 7 - Composition) ---
        self.clock = SceneClock(config)
        self.day_night_cycle = DayNightCycle(self.settings)
        self.spawner = MushroomSpawner(
            self.generator.create_spawn_prng(),
            self.height_field,
            portal_position=tuple(self.settings['portal_position']),
            max_spawned=self.settings['max_spawned_mushrooms'],
        )

        self.logger.info(f"World ready; starting in {self.day_night_cycle.phase.name}.")

    @classmethod
    def from_package(cls, package_path: str, logger: logging.Logger = None) -> 'World':
        """
        Rebuilds a world from a baked package's generation_config.json.
        The result is identical to the world that was baked.
        """
        config_path = os.path.join(package_path, GENERATION_CONFIG_FILENAME)
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Could not find '{GENERATION_CONFIG_FILENAME}' in '{package_path}'")

        with open(config_path, 'r') as f:
            config = json.load(f)
        return cls(config, logger=logger)

    @property
    def ground(self) -> GroundMesh:
        if self._ground is None:
            self._ground = self.generator.build_ground()
        return self._ground

    @property
    def phase(self) -> CyclePhase:
        return self.day_night_cycle.phase

    def update(self, real_delta_time: float) -> LightingState:
        """
        Advances the world by one frame and returns the lighting to apply.

        Args:
            real_delta_time (float): Real-world seconds since the last frame.
        """
        scene_delta_time = self.clock.update(real_delta_time)
        self.day_night_cycle.advance(scene_delta_time)
        return self.day_night_cycle.lighting_state()

    def lighting_state(self) -> LightingState:
        return self.day_night_cycle.lighting_state()

    # --- Public API for User Control ---
    def toggle_day_night(self) -> LightingState:
        """Switches between day and night immediately."""
        self.day_night_cycle.toggle()
        return self.day_night_cycle.lighting_state()

    def spawn_mushroom(self) -> SpawnedMushroom:
        return self.spawner.spawn()

    def set_game_speed(self, new_scale: float):
        """
        Sets the speed of scene time.
        0 = paused, 1 = real-time, > 1 = fast-forward.
        """
        self.clock.set_speed(new_scale)
        self.logger.info(f"Scene speed set to {new_scale}x.")

    def get_time_string(self) -> str:
        return self.clock.get_time_string()
