# gateway_world/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the scene
generator and its runtime. These values are used if they are not explicitly
provided by the user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC SCENE.
Instead, pass a configuration dictionary to the SceneGenerator instance.
================================================================================
"""

# --- Placement Randomness ---
# Fixed seed for the placement stream so every run scatters the forest the same way.
DEFAULT_PLACEMENT_SEED = 54321
# Offset applied to the placement seed for the dynamic-spawn stream, keeping it
# independent from the placement pass while still reproducible.
SPAWN_SEED_OFFSET = 7919

# --- Scatter Region (world units) ---
TREE_COUNT = 200
MUSHROOM_COUNT = 150
SPREAD = 20.0
MIN_DISTANCE_FROM_CENTER_TREES = 5.0
MIN_DISTANCE_FROM_GATEWAY_CENTER = 1.0
# Mushrooms stay inside this fraction of SPREAD so they cluster near the gateway.
MUSHROOM_MAX_DISTANCE_FACTOR = 0.9
# Upper bound on rejected candidates for a single instance (Rule 8).
MAX_PLACEMENT_ATTEMPTS = 100000

# --- Per-Variant Scale Ranges [low, high) ---
DECIDUOUS_SCALE_RANGE = (0.8, 1.2)
CONIFEROUS_SCALE_RANGE = (0.7, 1.1)
MUSHROOM_SCALE_RANGE = (0.5, 1.5)

# --- Terrain ---
GROUND_SIZE = 100.0
GROUND_SEGMENTS = 64
TERRAIN_MAX_HEIGHT = 3.5
TERRAIN_BASE_FREQUENCY = 0.04
TERRAIN_OCTAVES = 5
TERRAIN_PERSISTENCE = 0.45
TERRAIN_LACUNARITY = 2.1

# --- Lighting & Day/Night Cycle ---
LIGHT_ORBIT_RADIUS = 25.0
DAY_CYCLE_DURATION = 60.0    # seconds
NIGHT_CYCLE_DURATION = 45.0  # seconds
INITIAL_IS_DAYTIME = True
# Start mid-morning.
INITIAL_CYCLE_PROGRESS = 0.25
INITIAL_TIME_SCALE = 1.0

# Normalized-height band over which a celestial body fades in.
CELESTIAL_FADE_START = 0.05
CELESTIAL_FADE_END = 0.15
# World-space height at or below which the active body is hidden outright.
CELESTIAL_HIDE_HEIGHT = -0.1
CELESTIAL_MIN_SCALE = 0.5
SUN_SCALE_FACTOR = 1.2
MOON_SCALE_FACTOR = 1.0
CELESTIAL_SCALE_BIAS = 0.1

# --- Dynamic Mushroom Spawning ---
MAX_SPAWNED_MUSHROOMS = 50
PORTAL_POSITION = (0.0, 1.5, 0.0)
SPAWN_HEIGHT_OFFSET = 0.5

# --- Baking ---
PREVIEW_RESOLUTION = 512
