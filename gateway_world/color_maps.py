# gateway_world/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module contains the day and night colour palettes and the helpers that
turn terrain heights into RGB arrays for baked previews.

It is a pure, stateless utility with no rendering dependencies, so both the
runtime and the offline baker script can use it.
================================================================================
"""
import numpy as np

from . import config as DEFAULTS


def hex_to_rgb(value: int) -> tuple[int, int, int]:
    """Converts a 0xRRGGBB integer to an (R, G, B) tuple."""
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


# --- Phase Palettes (Rule 1) ---
DAY_PALETTE = {
    "background": hex_to_rgb(0x87CEEB),
    "fog_color": hex_to_rgb(0xCCE0FF),
    "fog_near": 10.0,
    "fog_far": 50.0,
    "ambient_light_intensity": 0.5,
    "directional_light_intensity": 0.8,
    "directional_light_color": hex_to_rgb(0xFFFFFF),
    "ground_color": hex_to_rgb(0x8FBC8F),
    "trunk_color": hex_to_rgb(0xA0522D),
    "deciduous_foliage_color": hex_to_rgb(0x556B2F),
    "coniferous_foliage_color": hex_to_rgb(0x228B22),
}

NIGHT_PALETTE = {
    "background": hex_to_rgb(0x0A0A20),
    "fog_color": hex_to_rgb(0x0A0A20),
    "fog_near": 25.0,
    "fog_far": 70.0,
    "ambient_light_intensity": 0.5,
    "directional_light_intensity": 0.8,
    "directional_light_color": hex_to_rgb(0xC0C0FF),
    "ground_color": hex_to_rgb(0x6A7F6A),
    "trunk_color": hex_to_rgb(0xA06A35),
    "deciduous_foliage_color": hex_to_rgb(0x4E8B57),
    "coniferous_foliage_color": hex_to_rgb(0x208420),
}


# --- Preview Colours ---
COLOR_MAP_HEIGHT = {
    "low": (46, 79, 46),
    "mid": hex_to_rgb(0x8FBC8F),
    "high": (196, 190, 160),
}
COLOR_TREE = hex_to_rgb(0x228B22)
COLOR_MUSHROOM = (200, 40, 40)


def create_height_lut() -> np.ndarray:
    """Creates a 256-entry colour LUT running low -> mid -> high."""
    t = np.linspace(0.0, 1.0, 256)[..., np.newaxis]
    low = np.array(COLOR_MAP_HEIGHT["low"], dtype=np.float64)
    mid = np.array(COLOR_MAP_HEIGHT["mid"], dtype=np.float64)
    high = np.array(COLOR_MAP_HEIGHT["high"], dtype=np.float64)

    lower_half = low + (mid - low) * np.clip(t * 2.0, 0.0, 1.0)
    upper_half = mid + (high - mid) * np.clip(t * 2.0 - 1.0, 0.0, 1.0)
    colors = np.where(t < 0.5, lower_half, upper_half)
    return colors.astype(np.uint8)


def get_height_color_array(
    height_data: np.ndarray,
    lut: np.ndarray,
    max_height: float = DEFAULTS.TERRAIN_MAX_HEIGHT
) -> np.ndarray:
    """
    Maps heights in [-max_height, max_height] to colours via the LUT.
    Returns a (rows, cols, 3) uint8 array.
    """
    normalized = (np.asarray(height_data) + max_height) / (2.0 * max_height)
    indices = (np.clip(normalized, 0.0, 1.0) * 255).astype(np.uint8)
    return lut[indices]
