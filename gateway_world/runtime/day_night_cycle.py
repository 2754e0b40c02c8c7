# gateway_world/runtime/day_night_cycle.py

"""
================================================================================
DAY/NIGHT CYCLE
================================================================================
This module provides the two-phase day/night state machine and the pure
functions that turn its state into lighting: where the sun or moon sits, how
opaque and how large it is, and which palette the scene should use.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Consolidated settings. Keys used: 'day_duration',
      'night_duration', 'light_orbit_radius', 'initial_is_daytime',
      'initial_cycle_progress'.
- Public Methods:
    - advance(delta_time): Bookkeeping only. Adds delta / duration to the
      current phase's progress and flips phase when it reaches 1.0.
    - toggle(): Switches phase immediately, resetting progress to 0.
    - snapshot(): The PhaseSettings record for the current phase.
    - celestial_transforms(): Sun and moon transforms for the current state.
    - lighting_state(): Everything a renderer needs for this tick.
- Public Properties:
    - phase (CyclePhase): Current phase and progress.
    - phase_changed (bool): Whether the last advance/toggle switched phase.
- Side Effects: Logs phase switches.
- Invariants: progress is always in [0, 1). On a switch the new phase starts
  at exactly 0; overshoot is never carried over. Palettes switch instantly,
  while celestial position stays a pure function of progress.
================================================================================
"""
import logging
import math
from dataclasses import dataclass

from .. import color_maps
from .. import config as DEFAULTS
from ..errors import ConfigurationError


@dataclass(frozen=True)
class CyclePhase:
    is_daytime: bool
    progress: float

    @property
    def name(self) -> str:
        return "Day" if self.is_daytime else "Night"


@dataclass(frozen=True)
class PhaseSettings:
    """Lighting, fog and material colours applied wholesale when a phase is entered."""
    background: tuple
    fog_color: tuple
    fog_near: float
    fog_far: float
    ambient_light_intensity: float
    directional_light_intensity: float
    directional_light_color: tuple
    ground_color: tuple
    trunk_color: tuple
    deciduous_foliage_color: tuple
    coniferous_foliage_color: tuple


DAY_SETTINGS = PhaseSettings(**color_maps.DAY_PALETTE)
NIGHT_SETTINGS = PhaseSettings(**color_maps.NIGHT_PALETTE)


@dataclass(frozen=True)
class CelestialTransform:
    position: tuple[float, float, float]
    opacity: float
    scale: float
    visible: bool


@dataclass(frozen=True)
class LightingState:
    phase: CyclePhase
    settings: PhaseSettings
    light_position: tuple[float, float, float]
    sun: CelestialTransform
    moon: CelestialTransform


def smoothstep(x: float, edge0: float, edge1: float) -> float:
    """0 below edge0, 1 above edge1, a smooth Hermite ramp in between."""
    if x <= edge0:
        return 0.0
    if x >= edge1:
        return 1.0
    t = (x - edge0) / (edge1 - edge0)
    return t * t * (3.0 - 2.0 * t)


def phase_snapshot(is_daytime: bool) -> PhaseSettings:
    """Returns the palette/lighting record for a phase."""
    return DAY_SETTINGS if is_daytime else NIGHT_SETTINGS


def orbit_position(progress: float, radius: float = DEFAULTS.LIGHT_ORBIT_RADIUS) -> tuple[float, float, float]:
    """
    Position on the light orbit. Progress 0 sits on one horizon, 0.5 is
    straight overhead at height radius, and progress 1 is the opposite horizon.
    """
    alpha = (1.0 - progress) * math.pi
    orbit_x = radius * math.cos(alpha)
    orbit_y = radius * math.sin(alpha)
    orbit_z = radius * math.cos(alpha - math.pi / 2)
    # Orbit axes map onto world axes as (z, y, x).
    return (orbit_z, orbit_y, orbit_x)


def celestial_transform(
    is_sun: bool,
    phase: CyclePhase,
    radius: float = DEFAULTS.LIGHT_ORBIT_RADIUS
) -> CelestialTransform:
    """
    Transform of the sun (is_sun=True) or the moon for the given phase.
    The body that does not belong to the current phase is always hidden.
    """
    position = orbit_position(phase.progress, radius)
    if is_sun != phase.is_daytime:
        return CelestialTransform(position, 0.0, DEFAULTS.CELESTIAL_MIN_SCALE, False)

    y = position[1]
    height_factor = max(0.0, y / radius)
    opacity = smoothstep(height_factor, DEFAULTS.CELESTIAL_FADE_START, DEFAULTS.CELESTIAL_FADE_END)
    scale_factor = DEFAULTS.SUN_SCALE_FACTOR if is_sun else DEFAULTS.MOON_SCALE_FACTOR
    scale = max(DEFAULTS.CELESTIAL_MIN_SCALE, height_factor * scale_factor + DEFAULTS.CELESTIAL_SCALE_BIAS)
    visible = y > DEFAULTS.CELESTIAL_HIDE_HEIGHT
    return CelestialTransform(position, opacity, scale, visible)


def celestial_transforms(phase: CyclePhase, radius: float = DEFAULTS.LIGHT_ORBIT_RADIUS) -> dict[str, CelestialTransform]:
    return {
        "sun": celestial_transform(True, phase, radius),
        "moon": celestial_transform(False, phase, radius),
    }


def advance_phase(
    phase: CyclePhase,
    delta_time: float,
    day_duration: float,
    night_duration: float
) -> CyclePhase:
    """
    Adds delta_time / duration to the active phase's progress. When progress
    reaches 1.0 the other phase starts at exactly 0. Non-positive deltas leave
    the phase untouched.
    """
    if delta_time <= 0:
        return phase

    duration = day_duration if phase.is_daytime else night_duration
    progress = phase.progress + delta_time / duration
    if progress >= 1.0:
        return CyclePhase(is_daytime=not phase.is_daytime, progress=0.0)
    return CyclePhase(is_daytime=phase.is_daytime, progress=progress)


class DayNightCycle:
    """
    Tracks the current phase and its progress.
    """
    def __init__(self, config: dict):
        """
        Initializes the DayNightCycle.
        """
        self.logger = logging.getLogger(__name__)

        # --- 1. Load Cycle Configuration (Rule 1) ---
        self.day_duration = config.get('day_duration', DEFAULTS.DAY_CYCLE_DURATION)
        self.night_duration = config.get('night_duration', DEFAULTS.NIGHT_CYCLE_DURATION)
        self.orbit_radius = config.get('light_orbit_radius', DEFAULTS.LIGHT_ORBIT_RADIUS)
        is_daytime = config.get('initial_is_daytime', DEFAULTS.INITIAL_IS_DAYTIME)
        progress = config.get('initial_cycle_progress', DEFAULTS.INITIAL_CYCLE_PROGRESS)

        if self.day_duration <= 0 or self.night_duration <= 0:
            raise ConfigurationError(
                f"Cycle durations must be positive, got day={self.day_duration}, "
                f"night={self.night_duration}"
            )
        if self.orbit_radius <= 0:
            raise ConfigurationError(f"light_orbit_radius must be positive, got {self.orbit_radius}")
        if not 0.0 <= progress < 1.0:
            raise ConfigurationError(f"initial_cycle_progress must be in [0, 1), got {progress}")

        # --- 2. Public State Variables ---
        self.phase = CyclePhase(is_daytime=bool(is_daytime), progress=float(progress))
        self.phase_changed = False

    @property
    def is_daytime(self) -> bool:
        return self.phase.is_daytime

    @property
    def progress(self) -> float:
        return self.phase.progress

    def advance(self, delta_time: float, day_duration: float = None, night_duration: float = None) -> CyclePhase:
        """
        Advances the active phase by delta_time seconds and returns the new
        phase. Applying the resulting lighting is left to the caller.
        """
        previous = self.phase
        self.phase = advance_phase(
            previous,
            delta_time,
            day_duration if day_duration is not None else self.day_duration,
            night_duration if night_duration is not None else self.night_duration,
        )
        self.phase_changed = self.phase.is_daytime != previous.is_daytime
        if self.phase_changed:
            self.logger.info(f"{previous.name} ended; switching to {self.phase.name}.")
        return self.phase

    def toggle(self) -> CyclePhase:
        """Switches phase now. Both phases restart from progress 0, as an automatic switch does."""
        self.phase = CyclePhase(is_daytime=not self.phase.is_daytime, progress=0.0)
        self.phase_changed = True
        self.logger.info(f"Manually switched to {self.phase.name}.")
        return self.phase

    def snapshot(self) -> PhaseSettings:
        return phase_snapshot(self.phase.is_daytime)

    def light_position(self) -> tuple[float, float, float]:
        return orbit_position(self.phase.progress, self.orbit_radius)

    def celestial_transforms(self) -> dict[str, CelestialTransform]:
        return celestial_transforms(self.phase, self.orbit_radius)

    def lighting_state(self) -> LightingState:
        bodies = self.celestial_transforms()
        return LightingState(
            phase=self.phase,
            settings=self.snapshot(),
            light_position=self.light_position(),
            sun=bodies["sun"],
            moon=bodies["moon"],
        )
