# gateway_world/runtime/clock.py

"""
================================================================================
SCENE CLOCK
================================================================================
This module provides a small, data-only clock that turns real frame deltas
into scene time. It lets the caller pause or fast-forward the day/night cycle
without touching the cycle itself.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Optional 'initial_time_scale' override.
- Public Methods:
    - update(real_delta_time): Advances the clock and returns the scaled delta.
    - set_speed(new_scale): Changes the speed of time.
    - get_time_string(): Formatted elapsed scene time.
- Public Properties:
    - elapsed (float): Total scene seconds since creation.
    - time_scale (float): Current speed multiplier.
- Side Effects: None.
- Invariants: elapsed is the sum of every scaled delta returned by update().
================================================================================
"""

from .. import config as DEFAULTS

SECONDS_PER_MINUTE = 60


class SceneClock:
    """Manages the passage of scene time."""

    def __init__(self, config: dict = None):
        config = config or {}
        self.time_scale = max(0.0, config.get('initial_time_scale', DEFAULTS.INITIAL_TIME_SCALE))
        self._total_seconds_elapsed = 0.0

    @property
    def elapsed(self) -> float:
        return self._total_seconds_elapsed

    def update(self, real_delta_time: float) -> float:
        """
        Advances the clock by a given amount of real-world time.

        Args:
            real_delta_time (float): The time elapsed in the real world, in seconds.

        Returns:
            float: The scene time that passed, 0.0 while paused.
        """
        if self.time_scale <= 0 or real_delta_time <= 0:
            return 0.0  # Time is paused, do nothing.

        scene_delta_time = real_delta_time * self.time_scale
        self._total_seconds_elapsed += scene_delta_time
        return scene_delta_time

    def set_speed(self, new_scale: float):
        """
        Sets the speed of scene time.
        0 = paused, 1 = real-time, > 1 = fast-forward.
        """
        self.time_scale = max(0.0, new_scale)

    def get_time_string(self) -> str:
        """Returns the elapsed scene time as MM:SS."""
        minutes, seconds = divmod(int(self._total_seconds_elapsed), SECONDS_PER_MINUTE)
        return f"{minutes:02d}:{seconds:02d}"
