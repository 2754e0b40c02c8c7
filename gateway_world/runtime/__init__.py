# gateway_world/runtime/__init__.py

# This file makes the 'runtime' directory a Python package.
# We can also use it to define the public API of the package.

from .world import World
from .clock import SceneClock
from .day_night_cycle import DayNightCycle

__all__ = ["World", "SceneClock", "DayNightCycle"]
