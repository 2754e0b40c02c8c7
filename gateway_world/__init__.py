# gateway_world/__init__.py

from .errors import ConfigurationError
from .prng import SeededRandom, get_placement_prng
from .terrain import HeightField

__all__ = ["ConfigurationError", "SeededRandom", "get_placement_prng", "HeightField"]
