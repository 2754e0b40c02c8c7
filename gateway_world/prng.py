# gateway_world/prng.py

"""
================================================================================
SEEDED PSEUDO-RANDOM STREAM
================================================================================
This module provides a small, fast, reproducible random stream based on the
Mulberry32 integer mixer. It is used wherever scene content must be identical
from run to run (tree and mushroom placement, dynamic spawning).

Data Contract:
---------------
- Inputs (on initialization):
    - seed (int, optional): Any integer; only its low 32 bits are kept. When
      omitted, the stream is seeded from the wall clock in milliseconds. That
      path is NOT reproducible: callers that need determinism must pass a seed.
- Public Methods:
    - next(): Advances the state and returns a float in [0, 1).
    - next_in_range(low, high): Float in [low, high).
    - next_int_in_range(low, high): Integer in [low, high).
- Side Effects: Each draw mutates the 32-bit state. Nothing else.
- Invariants: Two streams built from the same seed and driven by the same
  sequence of calls return bit-identical values at every step.
================================================================================
"""
import math
import time

from . import config as DEFAULTS

# --- Mulberry32 Constants (Rule 1) ---
_UINT32_MASK = 0xFFFFFFFF
_STATE_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply of two unsigned 32-bit integers."""
    return (a * b) & _UINT32_MASK


class SeededRandom:
    """A reproducible stream of floats in [0, 1) driven by a 32-bit state."""

    def __init__(self, seed: int = None):
        if seed is None:
            seed = time.time_ns() // 1_000_000
        self.seed = int(seed) & _UINT32_MASK

    def next(self) -> float:
        """Advances the stream by one step and returns a float in [0, 1)."""
        self.seed = (self.seed + _STATE_INCREMENT) & _UINT32_MASK
        t = self.seed
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _UINT32_MASK
        return ((t ^ (t >> 14)) & _UINT32_MASK) / _TWO_POW_32

    def next_in_range(self, low: float, high: float) -> float:
        """
        Returns a float in [low, high).

        The caller is responsible for passing high > low; a degenerate or
        inverted range is not rejected and simply yields values on the
        corresponding (possibly empty) span.
        """
        return self.next() * (high - low) + low

    def next_int_in_range(self, low: int, high: int) -> int:
        """Returns an integer in [low, high)."""
        return math.floor(self.next() * (high - low) + low)


def get_placement_prng(seed: int = DEFAULTS.DEFAULT_PLACEMENT_SEED) -> SeededRandom:
    """Returns a fresh stream for one placement pass, seeded with the fixed placement seed."""
    return SeededRandom(seed)
