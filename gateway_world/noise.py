# gateway_world/noise.py

"""
================================================================================
VALUE NOISE UTILITIES
================================================================================
This module provides the fractal value noise used for terrain elevation. It is
designed to be a pure, stateless utility: there is no seed and no permutation
table. Every lattice value comes from a fixed integer hash of its coordinates,
so a given (x, z) always produces the same height.

Data Contract:
---------------
- Inputs:
    - x, z: Scalar coordinates, or 2D NumPy arrays of coordinates.
    - base_frequency, octaves, persistence, lacunarity, max_height: Standard
      fBm parameters.
- Outputs:
    - A float (or an array of floats matching the input shape) in roughly
      [-max_height, max_height].
- Side Effects: None.
- Invariants: Output is continuous across lattice cells because the corner
  values are blended with a smoothstep weight.
================================================================================
"""

import numpy as np
from numba import njit

# --- Lattice Hash Constants (Rule 1) ---
_UINT32_MASK = 0xFFFFFFFF
_UINT16_MASK = 0xFFFF
_POSITIVE_31_MASK = 0x7FFFFFFF
_Z_STRIDE = 57
_HALF_RANGE = 1073741823.0


@njit
def _mul32(a, b):
    """
    Multiplies two unsigned 32-bit values modulo 2**32.
    The product is split in two halves so no intermediate leaves int64.
    """
    low = a * (b & _UINT16_MASK)
    high = ((a * (b >> 16)) & _UINT16_MASK) << 16
    return (low + high) & _UINT32_MASK


@njit
def lattice_hash(ix, iz):
    """Deterministic pseudo-random value in [-1, 1] for an integer lattice point."""
    n = (ix + iz * _Z_STRIDE) & _UINT32_MASK
    n = ((n << 13) & _UINT32_MASK) ^ n
    inner = (_mul32(_mul32(n, n), 15731) + 789221) & _UINT32_MASK
    n = (_mul32(n, inner) + 1376312589) & _UINT32_MASK
    n = n & _POSITIVE_31_MASK
    return 1.0 - n / _HALF_RANGE


@njit
def _smoothstep(t):
    "t^2 (3 - 2t)"
    return t * t * (3.0 - 2.0 * t)


@njit
def _lerp(a, b, t):
    "Linear interpolation."
    return a + t * (b - a)


@njit
def interpolated_noise(x, z, frequency):
    """Bilinearly blends the four surrounding lattice hashes with a smoothstep weight."""
    scaled_x = x * frequency
    scaled_z = z * frequency

    floor_x = np.floor(scaled_x)
    floor_z = np.floor(scaled_z)
    frac_x = scaled_x - floor_x
    frac_z = scaled_z - floor_z
    ix = int(floor_x)
    iz = int(floor_z)

    v1 = lattice_hash(ix, iz)
    v2 = lattice_hash(ix + 1, iz)
    v3 = lattice_hash(ix, iz + 1)
    v4 = lattice_hash(ix + 1, iz + 1)

    sx = _smoothstep(frac_x)
    sz = _smoothstep(frac_z)

    i1 = _lerp(v1, v2, sx)
    i2 = _lerp(v3, v4, sx)
    return _lerp(i1, i2, sz)


@njit
def fbm_height(x, z, base_frequency, octaves, persistence, lacunarity, max_height):
    """
    Fractal Brownian motion over interpolated value noise.
    The weighted sum is divided by the total amplitude used, bringing it back
    to about [-1, 1] before scaling by max_height.
    """
    total = 0.0
    frequency = base_frequency
    amplitude = 1.0
    normalization = 0.0

    for _ in range(octaves):
        total += interpolated_noise(x, z, frequency) * amplitude
        normalization += amplitude
        amplitude *= persistence
        frequency *= lacunarity

    return (total / normalization) * max_height


@njit
def fbm_height_grid(x, z, base_frequency, octaves, persistence, lacunarity, max_height):
    """
    Evaluates fbm_height over 2D coordinate arrays.
    Explicit loops are compiled by Numba into tight machine code.
    """
    rows, cols = x.shape
    heights = np.zeros((rows, cols))

    for i in range(rows):
        for j in range(cols):
            heights[i, j] = fbm_height(
                x[i, j], z[i, j],
                base_frequency, octaves, persistence, lacunarity, max_height
            )

    return heights
