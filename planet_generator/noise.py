# planet_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides a seeded hash noise over the integer lattice and a
multi-octave value-noise fBm built on top of it. It is designed to be a pure,
stateless utility.

Data Contract:
---------------
- Inputs:
    - x, y: Scalars or NumPy arrays of coordinates.
    - seed: A real number perturbing every lookup.
    - octaves: Number of fBm octaves (frequency doubles, amplitude halves).
- Outputs:
    - hash noise in [0, 1); fBm typically in [0, 1] but not clamped.
- Side Effects: None.
- Invariants: The shape of the output array matches the broadcast shape of the
  input x and y. The same inputs always produce the same outputs.
================================================================================
"""

import math

import numpy as np
from numba import njit

# Trigonometric scrambling constants of the classic shader hash.
_HASH_X = 12.9898
_HASH_Y = 78.233
_HASH_GAIN = 43758.5453


@njit
def hash_noise(x, y, seed):
    """Returns a pseudo-random value in [0, 1) for the lattice point (x, y)."""
    n = math.sin(x * _HASH_X + y * _HASH_Y + seed) * _HASH_GAIN
    return n - math.floor(n)


@njit
def _smooth(t):
    "3t^2 - 2t^3"
    return t * t * (3.0 - 2.0 * t)


@njit
def fractal_noise(x, y, seed, octaves=6):
    """
    Sums `octaves` layers of bilinearly blended lattice noise. The first octave
    has frequency 1 and amplitude 0.5; each following one doubles the frequency
    and halves the amplitude.
    """
    value = 0.0
    amplitude = 0.5
    frequency = 1.0
    for _ in range(octaves):
        x_sample = x * frequency
        y_sample = y * frequency

        ix = math.floor(x_sample)
        iy = math.floor(y_sample)

        fx = x_sample - ix
        fy = y_sample - iy

        a = hash_noise(ix, iy, seed)
        b = hash_noise(ix + 1.0, iy, seed)
        c = hash_noise(ix, iy + 1.0, seed)
        d = hash_noise(ix + 1.0, iy + 1.0, seed)

        ux = _smooth(fx)
        uy = _smooth(fy)

        octave_noise = (a * (1.0 - ux) + b * ux) * (1.0 - uy) + (c * (1.0 - ux) + d * ux) * uy

        value += octave_noise * amplitude
        amplitude *= 0.5
        frequency *= 2.0

    return value


@njit
def _hash_noise_flat(x, y, seed):
    out = np.empty(x.shape[0])
    for i in range(x.shape[0]):
        out[i] = hash_noise(x[i], y[i], seed)
    return out


@njit
def _fractal_noise_flat(x, y, seed, octaves):
    out = np.empty(x.shape[0])
    for i in range(x.shape[0]):
        out[i] = fractal_noise(x[i], y[i], seed, octaves)
    return out


def _flatten(x, y):
    """Broadcasts two coordinate arrays and returns contiguous 1D float copies."""
    x_arr, y_arr = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))
    return (np.ascontiguousarray(x_arr).ravel(),
            np.ascontiguousarray(y_arr).ravel(),
            x_arr.shape)


def hash_noise_2d(x, y, seed: float) -> np.ndarray:
    """Element-wise hash_noise over arrays of coordinates."""
    flat_x, flat_y, shape = _flatten(x, y)
    return _hash_noise_flat(flat_x, flat_y, float(seed)).reshape(shape)


def fractal_noise_2d(x, y, seed: float, octaves: int = 6) -> np.ndarray:
    """Element-wise fractal_noise over arrays of coordinates."""
    flat_x, flat_y, shape = _flatten(x, y)
    return _fractal_noise_flat(flat_x, flat_y, float(seed), int(octaves)).reshape(shape)
