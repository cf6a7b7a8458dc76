# planet_generator/noise.py

"""
================================================================================
PRIMORDIAL NOISE FIELD
================================================================================
This module provides 3D Perlin noise and a fractal (fBm) height-noise field
sampled on the sphere. It is designed to be a pure, stateless utility.

Sampling the noise at the 3D sphere point of each cell (rather than at the
2D UV position) makes the map wrap seamlessly across the u = 0 / u = 1 seam.

Data Contract:
---------------
- Inputs:
    - p: A pre-shuffled NumPy permutation table (int array, length 512).
    - Map dimensions, frequency, amplitude, and the standard octave settings.
- Outputs:
    - An (H, W) float32 array in [0, amplitude].
- Side Effects: None.
- Invariants: The field is independent of the plates. Given the same seed and
  settings, the output is identical.
================================================================================
"""

import numpy as np
from numba import njit, prange

from . import config as DEFAULTS


def create_permutation_table(seed: int) -> np.ndarray:
    """A seed-shuffled permutation of 0..255, repeated twice to avoid wrapping."""
    p = np.arange(256, dtype=np.int64)
    rng = np.random.default_rng(seed & 0xFFFFFFFF)
    rng.shuffle(p)
    return np.stack([p, p]).flatten()


@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)


@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)


@njit
def _gradient(h, x, y, z):
    """Dot product with one of the 12 cube-edge gradient directions."""
    h = h & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h == 12 or h == 14:
        v = x
    else:
        v = z
    a = u if (h & 1) == 0 else -u
    b = v if (h & 2) == 0 else -v
    return a + b


@njit
def perlin_noise_3d(p, x, y, z):
    """Single-octave 3D Perlin noise at one point, roughly in [-1, 1]."""
    xi = int(np.floor(x))
    yi = int(np.floor(y))
    zi = int(np.floor(z))

    xf = x - xi
    yf = y - yi
    zf = z - zi

    u = _fade(xf)
    v = _fade(yf)
    w = _fade(zf)

    X = xi & 255
    Y = yi & 255
    Z = zi & 255

    a = p[X] + Y
    aa = p[a] + Z
    ab = p[a + 1] + Z
    b = p[X + 1] + Y
    ba = p[b] + Z
    bb = p[b + 1] + Z

    x1 = _lerp(_gradient(p[aa], xf, yf, zf), _gradient(p[ba], xf - 1, yf, zf), u)
    x2 = _lerp(_gradient(p[ab], xf, yf - 1, zf), _gradient(p[bb], xf - 1, yf - 1, zf), u)
    y1 = _lerp(x1, x2, v)

    x3 = _lerp(_gradient(p[aa + 1], xf, yf, zf - 1), _gradient(p[ba + 1], xf - 1, yf, zf - 1), u)
    x4 = _lerp(_gradient(p[ab + 1], xf, yf - 1, zf - 1), _gradient(p[bb + 1], xf - 1, yf - 1, zf - 1), u)
    y2 = _lerp(x3, x4, v)

    return _lerp(y1, y2, w)


@njit(parallel=True)
def _fbm_sphere_field(p, width, height, frequency, octaves, persistence, lacunarity, out):
    """
    Evaluates fBm at every cell's sphere point. Rows are independent and are
    processed in parallel; each cell is written exactly once.
    """
    # Normalizing by the summed amplitudes keeps the result in [-1, 1].
    max_amplitude = 0.0
    amplitude = 1.0
    for _ in range(octaves):
        max_amplitude += amplitude
        amplitude *= persistence

    for j in prange(height):
        phi = ((j + 0.5) / height) * np.pi
        for i in range(width):
            theta = ((i + 0.5) / width) * 2.0 * np.pi
            px = np.sin(phi) * np.cos(theta) * frequency
            py = np.cos(phi) * frequency
            pz = np.sin(phi) * np.sin(theta) * frequency

            noise_val = 0.0
            amp = 1.0
            freq = 1.0
            for _ in range(octaves):
                noise_val += perlin_noise_3d(p, px * freq, py * freq, pz * freq) * amp
                amp *= persistence
                freq *= lacunarity

            out[j, i] = noise_val / max_amplitude


def generate_height_noise(
    width: int, height: int,
    frequency: float = DEFAULTS.DEFAULT_NOISE_FREQUENCY,
    amplitude: float = DEFAULTS.DEFAULT_NOISE_AMPLITUDE,
    seed: int = 0,
    octaves: int = DEFAULTS.NOISE_OCTAVES,
    persistence: float = DEFAULTS.NOISE_PERSISTENCE,
    lacunarity: float = DEFAULTS.NOISE_LACUNARITY,
    permutation_table: np.ndarray = None,
) -> np.ndarray:
    """
    Generates a W x H fractal noise field in [0, 1] scaled by `amplitude`.

    Args:
        width, height: Map resolution in cells.
        frequency: Scale applied to the unit-sphere point before sampling.
        amplitude: Multiplier applied to the normalized [0, 1] result.
        seed: Shuffles the permutation table unless one is injected.
        octaves, persistence, lacunarity: Standard fBm settings.
        permutation_table (np.ndarray, optional): A pre-computed table.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Noise resolution must be positive, got {width}x{height}.")
    if octaves < 1:
        raise ValueError(f"Noise needs at least one octave, got {octaves}.")

    p = permutation_table if permutation_table is not None else create_permutation_table(seed)

    raw = np.empty((height, width), dtype=np.float64)
    _fbm_sphere_field(p, width, height, float(frequency), int(octaves), float(persistence), float(lacunarity), raw)

    normalized = np.clip((raw + 1.0) / 2.0, 0.0, 1.0)
    return (normalized * amplitude).astype(np.float32)
