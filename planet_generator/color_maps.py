# planet_generator/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module converts the raw generated fields (plate ids, boundary delta,
height noise) into RGB color arrays for debug previews.

It is designed to be a pure, stateless utility with no dependencies on any
renderer, so it can be used by the offline baker and by external viewers.
All color arrays are (H, W, 3) uint8, matching the (H, W) field layout.
================================================================================
"""
import numpy as np
from . import config as DEFAULTS

# --- Default Colors ---
COLOR_BOUNDARY_LINE = (255, 255, 255)
COLOR_OCEANIC_CRUST = (20, 40, 120)
COLOR_CONTINENTAL_CRUST = (139, 119, 80)

# Plate colors are random hues with saturation and value kept in the upper
# half, so every plate stays clearly visible.
PLATE_SATURATION_RANGE = (0.5, 1.0)
PLATE_VALUE_RANGE = (0.5, 1.0)

# Boundary lines are drawn where boundary_delta < thickness * cell angle,
# with a soft edge of aa * cell angle on either side.
DEFAULT_BOUNDARY_LINE_THICKNESS = 1.5
DEFAULT_BOUNDARY_LINE_AA = 1.0


def hsv_to_rgb(hsv: np.ndarray) -> np.ndarray:
    """Vectorized HSV -> RGB for arrays of shape (..., 3) in [0, 1]."""
    h, s, v = hsv[..., 0], hsv[..., 1], hsv[..., 2]
    i = np.floor(h * 6.0).astype(int) % 6
    f = h * 6.0 - np.floor(h * 6.0)
    p = v * (1.0 - s)
    q = v * (1.0 - f * s)
    t = v * (1.0 - (1.0 - f) * s)

    r = np.choose(i, [v, q, p, p, t, v])
    g = np.choose(i, [t, v, v, q, p, p])
    b = np.choose(i, [p, p, t, v, v, q])
    return np.stack([r, g, b], axis=-1)


# --- Color Lookup Table (LUT) Generation ---
def create_plate_color_lut(num_plates: int, seed: int) -> np.ndarray:
    """
    Creates a (num_plates, 3) LUT of plate colors. The colors come from their
    own stream (seed + PLATE_COLOR_SEED_OFFSET) and never touch the plate RNG.
    """
    rng = np.random.default_rng((seed + DEFAULTS.PLATE_COLOR_SEED_OFFSET) & 0xFFFFFFFF)
    hsv = np.column_stack([
        rng.uniform(0.0, 1.0, num_plates),
        rng.uniform(*PLATE_SATURATION_RANGE, num_plates),
        rng.uniform(*PLATE_VALUE_RANGE, num_plates),
    ])
    return (hsv_to_rgb(hsv) * 255).astype(np.uint8)


def create_crust_color_lut(is_oceanic: np.ndarray) -> np.ndarray:
    """A per-plate LUT colored by crust type."""
    return np.where(
        np.asarray(is_oceanic, dtype=bool)[:, np.newaxis],
        np.array(COLOR_OCEANIC_CRUST, dtype=np.uint8),
        np.array(COLOR_CONTINENTAL_CRUST, dtype=np.uint8),
    ).astype(np.uint8)


def create_grayscale_lut() -> np.ndarray:
    """Creates a 256-entry grayscale LUT."""
    t = np.arange(256, dtype=np.uint8)[..., np.newaxis]
    return np.repeat(t, 3, axis=1)


# --- Color Array Generation Functions ---
def get_plate_color_array(plate_ids: np.ndarray, plate_lut: np.ndarray) -> np.ndarray:
    """Colors every cell with its plate's LUT entry."""
    return plate_lut[plate_ids]


def boundary_line_mask(boundary_delta: np.ndarray, thickness: float = DEFAULT_BOUNDARY_LINE_THICKNESS, aa: float = DEFAULT_BOUNDARY_LINE_AA) -> np.ndarray:
    """
    Returns a [0, 1] line coverage mask from the boundary delta field.
    Thresholds are expressed in cells (the angular size of one row) so the
    line width does not depend on the map resolution.
    """
    height = boundary_delta.shape[0]
    cell_angle = np.pi / height
    edge = thickness * cell_angle
    soft = max(aa * cell_angle, 1e-9)

    # Smoothstep from fully covered (edge - soft) to uncovered (edge + soft).
    t = np.clip((boundary_delta - (edge - soft)) / (2.0 * soft), 0.0, 1.0)
    return 1.0 - t * t * (3.0 - 2.0 * t)


def overlay_boundaries(color_array: np.ndarray, boundary_delta: np.ndarray, line_color: tuple = COLOR_BOUNDARY_LINE, **line_settings) -> np.ndarray:
    """Blends anti-aliased plate boundary lines over a color array."""
    mask = boundary_line_mask(boundary_delta, **line_settings)[..., np.newaxis]
    blended = color_array * (1.0 - mask) + np.array(line_color) * mask
    return blended.astype(np.uint8)


def get_scalar_color_array(values: np.ndarray, lut: np.ndarray, value_range: tuple = (0.0, 1.0)) -> np.ndarray:
    """Normalizes a scalar field to [0, 1] and maps it through a 256-entry LUT."""
    lo, hi = value_range
    span = hi - lo if hi > lo else 1.0
    normalized = np.clip((values - lo) / span, 0.0, 1.0)
    indices = (normalized * 255).astype(np.uint8)
    return lut[indices]
