# planet_generator/tectonics.py

"""
================================================================================
PLATE ASSIGNMENT FIELD
================================================================================
This module rasterizes the plate partition of the sphere onto an
equirectangular W x H grid. It is a spherical Voronoi diagram: each cell
belongs to the plate whose center is angularly closest.

Because plate centers and cell points are unit vectors, the dot product is a
monotonically decreasing function of angular distance, so the nearest plate is
the one with the largest dot product.

Data Contract:
---------------
- Inputs:
    - centers (np.ndarray): (N, 3) unit vectors, row i is plate id i.
    - width, height: grid resolution.
- Outputs:
    - plate_ids (np.ndarray): (H, W) int32 id of the nearest plate.
    - boundary_delta (np.ndarray): (H, W) float32 in [0, 2]. best - second
      best dot product: ~0 on a plate boundary, growing toward plate
      interiors. It varies continuously, so renderers can threshold it for
      anti-aliased boundary lines.
- Side Effects: None.
- Invariants: Each cell depends only on its position and the centers. On an
  exact tie the lower plate id wins.
================================================================================
"""
import numpy as np
from numba import njit, prange
from scipy.spatial import cKDTree

from . import config as DEFAULTS

ASSIGNMENT_METHODS = ("scan", "kdtree")
PLATE_ID_ENCODINGS = ("raw", "normalized")


@njit
def _cell_to_sphere(x, y, width, height):
    """Center of cell (x, y) on the unit sphere (same mapping as plate centers)."""
    u = (x + 0.5) / width
    v = (y + 0.5) / height
    theta = u * 2.0 * np.pi
    phi = v * np.pi
    return np.sin(phi) * np.cos(theta), np.cos(phi), np.sin(phi) * np.sin(theta)


@njit(parallel=True)
def _assign_plates_scan(centers, width, height, plate_ids, boundary_delta):
    """
    Single linear scan per cell keeping the best and second best dot product.
    The strict '>' keeps the first maximum seen, so ties go to the lower id.
    Rows are independent and processed in parallel.
    """
    num_plates = centers.shape[0]
    for y in prange(height):
        for x in range(width):
            px, py, pz = _cell_to_sphere(x, y, width, height)

            best = -np.inf
            second = -np.inf
            best_idx = 0
            for i in range(num_plates):
                d = px * centers[i, 0] + py * centers[i, 1] + pz * centers[i, 2]
                if d > best:
                    second = best
                    best = d
                    best_idx = i
                elif d > second:
                    second = d

            # A lone plate has no boundary; treat the antipode as its rival.
            if second == -np.inf:
                second = -1.0

            plate_ids[y, x] = best_idx
            boundary_delta[y, x] = best - second


def grid_sphere_points(width: int, height: int) -> np.ndarray:
    """An (H, W, 3) array of cell-center points on the unit sphere."""
    u = (np.arange(width, dtype=np.float64) + 0.5) / width
    v = (np.arange(height, dtype=np.float64) + 0.5) / height
    theta = u[np.newaxis, :] * 2.0 * np.pi
    phi = v[:, np.newaxis] * np.pi
    return np.stack(np.broadcast_arrays(
        np.sin(phi) * np.cos(theta),
        np.cos(phi),
        np.sin(phi) * np.sin(theta),
    ), axis=-1)


def _assign_plates_kdtree(centers: np.ndarray, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """
    Spatial-index alternative for very large plate counts.
    For unit vectors, chord distance d and dot product are related by
    dot = 1 - d^2 / 2, so the two nearest chords give the two best dots.
    Tie-breaking between equidistant plates is up to the tree.
    """
    points = grid_sphere_points(width, height).reshape(-1, 3)
    tree = cKDTree(centers)
    k = 2 if centers.shape[0] > 1 else 1
    dist, indices = tree.query(points, k=k)
    dist = dist.reshape(-1, k)
    indices = indices.reshape(-1, k)

    best = 1.0 - dist[:, 0] ** 2 / 2.0
    second = 1.0 - dist[:, 1] ** 2 / 2.0 if k == 2 else np.full_like(best, -1.0)

    plate_ids = indices[:, 0].reshape(height, width).astype(np.int32)
    boundary_delta = np.clip(best - second, 0.0, DEFAULTS.MAX_BOUNDARY_DELTA).reshape(height, width)
    return plate_ids, boundary_delta.astype(np.float32)


def compute_plate_assignment(centers: np.ndarray, width: int, height: int, method: str = DEFAULTS.DEFAULT_ASSIGNMENT_METHOD) -> tuple[np.ndarray, np.ndarray]:
    """
    Computes the plate id and boundary delta fields for a W x H grid.
    Cost is O(W * H * N) for the 'scan' method.
    """
    centers = np.array(centers, dtype=np.float64).reshape(-1, 3)
    if centers.shape[0] == 0:
        raise ValueError("Cannot compute a plate assignment field without plates.")
    if width <= 0 or height <= 0:
        raise ValueError(f"Grid resolution must be positive, got {width}x{height}.")

    if method == "scan":
        plate_ids = np.empty((height, width), dtype=np.int32)
        boundary_delta = np.empty((height, width), dtype=np.float32)
        _assign_plates_scan(centers, width, height, plate_ids, boundary_delta)
        return plate_ids, boundary_delta
    elif method == "kdtree":
        return _assign_plates_kdtree(centers, width, height)
    else:
        raise ValueError(f"Unknown assignment method '{method}'. Expected one of {ASSIGNMENT_METHODS}.")


def encode_plate_ids(plate_ids: np.ndarray, encoding: str = DEFAULTS.DEFAULT_PLATE_ID_ENCODING) -> np.ndarray:
    """Stores ids raw (int32) or as id / 255 (float32, an 8-bit texture channel)."""
    if encoding == "raw":
        return plate_ids.astype(np.int32, copy=False)
    elif encoding == "normalized":
        if plate_ids.size and plate_ids.max() > DEFAULTS.PLATE_ID_NORMALIZER:
            raise ValueError("Normalized encoding supports at most 256 plates.")
        return (plate_ids / DEFAULTS.PLATE_ID_NORMALIZER).astype(np.float32)
    else:
        raise ValueError(f"Unknown plate id encoding '{encoding}'. Expected one of {PLATE_ID_ENCODINGS}.")


def decode_plate_ids(field: np.ndarray) -> np.ndarray:
    """Inverse of encode_plate_ids for either encoding."""
    if np.issubdtype(field.dtype, np.integer):
        return field.astype(np.int32, copy=False)
    return np.rint(field * DEFAULTS.PLATE_ID_NORMALIZER).astype(np.int32)
