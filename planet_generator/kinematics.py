# planet_generator/kinematics.py

"""
================================================================================
PLATE KINEMATICS
================================================================================
Assigns every plate a drift direction (a unit vector tangent to the sphere at
the plate's center) and a scalar speed. These are closed-form kinematic
models, not a physical simulation.

Models (Rule 8):
---------------
- RANDOM: each plate drifts in an independent random tangent direction.
- AXIS_FLOWS_2 / AXIS_FLOWS_4: the velocity field is a weighted sum of 2 or 4
  solid-body rotations, v(p) = sum_k w_k * (a_k x p). All plates share the
  same axes, so neighbouring plates drift coherently.

Data Contract:
---------------
- Inputs: a PlateSet fresh from generate_plates(), the ParameterSet, and the
  same rng that seeded the plates.
- Outputs: None. Each plate is replaced by an updated copy and the set is
  frozen.
- Side Effects: Updates the plates of the set; advances rng.
- Invariants: Every movement_vector is unit length and tangent to the sphere.
================================================================================
"""
from dataclasses import replace

import numpy as np

from . import config as DEFAULTS
from .parameters import KinematicModel, ParameterSet
from .plates import PlateSet

WORLD_UP = np.array([0.0, 1.0, 0.0])
WORLD_RIGHT = np.array([1.0, 0.0, 0.0])


def random_unit_vector(rng: np.random.Generator) -> np.ndarray:
    """A point drawn uniformly from the surface of the unit sphere."""
    vec = rng.standard_normal(3)
    return vec / max(np.linalg.norm(vec), 1e-12)


def draw_flow_field(axis_count: int, rng: np.random.Generator) -> tuple[np.ndarray, np.ndarray]:
    """Draws the shared rotation axes first, then their weights."""
    axes = np.array([random_unit_vector(rng) for _ in range(axis_count)]).reshape(-1, 3)
    limit = DEFAULTS.AXIS_WEIGHT_LIMIT
    weights = rng.uniform(-limit, limit, axis_count)
    return axes, weights


def axis_flow_vector(center: np.ndarray, axes: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """Superposition of solid-body rotations at `center` (tangent by construction)."""
    raw = np.zeros(3)
    for axis, weight in zip(axes, weights):
        raw += weight * np.cross(axis, center)
    return raw


def resolve_movement_direction(center: np.ndarray, raw: np.ndarray) -> np.ndarray:
    """
    Normalizes a raw movement vector. When the raw vector is degenerate
    (the center lines up with the governing axis) a fixed tangent is used
    instead: center x up, or center x right if that is degenerate too.
    """
    threshold = DEFAULTS.DEGENERATE_VECTOR_SQR_MAGNITUDE
    if np.dot(raw, raw) < threshold:
        raw = np.cross(center, WORLD_UP)
        if np.dot(raw, raw) < threshold:
            raw = np.cross(center, WORLD_RIGHT)
    return raw / np.linalg.norm(raw)


def apply_kinematic_model(plates: PlateSet, params: ParameterSet, rng: np.random.Generator):
    """
    Gives every plate a speed and a drift direction, then freezes the set.
    Per plate the speed is drawn first, then (RANDOM model only) the random
    direction. The AxisFlows field is drawn once, before the first plate.
    """
    if plates.frozen:
        raise RuntimeError("Kinematics have already been applied to this PlateSet.")
    model = params.kinematic_model

    if model is KinematicModel.RANDOM:
        axes = weights = None
    elif model is KinematicModel.AXIS_FLOWS_2 or model is KinematicModel.AXIS_FLOWS_4:
        axes, weights = draw_flow_field(model.axis_count, rng)
    else:
        raise ValueError(f"Unsupported kinematic model: {model!r}")

    for plate in list(plates):
        center = plate.center_3d
        speed = float(rng.uniform(params.min_plate_speed, params.max_plate_speed))

        if axes is None:
            raw = np.cross(center, random_unit_vector(rng))
        else:
            raw = axis_flow_vector(center, axes, weights)

        plates.update(replace(
            plate,
            movement_vector=resolve_movement_direction(center, raw),
            speed=speed,
        ))

    plates.freeze()
