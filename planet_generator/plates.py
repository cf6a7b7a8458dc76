# planet_generator/plates.py

"""
================================================================================
TECTONIC PLATE SEEDING
================================================================================
This module places the seed points of the tectonic plates on the unit sphere
and owns the Plate / PlateSet data types.

Data Contract:
---------------
- Inputs:
    - A validated ParameterSet.
    - rng (np.random.Generator): the run's plate stream, created by
      create_plate_rng() from the resolved seed.
- Outputs:
    - PlateSet: exactly `num_plates` plates, ids 0..N-1 in creation order.
- Side Effects: Advances `rng`. The same generator must then be handed to the
  kinematics synthesizer so that the whole run replays from one seed.
- Invariants: Draw order per plate is u, v, jitter_u, jitter_v, crust type.
  Plates and their vectors are read-only; the set is frozen after kinematics.
================================================================================
"""
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from . import config as DEFAULTS
from .parameters import ParameterSet


class CrustType(Enum):
    OCEANIC = "oceanic"
    CONTINENTAL = "continental"


# Structured layout of one plate record as consumed by GPU-style renderers.
PLATE_RECORD_DTYPE = np.dtype([
    ('center_3d', np.float32, (3,)),
    ('movement_vector', np.float32, (3,)),
    ('speed', np.float32),
    ('is_oceanic', np.int32),
])


def uv_to_sphere(u, v):
    """
    Maps UV coordinates to points on the unit sphere.
    theta = u * 2pi runs around the equator, phi = v * pi runs from the north
    pole (v=0) to the south pole (v=1). Works on scalars and NumPy arrays.
    """
    theta = np.asarray(u, dtype=np.float64) * 2.0 * np.pi
    phi = np.asarray(v, dtype=np.float64) * np.pi
    return np.stack([
        np.sin(phi) * np.cos(theta),
        np.cos(phi),
        np.sin(phi) * np.sin(theta),
    ], axis=-1)


def _read_only_vector(values) -> np.ndarray:
    vector = np.array(values, dtype=np.float64).reshape(3)
    vector.setflags(write=False)
    return vector


@dataclass(frozen=True, eq=False)
class Plate:
    """
    A single tectonic plate. Plates are referenced by id everywhere else.
    Plates are immutable; kinematics produces updated copies with replace().
    """
    id: int
    seed_uv: tuple
    center_3d: np.ndarray
    crust_type: CrustType
    movement_vector: np.ndarray = field(default_factory=lambda: np.zeros(3))
    speed: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'center_3d', _read_only_vector(self.center_3d))
        object.__setattr__(self, 'movement_vector', _read_only_vector(self.movement_vector))

    @property
    def is_oceanic(self) -> bool:
        return self.crust_type is CrustType.OCEANIC

    @property
    def velocity(self) -> np.ndarray:
        """Movement direction scaled by speed."""
        return self.movement_vector * self.speed

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'seed_uv': [float(c) for c in self.seed_uv],
            'center_3d': [float(c) for c in self.center_3d],
            'crust_type': self.crust_type.value,
            'movement_vector': [float(c) for c in self.movement_vector],
            'speed': float(self.speed),
        }


class PlateSet:
    """
    The ordered plates of one generation run.
    Kinematics may update plates until the set is frozen; afterwards the set
    is read-only.
    """

    def __init__(self, plates: list):
        for index, plate in enumerate(plates):
            if plate.id != index:
                raise ValueError(f"Plate ids must be dense and ordered; found id {plate.id} at index {index}.")
        self._plates = list(plates)
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        self._frozen = True

    def update(self, plate: Plate):
        """Replaces the plate with the same id."""
        if self._frozen:
            raise RuntimeError("This PlateSet is frozen; plates cannot change after kinematics.")
        if not 0 <= plate.id < len(self._plates):
            raise ValueError(f"No plate with id {plate.id} in this set.")
        self._plates[plate.id] = plate

    def __len__(self) -> int:
        return len(self._plates)

    def __iter__(self):
        return iter(self._plates)

    def __getitem__(self, plate_id: int) -> Plate:
        return self._plates[plate_id]

    @property
    def count(self) -> int:
        return len(self._plates)

    @property
    def centers(self) -> np.ndarray:
        """An (N, 3) float64 array of plate centers, in id order."""
        centers = np.array([plate.center_3d for plate in self._plates], dtype=np.float64).reshape(-1, 3)
        centers.setflags(write=False)
        return centers

    def to_records(self) -> np.ndarray:
        """Packs the plates into a read-only PLATE_RECORD_DTYPE array."""
        records = np.zeros(len(self._plates), dtype=PLATE_RECORD_DTYPE)
        for plate in self._plates:
            records[plate.id] = (plate.center_3d, plate.movement_vector, plate.speed, int(plate.is_oceanic))
        records.setflags(write=False)
        return records

    def to_list(self) -> list:
        return [plate.to_dict() for plate in self._plates]


def resolve_seed(params: ParameterSet) -> int:
    """Returns the seed for a run. A seed of 0 falls back to one derived from age."""
    if params.seed != 0:
        return params.seed
    seed = int(params.planet_age_billions * DEFAULTS.AGE_SEED_MULTIPLIER) + 1
    return seed if seed != 0 else 1


def create_plate_rng(seed: int) -> np.random.Generator:
    """Creates the run's RNG state object from a signed 32-bit seed."""
    # default_rng rejects negative seeds, so reinterpret the 32 bits as unsigned.
    return np.random.default_rng(seed & 0xFFFFFFFF)


def generate_plates(params: ParameterSet, rng: np.random.Generator) -> PlateSet:
    """
    Places `params.num_plates` seed points on the sphere.
    Each point is drawn uniformly in UV space and then nudged by a small jitter
    to break up regular patterns. u wraps around the equator, v is clamped at
    the poles.
    """
    num_plates = params.num_plates
    jitter = DEFAULTS.PLATE_JITTER / num_plates
    plates = []

    for plate_id in range(num_plates):
        u = rng.uniform(0.0, 1.0)
        v = rng.uniform(0.0, 1.0)
        u += rng.uniform(-jitter, jitter)
        v += rng.uniform(-jitter, jitter)

        u = u - np.floor(u)
        if u >= 1.0:
            u = 0.0
        v = min(max(v, 0.0), 1.0)

        is_oceanic = rng.uniform(0.0, 1.0) < params.oceanic_plate_chance
        plates.append(Plate(
            id=plate_id,
            seed_uv=(float(u), float(v)),
            center_3d=uv_to_sphere(u, v),
            crust_type=CrustType.OCEANIC if is_oceanic else CrustType.CONTINENTAL,
        ))

    return PlateSet(plates)
