# planet_generator/__init__.py

# This file makes the 'planet_generator' directory a Python package.
# It also defines the public API of the package.

from .parameters import (
    HabitableZone,
    InvalidParameterError,
    KinematicModel,
    ParameterSet,
    randomize_parameters,
)
from .profile import PlanetProfile, PlanetType, classify_planet
from .plates import CrustType, Plate, PlateSet, generate_plates, resolve_seed
from .kinematics import apply_kinematic_model
from .tectonics import compute_plate_assignment, decode_plate_ids
from .noise import generate_height_noise
from .generator import PlanetData, PlanetGenerator, ResourceReleasedError, generate

__all__ = [
    "HabitableZone", "InvalidParameterError", "KinematicModel", "ParameterSet",
    "randomize_parameters", "PlanetProfile", "PlanetType", "classify_planet",
    "CrustType", "Plate", "PlateSet", "generate_plates", "resolve_seed",
    "apply_kinematic_model", "compute_plate_assignment", "decode_plate_ids",
    "generate_height_noise", "PlanetData", "PlanetGenerator",
    "ResourceReleasedError", "generate",
]
