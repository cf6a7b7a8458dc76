# planet_generator/profile.py

"""
================================================================================
PLANET PROFILE CLASSIFIER
================================================================================
A pure function that decides what kind of planet a Parameter Set describes.
The profile gates the rest of the pipeline: plates and fields are only
generated for planets with active plate tectonics.

Data Contract:
---------------
- Inputs: a validated ParameterSet.
- Outputs: PlanetProfile (frozen).
- Side Effects: None.
- Invariants: planet_type and display_color are fully determined by the pair
  (has_tectonics, has_liquid_water).
================================================================================
"""
from dataclasses import dataclass
from enum import Enum

from . import config as DEFAULTS
from .parameters import HabitableZone, ParameterSet


class PlanetType(Enum):
    EARTH_LIKE = "earth_like"            # tectonics, water
    VOLCANIC_WORLD = "volcanic_world"    # tectonics, no water
    ICE_SHELL_WORLD = "ice_shell_world"  # no tectonics, water
    CRATERED_WORLD = "cratered_world"    # no tectonics, no water


# (has_tectonics, has_liquid_water) -> (type, display color as linear RGB)
_ARCHETYPES = {
    (True, True): (PlanetType.EARTH_LIKE, (0.2, 0.4, 0.8)),
    (True, False): (PlanetType.VOLCANIC_WORLD, (0.7, 0.2, 0.1)),
    (False, True): (PlanetType.ICE_SHELL_WORLD, (0.9, 0.9, 1.0)),
    (False, False): (PlanetType.CRATERED_WORLD, (0.5, 0.5, 0.5)),
}


@dataclass(frozen=True)
class PlanetProfile:
    engine_score: float
    has_active_geology: bool
    has_liquid_water: bool
    has_tectonics: bool
    has_magnetic_field: bool
    planet_type: PlanetType
    display_color: tuple


def classify_archetype(has_tectonics: bool, has_liquid_water: bool) -> tuple:
    """Returns (PlanetType, display_color) for one of the four combinations."""
    return _ARCHETYPES[(bool(has_tectonics), bool(has_liquid_water))]


def classify_planet(params: ParameterSet) -> PlanetProfile:
    """Derives the planet profile from its radius, age, zone and water."""
    engine_score = params.planet_radius - (params.planet_age_billions / DEFAULTS.AGE_COOLING_DIVISOR)
    has_active_geology = engine_score > DEFAULTS.ACTIVE_GEOLOGY_THRESHOLD
    has_liquid_water = (
        params.planet_zone is HabitableZone.HABITABLE
        and params.water_abundance > DEFAULTS.LIQUID_WATER_THRESHOLD
    )
    has_tectonics = has_active_geology and has_liquid_water
    planet_type, display_color = classify_archetype(has_tectonics, has_liquid_water)

    return PlanetProfile(
        engine_score=engine_score,
        has_active_geology=has_active_geology,
        has_liquid_water=has_liquid_water,
        has_tectonics=has_tectonics,
        # A molten, convecting core is what drives a dynamo.
        has_magnetic_field=has_active_geology,
        planet_type=planet_type,
        display_color=display_color,
    )
