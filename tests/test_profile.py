"""
Tests for the planet profile classifier.
"""
import pytest

from planet_generator.parameters import HabitableZone, ParameterSet
from planet_generator.profile import PlanetType, classify_archetype, classify_planet


def test_earth_analogue_has_tectonics():
    profile = classify_planet(ParameterSet(planet_radius=1.0, planet_age_billions=4.5, water_abundance=0.7))
    assert profile.engine_score == pytest.approx(0.55)
    assert profile.has_active_geology
    assert profile.has_liquid_water
    assert profile.has_tectonics
    assert profile.has_magnetic_field
    assert profile.planet_type is PlanetType.EARTH_LIKE
    assert profile.display_color == (0.2, 0.4, 0.8)


def test_old_wet_planet_is_an_ice_shell_world():
    profile = classify_planet(ParameterSet(planet_radius=1.0, planet_age_billions=6.0))
    assert not profile.has_active_geology
    assert profile.has_liquid_water
    assert not profile.has_tectonics
    assert not profile.has_magnetic_field
    assert profile.planet_type is PlanetType.ICE_SHELL_WORLD


def test_hot_active_planet_has_no_water_and_no_tectonics():
    profile = classify_planet(ParameterSet(planet_zone=HabitableZone.TOO_HOT, planet_radius=2.0, planet_age_billions=1.0))
    assert profile.has_active_geology
    assert profile.has_magnetic_field
    assert not profile.has_liquid_water
    assert not profile.has_tectonics
    assert profile.planet_type is PlanetType.CRATERED_WORLD


def test_water_threshold_is_strict():
    assert not classify_planet(ParameterSet(water_abundance=0.1)).has_liquid_water
    assert classify_planet(ParameterSet(water_abundance=0.11)).has_liquid_water


def test_engine_score_threshold_is_strict():
    # 1.0 - 5.0 / 10 == 0.5 exactly, which is not enough.
    assert not classify_planet(ParameterSet(planet_radius=1.0, planet_age_billions=5.0)).has_active_geology


@pytest.mark.parametrize("tectonics, water, expected", [
    (True, True, PlanetType.EARTH_LIKE),
    (True, False, PlanetType.VOLCANIC_WORLD),
    (False, True, PlanetType.ICE_SHELL_WORLD),
    (False, False, PlanetType.CRATERED_WORLD),
])
def test_archetype_is_a_function_of_the_two_flags(tectonics, water, expected):
    planet_type, color = classify_archetype(tectonics, water)
    assert planet_type is expected
    assert len(color) == 3
