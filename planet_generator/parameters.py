# planet_generator/parameters.py

"""
================================================================================
PLANET GENERATION PARAMETERS
================================================================================
This module defines the immutable Parameter Set that describes a planet's
character and the resolution of the maps generated for it.

Data Contract:
---------------
- Inputs:
    - Keyword arguments, or a configuration dictionary (e.g. loaded from JSON)
      whose missing keys fall back to the internal defaults in config.py.
- Outputs:
    - ParameterSet: a frozen, fully validated value object.
- Side Effects: None.
- Invariants: A ParameterSet that exists is always valid. Every range check
  happens at construction time, before any random number is drawn, so a
  rejected run can never perturb the random stream of a later run.
================================================================================
"""
import numbers
from dataclasses import asdict, dataclass, replace
from enum import Enum

import numpy as np

from . import config as DEFAULTS


class InvalidParameterError(ValueError):
    """Raised when a planet parameter is outside its documented range."""

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid parameter '{field}' = {value!r}: {reason}")


class HabitableZone(Enum):
    """The planet's position relative to its star's habitable zone."""
    TOO_HOT = "too_hot"
    HABITABLE = "habitable"
    TOO_COLD = "too_cold"


class KinematicModel(Enum):
    """The closed set of plate velocity models."""
    RANDOM = "random"
    AXIS_FLOWS_2 = "axis_flows_2"
    AXIS_FLOWS_4 = "axis_flows_4"

    @property
    def axis_count(self) -> int:
        """Number of rotation axes for the AxisFlows models (0 for RANDOM)."""
        if self is KinematicModel.AXIS_FLOWS_2:
            return 2
        if self is KinematicModel.AXIS_FLOWS_4:
            return 4
        return 0


def _coerce_enum(enum_cls, value, field: str):
    """Accepts an enum member, its value ("habitable") or its name ("HABITABLE")."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        pass
    if isinstance(value, str):
        key = value.strip().upper()
        if key in enum_cls.__members__:
            return enum_cls[key]
    options = ", ".join(member.value for member in enum_cls)
    raise InvalidParameterError(field, value, f"expected one of: {options}")


def _check_range(field: str, value, bounds: tuple):
    lo, hi = bounds
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(field, value, "must be a number")
    # Written as a negated comparison so that NaN is rejected as well.
    if not (lo <= value <= hi):
        raise InvalidParameterError(field, value, f"must be within [{lo}, {hi}]")


def _check_integer(field: str, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(field, value, "must be an integer")


@dataclass(frozen=True)
class ParameterSet:
    """
    Immutable input describing a planet's character.

    A seed of 0 is a request for a fallback seed derived from the planet's
    age (see plates.resolve_seed); the literal 0 is never used as a seed.
    """
    planet_zone: HabitableZone = HabitableZone(DEFAULTS.DEFAULT_PLANET_ZONE)
    planet_radius: float = DEFAULTS.DEFAULT_PLANET_RADIUS
    planet_age_billions: float = DEFAULTS.DEFAULT_PLANET_AGE_BILLIONS
    water_abundance: float = DEFAULTS.DEFAULT_WATER_ABUNDANCE
    has_large_moon: bool = DEFAULTS.DEFAULT_HAS_LARGE_MOON
    num_plates: int = DEFAULTS.DEFAULT_NUM_TECTONIC_PLATES
    oceanic_plate_chance: float = DEFAULTS.DEFAULT_OCEANIC_PLATE_CHANCE
    map_width: int = DEFAULTS.DEFAULT_MAP_WIDTH
    map_height: int = DEFAULTS.DEFAULT_MAP_HEIGHT
    seed: int = 0
    kinematic_model: KinematicModel = KinematicModel(DEFAULTS.DEFAULT_KINEMATIC_MODEL)
    min_plate_speed: float = DEFAULTS.DEFAULT_MIN_PLATE_SPEED
    max_plate_speed: float = DEFAULTS.DEFAULT_MAX_PLATE_SPEED
    randomize_on_start: bool = False

    def __post_init__(self):
        # Enum fields may arrive as strings from JSON configs.
        object.__setattr__(self, 'planet_zone', _coerce_enum(HabitableZone, self.planet_zone, 'planet_zone'))
        object.__setattr__(self, 'kinematic_model', _coerce_enum(KinematicModel, self.kinematic_model, 'kinematic_model'))
        self.validate()

    def validate(self):
        """Raises InvalidParameterError for the first out-of-range field."""
        _check_range('planet_radius', self.planet_radius, DEFAULTS.PLANET_RADIUS_RANGE)
        _check_range('planet_age_billions', self.planet_age_billions, DEFAULTS.PLANET_AGE_RANGE_BILLIONS)
        _check_range('water_abundance', self.water_abundance, DEFAULTS.WATER_ABUNDANCE_RANGE)

        if not isinstance(self.has_large_moon, bool):
            raise InvalidParameterError('has_large_moon', self.has_large_moon, "must be a boolean")
        if not isinstance(self.randomize_on_start, bool):
            raise InvalidParameterError('randomize_on_start', self.randomize_on_start, "must be a boolean")

        _check_integer('num_plates', self.num_plates)
        _check_range('num_plates', self.num_plates, DEFAULTS.PLATE_COUNT_RANGE)
        _check_range('oceanic_plate_chance', self.oceanic_plate_chance, DEFAULTS.OCEANIC_CHANCE_RANGE)

        for field in ('map_width', 'map_height'):
            value = getattr(self, field)
            _check_integer(field, value)
            if value <= 0:
                raise InvalidParameterError(field, value, "must be a positive integer")

        _check_integer('seed', self.seed)
        _check_range('seed', self.seed, DEFAULTS.SEED_RANGE)

        for field in ('min_plate_speed', 'max_plate_speed'):
            value = getattr(self, field)
            _check_range(field, value, (-np.inf, np.inf))
            if not np.isfinite(value):
                raise InvalidParameterError(field, value, "must be finite")
            if value <= 0:
                raise InvalidParameterError(field, value, "must be greater than zero")
        if self.min_plate_speed > self.max_plate_speed:
            raise InvalidParameterError(
                'min_plate_speed', self.min_plate_speed,
                f"must not exceed max_plate_speed ({self.max_plate_speed})"
            )

    @classmethod
    def from_config(cls, config: dict) -> "ParameterSet":
        """
        Builds a ParameterSet from a user configuration dictionary, filling in
        internal defaults for any key that is not provided.
        """
        unknown = set(config) - set(cls.__dataclass_fields__)
        if unknown:
            name = sorted(unknown)[0]
            raise InvalidParameterError(name, config[name], "unknown parameter")

        return cls(
            planet_zone=config.get('planet_zone', DEFAULTS.DEFAULT_PLANET_ZONE),
            planet_radius=config.get('planet_radius', DEFAULTS.DEFAULT_PLANET_RADIUS),
            planet_age_billions=config.get('planet_age_billions', DEFAULTS.DEFAULT_PLANET_AGE_BILLIONS),
            water_abundance=config.get('water_abundance', DEFAULTS.DEFAULT_WATER_ABUNDANCE),
            has_large_moon=config.get('has_large_moon', DEFAULTS.DEFAULT_HAS_LARGE_MOON),
            num_plates=config.get('num_plates', DEFAULTS.DEFAULT_NUM_TECTONIC_PLATES),
            oceanic_plate_chance=config.get('oceanic_plate_chance', DEFAULTS.DEFAULT_OCEANIC_PLATE_CHANCE),
            map_width=config.get('map_width', DEFAULTS.DEFAULT_MAP_WIDTH),
            map_height=config.get('map_height', DEFAULTS.DEFAULT_MAP_HEIGHT),
            seed=config.get('seed', 0),
            kinematic_model=config.get('kinematic_model', DEFAULTS.DEFAULT_KINEMATIC_MODEL),
            min_plate_speed=config.get('min_plate_speed', DEFAULTS.DEFAULT_MIN_PLATE_SPEED),
            max_plate_speed=config.get('max_plate_speed', DEFAULTS.DEFAULT_MAX_PLATE_SPEED),
            randomize_on_start=config.get('randomize_on_start', False),
        )

    def to_dict(self) -> dict:
        """A JSON-serializable copy of the parameters (enums as their values)."""
        data = asdict(self)
        data['planet_zone'] = self.planet_zone.value
        data['kinematic_model'] = self.kinematic_model.value
        return data


def randomize_parameters(params: ParameterSet, rng: np.random.Generator) -> ParameterSet:
    """
    Returns a copy of `params` with the planet's character replaced by random
    draws. Map resolution is preserved and randomize_on_start is cleared so
    the result can be generated directly.

    The caller owns `rng`; it is never the plate stream of a generation run.
    """
    zones = list(HabitableZone)
    models = [KinematicModel.RANDOM, KinematicModel.AXIS_FLOWS_2]
    seed_lo, seed_hi = DEFAULTS.SEED_RANGE

    return replace(
        params,
        seed=int(rng.integers(seed_lo, seed_hi)),
        planet_zone=zones[int(rng.integers(0, len(zones)))],
        planet_radius=float(rng.uniform(*DEFAULTS.PLANET_RADIUS_RANGE)),
        planet_age_billions=float(rng.uniform(*DEFAULTS.PLANET_AGE_RANGE_BILLIONS)),
        water_abundance=float(rng.uniform(*DEFAULTS.WATER_ABUNDANCE_RANGE)),
        has_large_moon=bool(rng.integers(0, 2) > 0),
        num_plates=int(rng.integers(*DEFAULTS.RANDOM_PLATE_COUNT_RANGE)),
        oceanic_plate_chance=float(rng.uniform(*DEFAULTS.RANDOM_OCEANIC_CHANCE_RANGE)),
        kinematic_model=models[int(rng.integers(0, len(models)))],
        min_plate_speed=float(rng.uniform(*DEFAULTS.RANDOM_MIN_SPEED_RANGE)),
        max_plate_speed=float(rng.uniform(*DEFAULTS.RANDOM_MAX_SPEED_RANGE)),
        randomize_on_start=False,
    )
