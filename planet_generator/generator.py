# planet_generator/generator.py

"""
================================================================================
CORE PLANET GENERATOR
================================================================================
This module contains the PlanetGenerator class, which sequences the pipeline
(profile -> plates -> kinematics -> field kernels) and the PlanetData bundle
that owns everything one generation run produces.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Pipeline settings which can override the internal
      defaults (assignment method, id encoding, noise settings).
    - logger: A configured Python logging object for runtime messages.
- Inputs (per run): a ParameterSet.
- Outputs (from methods):
    - PlanetData: the profile, the plate set, and the (H, W) field arrays.
- Side Effects: Logs messages using the provided logger. Releases the previous
  run's bundle when a new run starts in the same generator.
- Invariants: Given the same ParameterSet with a non-zero seed, the output is
  deterministic. Planets without plate tectonics get no plates and no fields.
================================================================================
"""

import logging
import time

import numpy as np

from . import config as DEFAULTS
from . import noise
from . import tectonics
from .kinematics import apply_kinematic_model
from .parameters import ParameterSet, randomize_parameters
from .plates import PlateSet, create_plate_rng, generate_plates, resolve_seed
from .profile import PlanetProfile, classify_planet


class ResourceReleasedError(RuntimeError):
    """Raised when a released PlanetData bundle is accessed."""


def _freeze(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class PlanetData:
    """
    The output bundle of one generation run.

    The bundle owns its plate set and field arrays. release() drops them and
    is safe to call more than once; using the bundle as a context manager
    releases it on exit.
    """

    def __init__(self, params: ParameterSet, profile: PlanetProfile, seed: int = None):
        self.params = params
        self.profile = profile
        self.seed = seed
        self._plates = PlateSet([])
        self._plates.freeze()
        self._plate_records = None
        self._plate_id_field = None
        self._boundary_delta_field = None
        self._height_noise_field = None
        self._released = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

    def _check_alive(self):
        if self._released:
            raise ResourceReleasedError("This PlanetData has been released; generate a new planet.")

    def _attach_tectonics(self, plates: PlateSet, plate_id_field: np.ndarray, boundary_delta_field: np.ndarray):
        plates.freeze()
        self._plates = plates
        self._plate_records = plates.to_records()
        self._plate_id_field = _freeze(plate_id_field)
        self._boundary_delta_field = _freeze(boundary_delta_field)

    def _attach_height_noise(self, field: np.ndarray):
        self._height_noise_field = _freeze(field)

    # --- Public Properties (Read-Only) ---
    @property
    def released(self) -> bool:
        return self._released

    @property
    def has_tectonics(self) -> bool:
        return self.profile.has_tectonics

    @property
    def width(self) -> int:
        return self.params.map_width

    @property
    def height(self) -> int:
        return self.params.map_height

    @property
    def plates(self) -> PlateSet:
        self._check_alive()
        return self._plates

    @property
    def plate_records(self) -> np.ndarray:
        """Read-only structured array of the plates (None without tectonics)."""
        self._check_alive()
        return self._plate_records

    @property
    def plate_id_field(self) -> np.ndarray:
        self._check_alive()
        return self._plate_id_field

    @property
    def boundary_delta_field(self) -> np.ndarray:
        self._check_alive()
        return self._boundary_delta_field

    @property
    def height_noise_field(self) -> np.ndarray:
        self._check_alive()
        return self._height_noise_field

    def release(self):
        """Invalidates the plate set and all fields. Idempotent."""
        if self._released:
            return
        self._plates = None
        self._plate_records = None
        self._plate_id_field = None
        self._boundary_delta_field = None
        self._height_noise_field = None
        self._released = True


class PlanetGenerator:
    """
    Generates the tectonic fields of a planet.
    The generator holds a single output slot: starting a new run releases the
    bundle of the previous one.
    """
    def __init__(self, config: dict = None, logger: logging.Logger = None):
        """
        Initializes the planet generator.

        Args:
            config (dict, optional): Pipeline settings to override defaults.
            logger (logging.Logger, optional): The logger instance for all output.
        """
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.user_config = config or {}

        # --- Consolidate Configuration ---
        self.settings = {
            'assignment_method': self.user_config.get('assignment_method', DEFAULTS.DEFAULT_ASSIGNMENT_METHOD),
            'plate_id_encoding': self.user_config.get('plate_id_encoding', DEFAULTS.DEFAULT_PLATE_ID_ENCODING),
            'noise_frequency': self.user_config.get('noise_frequency', DEFAULTS.DEFAULT_NOISE_FREQUENCY),
            'noise_amplitude': self.user_config.get('noise_amplitude', DEFAULTS.DEFAULT_NOISE_AMPLITUDE),
            'noise_octaves': self.user_config.get('noise_octaves', DEFAULTS.NOISE_OCTAVES),
            'noise_persistence': self.user_config.get('noise_persistence', DEFAULTS.NOISE_PERSISTENCE),
            'noise_lacunarity': self.user_config.get('noise_lacunarity', DEFAULTS.NOISE_LACUNARITY),
            'noise_seed_offset': self.user_config.get('noise_seed_offset', DEFAULTS.NOISE_SEED_OFFSET),
        }

        if self.settings['assignment_method'] not in tectonics.ASSIGNMENT_METHODS:
            raise ValueError(f"Unknown assignment_method '{self.settings['assignment_method']}'.")
        if self.settings['plate_id_encoding'] not in tectonics.PLATE_ID_ENCODINGS:
            raise ValueError(f"Unknown plate_id_encoding '{self.settings['plate_id_encoding']}'.")

        if self.settings['assignment_method'] == "kdtree":
            self.logger.debug("kdtree plate assignment: cells equidistant to two plates may not resolve to the lower id.")

        self._current = None
        self.logger.debug(f"PlanetGenerator initialized with settings: {self.settings}")

    @property
    def current(self) -> PlanetData:
        """The bundle in the output slot, or None."""
        return self._current

    def release_current(self):
        if self._current is not None:
            self.logger.debug("Releasing previous planet data.")
            self._current.release()
            self._current = None

    def close(self):
        self.release_current()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def generate(self, params: ParameterSet, randomizer_rng: np.random.Generator = None) -> PlanetData:
        """
        Runs one generation: profile, then (with tectonics) plates, kinematics
        and the plate assignment field. The noise field is generated
        separately with generate_noise().

        Args:
            params (ParameterSet): The planet to generate.
            randomizer_rng (np.random.Generator, optional): Used only when
                params.randomize_on_start is set.
        """
        self.release_current()

        if params.randomize_on_start:
            rng = randomizer_rng if randomizer_rng is not None else np.random.default_rng()
            params = randomize_parameters(params, rng)
            self.logger.info(f"Randomized planet parameters: {params.to_dict()}")
        params.validate()

        profile = classify_planet(params)
        self.logger.info(
            f"Planet profile: {profile.planet_type.value} "
            f"(geology={profile.has_active_geology}, water={profile.has_liquid_water}, "
            f"tectonics={profile.has_tectonics})"
        )

        if not profile.has_tectonics:
            planet = PlanetData(params, profile)
            self._current = planet
            self.logger.info("No plate tectonics; skipping plate generation and field kernels.")
            return planet

        seed = resolve_seed(params)
        planet = PlanetData(params, profile, seed=seed)
        self._current = planet
        try:
            start_time = time.perf_counter()
            rng = create_plate_rng(seed)
            plates = generate_plates(params, rng)
            apply_kinematic_model(plates, params, rng)
            self.logger.info(
                f"Generated {plates.count} plates with seed {seed} "
                f"({params.kinematic_model.value} kinematics)."
            )

            plate_ids, boundary_delta = tectonics.compute_plate_assignment(
                plates.centers, params.map_width, params.map_height,
                method=self.settings['assignment_method']
            )
            plate_id_field = tectonics.encode_plate_ids(plate_ids, self.settings['plate_id_encoding'])
            planet._attach_tectonics(plates, plate_id_field, boundary_delta)

            end_time = time.perf_counter()
            self.logger.info(
                f"Plate assignment field {params.map_width}x{params.map_height} "
                f"computed in {end_time - start_time:.2f} seconds."
            )
        except Exception:
            self.logger.error("Planet generation failed; releasing partial planet data.")
            planet.release()
            self._current = None
            raise

        return planet

    def generate_noise(self, planet: PlanetData, frequency: float = None, amplitude: float = None) -> np.ndarray:
        """
        Generates the primordial height-noise field for a planet and stores it
        on the bundle. Returns None for planets without plate tectonics.
        """
        if planet.released:
            raise ResourceReleasedError("Cannot generate noise for a released planet.")
        if not planet.has_tectonics or len(planet.plates) == 0:
            self.logger.info("No plate tectonics; skipping the noise field kernel.")
            return None

        frequency = self.settings['noise_frequency'] if frequency is None else frequency
        amplitude = self.settings['noise_amplitude'] if amplitude is None else amplitude

        start_time = time.perf_counter()
        field = noise.generate_height_noise(
            planet.width, planet.height,
            frequency=frequency,
            amplitude=amplitude,
            seed=planet.seed + self.settings['noise_seed_offset'],
            octaves=self.settings['noise_octaves'],
            persistence=self.settings['noise_persistence'],
            lacunarity=self.settings['noise_lacunarity'],
        )
        planet._attach_height_noise(field)
        end_time = time.perf_counter()
        self.logger.info(f"Primordial noise (frequency={frequency}, amplitude={amplitude}) computed in {end_time - start_time:.2f} seconds.")
        return planet.height_noise_field


def generate(params: ParameterSet, logger: logging.Logger = None) -> PlanetData:
    """Convenience wrapper: one run with default pipeline settings."""
    return PlanetGenerator(logger=logger).generate(params)
