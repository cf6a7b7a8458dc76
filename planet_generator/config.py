# planet_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the planet
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC PLANET.
Instead, pass a configuration dictionary to ParameterSet.from_config() or to
the PlanetGenerator instance.
================================================================================
"""

# --- Planet Character Defaults ---
# An Earth analogue: habitable, one Earth radius, 4.5 billion years old.
DEFAULT_PLANET_ZONE = "habitable"
DEFAULT_PLANET_RADIUS = 1.0
DEFAULT_PLANET_AGE_BILLIONS = 4.5
DEFAULT_WATER_ABUNDANCE = 0.7
DEFAULT_HAS_LARGE_MOON = True

# --- Parameter Ranges (Rule 1) ---
# Inputs outside these ranges are rejected, never clamped.
PLANET_RADIUS_RANGE = (0.25, 2.0)
PLANET_AGE_RANGE_BILLIONS = (0.5, 10.0)
WATER_ABUNDANCE_RANGE = (0.0, 1.0)
PLATE_COUNT_RANGE = (3, 100)
OCEANIC_CHANCE_RANGE = (0.0, 1.0)
SEED_RANGE = (-2**31, 2**31 - 1)

# --- Planet Profile Thresholds (Rule 8) ---
# engine_score = radius - age / AGE_COOLING_DIVISOR. Big, young planets keep
# enough internal heat to drive an active geology.
AGE_COOLING_DIVISOR = 10.0
ACTIVE_GEOLOGY_THRESHOLD = 0.5
# Below this abundance a habitable planet is still considered dry.
LIQUID_WATER_THRESHOLD = 0.1

# --- Tectonics ---
DEFAULT_NUM_TECTONIC_PLATES = 12
DEFAULT_OCEANIC_PLATE_CHANCE = 0.6
# Seed points get a small perturbation of +/- PLATE_JITTER / num_plates.
PLATE_JITTER = 0.1
DEFAULT_KINEMATIC_MODEL = "axis_flows_2"
DEFAULT_MIN_PLATE_SPEED = 0.5
DEFAULT_MAX_PLATE_SPEED = 2.0
# AxisFlows rotation weights are drawn from [-AXIS_WEIGHT_LIMIT, AXIS_WEIGHT_LIMIT].
AXIS_WEIGHT_LIMIT = 0.5
# Raw movement vectors with a squared length below this use the fallback tangent.
DEGENERATE_VECTOR_SQR_MAGNITUDE = 1e-3

# --- Seeding ---
# A seed of 0 means "derive one from the planet's age".
AGE_SEED_MULTIPLIER = 1000
# Large prime offsets keep secondary streams unique but deterministic from
# the master seed.
NOISE_SEED_OFFSET = 12347
PLATE_COLOR_SEED_OFFSET = 54321

# --- Resolutions ---
# GPU renderers typically bake 2048x1024 maps. The smaller default keeps the
# CPU kernels interactive.
DEFAULT_MAP_WIDTH = 512
DEFAULT_MAP_HEIGHT = 256

# --- Plate Assignment Field ---
# 'scan' is the exact linear search with lowest-id tie-breaking.
# 'kdtree' uses a spatial index and is only faster for large plate counts.
DEFAULT_ASSIGNMENT_METHOD = "scan"
# 'raw' stores int32 ids, 'normalized' stores float32 id / 255 (an R8 texture).
DEFAULT_PLATE_ID_ENCODING = "raw"
PLATE_ID_NORMALIZER = 255.0
MAX_BOUNDARY_DELTA = 2.0

# --- Primordial Noise ---
DEFAULT_NOISE_FREQUENCY = 3.5
DEFAULT_NOISE_AMPLITUDE = 1.0
NOISE_OCTAVES = 5
NOISE_PERSISTENCE = 0.5
NOISE_LACUNARITY = 2.0

# --- Randomization Ranges (used when randomize_on_start is set) ---
RANDOM_PLATE_COUNT_RANGE = (5, 40)
RANDOM_OCEANIC_CHANCE_RANGE = (0.4, 0.8)
RANDOM_MIN_SPEED_RANGE = (0.2, 0.8)
RANDOM_MAX_SPEED_RANGE = (1.0, 2.5)
