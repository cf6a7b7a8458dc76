# bake_planet.py

"""
================================================================================
OFFLINE PLANET BAKER SCRIPT
================================================================================
This script is a command-line tool for generating one or more planets and
saving their tectonic data to disk ("baking"): the raw field arrays as .npy
files, the plate list as JSON, and PNG previews of every field.

Several planets (consecutive seeds) can be baked in parallel worker
processes. Every worker owns its own PlanetGenerator, so runs never share a
random stream.

Usage:
    python bake_planet.py --config path/to/config.json [--seed 42] [--count 4]
================================================================================
"""
import os
import sys
import json
import logging
import logging.config
import argparse
import time
import multiprocessing
import numpy as np
from PIL import Image
from tqdm import tqdm

from planet_generator import color_maps
from planet_generator.generator import PlanetGenerator
from planet_generator.parameters import InvalidParameterError, ParameterSet
from planet_generator.tectonics import decode_plate_ids

DEFAULT_OUTPUT_DIR = "baked_planets"
DEFAULT_LOG_CONFIG = "logging_config.json"


# --- Helper for Preview Images ---
def save_preview(color_array: np.ndarray, directory: str, name: str) -> str:
    """Saves an (H, W, 3) uint8 color array as a PNG and returns its path."""
    file_path = os.path.join(directory, f"{name}.png")
    img = Image.fromarray(np.ascontiguousarray(color_array), 'RGB')

    # Plate maps rarely use more than a few hundred colors; palettize when possible.
    if img.getcolors(256):
        img = img.quantize(colors=256)
    img.save(file_path, 'PNG')
    return file_path


def write_planet_package(planet, generator: PlanetGenerator, output_dir: str, logger: logging.Logger) -> dict:
    """Writes every artifact of a generated planet into `output_dir`."""
    os.makedirs(output_dir, exist_ok=True)
    profile = planet.profile

    generation_config = {
        'planet_generation_parameters': planet.params.to_dict(),
        'pipeline_settings': generator.settings,
        'resolved_seed': planet.seed,
        'profile': {
            'planet_type': profile.planet_type.value,
            'display_color': list(profile.display_color),
            'engine_score': profile.engine_score,
            'has_active_geology': profile.has_active_geology,
            'has_liquid_water': profile.has_liquid_water,
            'has_tectonics': profile.has_tectonics,
            'has_magnetic_field': profile.has_magnetic_field,
        },
    }
    with open(os.path.join(output_dir, "generation_config.json"), 'w') as f:
        json.dump(generation_config, f, indent=4)

    summary = {'output_dir': output_dir, 'planet_type': profile.planet_type.value, 'num_plates': 0, 'files': ["generation_config.json"]}
    if not planet.has_tectonics:
        logger.info(f"Planet is a {profile.planet_type.value} without tectonics; only the profile was saved.")
        return summary

    data_to_save = {
        "plate_ids": planet.plate_id_field,
        "boundary_delta": planet.boundary_delta_field,
        "height_noise": planet.height_noise_field,
        "plate_records": planet.plate_records,
    }
    for name, data_array in data_to_save.items():
        if data_array is None:
            continue
        np.save(os.path.join(output_dir, f"{name}.npy"), data_array)
        summary['files'].append(f"{name}.npy")
        logger.debug(f"  - Saved {name}.npy (shape: {data_array.shape})")

    with open(os.path.join(output_dir, "plates.json"), 'w') as f:
        json.dump(planet.plates.to_list(), f, indent=2)
    summary['files'].append("plates.json")

    # --- Previews ---
    plate_ids = decode_plate_ids(planet.plate_id_field)
    plate_lut = color_maps.create_plate_color_lut(planet.plates.count, planet.seed)
    crust_lut = color_maps.create_crust_color_lut(planet.plate_records['is_oceanic'])
    gray_lut = color_maps.create_grayscale_lut()
    boundary_delta = planet.boundary_delta_field

    previews = {
        "plates_preview": color_maps.overlay_boundaries(
            color_maps.get_plate_color_array(plate_ids, plate_lut), boundary_delta),
        "crust_preview": color_maps.overlay_boundaries(
            color_maps.get_plate_color_array(plate_ids, crust_lut), boundary_delta),
        "boundary_delta_preview": color_maps.get_scalar_color_array(
            boundary_delta, gray_lut, value_range=(0.0, float(boundary_delta.max()))),
    }
    if planet.height_noise_field is not None:
        amplitude = generator.settings['noise_amplitude']
        previews["height_noise_preview"] = color_maps.get_scalar_color_array(
            planet.height_noise_field, gray_lut, value_range=(0.0, amplitude))

    for name, color_array in previews.items():
        save_preview(color_array, output_dir, name)
        summary['files'].append(f"{name}.png")

    summary['num_plates'] = planet.plates.count
    return summary


def bake_planet(params: ParameterSet, pipeline_settings: dict, output_root: str, logger: logging.Logger) -> dict:
    """Generates one planet (plates, fields, noise) and writes its package."""
    with PlanetGenerator(config=pipeline_settings, logger=logger) as generator:
        planet = generator.generate(params)
        generator.generate_noise(planet)
        seed_label = planet.seed if planet.seed is not None else params.seed
        output_dir = os.path.join(output_root, f"seed_{seed_label}")
        return write_planet_package(planet, generator, output_dir, logger)


# --- Global variables for worker processes ---
worker_settings = None
worker_output_root = None


def init_worker(pipeline_settings, output_root):
    """Initializes the global state for each worker process."""
    global worker_settings, worker_output_root
    worker_settings = pipeline_settings
    worker_output_root = output_root


def process_planet(params_dict: dict) -> dict:
    """Bakes a single planet inside a worker process."""
    worker_logger = logging.getLogger(f"Worker-{os.getpid()}")
    params = ParameterSet.from_config(params_dict)
    return bake_planet(params, worker_settings, worker_output_root, worker_logger)


def setup_logging(log_config_path: str):
    """Configures logging from a dictConfig JSON file, or a basic stdout handler."""
    if log_config_path and os.path.exists(log_config_path):
        with open(log_config_path, 'rt') as f:
            log_config = json.load(f)
        file_handler = log_config.get('handlers', {}).get('file')
        if file_handler is not None:
            log_dir = os.path.dirname(file_handler['filename'])
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
        logging.config.dictConfig(log_config)
    else:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s',
            stream=sys.stdout
        )


def load_config(config_path: str, logger: logging.Logger) -> dict:
    logger.info(f"Loading configuration from: {config_path}")
    with open(config_path, 'r') as f:
        return json.load(f)


# --- Main Baking Function ---
def bake_planets(config: dict, output_root: str = DEFAULT_OUTPUT_DIR, seed: int = None, count: int = 1, logger: logging.Logger = None) -> list:
    """
    Bakes `count` planets with consecutive seeds starting from `seed` (or the
    configured seed). Returns the per-planet summaries in seed order.
    """
    logger = logger if logger is not None else logging.getLogger("Baker")
    planet_params = dict(config.get('planet_generation_parameters', {}))
    pipeline_settings = config.get('pipeline_settings', {})

    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}.")
    if seed is not None:
        planet_params['seed'] = seed
    base_seed = planet_params.get('seed', 0)
    if planet_params.get('randomize_on_start') and (seed is not None or count > 1):
        logger.warning("randomize_on_start is set: every planet draws its own random seed, so the requested seeds are ignored.")

    # Validate every run up front so a bad seed never starts a partial bake.
    jobs = []
    for i in range(count):
        params = ParameterSet.from_config({**planet_params, 'seed': base_seed + i})
        jobs.append(params.to_dict())

    start_time = time.perf_counter()
    if count == 1:
        results = [bake_planet(ParameterSet.from_config(jobs[0]), pipeline_settings, output_root, logger)]
    else:
        num_workers = max(1, min(count, multiprocessing.cpu_count() - 1))
        logger.info(f"Baking {count} planets using {num_workers} worker processes.")
        # Forking after a parallel numba kernel has run deadlocks the workers.
        context = multiprocessing.get_context("spawn")
        with context.Pool(processes=num_workers, initializer=init_worker, initargs=(pipeline_settings, output_root)) as pool:
            results = list(tqdm(pool.imap(process_planet, jobs), total=count, desc="Baking Planets"))

    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    for result in results:
        logger.info(f"  - {result['output_dir']}: {result['planet_type']}, {result['num_plates']} plates, {len(result['files'])} files")
    return results


# --- Command-Line Interface ---
def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Offline planet baker for the procedural planet tectonics generator.")
    parser.add_argument("--config", type=str, required=True, help="Path to the JSON configuration file.")
    parser.add_argument("--seed", type=int, default=None, help="Overrides the configured seed.")
    parser.add_argument("--count", type=int, default=1, help="Number of planets to bake (consecutive seeds).")
    parser.add_argument("--output", type=str, default=DEFAULT_OUTPUT_DIR, help="Root directory for baked planets.")
    parser.add_argument("--log-config", type=str, default=DEFAULT_LOG_CONFIG, help="Path to a logging dictConfig JSON file.")
    args = parser.parse_args(argv)

    setup_logging(args.log_config)
    logger = logging.getLogger("Baker")

    try:
        config = load_config(args.config, logger)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return 1

    try:
        bake_planets(config, output_root=args.output, seed=args.seed, count=args.count, logger=logger)
    except InvalidParameterError as e:
        logger.critical(f"Rejected planet parameters: {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
