"""
Tests for the offline planet baker script.
"""
import json
import logging
import os

import numpy as np
import pytest

import bake_planet


@pytest.fixture
def small_config():
    return {
        "planet_generation_parameters": {
            "num_plates": 8,
            "map_width": 32,
            "map_height": 16,
            "seed": 42,
        },
        "pipeline_settings": {
            "noise_octaves": 3,
        },
    }


def test_bakes_a_planet_package(tmp_path, small_config):
    results = bake_planet.bake_planets(small_config, output_root=str(tmp_path), logger=logging.getLogger("test"))
    assert len(results) == 1
    output_dir = tmp_path / "seed_42"
    assert results[0]['output_dir'] == str(output_dir)
    assert results[0]['num_plates'] == 8

    for name in ["generation_config.json", "plates.json", "plate_ids.npy", "boundary_delta.npy",
                 "height_noise.npy", "plate_records.npy", "plates_preview.png", "crust_preview.png",
                 "boundary_delta_preview.png", "height_noise_preview.png"]:
        assert (output_dir / name).exists(), name

    plate_ids = np.load(output_dir / "plate_ids.npy")
    assert plate_ids.shape == (16, 32)
    assert plate_ids.max() < 8

    with open(output_dir / "plates.json") as f:
        plates = json.load(f)
    assert [plate['id'] for plate in plates] == list(range(8))

    with open(output_dir / "generation_config.json") as f:
        generation_config = json.load(f)
    assert generation_config['resolved_seed'] == 42
    assert generation_config['profile']['planet_type'] == "earth_like"
    assert generation_config['pipeline_settings']['noise_octaves'] == 3


def test_seed_override(tmp_path, small_config):
    bake_planet.bake_planets(small_config, output_root=str(tmp_path), seed=7)
    assert (tmp_path / "seed_7" / "plate_ids.npy").exists()


def test_worker_pool_matches_single_bakes(tmp_path, small_config):
    # Runs a kernel in this process before the pool starts its workers.
    single_root = tmp_path / "single"
    for seed in (42, 43):
        bake_planet.bake_planets(small_config, output_root=str(single_root), seed=seed)

    pool_root = tmp_path / "pool"
    results = bake_planet.bake_planets(small_config, output_root=str(pool_root), count=2)
    assert [result['output_dir'] for result in results] == [str(pool_root / "seed_42"), str(pool_root / "seed_43")]

    for seed in (42, 43):
        for name in ("plate_ids.npy", "boundary_delta.npy", "height_noise.npy"):
            np.testing.assert_array_equal(
                np.load(pool_root / f"seed_{seed}" / name),
                np.load(single_root / f"seed_{seed}" / name),
            )


def test_seed_override_with_randomization_is_reported(tmp_path, small_config, caplog):
    small_config["planet_generation_parameters"]["randomize_on_start"] = True
    with caplog.at_level(logging.WARNING):
        bake_planet.bake_planets(small_config, output_root=str(tmp_path), seed=7)
    assert any("randomize_on_start" in record.getMessage() for record in caplog.records)


def test_planet_without_tectonics_only_saves_the_profile(tmp_path, small_config):
    small_config["planet_generation_parameters"]["planet_zone"] = "too_hot"
    results = bake_planet.bake_planets(small_config, output_root=str(tmp_path))
    assert results[0]['planet_type'] == "cratered_world"
    assert os.listdir(tmp_path / "seed_42") == ["generation_config.json"]


def test_invalid_count_is_rejected(tmp_path, small_config):
    with pytest.raises(ValueError):
        bake_planet.bake_planets(small_config, output_root=str(tmp_path), count=0)


class TestMain:

    def test_missing_config_exits_with_error(self, tmp_path):
        code = bake_planet.main([
            "--config", str(tmp_path / "missing.json"),
            "--log-config", str(tmp_path / "no_logging.json"),
        ])
        assert code == 1

    def test_invalid_parameters_exit_with_error(self, tmp_path, small_config):
        small_config["planet_generation_parameters"]["num_plates"] = 2
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(small_config))
        code = bake_planet.main([
            "--config", str(config_path),
            "--output", str(tmp_path / "out"),
            "--log-config", str(tmp_path / "no_logging.json"),
        ])
        assert code == 2
        assert not (tmp_path / "out").exists()

    def test_successful_bake(self, tmp_path, small_config):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(small_config))
        code = bake_planet.main([
            "--config", str(config_path),
            "--output", str(tmp_path / "out"),
            "--seed", "5",
            "--log-config", str(tmp_path / "no_logging.json"),
        ])
        assert code == 0
        assert (tmp_path / "out" / "seed_5" / "plates_preview.png").exists()
