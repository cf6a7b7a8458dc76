"""
Tests for the plate kinematics synthesizer.
"""
import numpy as np
import pytest

from planet_generator.kinematics import (
    WORLD_UP,
    apply_kinematic_model,
    axis_flow_vector,
    draw_flow_field,
    resolve_movement_direction,
)
from planet_generator.parameters import KinematicModel, ParameterSet
from planet_generator.plates import CrustType, Plate, PlateSet, create_plate_rng, generate_plates


def _moving_plates(model, seed=42, num_plates=24, **overrides):
    params = ParameterSet(num_plates=num_plates, seed=seed, kinematic_model=model, **overrides)
    rng = create_plate_rng(params.seed)
    plates = generate_plates(params, rng)
    apply_kinematic_model(plates, params, rng)
    return plates


@pytest.mark.parametrize("model", list(KinematicModel))
class TestEveryModel:

    def test_movement_is_unit_and_tangent(self, model):
        for plate in _moving_plates(model):
            assert np.isfinite(plate.movement_vector).all()
            assert np.linalg.norm(plate.movement_vector) == pytest.approx(1.0)
            assert abs(np.dot(plate.movement_vector, plate.center_3d)) < 1e-5

    def test_speed_is_within_range(self, model):
        for plate in _moving_plates(model, min_plate_speed=0.3, max_plate_speed=0.9):
            assert 0.3 <= plate.speed <= 0.9

    def test_kinematics_are_reproducible(self, model):
        first, second = _moving_plates(model), _moving_plates(model)
        for a, b in zip(first, second):
            np.testing.assert_array_equal(a.movement_vector, b.movement_vector)
            assert a.speed == b.speed


def test_fixed_speed_when_range_is_empty():
    for plate in _moving_plates(KinematicModel.RANDOM, min_plate_speed=1.25, max_plate_speed=1.25):
        assert plate.speed == 1.25


def test_velocity_is_direction_times_speed():
    plate = _moving_plates(KinematicModel.AXIS_FLOWS_4)[0]
    np.testing.assert_allclose(plate.velocity, plate.movement_vector * plate.speed)


def test_axis_flows_share_one_field_across_plates():
    # Two plates at the same location must drift identically under AxisFlows.
    params = ParameterSet(num_plates=3, seed=7, kinematic_model=KinematicModel.AXIS_FLOWS_2)
    center = np.array([0.6, 0.0, 0.8])
    plates = PlateSet([
        Plate(id=i, seed_uv=(0.1, 0.5), center_3d=center.copy(), crust_type=CrustType.OCEANIC)
        for i in range(3)
    ])
    apply_kinematic_model(plates, params, create_plate_rng(7))
    np.testing.assert_allclose(plates[0].movement_vector, plates[1].movement_vector)
    np.testing.assert_allclose(plates[1].movement_vector, plates[2].movement_vector)


def test_flow_field_draws_unit_axes():
    axes, weights = draw_flow_field(4, np.random.default_rng(0))
    assert axes.shape == (4, 3)
    np.testing.assert_allclose(np.linalg.norm(axes, axis=1), 1.0)
    assert np.all(np.abs(weights) <= 0.5)


class TestDegenerateFallback:

    def test_center_parallel_to_every_axis_uses_up_fallback(self):
        center = np.array([1.0, 0.0, 0.0])
        axes = np.array([center, -center, center])
        raw = axis_flow_vector(center, axes, np.array([0.4, -0.2, 0.1]))
        np.testing.assert_allclose(raw, 0.0)

        direction = resolve_movement_direction(center, raw)
        np.testing.assert_allclose(direction, np.cross(center, WORLD_UP))
        assert abs(np.dot(direction, center)) < 1e-12

    def test_center_at_pole_uses_right_fallback(self):
        center = np.array([0.0, 1.0, 0.0])
        direction = resolve_movement_direction(center, np.zeros(3))
        assert np.isfinite(direction).all()
        np.testing.assert_allclose(direction, [0.0, 0.0, -1.0])
        assert np.linalg.norm(direction) == pytest.approx(1.0)

    def test_axis_flows_plate_on_the_axis_still_moves(self):
        # The plate sits on the world up axis; if the random axes happen to be
        # near-parallel the fallback must still yield a valid tangent.
        params = ParameterSet(num_plates=3, seed=11, kinematic_model=KinematicModel.AXIS_FLOWS_4)
        plates = PlateSet([
            Plate(id=0, seed_uv=(0.0, 0.0), center_3d=np.array([0.0, 1.0, 0.0]), crust_type=CrustType.OCEANIC),
            Plate(id=1, seed_uv=(0.0, 1.0), center_3d=np.array([0.0, -1.0, 0.0]), crust_type=CrustType.OCEANIC),
            Plate(id=2, seed_uv=(0.0, 0.5), center_3d=np.array([1.0, 0.0, 0.0]), crust_type=CrustType.CONTINENTAL),
        ])
        apply_kinematic_model(plates, params, create_plate_rng(11))
        for plate in plates:
            assert np.linalg.norm(plate.movement_vector) == pytest.approx(1.0)
            assert abs(np.dot(plate.movement_vector, plate.center_3d)) < 1e-5

    def test_small_but_valid_vector_is_only_normalized(self):
        center = np.array([1.0, 0.0, 0.0])
        raw = np.array([0.0, 0.05, 0.0])
        np.testing.assert_allclose(resolve_movement_direction(center, raw), [0.0, 1.0, 0.0])


def test_plate_set_is_frozen_after_kinematics():
    plates = _moving_plates(KinematicModel.RANDOM, num_plates=5)
    assert plates.frozen
    with pytest.raises(RuntimeError):
        apply_kinematic_model(plates, ParameterSet(num_plates=5), create_plate_rng(1))
