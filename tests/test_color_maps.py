"""
Tests for the debug color mapping utilities.
"""
import numpy as np

from planet_generator import color_maps


def test_hsv_to_rgb_primaries():
    hsv = np.array([[0.0, 1.0, 1.0], [1.0 / 3.0, 1.0, 1.0], [2.0 / 3.0, 1.0, 1.0], [0.5, 0.0, 0.4]])
    np.testing.assert_allclose(
        color_maps.hsv_to_rgb(hsv),
        [[1, 0, 0], [0, 1, 0], [0, 0, 1], [0.4, 0.4, 0.4]],
        atol=1e-9,
    )


def test_plate_color_lut_is_seeded():
    lut = color_maps.create_plate_color_lut(12, seed=42)
    assert lut.shape == (12, 3)
    assert lut.dtype == np.uint8
    np.testing.assert_array_equal(lut, color_maps.create_plate_color_lut(12, seed=42))
    assert not np.array_equal(lut, color_maps.create_plate_color_lut(12, seed=43))


def test_crust_lut_uses_crust_colors():
    lut = color_maps.create_crust_color_lut(np.array([1, 0, 1]))
    np.testing.assert_array_equal(lut[0], color_maps.COLOR_OCEANIC_CRUST)
    np.testing.assert_array_equal(lut[1], color_maps.COLOR_CONTINENTAL_CRUST)


def test_plate_color_array_indexes_the_lut():
    lut = np.array([[255, 0, 0], [0, 0, 255]], dtype=np.uint8)
    ids = np.array([[0, 1], [1, 0]])
    colors = color_maps.get_plate_color_array(ids, lut)
    assert colors.shape == (2, 2, 3)
    np.testing.assert_array_equal(colors[0, 1], [0, 0, 255])


def test_boundary_mask_covers_boundaries_only():
    delta = np.zeros((64, 128), dtype=np.float32)
    delta[:, 64:] = 1.5
    mask = color_maps.boundary_line_mask(delta)
    assert np.all(mask[:, :64] == 1.0)
    assert np.all(mask[:, 64:] == 0.0)


def test_overlay_paints_line_color():
    colors = np.zeros((8, 8, 3), dtype=np.uint8)
    delta = np.zeros((8, 8), dtype=np.float32)
    out = color_maps.overlay_boundaries(colors, delta, line_color=(200, 100, 50))
    np.testing.assert_array_equal(out[0, 0], [200, 100, 50])


def test_scalar_color_array_normalizes_values():
    lut = color_maps.create_grayscale_lut()
    values = np.array([[0.0, 0.5, 1.0]])
    colors = color_maps.get_scalar_color_array(values, lut, value_range=(0.0, 1.0))
    np.testing.assert_array_equal(colors[0, :, 0], [0, 127, 255])
