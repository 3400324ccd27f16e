"""Tests for point-wise colour filters and colour helpers."""

import numpy as np
import pytest

from photocraft.errors import InvalidParameterError, OutOfBoundsError
from photocraft.models.pixel_buffer import Color, PixelBuffer
from photocraft.services.color_service import color_at, contrast_factor, hex_to_rgb, rgb_to_hex


@pytest.fixture
def all_values_buffer(make_buffer):
    """16x16 image whose pixel i has R=G=B=i."""
    values = np.arange(256, dtype=np.uint8).reshape(16, 16)
    pixels = np.stack([values, values, values, np.full_like(values, 255)], axis=2)
    return make_buffer(pixels)


@pytest.mark.parametrize("levels", range(2, 17))
def test_quantize_formula_for_every_value(colors, all_values_buffer, levels):
    out = colors.quantize(all_values_buffer, levels).to_array()[..., 0].ravel()

    step = 255.0 / (levels - 1)
    values = np.arange(256, dtype=np.float64)
    expected = np.clip(np.rint(np.floor(values * (1.0 / step) + 0.5) * step), 0, 255)
    np.testing.assert_array_equal(out, expected)
    assert len(set(out.tolist())) <= levels


@pytest.mark.parametrize("levels", [2, 3, 5, 8, 16])
def test_quantize_is_idempotent(colors, random_buffer, levels):
    once = colors.quantize(random_buffer, levels)
    assert colors.quantize(once, levels) == once


def test_quantize_keeps_alpha(colors, random_buffer):
    out = colors.quantize(random_buffer, 4).to_array()
    np.testing.assert_array_equal(out[..., 3], random_buffer.to_array()[..., 3])


@pytest.mark.parametrize("levels", [1, 0, -3, 17, 256])
def test_quantize_rejects_bad_levels(colors, random_buffer, levels):
    with pytest.raises(InvalidParameterError):
        colors.quantize(random_buffer, levels)


def test_saturation_examples(colors, make_buffer):
    buf = make_buffer([[[200, 100, 50, 255], [90, 90, 90, 17]]])

    gray = colors.boost_saturation(buf, 0.0).to_array()
    assert gray[0, 0, :3].tolist() == [124, 124, 124]

    boosted = colors.boost_saturation(buf, 2.0).to_array()
    assert boosted[0, 0, :3].tolist() == [255, 76, 0]
    # neutral pixels and alpha are untouched
    assert boosted[0, 1].tolist() == [90, 90, 90, 17]


def test_saturation_identity_factor(colors, random_buffer):
    assert colors.boost_saturation(random_buffer, 1.0) == random_buffer


def test_enhance_brightness_clamps_to_black(colors, white_buffer):
    out = colors.enhance(white_buffer, brightness=-300).to_array()
    assert (out[..., :3] == 0).all()
    assert (out[..., 3] == 255).all()


def test_enhance_neutral_parameters_are_identity(colors, random_buffer):
    assert colors.enhance(random_buffer) == random_buffer


def test_enhance_applies_brightness_before_contrast(colors):
    buf = PixelBuffer.filled(1, 1, (100, 100, 100, 255))
    factor = contrast_factor(50)
    out = colors.enhance(buf, brightness=20, contrast=50).to_array()

    expected = int(np.rint(factor * (100 + 20 - 128) + 128))
    swapped = int(np.rint(factor * (100 - 128) + 128 + 20))
    assert out[0, 0, 0] == expected
    assert expected != swapped


def test_enhance_saturation_uses_percent_factor(colors, make_buffer):
    buf = make_buffer([[[200, 100, 50, 255]]])
    out = colors.enhance(buf, saturation=100).to_array()
    assert out[0, 0, :3].tolist() == [255, 76, 0]


def test_enhance_sharpness_is_final_pass(colors, windowed, random_buffer):
    adjusted = colors.enhance(random_buffer, brightness=10, contrast=20, saturation=-30)
    expected = windowed.sharpen(adjusted, 60)
    assert colors.enhance(random_buffer, 10, 20, -30, 60) == expected


@pytest.mark.parametrize("contrast", [259, 300, -256])
def test_enhance_rejects_contrast_outside_formula_domain(colors, random_buffer, contrast):
    with pytest.raises(InvalidParameterError):
        colors.enhance(random_buffer, contrast=contrast)


def test_enhance_rejects_negative_sharpness(colors, random_buffer):
    with pytest.raises(InvalidParameterError):
        colors.enhance(random_buffer, sharpness=-5)


def test_contrast_factor_is_one_at_zero():
    assert contrast_factor(0) == pytest.approx(1.0)
    assert contrast_factor(100) > 1.0 > contrast_factor(-100) > 0.0


@pytest.mark.parametrize(
    "text, expected",
    [
        ("#FF0000", Color(255, 0, 0)),
        ("00ff7f", Color(0, 255, 127)),
        ("#aBcDeF", Color(171, 205, 239)),
        ("notacolor", Color(0, 0, 0)),
        ("#FFF", Color(0, 0, 0)),
        ("#ff00001", Color(0, 0, 0)),
        ("#ff0000\n", Color(0, 0, 0)),
        ("", Color(0, 0, 0)),
    ],
)
def test_hex_to_rgb(text, expected):
    assert hex_to_rgb(text) == expected


def test_rgb_to_hex_is_lowercase():
    assert rgb_to_hex(Color(0, 171, 255)) == "#00abff"
    assert hex_to_rgb(rgb_to_hex(Color(12, 34, 56))) == Color(12, 34, 56)


def test_color_at_reads_pixel(make_buffer):
    pixels = np.zeros((2, 3, 4), dtype=np.uint8)
    pixels[1, 2] = (7, 8, 9, 10)
    assert color_at(make_buffer(pixels), 2, 1) == Color(7, 8, 9)


@pytest.mark.parametrize("point", [(-1, 0), (3, 0), (0, 2), (0, -1)])
def test_color_at_out_of_bounds(point):
    buf = PixelBuffer.filled(3, 2, (0, 0, 0, 255))
    with pytest.raises(OutOfBoundsError):
        color_at(buf, *point)
