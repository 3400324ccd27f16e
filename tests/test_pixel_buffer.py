"""Tests for the RGBA buffer model."""

import numpy as np
import pytest

from photocraft.errors import DimensionMismatchError, InvalidParameterError
from photocraft.models.pixel_buffer import Color, PixelBuffer


def test_length_must_match_dimensions():
    with pytest.raises(DimensionMismatchError):
        PixelBuffer(width=2, height=2, data=bytes(15))


def test_dimensions_must_be_positive():
    with pytest.raises(InvalidParameterError):
        PixelBuffer(width=0, height=3, data=b"")


def test_from_array_clamps_and_rounds_half_to_even():
    arr = np.array([[[-5.0, 300.0, 127.5, 128.5]]])
    buf = PixelBuffer.from_array(arr)
    assert list(buf.data) == [0, 255, 128, 128]


def test_from_array_rejects_wrong_channel_count():
    with pytest.raises(DimensionMismatchError):
        PixelBuffer.from_array(np.zeros((2, 2, 3), dtype=np.uint8))


def test_to_array_returns_independent_copy():
    buf = PixelBuffer.filled(3, 2, (10, 20, 30, 255))
    arr = buf.to_array()
    arr[...] = 0
    assert buf.to_array()[0, 0].tolist() == [10, 20, 30, 255]
    assert arr.shape == (2, 3, 4)


def test_pil_conversion_preserves_pixels(make_buffer):
    pixels = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
    buf = make_buffer(pixels)
    image = buf.to_pil()
    assert image.size == (3, 2)
    assert image.mode == "RGBA"
    assert PixelBuffer.from_pil(image) == buf


def test_color_white_check():
    assert Color(255, 255, 255).is_white()
    assert not Color(255, 255, 254).is_white()
