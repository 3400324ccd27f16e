"""Tests for decoding files and encoding export bytes."""

from io import BytesIO

import numpy as np
import pytest
from PIL import Image, features

from photocraft.errors import InvalidParameterError
from photocraft.models.pixel_buffer import PixelBuffer
from photocraft.services.image_service import ImageService


@pytest.fixture
def service():
    return ImageService(max_pixels=10_000)


def test_load_converts_to_rgba(service, tmp_path):
    path = tmp_path / "sample.png"
    Image.new("RGB", (6, 4), (10, 20, 30)).save(path)

    data = service.load_image(path)
    assert (data.width, data.height) == (6, 4)
    assert data.source_mode == "RGB"
    assert data.size_bytes == path.stat().st_size
    assert (data.buffer.to_array() == (10, 20, 30, 255)).all()


def test_load_missing_file(service, tmp_path):
    with pytest.raises(FileNotFoundError):
        service.load_image(tmp_path / "nope.png")


def test_load_rejects_non_image(service, tmp_path):
    path = tmp_path / "garbage.png"
    path.write_bytes(b"definitely not an image")
    with pytest.raises(ValueError):
        service.load_image(path)


def test_load_rejects_truncated_file(service, tmp_path):
    path = tmp_path / "cut.png"
    noise = np.random.default_rng(7).integers(0, 256, size=(64, 64, 3), dtype=np.uint8)
    Image.fromarray(noise).save(path)
    data = path.read_bytes()
    path.write_bytes(data[: len(data) // 2])

    with pytest.raises(ValueError):
        service.load_image(path)


def test_load_rejects_oversized_image(tmp_path):
    path = tmp_path / "big.png"
    Image.new("RGB", (20, 20)).save(path)
    with pytest.raises(InvalidParameterError):
        ImageService(max_pixels=100).load_image(path)


def test_encode_png_is_lossless(service, random_buffer):
    data = service.encode_image(random_buffer, "png")
    with Image.open(BytesIO(data)) as decoded:
        assert PixelBuffer.from_pil(decoded.convert("RGBA")) == random_buffer


def test_encode_jpeg_drops_alpha(service, random_buffer):
    data = service.encode_image(random_buffer, "JPG", quality=80)
    assert data[:2] == b"\xff\xd8"
    with Image.open(BytesIO(data)) as decoded:
        assert decoded.mode == "RGB"


@pytest.mark.skipif(not features.check("webp"), reason="Pillow built without WebP")
def test_encode_webp(service, random_buffer):
    data = service.encode_image(random_buffer, "webp", quality=85)
    assert data[:4] == b"RIFF" and data[8:12] == b"WEBP"


@pytest.mark.parametrize("fmt, quality", [("gif", 90), ("png", -1), ("jpg", 101)])
def test_encode_rejects_bad_arguments(service, random_buffer, fmt, quality):
    with pytest.raises(InvalidParameterError):
        service.encode_image(random_buffer, fmt, quality)


def test_export_picks_format_from_suffix(service, tmp_path):
    buffer = PixelBuffer.filled(5, 5, (200, 0, 0, 255))
    path = service.export_image(buffer, tmp_path / "out.jpeg", quality=95)

    assert path.read_bytes()[:2] == b"\xff\xd8"
    with Image.open(path) as decoded:
        pixel = np.asarray(decoded)[2, 2]
    assert abs(int(pixel[0]) - 200) <= 3
