"""Shared fixtures: small synthetic RGBA buffers."""

import numpy as np
import pytest

from photocraft.models.pixel_buffer import PixelBuffer
from photocraft.services.background_service import BackgroundService
from photocraft.services.color_service import ColorFilterService
from photocraft.services.process_service import ProcessService
from photocraft.services.windowed_service import WindowedFilterService


def _buffer_from(pixels) -> PixelBuffer:
    return PixelBuffer.from_array(np.asarray(pixels, dtype=np.uint8))


@pytest.fixture
def make_buffer():
    """Factory turning an (H, W, 4) array-like into a PixelBuffer."""
    return _buffer_from


@pytest.fixture
def windowed() -> WindowedFilterService:
    return WindowedFilterService()


@pytest.fixture
def colors() -> ColorFilterService:
    return ColorFilterService()


@pytest.fixture
def background() -> BackgroundService:
    return BackgroundService()


@pytest.fixture
def process() -> ProcessService:
    return ProcessService()


@pytest.fixture
def random_buffer() -> PixelBuffer:
    """Deterministic 24x18 noise image with varying alpha."""
    rng = np.random.default_rng(1234)
    return _buffer_from(rng.integers(0, 256, size=(18, 24, 4)))


@pytest.fixture
def white_buffer() -> PixelBuffer:
    return PixelBuffer.filled(100, 100, (255, 255, 255, 255))


@pytest.fixture
def green_frame_buffer() -> PixelBuffer:
    """50x50 green image with a centred 30x30 red block."""
    pixels = np.zeros((50, 50, 4), dtype=np.uint8)
    pixels[..., 1] = 255
    pixels[..., 3] = 255
    pixels[10:40, 10:40, :3] = (255, 0, 0)
    return _buffer_from(pixels)
