"""Tests for caption layout and the Pillow drawing surface."""

import pytest
from PIL import Image

from photocraft.models.pixel_buffer import Color, PixelBuffer
from photocraft.services.text_service import PillowTextSurface, add_text_overlay


class RecordingSurface:
    """Fake surface that records drawing calls instead of rasterizing."""

    def __init__(self, width=400, height=300):
        self.width = width
        self.height = height
        self.calls = []

    def stroke_text(self, text, x, y, font_size, font_family, color, line_width):
        self.calls.append(("stroke", text, x, y, font_size, font_family, color, line_width))

    def fill_text(self, text, x, y, font_size, font_family, color):
        self.calls.append(("fill", text, x, y, font_size, font_family, color))


def test_empty_captions_draw_nothing():
    surface = RecordingSurface()
    add_text_overlay(surface, "", "")
    assert surface.calls == []


def test_outline_is_stroked_before_fill():
    surface = RecordingSurface()
    add_text_overlay(surface, "TOP", "", font_size=40, text_color="#ffff00", outline_color="#112233")

    assert [call[0] for call in surface.calls] == ["stroke", "fill"]
    stroke, fill = surface.calls
    assert stroke[1:4] == ("TOP", 200.0, 20)
    assert stroke[6] == Color(0x11, 0x22, 0x33)
    assert stroke[7] == pytest.approx(40 / 15)
    assert fill[6] == Color(255, 255, 0)
    assert fill[5] == "Impact"


@pytest.mark.parametrize("font_size, line_width", [(20, 2.0), (30, 2.0), (60, 4.0)])
def test_outline_width_has_floor(font_size, line_width):
    surface = RecordingSurface()
    add_text_overlay(surface, "A", "", font_size=font_size)
    assert surface.calls[0][7] == pytest.approx(line_width)


def test_bottom_caption_position():
    surface = RecordingSurface(width=300, height=500)
    add_text_overlay(surface, "", "BOTTOM", font_size=50, use_outline=False, font_family="Arial")

    assert surface.calls == [("fill", "BOTTOM", 150.0, 500 - 50 - 20, 50, "Arial", Color(255, 255, 255))]


def test_both_captions_in_order():
    surface = RecordingSurface()
    add_text_overlay(surface, "UP", "DOWN")
    assert [(call[0], call[1]) for call in surface.calls] == [
        ("stroke", "UP"),
        ("fill", "UP"),
        ("stroke", "DOWN"),
        ("fill", "DOWN"),
    ]


def test_pillow_surface_draws_in_place():
    buffer = PixelBuffer.filled(160, 120, (40, 80, 120, 255))
    surface = PillowTextSurface.from_buffer(buffer)
    add_text_overlay(surface, "MEME", "", font_size=32)

    out = surface.to_buffer()
    assert out.size == buffer.size
    assert out != buffer


def test_pillow_surface_requires_rgba():
    with pytest.raises(ValueError):
        PillowTextSurface(Image.new("RGB", (10, 10)))
