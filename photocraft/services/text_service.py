"""Наложение текста (мемы) на рисуемую поверхность.

В отличие от остальных фильтров, наложение текста не возвращает новый буфер:
оно рисует прямо на переданной вызывающим поверхности (побочный эффект).
Поверхность описана протоколом `TextSurface`; `PillowTextSurface` реализует
его поверх `PIL.ImageDraw`.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

from photocraft.models.pixel_buffer import Color, PixelBuffer
from photocraft.services.color_service import hex_to_rgb

TEXT_MARGIN = 20
_FALLBACK_FONTS = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")


class TextSurface(Protocol):
    """Двумерная поверхность, умеющая обводить и заливать текст.

    (x, y) — центр строки по горизонтали и её верхний край.
    """

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def stroke_text(
        self, text: str, x: float, y: float, font_size: int, font_family: str, color: Color, line_width: float
    ) -> None: ...

    def fill_text(self, text: str, x: float, y: float, font_size: int, font_family: str, color: Color) -> None: ...


@lru_cache(maxsize=32)
def load_font(font_family: str, font_size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Ищет TrueType-шрифт по имени семейства, затем жирный системный, затем встроенный."""
    candidates = (font_family, f"{font_family}.ttf", *_FALLBACK_FONTS)
    for name in candidates:
        try:
            return ImageFont.truetype(name, font_size)
        except OSError:
            continue
    return ImageFont.load_default(size=font_size)


class PillowTextSurface:
    """`TextSurface` поверх RGBA-изображения Pillow (изменяется на месте)."""

    def __init__(self, image: Image.Image) -> None:
        if image.mode != "RGBA":
            raise ValueError(f"Ожидалось RGBA-изображение, получено {image.mode}")
        self.image = image
        self._draw = ImageDraw.Draw(image)

    @classmethod
    def from_buffer(cls, buffer: PixelBuffer) -> PillowTextSurface:
        return cls(buffer.to_pil())

    def to_buffer(self) -> PixelBuffer:
        return PixelBuffer.from_pil(self.image)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def stroke_text(
        self, text: str, x: float, y: float, font_size: int, font_family: str, color: Color, line_width: float
    ) -> None:
        # stroke_width у Pillow растёт только наружу от контура
        stroke = max(1, int(round(line_width / 2)))
        self._draw_text(text, x, y, font_size, font_family, color, stroke)

    def fill_text(self, text: str, x: float, y: float, font_size: int, font_family: str, color: Color) -> None:
        self._draw_text(text, x, y, font_size, font_family, color, 0)

    def _draw_text(
        self, text: str, x: float, y: float, font_size: int, font_family: str, color: Color, stroke: int
    ) -> None:
        font = load_font(font_family, font_size)
        left, _top, right, _bottom = self._draw.textbbox((0, 0), text, font=font)
        origin = (x - (right - left) / 2 - left, y)
        fill = (*color.as_tuple(), 255)
        self._draw.text(origin, text, font=font, fill=fill, stroke_width=stroke, stroke_fill=fill)


def add_text_overlay(
    surface: TextSurface,
    top_text: str,
    bottom_text: str,
    font_size: int = 40,
    text_color: str = "#ffffff",
    outline_color: str = "#000000",
    use_outline: bool = True,
    font_family: str = "Impact",
) -> None:
    """Рисует верхнюю и нижнюю подписи по центру поверхности.

    Верхняя строка — на отступе 20 px сверху, нижняя — на высоте
    H - font_size - 20. При `use_outline` текст сначала обводится цветом
    `outline_color` толщиной max(2, font_size / 15), затем заливается.
    Пустая строка не рисуется вовсе.
    """
    fill = hex_to_rgb(text_color)
    outline = hex_to_rgb(outline_color)
    line_width = max(2.0, font_size / 15)
    center_x = surface.width / 2

    def draw(text: str, y: float) -> None:
        if use_outline:
            surface.stroke_text(text, center_x, y, font_size, font_family, outline, line_width)
        surface.fill_text(text, center_x, y, font_size, font_family, fill)

    if top_text:
        draw(top_text, TEXT_MARGIN)
    if bottom_text:
        draw(bottom_text, surface.height - font_size - TEXT_MARGIN)
