"""Поточечные цветовые фильтры и работа с цветом.

Поточечные фильтры не зависят от соседей пикселя: постеризация, насыщенность,
яркость/контраст. Для оттенков серого везде используются веса BT.601.
"""
from __future__ import annotations

import re
from typing import Optional

import numpy as np

from photocraft.errors import InvalidParameterError, OutOfBoundsError
from photocraft.models.pixel_buffer import BLACK, Color, PixelBuffer
from photocraft.services.windowed_service import WindowedFilterService
from photocraft.utils.logging import get_logger

logger = get_logger()

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)

_HEX_RE = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


def hex_to_rgb(value: str) -> Color:
    """Разбирает строку `#RRGGBB` (решётка необязательна, регистр любой).

    Некорректная строка не является ошибкой: возвращается чёрный цвет.
    """
    match = _HEX_RE.fullmatch(value or "")
    if match is None:
        return BLACK
    r, g, b = (int(part, 16) for part in match.groups())
    return Color(r, g, b)


def rgb_to_hex(color: Color) -> str:
    """Цвет в `#rrggbb` (нижний регистр)."""
    return f"#{color.r:02x}{color.g:02x}{color.b:02x}"


def color_at(buffer: PixelBuffer, x: int, y: int) -> Color:
    """Цвет пикселя (x, y) без альфы.

    Raises:
        OutOfBoundsError: если точка вне [0, W) × [0, H). Координаты не
            подтягиваются к краю: пипетка не должна показывать чужой цвет.
    """
    if not (0 <= x < buffer.width and 0 <= y < buffer.height):
        raise OutOfBoundsError(f"Точка ({x}, {y}) вне изображения {buffer.width}×{buffer.height}")
    index = (y * buffer.width + x) * 4
    data = buffer.data
    return Color(data[index], data[index + 1], data[index + 2])


def contrast_factor(contrast: float) -> float:
    """Множитель контраста 259·(c + 255) / (255·(259 - c)).

    Raises:
        InvalidParameterError: при c >= 259 (знаменатель не положителен) или
            c < -255 (множитель отрицателен).
    """
    if contrast >= 259 or contrast < -255:
        raise InvalidParameterError(f"contrast вне области формулы [-255, 259): {contrast}")
    return (259.0 * (contrast + 255.0)) / (255.0 * (259.0 - contrast))


def _blend_with_gray(rgb: np.ndarray, factor: float) -> np.ndarray:
    gray = (rgb @ LUMA_WEIGHTS)[..., None]
    return gray + factor * (rgb - gray)


class ColorFilterService:
    def __init__(self, windowed: Optional[WindowedFilterService] = None) -> None:
        self._windowed = windowed or WindowedFilterService()

    def quantize(self, buffer: PixelBuffer, levels: int) -> PixelBuffer:
        """Постеризация: каждый канал → round(v / step) · step, step = 255 / (levels - 1)."""
        if not 2 <= levels <= 16:
            logger.warning("quantize: rejected levels=%s", levels)
            raise InvalidParameterError(f"levels должен быть в [2, 16]: {levels}")

        step = 255.0 / (levels - 1)
        inv_step = 1.0 / step
        arr = buffer.to_array()
        rgb = arr[..., :3].astype(np.float64)
        # round half up, как у Math.round
        arr[..., :3] = np.clip(np.rint(np.floor(rgb * inv_step + 0.5) * step), 0, 255).astype(np.uint8)
        return PixelBuffer.from_array(arr)

    def boost_saturation(self, buffer: PixelBuffer, factor: float) -> PixelBuffer:
        """gray + factor · (c - gray). factor < 0 инвертирует насыщенность (допустимо)."""
        arr = buffer.to_array()
        rgb = arr[..., :3].astype(np.float64)
        arr[..., :3] = np.clip(np.rint(_blend_with_gray(rgb, factor)), 0, 255).astype(np.uint8)
        return PixelBuffer.from_array(arr)

    def enhance(
        self,
        buffer: PixelBuffer,
        brightness: float = 0.0,
        contrast: float = 0.0,
        saturation: float = 0.0,
        sharpness: float = 0.0,
    ) -> PixelBuffer:
        """Яркость → контраст → насыщенность → (опционально) резкость.

        Порядок фиксирован. Насыщение в [0, 255] выполняется один раз после
        первых трёх шагов; резкость применяется ко всему скорректированному
        буферу отдельным проходом.
        """
        factor = contrast_factor(contrast)
        if sharpness < 0:
            logger.warning("enhance: rejected sharpness=%s", sharpness)
            raise InvalidParameterError(f"sharpness должна быть >= 0: {sharpness}")
        logger.debug(
            "enhance %dx%d b=%s c=%s s=%s sh=%s",
            buffer.width, buffer.height, brightness, contrast, saturation, sharpness,
        )

        arr = buffer.to_array()
        rgb = arr[..., :3].astype(np.float64)
        rgb = rgb + brightness
        rgb = factor * (rgb - 128.0) + 128.0
        if saturation != 0:
            rgb = _blend_with_gray(rgb, 1.0 + saturation / 100.0)
        arr[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
        result = PixelBuffer.from_array(arr)

        if sharpness > 0:
            result = self._windowed.sharpen(result, sharpness)
        return result
