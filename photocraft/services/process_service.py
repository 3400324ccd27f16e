"""Составные конвейеры и выбор конвейера по режиму обработки.

- Мультфильм: билатеральный фильтр → постеризация → насыщенность → затемнение краёв.
- Реставрация: шумоподавление → резкость 25.
- Фото на документы: вырезка по долям кадра и масштабирование до размера пресета.
- `process`: режим студии → упорядоченная цепочка фильтров.
"""
from __future__ import annotations

from typing import Optional

import numpy as np
from PIL import Image

from photocraft.errors import InvalidParameterError
from photocraft.models.pixel_buffer import CropRect, OutputSize, PixelBuffer
from photocraft.models.presets import get_passport_preset
from photocraft.models.settings import ProcessingMode, ProcessingSettings
from photocraft.services.background_service import BackgroundService
from photocraft.services.color_service import ColorFilterService, hex_to_rgb
from photocraft.services.text_service import PillowTextSurface, add_text_overlay
from photocraft.services.windowed_service import WindowedFilterService
from photocraft.utils.logging import get_logger

logger = get_logger()

CARTOON_DIAMETER = 9
CARTOON_SIGMA_COLOR = 50.0
CARTOON_SIGMA_SPACE = 50.0
CARTOON_SATURATION = 1.3
EDGE_THRESHOLD = 30
RESTORE_SHARPNESS = 25.0


class ProcessService:
    def __init__(
        self,
        windowed: Optional[WindowedFilterService] = None,
        color: Optional[ColorFilterService] = None,
        background: Optional[BackgroundService] = None,
    ) -> None:
        self.windowed = windowed or WindowedFilterService()
        self.color = color or ColorFilterService(self.windowed)
        self.background = background or BackgroundService()

    # ---------- Мультфильм ----------
    def cartoonize(self, buffer: PixelBuffer, color_levels: int = 8, edge_strength: float = 50.0) -> PixelBuffer:
        """Мультяшный эффект.

        Карта краёв строится по исходному буферу, а не по уже
        постеризованному: так линии остаются на месте мелких деталей, которые
        квантование успело стереть.
        """
        if not 2 <= color_levels <= 16:
            raise InvalidParameterError(f"color_levels должен быть в [2, 16]: {color_levels}")
        if not 0 <= edge_strength <= 100:
            raise InvalidParameterError(f"edge_strength должна быть в [0, 100]: {edge_strength}")
        logger.debug(
            "cartoonize %dx%d levels=%d edges=%s", buffer.width, buffer.height, color_levels, edge_strength
        )

        result = self.windowed.bilateral_filter(buffer, CARTOON_DIAMETER, CARTOON_SIGMA_COLOR, CARTOON_SIGMA_SPACE)
        result = self.color.quantize(result, color_levels)
        result = self.color.boost_saturation(result, CARTOON_SATURATION)
        if edge_strength > 0:
            result = self.darken_edges(result, self.windowed.sobel_edges(buffer), edge_strength)
        return result

    def darken_edges(self, buffer: PixelBuffer, edges: np.ndarray, edge_strength: float) -> PixelBuffer:
        """Затемняет RGB на edge · strength/100 · 0.5 там, где edge > 30."""
        if edges.shape != (buffer.height, buffer.width):
            raise InvalidParameterError(
                f"Карта краёв {edges.shape} не совпадает с буфером {buffer.height}×{buffer.width}"
            )
        arr = buffer.to_array()
        amount = np.where(edges > EDGE_THRESHOLD, edges.astype(np.float64) * (edge_strength / 100.0) * 0.5, 0.0)
        rgb = arr[..., :3].astype(np.float64) - amount[..., None]
        arr[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
        return PixelBuffer.from_array(arr)

    # ---------- Реставрация ----------
    def restore(self, buffer: PixelBuffer) -> PixelBuffer:
        logger.debug("restore %dx%d", buffer.width, buffer.height)
        return self.windowed.sharpen(self.windowed.denoise(buffer), RESTORE_SHARPNESS)

    # ---------- Геометрия ----------
    def crop_and_scale(self, buffer: PixelBuffer, crop_rect: CropRect, output_size: OutputSize) -> PixelBuffer:
        """Вырезает долю кадра и растягивает её ровно до `output_size`.

        Масштабы по X и Y независимы (пропорции могут искажаться). Часть
        прямоугольника за пределами кадра обрезается; непокрытая область
        результата заливается непрозрачным белым.
        """
        if output_size.width <= 0 or output_size.height <= 0:
            raise InvalidParameterError(f"Размер результата должен быть положительным: {output_size}")
        if crop_rect.width <= 0 or crop_rect.height <= 0:
            raise InvalidParameterError(f"Пустой прямоугольник вырезки: {crop_rect}")

        src_w, src_h = buffer.size
        sx0 = crop_rect.x * src_w
        sy0 = crop_rect.y * src_h
        sx1 = sx0 + crop_rect.width * src_w
        sy1 = sy0 + crop_rect.height * src_h
        scale_x = output_size.width / (sx1 - sx0)
        scale_y = output_size.height / (sy1 - sy0)

        canvas = Image.new("RGBA", (output_size.width, output_size.height), (255, 255, 255, 255))
        cx0, cy0 = max(sx0, 0.0), max(sy0, 0.0)
        cx1, cy1 = min(sx1, float(src_w)), min(sy1, float(src_h))
        if cx1 > cx0 and cy1 > cy0:
            left = int(round((cx0 - sx0) * scale_x))
            top = int(round((cy0 - sy0) * scale_y))
            right = int(round((cx1 - sx0) * scale_x))
            bottom = int(round((cy1 - sy0) * scale_y))
            if right > left and bottom > top:
                scaled = buffer.to_pil().resize(
                    (right - left, bottom - top), Image.Resampling.BILINEAR, box=(cx0, cy0, cx1, cy1)
                )
                canvas.alpha_composite(scaled, dest=(left, top))
        logger.debug("crop %s -> %dx%d", crop_rect, output_size.width, output_size.height)
        return PixelBuffer.from_pil(canvas)

    # ---------- Выбор конвейера ----------
    def process(
        self,
        mode: ProcessingMode | str,
        buffer: PixelBuffer,
        settings: Optional[ProcessingSettings] = None,
    ) -> PixelBuffer:
        """Применяет конвейер выбранного режима к исходному буферу.

        Raises:
            InvalidParameterError: неизвестный режим или недопустимые параметры.
        """
        try:
            mode = ProcessingMode(mode)
        except ValueError as exc:
            raise InvalidParameterError(f"Неизвестный режим обработки: {mode}") from exc
        settings = settings or ProcessingSettings()

        if mode is ProcessingMode.CARTOONIFY:
            cartoon = settings.cartoon
            return self.cartoonize(buffer, cartoon.color_levels, cartoon.edge_strength)

        if mode is ProcessingMode.BACKGROUND:
            bg = settings.background
            tolerance = bg.tolerance / 100.0
            if bg.smart:
                return self.background.smart_remove_background(buffer, tolerance)
            return self.background.remove_background(
                buffer, hex_to_rgb(bg.key_color), tolerance, hex_to_rgb(bg.replacement_color)
            )

        if mode is ProcessingMode.PASSPORT:
            passport = settings.passport
            preset = get_passport_preset(passport.preset_index)
            return self.crop_and_scale(buffer, passport.crop_rect, preset.output_size)

        if mode is ProcessingMode.MEME:
            meme = settings.meme
            surface = PillowTextSurface.from_buffer(buffer)
            add_text_overlay(
                surface,
                meme.top_text,
                meme.bottom_text,
                meme.font_size,
                meme.text_color,
                meme.outline_color,
                meme.use_outline,
                meme.font_family,
            )
            return surface.to_buffer()

        if mode is ProcessingMode.ENHANCE:
            en = settings.enhance
            return self.color.enhance(buffer, en.brightness, en.contrast, en.saturation, en.sharpness)

        return self.restore(buffer)
