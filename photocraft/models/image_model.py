"""Модели данных для загруженных изображений.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from photocraft.models.pixel_buffer import PixelBuffer


@dataclass(frozen=True)
class ImageData:
    """Декодированное изображение и его метаданные.

    Fields:
        path: Путь к исходному файлу.
        buffer: RGBA-буфер, с которым работают фильтры.
        source_mode: Режим PIL исходного файла до приведения к RGBA.
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    buffer: PixelBuffer
    source_mode: str
    size_bytes: Optional[int]

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height
