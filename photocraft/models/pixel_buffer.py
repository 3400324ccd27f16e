"""Модель пиксельного буфера и сопутствующие значения-объекты.

Принципы:
- Буфер неизменяем: фильтры получают `PixelBuffer` и возвращают новый.
- Запись каналов всегда с насыщением в [0, 255] (без переполнения по модулю),
  округление к ближайшему чётному, как у байтовых массивов с насыщением.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

from photocraft.errors import DimensionMismatchError, InvalidParameterError

CHANNELS = 4


@dataclass(frozen=True)
class Color:
    """Цвет RGB, 8 бит на канал."""
    r: int
    g: int
    b: int

    def as_tuple(self) -> tuple[int, int, int]:
        return self.r, self.g, self.b

    def is_white(self) -> bool:
        return self.r == 255 and self.g == 255 and self.b == 255


WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)


@dataclass(frozen=True)
class CropRect:
    """Прямоугольник в долях от размеров исходного изображения."""
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class OutputSize:
    width: int
    height: int


@dataclass(frozen=True)
class PixelBuffer:
    """RGBA-пиксели построчно сверху вниз, `len(data) == width * height * 4`.

    Fields:
        width: Ширина, px (> 0).
        height: Высота, px (> 0).
        data: Байты R, G, B, A для каждого пикселя.
    """
    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidParameterError(f"Размеры должны быть положительными: {self.width}×{self.height}")
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise DimensionMismatchError(
                f"Длина буфера {len(self.data)} не равна {self.width}×{self.height}×4 = {expected}"
            )
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    # ---- Конструкторы ----
    @classmethod
    def from_array(cls, array: np.ndarray) -> PixelBuffer:
        """Собирает буфер из массива (H, W, 4) любого числового типа.

        Значения округляются (`np.rint`) и насыщаются в [0, 255].
        """
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise DimensionMismatchError(f"Ожидался массив (H, W, 4), получен {array.shape}")
        if array.dtype != np.uint8:
            array = np.clip(np.rint(array), 0, 255).astype(np.uint8)
        height, width = array.shape[:2]
        return cls(width=width, height=height, data=np.ascontiguousarray(array).tobytes())

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> PixelBuffer:
        """Буфер, залитый одним цветом."""
        array = np.empty((max(0, height), max(0, width), CHANNELS), dtype=np.uint8)
        array[...] = rgba
        return cls(width=width, height=height, data=array.tobytes())

    @classmethod
    def from_pil(cls, image: Image.Image) -> PixelBuffer:
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        width, height = rgba.size
        return cls(width=width, height=height, data=rgba.tobytes())

    # ---- Представления ----
    def to_array(self) -> np.ndarray:
        """Возвращает рабочую (изменяемую) копию в виде массива (H, W, 4) uint8."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, CHANNELS).copy()

    def to_pil(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), self.data)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height
