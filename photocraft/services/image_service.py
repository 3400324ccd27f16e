"""Загрузка изображений с диска и кодирование результата для экспорта.

Принципы:
- SRP: декодирование/кодирование файлов; сами фильтры сюда не относятся.
- Внешний кодировщик — Pillow: движок лишь передаёт ему готовый буфер.
"""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from photocraft.config import get_config
from photocraft.errors import InvalidParameterError
from photocraft.models.image_model import ImageData
from photocraft.models.pixel_buffer import PixelBuffer
from photocraft.models.presets import EXPORT_PRESETS
from photocraft.utils.logging import get_logger

logger = get_logger()


class ImageService:
    def __init__(self, max_pixels: Optional[int] = None) -> None:
        self._max_pixels = max_pixels if max_pixels is not None else get_config().max_pixels

    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` с RGBA-буфером и метаданными файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не распознан как изображение или не декодируется
                (усечён, повреждён, превышает предел Pillow).
            InvalidParameterError: если число пикселей превышает предел конфигурации.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            with Image.open(path) as pil_image:
                width, height = pil_image.size
                if width * height > self._max_pixels:
                    raise InvalidParameterError(
                        f"Изображение {width}×{height} превышает предел {self._max_pixels} пикселей"
                    )
                source_mode = pil_image.mode
                buffer = PixelBuffer.from_pil(pil_image.convert("RGBA"))
        except UnidentifiedImageError as exc:
            raise ValueError(f"Файл не является изображением: {path}") from exc
        except (OSError, Image.DecompressionBombError) as exc:
            # усечённый или повреждённый файл, либо «бомба» сверх предела Pillow
            raise ValueError(f"Не удалось декодировать {path}: {exc}") from exc

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        logger.debug("loaded %s (%dx%d, %s)", path, buffer.width, buffer.height, source_mode)
        return ImageData(path=path, buffer=buffer, source_mode=source_mode, size_bytes=size_bytes)

    def encode_image(self, buffer: PixelBuffer, fmt: str, quality: float = 90) -> bytes:
        """Кодирует буфер в PNG/JPEG/WebP.

        Args:
            buffer: Готовый к экспорту буфер.
            fmt: "png" | "jpg" | "webp".
            quality: Качество 0–100 (переводится в долю 0–1 и обратно в шкалу Pillow).

        Raises:
            InvalidParameterError: неизвестный формат или качество вне [0, 100].
        """
        preset = EXPORT_PRESETS.get(fmt.lower())
        if preset is None:
            raise InvalidParameterError(f"Неподдерживаемый формат экспорта: {fmt}")
        if not 0 <= quality <= 100:
            raise InvalidParameterError(f"Качество должно быть в [0, 100]: {quality}")

        ratio = quality / 100.0
        image = buffer.to_pil()
        out = BytesIO()
        if preset.pil_format == "PNG":
            image.save(out, format="PNG")
        elif preset.pil_format == "JPEG":
            # JPEG не хранит альфа-канал
            image.convert("RGB").save(out, format="JPEG", quality=int(round(ratio * 100)))
        else:
            image.save(out, format=preset.pil_format, quality=int(round(ratio * 100)))
        return out.getvalue()

    def export_image(self, buffer: PixelBuffer, file_path: str | Path, quality: float = 90) -> Path:
        """Сохраняет буфер в файл; формат определяется расширением пути."""
        path = Path(file_path)
        fmt = path.suffix.lstrip(".").lower()
        if fmt == "jpeg":
            fmt = "jpg"
        path.write_bytes(self.encode_image(buffer, fmt, quality))
        logger.info("exported %s (%dx%d, quality=%s)", path, buffer.width, buffer.height, quality)
        return path
