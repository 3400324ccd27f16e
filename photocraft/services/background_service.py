"""Удаление фона: хромакей и автоматическое определение цвета фона.

Автоопределение берёт пиксели по периметру кадра с шагом 10 px, раскладывает
их по грубым корзинам (канал // 10) и выбирает самую частую корзину. При
равенстве побеждает корзина, встреченная первой (dict хранит порядок вставки).
"""
from __future__ import annotations

import numpy as np

from photocraft.errors import InvalidParameterError
from photocraft.models.pixel_buffer import WHITE, Color, PixelBuffer
from photocraft.utils.logging import get_logger

logger = get_logger()

EDGE_SAMPLE_STRIDE = 10
BUCKET_SIZE = 10
MAX_DISTANCE_SQUARED = 255 * 255 * 3


class BackgroundService:
    def remove_background(
        self,
        buffer: PixelBuffer,
        key_color: Color,
        tolerance: float = 0.3,
        replacement_color: Color = WHITE,
    ) -> PixelBuffer:
        """Заменяет пиксели, близкие к `key_color`, на `replacement_color`.

        Пиксель совпадает, если квадрат евклидова расстояния по RGB
        <= tolerance² · 255² · 3. Белая замена означает «сделать прозрачным»
        (alpha = 0); любая другая замена непрозрачна (alpha = 255).
        """
        if not 0.0 <= tolerance <= 1.0:
            logger.warning("remove_background: rejected tolerance=%s", tolerance)
            raise InvalidParameterError(f"tolerance должна быть в [0, 1]: {tolerance}")

        arr = buffer.to_array()
        diff = arr[..., :3].astype(np.int64) - np.array(key_color.as_tuple(), dtype=np.int64)
        distance = (diff * diff).sum(axis=2)
        mask = distance <= tolerance * tolerance * MAX_DISTANCE_SQUARED

        arr[mask, 0] = replacement_color.r
        arr[mask, 1] = replacement_color.g
        arr[mask, 2] = replacement_color.b
        arr[mask, 3] = 0 if replacement_color.is_white() else 255
        logger.debug("chroma key %s: %d of %d pixels matched", key_color, int(mask.sum()), mask.size)
        return PixelBuffer.from_array(arr)

    def sample_edge_colors(self, buffer: PixelBuffer) -> list[Color]:
        """Цвета по периметру: верх/низ для каждого x с шагом, затем лево/право для каждого y."""
        arr = np.frombuffer(buffer.data, dtype=np.uint8).reshape(buffer.height, buffer.width, 4)
        last_row = buffer.height - 1
        last_col = buffer.width - 1
        samples: list[Color] = []
        for x in range(0, buffer.width, EDGE_SAMPLE_STRIDE):
            samples.append(Color(*(int(c) for c in arr[0, x, :3])))
            samples.append(Color(*(int(c) for c in arr[last_row, x, :3])))
        for y in range(0, buffer.height, EDGE_SAMPLE_STRIDE):
            samples.append(Color(*(int(c) for c in arr[y, 0, :3])))
            samples.append(Color(*(int(c) for c in arr[y, last_col, :3])))
        return samples

    def detect_background_color(self, buffer: PixelBuffer) -> Color:
        """Приблизительный цвет фона: самая частая корзина краевых цветов × 10."""
        counts: dict[tuple[int, int, int], int] = {}
        for color in self.sample_edge_colors(buffer):
            key = (color.r // BUCKET_SIZE, color.g // BUCKET_SIZE, color.b // BUCKET_SIZE)
            counts[key] = counts.get(key, 0) + 1

        best = WHITE
        best_count = 0
        for (r, g, b), count in counts.items():
            if count > best_count:
                best_count = count
                best = Color(r * BUCKET_SIZE, g * BUCKET_SIZE, b * BUCKET_SIZE)
        return best

    def smart_remove_background(self, buffer: PixelBuffer, tolerance: float = 0.3) -> PixelBuffer:
        """Определяет фон по краям кадра и делает его прозрачным."""
        background = self.detect_background_color(buffer)
        logger.debug("smart background: detected %s", background)
        return self.remove_background(buffer, background, tolerance, WHITE)
