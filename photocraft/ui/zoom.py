"""Шаги масштаба просмотра, в процентах.

Кнопки и колесо мыши переводят масштаб к соседней отметке, кратной 25 %,
в пределах 25–200 %. Масштаб «вписать» бывает произвольным (например, 63 %),
поэтому шаг ведёт к ближайшей отметке в нужную сторону и никогда не идёт назад.
"""
from __future__ import annotations

import math

ZOOM_MIN = 25
ZOOM_MAX = 200
ZOOM_STEP = 25


def step_zoom(current: float, direction: int) -> float:
    """Следующий масштаб: direction > 0 увеличивает, иначе уменьшает."""
    if direction > 0:
        target = math.floor(current / ZOOM_STEP) * ZOOM_STEP + ZOOM_STEP
        return max(current, min(ZOOM_MAX, max(ZOOM_MIN, target)))
    target = math.ceil(current / ZOOM_STEP) * ZOOM_STEP - ZOOM_STEP
    return min(current, min(ZOOM_MAX, max(ZOOM_MIN, target)))


def fit_zoom(image_size: tuple[int, int], canvas_size: tuple[int, int]) -> float:
    """Масштаб (в процентах), при котором изображение целиком помещается на канве."""
    img_w, img_h = image_size
    canvas_w, canvas_h = canvas_size
    return max(1.0, min(400.0, 100.0 * min(canvas_w / img_w, canvas_h / img_h)))
