"""Оконные фильтры: билатеральное сглаживание, Собель, шумоподавление, резкость.

Все фильтры читают только исходный буфер (без обратной связи внутри прохода),
обрабатывают внутренние пиксели и оставляют рамку шириной в радиус окна без
изменений. Изображение меньше окна проходит насквозь целиком.
Альфа-канал не трогается.
"""
from __future__ import annotations

import numpy as np

from photocraft.errors import InvalidParameterError
from photocraft.models.pixel_buffer import PixelBuffer

SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float64)
SOBEL_Y = SOBEL_X.T
GAUSSIAN_3X3 = np.array([[1, 2, 1], [2, 4, 2], [1, 2, 1]], dtype=np.float64)


def _window(arr: np.ndarray, radius: int, dy: int, dx: int) -> np.ndarray:
    """Срез `arr`, сдвинутый на (dy, dx) и выровненный по внутренней области."""
    h, w = arr.shape[:2]
    return arr[radius + dy : h - radius + dy, radius + dx : w - radius + dx]


def _has_interior(buffer: PixelBuffer, radius: int) -> bool:
    return buffer.width > 2 * radius and buffer.height > 2 * radius


def _to_channel_bytes(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


class WindowedFilterService:
    def bilateral_filter(
        self,
        buffer: PixelBuffer,
        diameter: int = 9,
        sigma_color: float = 50.0,
        sigma_space: float = 50.0,
    ) -> PixelBuffer:
        """Сглаживание с сохранением границ.

        Вес соседа = exp(-(dx²+dy²) / 2σs²) · exp(-Σ|ΔRGB| / σc).
        Пространственные веса считаются один раз на вызов.
        """
        if diameter < 1:
            raise InvalidParameterError(f"diameter должен быть >= 1: {diameter}")
        if sigma_color <= 0 or sigma_space <= 0:
            raise InvalidParameterError(f"sigma должны быть > 0: {sigma_color}, {sigma_space}")

        radius = diameter // 2
        if not _has_interior(buffer, radius):
            return buffer

        src = buffer.to_array()
        rgb = src[..., :3].astype(np.float64)
        offsets = np.arange(-radius, radius + 1)
        dy_grid, dx_grid = np.meshgrid(offsets, offsets, indexing="ij")
        spatial = np.exp(-(dx_grid**2 + dy_grid**2) / (2.0 * sigma_space * sigma_space))

        center = _window(rgb, radius, 0, 0)
        acc = np.zeros_like(center)
        weight_sum = np.zeros(center.shape[:2], dtype=np.float64)
        for iy, dy in enumerate(offsets):
            for ix, dx in enumerate(offsets):
                neighbor = _window(rgb, radius, int(dy), int(dx))
                color_dist = np.abs(center - neighbor).sum(axis=2)
                weight = spatial[iy, ix] * np.exp(-color_dist / sigma_color)
                acc += neighbor * weight[..., None]
                weight_sum += weight

        # weight_sum > 0: вес центрального пикселя всегда равен 1
        src[radius : buffer.height - radius, radius : buffer.width - radius, :3] = _to_channel_bytes(
            acc / weight_sum[..., None]
        )
        return PixelBuffer.from_array(src)

    def sobel_edges(self, buffer: PixelBuffer) -> np.ndarray:
        """Карта величины градиента (H, W) uint8.

        Яркость = среднее R, G, B; величина = sqrt(gx² + gy²), ограничена 255
        и усечена до целого. Рамка в 1 px остаётся нулевой.
        """
        edges = np.zeros((buffer.height, buffer.width), dtype=np.uint8)
        if not _has_interior(buffer, 1):
            return edges

        src = buffer.to_array()
        gray = src[..., :3].astype(np.float64).sum(axis=2) / 3.0
        gx = np.zeros((buffer.height - 2, buffer.width - 2), dtype=np.float64)
        gy = np.zeros_like(gx)
        for ky in range(3):
            for kx in range(3):
                patch = _window(gray, 1, ky - 1, kx - 1)
                if SOBEL_X[ky, kx]:
                    gx += patch * SOBEL_X[ky, kx]
                if SOBEL_Y[ky, kx]:
                    gy += patch * SOBEL_Y[ky, kx]

        magnitude = np.hypot(gx, gy)
        edges[1:-1, 1:-1] = np.minimum(magnitude, 255.0).astype(np.uint8)
        return edges

    def denoise(self, buffer: PixelBuffer) -> PixelBuffer:
        """Гауссово размытие 3×3 с ядром [1 2 1; 2 4 2; 1 2 1] / 16."""
        if not _has_interior(buffer, 1):
            return buffer

        src = buffer.to_array()
        rgb = src[..., :3].astype(np.float64)
        total = np.zeros_like(_window(rgb, 1, 0, 0))
        for ky in range(3):
            for kx in range(3):
                total += _window(rgb, 1, ky - 1, kx - 1) * GAUSSIAN_3X3[ky, kx]

        src[1:-1, 1:-1, :3] = _to_channel_bytes(total / 16.0)
        return PixelBuffer.from_array(src)

    def sharpen(self, buffer: PixelBuffer, strength: float) -> PixelBuffer:
        """Нерезкое маскирование: center + strength/100 · (center - среднее 4 соседей)."""
        if strength < 0:
            raise InvalidParameterError(f"strength должна быть >= 0: {strength}")
        if not _has_interior(buffer, 1):
            return buffer

        src = buffer.to_array()
        rgb = src[..., :3].astype(np.float64)
        center = _window(rgb, 1, 0, 0)
        blur = (
            _window(rgb, 1, -1, 0)
            + _window(rgb, 1, 1, 0)
            + _window(rgb, 1, 0, -1)
            + _window(rgb, 1, 0, 1)
        ) / 4.0
        factor = strength / 100.0

        src[1:-1, 1:-1, :3] = _to_channel_bytes(center + factor * (center - blur))
        return PixelBuffer.from_array(src)
