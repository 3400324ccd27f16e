"""Ошибки движка фильтров.

Все ошибки наследуются от `ValueError`, поэтому вызывающий код, привыкший
ловить `ValueError` (как `ImageService.load_image`), продолжает работать.
"""
from __future__ import annotations


class FilterError(ValueError):
    """Базовая ошибка обработки: частичный буфер никогда не возвращается."""


class InvalidParameterError(FilterError):
    """Параметр фильтра вне допустимой области (levels < 2, contrast >= 259 и т.п.)."""


class DimensionMismatchError(FilterError):
    """Длина байтового буфера не равна width * height * 4."""


class OutOfBoundsError(FilterError):
    """Координаты (x, y) вне изображения при выборке цвета."""
