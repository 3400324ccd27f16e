"""Статические каталоги: пресеты фото на документы и экспорта.

Каталоги неизменяемы (кортежи frozen-датаклассов) и загружаются один раз при
импорте модуля. Пресет выбирается по индексу.
"""
from __future__ import annotations

from dataclasses import dataclass

from photocraft.errors import InvalidParameterError
from photocraft.models.pixel_buffer import OutputSize


@dataclass(frozen=True)
class PassportPreset:
    """Запись каталога фото на документы.

    Fields:
        name: Отображаемое имя.
        width: Целевая ширина, px.
        height: Целевая высота, px.
        aspect_ratio: Округлённое отношение ширины к высоте.
        description: Человекочитаемое описание.
    """
    name: str
    width: int
    height: int
    aspect_ratio: float
    description: str

    @property
    def output_size(self) -> OutputSize:
        return OutputSize(self.width, self.height)


PASSPORT_PRESETS: tuple[PassportPreset, ...] = (
    PassportPreset("US Passport (2×2 in)", 600, 600, 1.0, "51×51 mm, square format"),
    PassportPreset("UK Passport (35×45 mm)", 413, 531, 0.78, "Standard European format"),
    PassportPreset("Canada Passport (50×70 mm)", 590, 827, 0.71, "Larger Canadian format"),
    PassportPreset("Australia Passport (35×45 mm)", 413, 531, 0.78, "Same as UK standard"),
    PassportPreset("India Passport (51×51 mm)", 600, 600, 1.0, "Square Indian format"),
    PassportPreset("China Passport (33×48 mm)", 390, 567, 0.69, "Chinese official size"),
    PassportPreset("Japan Passport (35×45 mm)", 413, 531, 0.78, "Japanese standard"),
    PassportPreset("Germany Passport (35×45 mm)", 413, 531, 0.78, "German biometric format"),
    PassportPreset("France Passport (35×45 mm)", 413, 531, 0.78, "French official size"),
    PassportPreset("Brazil Passport (30×40 mm)", 354, 472, 0.75, "Brazilian format"),
    PassportPreset("Russia Passport (35×45 mm)", 413, 531, 0.78, "Russian Federation"),
    PassportPreset("South Korea (35×45 mm)", 413, 531, 0.78, "Korean standard"),
    PassportPreset("Mexico Passport (39×31 mm)", 460, 366, 1.26, "Mexican landscape format"),
    PassportPreset("UAE Passport (43×55 mm)", 508, 650, 0.78, "UAE official size"),
    PassportPreset("Singapore Passport (35×45 mm)", 413, 531, 0.78, "Singapore standard"),
    PassportPreset("US Visa (50×50 mm)", 590, 590, 1.0, "Square US visa format"),
    PassportPreset("Schengen Visa (35×45 mm)", 413, 531, 0.78, "European visa standard"),
    PassportPreset("LinkedIn Profile (1:1)", 400, 400, 1.0, "Social media square"),
    PassportPreset("Custom Size", 500, 500, 1.0, "Define your own dimensions"),
)


def get_passport_preset(index: int) -> PassportPreset:
    """Возвращает пресет по индексу каталога.

    Raises:
        InvalidParameterError: если индекс вне каталога.
    """
    if not 0 <= index < len(PASSPORT_PRESETS):
        raise InvalidParameterError(f"Нет пресета с индексом {index}")
    return PASSPORT_PRESETS[index]


@dataclass(frozen=True)
class ExportPreset:
    quality: float  # 0..1
    mime_type: str
    pil_format: str


EXPORT_PRESETS: dict[str, ExportPreset] = {
    "png": ExportPreset(1.0, "image/png", "PNG"),
    "jpg": ExportPreset(0.9, "image/jpeg", "JPEG"),
    "webp": ExportPreset(0.85, "image/webp", "WEBP"),
}
