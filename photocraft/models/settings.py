"""Настройки режимов обработки.

Значения-объекты без жизненного цикла: UI собирает их из виджетов, сервис
обработки читает их за один вызов.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from photocraft.models.pixel_buffer import CropRect


class ProcessingMode(str, Enum):
    CARTOONIFY = "cartoonify"
    BACKGROUND = "background"
    PASSPORT = "passport"
    MEME = "meme"
    ENHANCE = "enhance"
    RESTORE = "restore"


@dataclass(frozen=True)
class CartoonSettings:
    color_levels: int = 8
    edge_strength: float = 50.0


@dataclass(frozen=True)
class BackgroundSettings:
    """Удаление фона.

    Fields:
        tolerance: Допуск в процентах (0–100); движку передаётся tolerance / 100.
        key_color: HEX цвета фона.
        replacement_color: HEX цвета замены; белый означает прозрачность.
        smart: Определять цвет фона автоматически по краям кадра.
    """
    tolerance: float = 30.0
    key_color: str = "#00ff00"
    replacement_color: str = "#ffffff"
    smart: bool = False


@dataclass(frozen=True)
class PassportSettings:
    preset_index: int = 0
    crop_rect: CropRect = field(default_factory=lambda: CropRect(0.1, 0.1, 0.8, 0.8))


@dataclass(frozen=True)
class MemeSettings:
    top_text: str = ""
    bottom_text: str = ""
    font_size: int = 40
    text_color: str = "#ffffff"
    outline_color: str = "#000000"
    use_outline: bool = True
    font_family: str = "Impact"


@dataclass(frozen=True)
class EnhanceSettings:
    brightness: float = 0.0
    contrast: float = 0.0
    saturation: float = 0.0
    sharpness: float = 0.0


@dataclass(frozen=True)
class ProcessingSettings:
    """Полный набор настроек всех режимов (как хранит их студия)."""
    cartoon: CartoonSettings = field(default_factory=CartoonSettings)
    background: BackgroundSettings = field(default_factory=BackgroundSettings)
    passport: PassportSettings = field(default_factory=PassportSettings)
    meme: MemeSettings = field(default_factory=MemeSettings)
    enhance: EnhanceSettings = field(default_factory=EnhanceSettings)
