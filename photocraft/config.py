"""Конфигурация движка: значения по умолчанию + переопределение из окружения."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_MAX_PIXELS = 36_000_000


@dataclass(frozen=True)
class EngineConfig:
    """Неизменяемые настройки процесса.

    Fields:
        max_pixels: Предел W*H при декодировании файла.
        log_level: Уровень логгера "photocraft".
        export_format: Формат экспорта по умолчанию (png | jpg | webp).
    """
    max_pixels: int = DEFAULT_MAX_PIXELS
    log_level: str = "INFO"
    export_format: str = "png"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(1, int(raw))
    except ValueError:
        return default


def load_config() -> EngineConfig:
    """Читает окружение заново (удобно для тестов)."""
    return EngineConfig(
        max_pixels=_env_int("PHOTOCRAFT_MAX_PIXELS", DEFAULT_MAX_PIXELS),
        log_level=os.getenv("PHOTOCRAFT_LOG_LEVEL", "INFO").upper(),
        export_format=os.getenv("PHOTOCRAFT_EXPORT_FORMAT", "png").lower(),
    )


@lru_cache(maxsize=1)
def get_config() -> EngineConfig:
    """Возвращает конфигурацию, прочитанную один раз за процесс."""
    return load_config()
