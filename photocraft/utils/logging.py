"""Логирование пакета: один именованный логгер «photocraft».

Обработчик вешается при первом обращении и только если его ещё нет; уровень
берётся из конфигурации (`PHOTOCRAFT_LOG_LEVEL`), неизвестное имя уровня
означает INFO.
"""
from __future__ import annotations

import logging
from functools import lru_cache

from photocraft.config import get_config

LOGGER_NAME = "photocraft"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


@lru_cache(maxsize=1)
def get_logger() -> logging.Logger:
    """Возвращает логгер пакета; повторные вызовы отдают тот же объект."""
    package_logger = logging.getLogger(LOGGER_NAME)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    package_logger.setLevel(resolve_level(get_config().log_level))
    return package_logger
