"""Tests for environment configuration, catalogues and the package logger."""

import logging

import pytest

from photocraft.config import DEFAULT_MAX_PIXELS, load_config
from photocraft.errors import FilterError, InvalidParameterError
from photocraft.models.pixel_buffer import OutputSize
from photocraft.models.presets import EXPORT_PRESETS, PASSPORT_PRESETS, get_passport_preset
from photocraft.models.settings import ProcessingSettings
from photocraft.utils.logging import LOGGER_NAME, get_logger, resolve_level


def test_defaults_without_environment(monkeypatch):
    for name in ("PHOTOCRAFT_MAX_PIXELS", "PHOTOCRAFT_LOG_LEVEL", "PHOTOCRAFT_EXPORT_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    config = load_config()
    assert config.max_pixels == DEFAULT_MAX_PIXELS
    assert config.log_level == "INFO"
    assert config.export_format == "png"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PHOTOCRAFT_MAX_PIXELS", "2500")
    monkeypatch.setenv("PHOTOCRAFT_LOG_LEVEL", "debug")
    monkeypatch.setenv("PHOTOCRAFT_EXPORT_FORMAT", "WEBP")
    config = load_config()
    assert (config.max_pixels, config.log_level, config.export_format) == (2500, "DEBUG", "webp")


def test_unparsable_pixel_limit_falls_back(monkeypatch):
    monkeypatch.setenv("PHOTOCRAFT_MAX_PIXELS", "lots")
    assert load_config().max_pixels == DEFAULT_MAX_PIXELS


def test_passport_catalogue():
    assert len(PASSPORT_PRESETS) == 19
    assert get_passport_preset(0).output_size == OutputSize(600, 600)
    assert get_passport_preset(18).name == "Custom Size"


@pytest.mark.parametrize("index", [-1, 19])
def test_passport_index_out_of_range(index):
    with pytest.raises(InvalidParameterError):
        get_passport_preset(index)


def test_export_presets():
    assert {name: preset.quality for name, preset in EXPORT_PRESETS.items()} == {
        "png": 1.0,
        "jpg": 0.9,
        "webp": 0.85,
    }


def test_default_settings():
    settings = ProcessingSettings()
    assert settings.cartoon.color_levels == 8
    assert settings.background.tolerance == 30.0
    assert settings.meme.font_family == "Impact"
    assert settings.enhance.sharpness == 0.0


def test_errors_are_value_errors():
    assert issubclass(InvalidParameterError, FilterError)
    assert issubclass(FilterError, ValueError)


def test_package_logger():
    logger = get_logger()
    assert logger is get_logger()
    assert logger.name == LOGGER_NAME == "photocraft"
    assert isinstance(logger, logging.Logger)
    assert len(logger.handlers) == 1


@pytest.mark.parametrize(
    "name, level",
    [("DEBUG", logging.DEBUG), ("warning", logging.WARNING), ("VERBOSE", logging.INFO), ("", logging.INFO)],
)
def test_log_level_names(name, level):
    assert resolve_level(name) == level
