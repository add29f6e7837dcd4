from __future__ import annotations

import logging
from pathlib import Path

import pytest

from hnmirror.config import AppSettings, LoggingSettings, Settings
from hnmirror.logger import PACKAGE_LOGGER, _build_logging_config, _resolve_log_level


def make_settings(tmp_path: Path, **logging_overrides) -> Settings:
    return Settings(
        _env_file=None,
        logging=LoggingSettings(directory=tmp_path / "logs", **logging_overrides),
    )


def test_console_and_rotating_file(tmp_path: Path) -> None:
    config = _build_logging_config(make_settings(tmp_path, level="warning"))

    assert (tmp_path / "logs").is_dir()
    assert config["root"] == {"level": logging.WARNING, "handlers": ["console", "file"]}
    assert config["handlers"]["file"]["filename"] == str(tmp_path / "logs" / "hn-mirror.log")


def test_file_handler_can_be_disabled(tmp_path: Path) -> None:
    config = _build_logging_config(make_settings(tmp_path, file_enabled=False))

    assert list(config["handlers"]) == ["console"]
    assert not (tmp_path / "logs").exists()


def test_third_party_loggers_are_quieted(tmp_path: Path) -> None:
    config = _build_logging_config(make_settings(tmp_path, level="debug"))

    assert config["loggers"]["asyncprawcore"]["level"] == logging.WARNING
    assert config["loggers"]["httpx"]["level"] == logging.WARNING
    assert config["loggers"][PACKAGE_LOGGER]["level"] == logging.DEBUG


def test_debug_mode_lowers_package_level_only(tmp_path: Path) -> None:
    settings = make_settings(tmp_path).model_copy(update={"app": AppSettings(debug=True)})

    config = _build_logging_config(settings)

    assert config["root"]["level"] == logging.INFO
    assert config["loggers"][PACKAGE_LOGGER]["level"] == logging.DEBUG
    assert config["handlers"]["console"]["level"] == logging.DEBUG


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported log level"):
        _resolve_log_level("chatty")
