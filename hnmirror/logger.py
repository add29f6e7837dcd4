"""
Logging setup for the CLI and the scheduler.

Everything goes through the standard library: a console handler, plus a
rotating file handler unless ``LOGGING__FILE_ENABLED`` is false (cron and
container deployments usually collect stdout).
"""

from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any

from .config import LoggingSettings, Settings, get_settings

PACKAGE_LOGGER = "hnmirror"

# Chatty at INFO: request lines, job bookkeeping, rate-limit headers.
_QUIET_LOGGERS = ("apscheduler", "asyncprawcore", "httpx")

_configured = False


def _resolve_log_level(level_name: str) -> int:
    numeric_level = logging.getLevelName(level_name.upper())
    if isinstance(numeric_level, int):
        return numeric_level
    raise ValueError(f"Unsupported log level: {level_name}")


def _handlers(log_settings: LoggingSettings, level: int) -> dict[str, dict[str, Any]]:
    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "standard",
        }
    }
    if log_settings.file_enabled:
        log_settings.directory.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "standard",
            "filename": str(log_settings.directory / log_settings.file_name),
            "encoding": "utf-8",
            "maxBytes": log_settings.max_bytes,
            "backupCount": log_settings.backup_count,
        }
    return handlers


def _build_logging_config(settings: Settings) -> dict[str, Any]:
    """Return the dictConfig payload for ``settings``."""

    log_settings = settings.logging
    level = _resolve_log_level(log_settings.level)
    package_level = logging.DEBUG if settings.app.debug else level
    handlers = _handlers(log_settings, min(level, package_level))

    loggers: dict[str, dict[str, Any]] = {
        name: {"level": max(level, logging.WARNING)} for name in _QUIET_LOGGERS
    }
    loggers[PACKAGE_LOGGER] = {"level": package_level}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": log_settings.format}},
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": level, "handlers": list(handlers)},
    }


def setup_logging(settings: Settings | None = None, *, force: bool = False) -> logging.Logger:
    """
    Configure logging once per process and return the package logger.

    Later calls are no-ops unless ``force`` is set, which re-applies the
    configuration (used after settings change at runtime).
    """

    global _configured

    if force or not _configured:
        dictConfig(_build_logging_config(settings or get_settings()))
        _configured = True
    return logging.getLogger(PACKAGE_LOGGER)


__all__ = ["PACKAGE_LOGGER", "setup_logging"]
