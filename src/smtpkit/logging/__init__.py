"""Logging helpers for smtpkit.

Library modules log through ``logging.getLogger(__name__)`` and never attach
handlers. Applications opt in to formatted output with :func:`init_logging`,
which installs a :class:`LogManager`'s handlers on the ``smtpkit`` logger.

Examples:
    >>> from smtpkit.logging import init_logging
    >>> init_logging(preset="debug")  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from typing import Any

from smtpkit.logging.manager import (
    FALLBACK_DEFAULTS,
    FALLBACK_PRESETS,
    LOGGING_LEVEL,
    SUCCESS_LEVEL,
    TRACE_LEVEL,
    LogManager,
)

ROOT_LOGGER_NAME = "smtpkit"

_root_logger: LogManager | None = None


def init_logging(preset: str | None = None, config: dict[str, Any] | None = None) -> LogManager:
    """Configure smtpkit logging and return the root ``LogManager``.

    When neither ``preset`` nor ``config`` is given, the ``logging`` section
    of the loaded smtpkit configuration is used.

    Args:
        preset: Logging preset name (``dev``, ``prod``, ``debug``).
        config: Explicit logging configuration mapping.

    Returns:
        The configured root logger.
    """
    global _root_logger

    if preset is None and config is None:
        from smtpkit.config import get_config

        section = dict(get_config().get("logging", {}))
        preset = section.pop("preset", None)
        config = section or None

    manager = LogManager(name=ROOT_LOGGER_NAME, preset=preset, config=config)

    std_logger = logging.getLogger(ROOT_LOGGER_NAME)
    std_logger.setLevel(TRACE_LEVEL)
    for handler in std_logger.handlers[:]:
        std_logger.removeHandler(handler)
    for handler in manager.handlers:
        std_logger.addHandler(handler)

    _root_logger = manager
    return manager


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger inside the ``smtpkit`` namespace.

    Args:
        name: Module or component name. ``None`` returns the root logger
            (the ``LogManager`` when :func:`init_logging` ran).
    """
    if name is None:
        if _root_logger is not None:
            return _root_logger
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = [
    "FALLBACK_DEFAULTS",
    "FALLBACK_PRESETS",
    "LOGGING_LEVEL",
    "SUCCESS_LEVEL",
    "TRACE_LEVEL",
    "LogManager",
    "get_logger",
    "init_logging",
]
