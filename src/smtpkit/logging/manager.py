"""Rich-backed logger with presets and structured context.

``LogManager`` is a :class:`logging.Logger` subclass. The logger itself lets
every record through (its level is ``TRACE_LEVEL``); handlers decide what is
emitted. Console output goes through :class:`rich.logging.RichHandler`, file
output through a plain :class:`logging.FileHandler`.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from smtpkit.utils.dict import deep_merge

TRACE_LEVEL = 5
SUCCESS_LEVEL = 25

logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")

LOGGING_LEVEL = SimpleNamespace(
    TRACE=TRACE_LEVEL,
    DEBUG=logging.DEBUG,
    INFO=logging.INFO,
    SUCCESS=SUCCESS_LEVEL,
    WARNING=logging.WARNING,
    ERROR=logging.ERROR,
    CRITICAL=logging.CRITICAL,
)

FALLBACK_DEFAULTS: dict[str, Any] = {
    "output": "console",
    "console": {
        "level": "INFO",
        "show_path": False,
        "tracebacks_show_locals": False,
    },
    "file": {
        "level": "DEBUG",
        "log_path": ".",
        "log_dir": "logs",
        "log_name": "smtpkit.log",
        "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    },
}

FALLBACK_PRESETS: dict[str, dict[str, Any]] = {
    "dev": {
        "output": "console",
        "console": {"level": "DEBUG"},
    },
    "prod": {
        "output": "file",
        "console": {"tracebacks_show_locals": False},
        "file": {"level": "INFO"},
    },
    "debug": {
        "output": "both",
        "console": {"level": "TRACE", "tracebacks_show_locals": True},
        "file": {"level": "DEBUG"},
    },
}

_VALID_OUTPUTS = frozenset({"console", "file", "both"})
_RESERVED_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})


def _level_value(level: str | int) -> int:
    """Translate a level name (``"TRACE"``, ``"info"``) or number to an int."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


class LogManager(logging.Logger):
    """Logger configured from a preset and/or a config mapping.

    Args:
        name: Logger name.
        preset: One of ``dev``, ``prod`` or ``debug``.
        config: Mapping merged over the preset (same keys as
            ``FALLBACK_DEFAULTS``).

    Raises:
        ValueError: If the preset, output mode or a level is unknown.

    Examples:
        >>> logger = LogManager(preset="dev")  # doctest: +SKIP
        >>> logger.info("Message sent", recipients=2)  # doctest: +SKIP
    """

    def __init__(
        self,
        name: str = "smtpkit",
        preset: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(name, level=TRACE_LEVEL)
        self.config = self._resolve_config(preset, config)
        self._setup_handlers()

    @staticmethod
    def _resolve_config(preset: str | None, config: dict[str, Any] | None) -> dict[str, Any]:
        resolved = copy.deepcopy(FALLBACK_DEFAULTS)
        if preset is not None:
            if preset not in FALLBACK_PRESETS:
                raise ValueError(f"Unknown logging preset: {preset!r}")
            resolved = deep_merge(resolved, FALLBACK_PRESETS[preset])
        if config:
            resolved = deep_merge(resolved, dict(config))
        if resolved["output"] not in _VALID_OUTPUTS:
            raise ValueError(f"Unknown logging output: {resolved['output']!r}")
        return resolved

    def _setup_handlers(self) -> None:
        output = self.config["output"]
        if output in ("console", "both"):
            self.addHandler(self._console_handler(self.config["console"]))
        if output in ("file", "both"):
            self.addHandler(self._file_handler(self.config["file"]))

    @staticmethod
    def _console_handler(options: dict[str, Any]) -> logging.Handler:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=options.get("show_path", False),
            rich_tracebacks=True,
            tracebacks_show_locals=options.get("tracebacks_show_locals", False),
        )
        handler.setLevel(_level_value(options.get("level", "INFO")))
        return handler

    @staticmethod
    def _file_handler(options: dict[str, Any]) -> logging.Handler:
        log_dir = Path(options["log_path"]).expanduser() / options["log_dir"]
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_dir / options["log_name"], encoding="utf-8")
        handler.setLevel(_level_value(options.get("level", "DEBUG")))
        handler.setFormatter(logging.Formatter(options["format"]))
        return handler

    def _log_with_context(self, level: int, msg: object, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        if not self.isEnabledFor(level):
            return
        std_kwargs = {k: v for k, v in kwargs.items() if k in _RESERVED_KWARGS}
        context = {k: v for k, v in kwargs.items() if k not in _RESERVED_KWARGS}
        if context:
            rendered = " ".join(f"{key}={value!r}" for key, value in context.items())
            if args:
                rendered = rendered.replace("%", "%%")
            msg = f"{msg} | {rendered}"
        std_kwargs.setdefault("stacklevel", 3)
        self._log(level, msg, args, **std_kwargs)

    def trace(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log at TRACE level (protocol-level detail)."""
        self._log_with_context(TRACE_LEVEL, msg, args, kwargs)

    def debug(self, msg: object, *args: Any, **kwargs: Any) -> None:  # noqa: D102
        self._log_with_context(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: object, *args: Any, **kwargs: Any) -> None:  # noqa: D102
        self._log_with_context(logging.INFO, msg, args, kwargs)

    def success(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log at SUCCESS level, between INFO and WARNING."""
        self._log_with_context(SUCCESS_LEVEL, msg, args, kwargs)

    def warning(self, msg: object, *args: Any, **kwargs: Any) -> None:  # noqa: D102
        self._log_with_context(logging.WARNING, msg, args, kwargs)

    def error(self, msg: object, *args: Any, **kwargs: Any) -> None:  # noqa: D102
        self._log_with_context(logging.ERROR, msg, args, kwargs)

    def critical(self, msg: object, *args: Any, **kwargs: Any) -> None:  # noqa: D102
        self._log_with_context(logging.CRITICAL, msg, args, kwargs)

    def traceback(self, exc: BaseException) -> None:
        """Log an exception with its rich traceback at ERROR level."""
        self._log_with_context(logging.ERROR, "%s", (exc,), {"exc_info": exc})


__all__ = [
    "FALLBACK_DEFAULTS",
    "FALLBACK_PRESETS",
    "LOGGING_LEVEL",
    "SUCCESS_LEVEL",
    "TRACE_LEVEL",
    "LogManager",
]
