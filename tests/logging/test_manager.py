"""Tests for the logging manager module.

Covers presets, custom configuration, output modes and structured context.
"""

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from smtpkit.logging import LOGGING_LEVEL, LogManager
from smtpkit.logging.manager import SUCCESS_LEVEL, TRACE_LEVEL


def test_logmanager_default_creation() -> None:
    """Test creating LogManager with default settings."""
    logger = LogManager(name="test_default")

    assert logger.name == "test_default"
    assert isinstance(logger, logging.Logger)
    assert logger.level == TRACE_LEVEL  # Logger allows all levels, handlers filter
    assert logger.config["output"] == "console"


def test_custom_levels_are_registered() -> None:
    assert logging.getLevelName(TRACE_LEVEL) == "TRACE"
    assert logging.getLevelName(SUCCESS_LEVEL) == "SUCCESS"
    assert LOGGING_LEVEL.INFO < LOGGING_LEVEL.SUCCESS < LOGGING_LEVEL.WARNING


def test_logmanager_with_preset_dev() -> None:
    """Dev preset logs DEBUG and above to the console."""
    logger = LogManager(name="test_dev", preset="dev")

    assert len(logger.handlers) == 1
    handler = logger.handlers[0]
    assert isinstance(handler, RichHandler)
    assert handler.level == logging.DEBUG


def test_logmanager_with_preset_prod(isolated_environment: Path) -> None:
    """Prod preset writes INFO and above to a file only."""
    logger = LogManager(name="test_prod", preset="prod")

    assert len(logger.handlers) == 1
    handler = logger.handlers[0]
    assert isinstance(handler, logging.FileHandler)
    assert handler.level == logging.INFO
    assert (isolated_environment / "logs" / "smtpkit.log").exists()
    handler.close()


def test_logmanager_with_preset_debug(isolated_environment: Path) -> None:
    """Debug preset sends TRACE to the console and DEBUG to the file."""
    logger = LogManager(name="test_debug", preset="debug")

    levels = {type(h): h.level for h in logger.handlers}
    assert levels[RichHandler] == TRACE_LEVEL
    assert levels[logging.FileHandler] == logging.DEBUG
    for handler in logger.handlers:
        handler.close()


def test_logmanager_with_custom_config() -> None:
    """Config values are merged over the preset."""
    logger = LogManager(name="test_custom", preset="dev", config={"console": {"level": "warning"}})

    assert logger.handlers[0].level == logging.WARNING
    assert logger.config["console"]["show_path"] is False


def test_file_output_location(tmp_path: Path) -> None:
    config = {
        "output": "file",
        "file": {"log_path": str(tmp_path), "log_dir": "out", "log_name": "mail.log"},
    }
    logger = LogManager(name="test_file", config=config)

    logger.info("Message queued", recipients=2)
    for handler in logger.handlers:
        handler.flush()
        handler.close()

    content = (tmp_path / "out" / "mail.log").read_text(encoding="utf-8")
    assert "Message queued | recipients=2" in content


@pytest.mark.parametrize(
    ("preset", "config"),
    [
        ("unknown", None),
        (None, {"output": "syslog"}),
        (None, {"console": {"level": "LOUD"}}),
    ],
    ids=["preset", "output", "level"],
)
def test_invalid_settings_raise(preset: str | None, config: dict | None) -> None:
    with pytest.raises(ValueError):
        LogManager(name="test_invalid", preset=preset, config=config)


def test_context_is_appended(caplog: pytest.LogCaptureFixture) -> None:
    """Keyword arguments are rendered as key=value pairs."""
    logger = LogManager(name="test_context", config={"output": "console"})
    logger.addHandler(caplog.handler)
    caplog.set_level(TRACE_LEVEL)

    logger.success("Delivered", host="smtp.example.com", port=25)
    logger.trace("EHLO sent")

    records = [r for r in caplog.records if r.name == "test_context"]
    assert records[0].levelno == SUCCESS_LEVEL
    assert records[0].getMessage() == "Delivered | host='smtp.example.com' port=25"
    assert records[1].levelno == TRACE_LEVEL


def test_context_with_percent_is_preserved(caplog: pytest.LogCaptureFixture) -> None:
    logger = LogManager(name="test_percent", config={"output": "console"})
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG)

    logger.info("Progress", ratio="50%")

    records = [r for r in caplog.records if r.name == "test_percent"]
    assert records[0].getMessage() == "Progress | ratio='50%'"


def test_traceback_logs_exception(caplog: pytest.LogCaptureFixture) -> None:
    logger = LogManager(name="test_traceback", config={"output": "console"})
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG)

    try:
        raise RuntimeError("boom")
    except RuntimeError as exc:
        logger.traceback(exc)

    records = [r for r in caplog.records if r.name == "test_traceback"]
    assert records[0].levelno == logging.ERROR
    assert records[0].exc_info is not None
