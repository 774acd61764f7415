"""Shared pytest fixtures for the smtpkit test suite."""

from __future__ import annotations

# Disable Rich colors and force wide terminal BEFORE any imports
# Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["COLUMNS"] = "200"

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

# Import private internals for testing purposes
import smtpkit.config.loader as _cfg_loader
import smtpkit.logging as _smtpkit_logging
from smtpkit.config import clear_config

# pylint: disable=redefined-outer-name


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Run each test from an empty HOME and working directory.

    User configuration files on the machine running the tests must never
    leak into the cascade.
    """
    home = tmp_path / "home"
    workdir = tmp_path / "work"
    home.mkdir()
    workdir.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(workdir)
    clear_config()
    yield workdir
    clear_config()


@pytest.fixture(autouse=True)
def reset_smtpkit_logger() -> Iterator[None]:
    """Undo ``init_logging`` side effects on the ``smtpkit`` logger."""
    yield
    logger = logging.getLogger("smtpkit")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    _smtpkit_logging._root_logger = None  # pylint: disable=protected-access


@pytest.fixture
def home_dir(isolated_environment: Path) -> Path:
    """Return the fake HOME used by the current test."""
    return isolated_environment.parent / "home"


# ============================================================================
# CONFIG MODULE PRIVATE INTERNALS - For testing purposes only
# ============================================================================


@pytest.fixture
def cfg_loader() -> Any:
    """Expose config.loader module for testing private helpers.

    Returns:
        Module object containing private config loader internals.
    """
    return _cfg_loader
