"""YAML configuration loader for smtpkit.

Configuration is layered. The packaged defaults are loaded first, then each
user file found in the cascade is deep-merged on top of them:

1. ``~/.config/smtpkit/smtpkit.conf.yml``
2. ``~/smtpkit.conf.yml``
3. ``./smtpkit.conf.yml`` (highest priority)

The merged mapping is exposed as a :class:`box.Box` so values can be read
with attribute access (``config.mail.smtp.host``).
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from box import Box

from smtpkit.config.exceptions import (
    ConfigFileNotFoundError,
    ConfigFormatError,
    ConfigNotLoadedError,
)
from smtpkit.utils.dict import deep_merge

log = logging.getLogger(__name__)

CONFIG_FILENAME = "smtpkit.conf.yml"
DEFAULT_ENCODING = "utf-8"

_config: Box | None = None


def _load_yaml_file(path: Path, encoding: str = DEFAULT_ENCODING) -> dict[str, Any]:
    """Parse a YAML file into a plain dict.

    Args:
        path: File to read.
        encoding: Text encoding of the file.

    Returns:
        Parsed mapping (empty dict for an empty file).

    Raises:
        ConfigFileNotFoundError: If the file does not exist.
        ConfigFormatError: If the YAML is invalid or its root is not a mapping.
    """
    if not path.is_file():
        raise ConfigFileNotFoundError(str(path))

    try:
        data = yaml.safe_load(path.read_text(encoding=encoding))
    except yaml.YAMLError as e:
        raise ConfigFormatError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFormatError(f"Root of {path} must be a mapping, got {type(data).__name__}")
    return data


def _load_default_config(encoding: str = DEFAULT_ENCODING) -> dict[str, Any]:
    """Load the defaults shipped inside the package."""
    text = resources.files("smtpkit.config").joinpath(CONFIG_FILENAME).read_text(encoding=encoding)
    return yaml.safe_load(text) or {}


def _cascade_paths(filename: str) -> list[Path]:
    """Candidate user config files, lowest priority first."""
    home = Path.home()
    return [
        home / ".config" / "smtpkit" / filename,
        home / filename,
        Path.cwd() / filename,
    ]


def load_from_file(path: str | Path, encoding: str = DEFAULT_ENCODING) -> Box:
    """Load a single configuration file on top of the packaged defaults.

    The result also becomes the cached configuration returned by
    :func:`get_config`.

    Args:
        path: YAML file to load.
        encoding: Text encoding of the file.

    Returns:
        Merged configuration.

    Raises:
        ConfigFileNotFoundError: If ``path`` does not exist.
        ConfigFormatError: If ``path`` is not a valid YAML mapping.

    Examples:
        >>> config = load_from_file("smtpkit.conf.yml")  # doctest: +SKIP
        >>> config.mail.smtp.port  # doctest: +SKIP
        25
    """
    global _config

    path = Path(path).expanduser()
    data = deep_merge(_load_default_config(encoding), _load_yaml_file(path, encoding))
    log.debug("Loaded configuration from %s", path)
    _config = Box(data)
    return _config


def load_config(filename: str = CONFIG_FILENAME, encoding: str = DEFAULT_ENCODING) -> Box:
    """Load the configuration cascade and cache the result.

    Missing user files are skipped; only the packaged defaults are mandatory.

    Args:
        filename: File name searched for in each cascade location.
        encoding: Text encoding of the files.

    Returns:
        Merged configuration.

    Raises:
        ConfigFormatError: If a found file is not a valid YAML mapping.
    """
    global _config

    data = _load_default_config(encoding)
    for candidate in _cascade_paths(filename):
        if candidate.is_file():
            log.debug("Merging configuration from %s", candidate)
            data = deep_merge(data, _load_yaml_file(candidate, encoding))

    _config = Box(data)
    return _config


def get_config() -> Box:
    """Return the cached configuration, loading the cascade on first use."""
    if _config is None:
        return load_config()
    return _config


def require_config() -> Box:
    """Return the cached configuration without loading anything.

    Raises:
        ConfigNotLoadedError: If no configuration has been loaded yet.
    """
    if _config is None:
        raise ConfigNotLoadedError("Configuration not loaded, call load_config() first")
    return _config


def clear_config() -> None:
    """Forget the cached configuration."""
    global _config
    _config = None


__all__ = [
    "CONFIG_FILENAME",
    "clear_config",
    "get_config",
    "load_config",
    "load_from_file",
    "require_config",
]
