"""Configuration loading for smtpkit.

Examples:
    >>> from smtpkit.config import get_config
    >>> get_config().mail.smtp.port  # doctest: +SKIP
    25
"""

from smtpkit.config.exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigFormatError,
    ConfigNotLoadedError,
    SmtpkitError,
)
from smtpkit.config.loader import (
    CONFIG_FILENAME,
    clear_config,
    get_config,
    load_config,
    load_from_file,
    require_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigNotLoadedError",
    "SmtpkitError",
    "clear_config",
    "get_config",
    "load_config",
    "load_from_file",
    "require_config",
]
