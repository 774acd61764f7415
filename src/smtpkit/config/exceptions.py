"""Exception hierarchy shared by every smtpkit module.

Exception hierarchy::

    SmtpkitError
        ConfigError (base for configuration errors)
            ConfigFileNotFoundError (also FileNotFoundError)
            ConfigFormatError (also ValueError)
            ConfigNotLoadedError
"""

from __future__ import annotations


class SmtpkitError(Exception):
    """Base exception for all smtpkit errors."""


class ConfigError(SmtpkitError):
    """Base exception for configuration loading errors."""


class ConfigFileNotFoundError(ConfigError, FileNotFoundError):
    """A configuration file does not exist.

    Attributes:
        path: The path that was looked up.
    """

    def __init__(self, path: str) -> None:
        """Initialize ConfigFileNotFoundError.

        Args:
            path: The path that was looked up.
        """
        super().__init__(f"Configuration file not found: {path}")
        self.path = path


class ConfigFormatError(ConfigError, ValueError):
    """A configuration file cannot be parsed or has the wrong shape."""


class ConfigNotLoadedError(ConfigError):
    """Configuration was required before anything was loaded."""


__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigNotLoadedError",
    "SmtpkitError",
]
