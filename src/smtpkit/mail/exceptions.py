"""Specialized exceptions raised by the smtpkit.mail module.

Exception hierarchy::

    SmtpkitError
        MailError (base for all mail errors)
            MailValidationError (invalid message content, also ValueError)
            MailConfigurationError (invalid transport settings)

Errors raised while reading an attachment file, and delivery errors from
``smtplib`` or the socket layer, reach the caller unchanged.
"""

from __future__ import annotations

from smtpkit.config.exceptions import SmtpkitError


class MailError(SmtpkitError):
    """Base exception for all mail module errors."""


class MailValidationError(MailError, ValueError):
    """A message is missing a required value or holds an invalid one.

    Attributes:
        field: Name of the offending field (``server``, ``sender``,
            ``recipients``, ``body`` or ``attachment``).
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        """Initialize MailValidationError.

        Args:
            message: Human-readable error message.
            field: Name of the offending field.
        """
        super().__init__(message)
        self.field = field


class MailConfigurationError(MailError):
    """A transport was configured with unusable settings."""


__all__ = [
    "MailConfigurationError",
    "MailError",
    "MailValidationError",
]
