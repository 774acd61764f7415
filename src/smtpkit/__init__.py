"""smtpkit: MIME mail building and SMTP delivery."""

from smtpkit.config.exceptions import SmtpkitError
from smtpkit.mail import (
    Attachment,
    Envelope,
    InMemoryTransport,
    MailConfigurationError,
    MailError,
    MailMessage,
    MailTransport,
    MailValidationError,
    SMTPCredentials,
    SMTPSecurity,
    SMTPTransport,
)
from smtpkit.meta import __app_name__, __version__

__all__ = [
    "Attachment",
    "Envelope",
    "InMemoryTransport",
    "MailConfigurationError",
    "MailError",
    "MailMessage",
    "MailTransport",
    "MailValidationError",
    "SMTPCredentials",
    "SMTPSecurity",
    "SMTPTransport",
    "SmtpkitError",
    "__app_name__",
    "__version__",
]
