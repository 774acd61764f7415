"""Build MIME mail messages and deliver them over SMTP.

Examples:
    >>> from smtpkit.mail import MailMessage
    >>> message = MailMessage("smtp.example.com", 0, "me@example.com", ["you@example.com"])
    >>> message.port
    25
    >>> _ = message.set_body("hello").add_attachment("report.pdf")  # doctest: +SKIP
    >>> message.send()  # doctest: +SKIP
"""

from smtpkit.mail.exceptions import (
    MailConfigurationError,
    MailError,
    MailValidationError,
)
from smtpkit.mail.message import Attachment, MailMessage
from smtpkit.mail.transport import Envelope, MailTransport
from smtpkit.mail.transports import InMemoryTransport, SMTPCredentials, SMTPSecurity, SMTPTransport

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
]
