"""Transport implementations for mail delivery.

Available transports:
    - SMTPTransport: SMTP protocol through ``smtplib`` (sync)
    - InMemoryTransport: records deliveries, for tests
"""

from smtpkit.mail.transports.memory import InMemoryTransport
from smtpkit.mail.transports.smtp import SMTPCredentials, SMTPSecurity, SMTPTransport

__all__ = [
    "InMemoryTransport",
    "SMTPCredentials",
    "SMTPSecurity",
    "SMTPTransport",
]
