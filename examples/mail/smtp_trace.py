#!/usr/bin/env python3
"""Demonstrate SMTP TRACE-level logging for debugging.

This example shows the detailed SMTP session information available
when TRACE logging is enabled. Useful for debugging connection issues,
TLS negotiation, and authentication problems.

Setup:
    1. Go to https://ethereal.email and create a free account
    2. Copy your credentials (user/pass)
    3. Set environment variables:
       export ETHEREAL_USER="your-user@ethereal.email"
       export ETHEREAL_PASS="your-password"

Usage:
    python examples/mail/smtp_trace.py
"""

from __future__ import annotations

import os
import smtplib
import sys

from smtpkit.logging import init_logging
from smtpkit.mail import MailMessage
from smtpkit.mail.transports.smtp import SMTPCredentials, SMTPSecurity, SMTPTransport

# Ethereal SMTP configuration
ETHEREAL_HOST = "smtp.ethereal.email"
ETHEREAL_PORT = 587


def get_ethereal_credentials() -> SMTPCredentials:
    """Load Ethereal credentials from environment variables."""
    user = os.getenv("ETHEREAL_USER")
    password = os.getenv("ETHEREAL_PASS")

    if not user or not password:
        print("ERROR: set ETHEREAL_USER and ETHEREAL_PASS (see https://ethereal.email)")
        sys.exit(1)

    return SMTPCredentials(username=user, password=password)


def main() -> None:
    """Send email with TRACE logging enabled."""
    log = init_logging(config={"console": {"level": "TRACE"}})
    log.info("TRACE logging enabled - SMTP session details will be shown")

    credentials = get_ethereal_credentials()
    transport = SMTPTransport(
        ETHEREAL_HOST,
        ETHEREAL_PORT,
        credentials=credentials,
        security=SMTPSecurity(use_starttls=True),
        timeout=30.0,
    )

    message = (
        MailMessage(ETHEREAL_HOST, ETHEREAL_PORT, credentials.username, [credentials.username], use_tls=True)
        .set_subject("TRACE logging test from smtpkit")
        .set_body(
            "This email was sent with TRACE-level logging enabled.\n\n"
            "Check the console output for the STARTTLS negotiation, "
            "the authentication flow and the envelope commands.\n"
        )
    )

    try:
        message.send(transport)
    except (smtplib.SMTPException, OSError) as exc:
        log.traceback(exc)
        sys.exit(1)

    log.success("Email sent", recipients=len(message.recipients))


if __name__ == "__main__":  # pragma: no cover - manual example
    main()
