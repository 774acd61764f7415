"""Plain-text mail composition using :class:`smtpkit.mail.MailMessage`."""

from __future__ import annotations

from smtpkit.mail import MailMessage


def build_plain_message() -> None:
    """Construct a plain-text message and print the serialized payload."""
    message = (
        MailMessage("localhost", 25, "sender@example.com", ["user@example.com"])
        .set_subject("Plain Greetings")
        .set_body("Hello from smtpkit!\nThis message uses the plain content type.")
    )
    print(message.build().decode("utf-8"))


if __name__ == "__main__":  # pragma: no cover - manual example
    build_plain_message()
