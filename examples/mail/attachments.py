"""Attach files to a message and capture it with the in-memory transport."""

from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory

from smtpkit.mail import InMemoryTransport, MailMessage


def send_with_attachments() -> None:
    """Attach two files, send to an in-memory outbox and show the envelope."""
    with TemporaryDirectory() as tmp_dir:
        workdir = Path(tmp_dir)
        report = workdir / "daily-report.txt"
        report.write_text("Daily metrics: 42 conversions", encoding="utf-8")
        data = workdir / "raw.csv"
        data.write_text("day,conversions\nmonday,42\n", encoding="utf-8")

        message = (
            MailMessage("localhost", 25, "reports@example.com", ["ops@example.com", "cto@example.com"])
            .set_subject("Daily metrics report")
            .set_body("Please find the report attached.")
            .add_attachment(report)
            .add_attachment(data)
        )

        outbox = InMemoryTransport()
        message.send(outbox)

    envelope, payload = outbox.last()  # type: ignore[misc]
    print(f"MAIL FROM: {envelope.sender}")
    for recipient in envelope.recipients:
        print(f"RCPT TO: {recipient}")
    for attachment in message.attachments:
        print(f"attachment {attachment.name}: boundary={attachment.boundary} size={attachment.size}")
    print(f"{len(payload)} bytes")


if __name__ == "__main__":  # pragma: no cover - manual example
    send_with_attachments()
