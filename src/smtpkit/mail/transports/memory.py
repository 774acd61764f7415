"""In-memory transport that records deliveries instead of sending them."""

from __future__ import annotations

from smtpkit.mail.transport import Envelope, MailTransport

__all__ = ["InMemoryTransport"]


class InMemoryTransport(MailTransport):
    """Transport double capturing ``(envelope, payload)`` pairs in ``sent``."""

    def __init__(self) -> None:
        self.sent: list[tuple[Envelope, bytes]] = []

    def send(self, envelope: Envelope, payload: bytes) -> None:
        """Append the delivery to the outbox."""
        self.sent.append((envelope, payload))

    def reset(self) -> None:
        """Clear the outbox."""
        self.sent.clear()

    @property
    def count(self) -> int:
        """Number of recorded deliveries."""
        return len(self.sent)

    def last(self) -> tuple[Envelope, bytes] | None:
        """Return the most recent delivery, or ``None`` when the outbox is empty."""
        return self.sent[-1] if self.sent else None
