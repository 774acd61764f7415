"""Delivery contract between a built message and a mail transport."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Envelope:
    """SMTP envelope addresses, distinct from the message headers.

    Attributes:
        sender: Address given to ``MAIL FROM``.
        recipients: Addresses given to ``RCPT TO``, in order.
    """

    sender: str
    recipients: tuple[str, ...]


class MailTransport(ABC):
    """Backend that delivers serialized messages."""

    @abstractmethod
    def send(self, envelope: Envelope, payload: bytes) -> None:
        """Deliver ``payload`` to the envelope recipients.

        Args:
            envelope: Sender and recipient addresses.
            payload: Serialized message bytes.

        Implementations let the underlying client error propagate
        unchanged.
        """


__all__ = ["Envelope", "MailTransport"]
