"""MIME message builder.

A :class:`MailMessage` accumulates the envelope, a text body, a content type
and file attachments, then serializes them once into a single MIME byte
buffer. The buffer is cached: later calls to :meth:`MailMessage.build` return
the same bytes.

Serialized layout (``\\n`` line endings, transports normalize to CRLF)::

    To: <recipients>
    Subject: <subject>
    Content-Type: multipart/mixed; boundary="<b1>"    (one pair per attachment)
    --<b1>
    Content-Transfer-Encoding: base64
    MIME-Version: 1.0;
    Content-Type: text/plain; charset="utf-8";

    <base64 body>

    --<b1>
    Content-Type: application/octet-stream; name="<name>"
    Content-Description: <name>
    Content-Disposition: attachment; filename="<name>"; size=<encoded size>
    Content-Transfer-Encoding: base64

    <base64 attachment>
    --<b1>--

Examples:
    >>> message = MailMessage("localhost", 25, "a@example.com", ["b@example.com"])
    >>> _ = message.set_subject("Report").set_body("hello")
    >>> b"aGVsbG8=" in message.build()
    True
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from os import PathLike
from pathlib import Path
from typing import TYPE_CHECKING, Any

from smtpkit.mail.exceptions import MailValidationError
from smtpkit.mail.transport import Envelope
from smtpkit.utils.text import random_base36

if TYPE_CHECKING:
    from smtpkit.mail.transport import MailTransport
    from smtpkit.mail.transports.smtp import SMTPTransport

log = logging.getLogger(__name__)

DEFAULT_SMTP_PORT = 25
DEFAULT_CONTENT_TYPE = "text/plain"
DEFAULT_SUBJECT_PREFIX = "smtpkit"

LINESEP = b"\n"


@dataclass(frozen=True, slots=True)
class Attachment:
    """A base64-encoded file attached to a message.

    Attributes:
        name: Base file name of the source path.
        content: Base64-encoded file content.
        boundary: MIME boundary token owned by this attachment.
    """

    name: str
    content: bytes
    boundary: str

    @property
    def size(self) -> int:
        """Encoded length, advertised in the ``size=`` disposition parameter."""
        return len(self.content)

    def __repr__(self) -> str:  # pragma: no cover
        return f"Attachment(name={self.name!r}, boundary={self.boundary!r}, size={self.size})"


class MailMessage:
    """Mutable mail message serialized at most once.

    Args:
        server: SMTP server host, optionally with a ``:port`` suffix.
        port: SMTP port; values ``<= 0`` fall back to 25.
        sender: Envelope sender address.
        recipients: Envelope recipient addresses (a single string is
            accepted as one recipient).
        use_tls: Attempt a STARTTLS upgrade when sending.
        timeout: Socket timeout in seconds for the default SMTP transport,
            ``None`` to block.

    Raises:
        MailValidationError: If ``server``, ``sender`` or ``recipients`` is
            empty. ``field`` names the missing value.
    """

    def __init__(
        self,
        server: str,
        port: int,
        sender: str,
        recipients: Sequence[str] | str,
        use_tls: bool = False,
        *,
        timeout: float | None = None,
    ) -> None:
        if not server:
            raise MailValidationError("SMTP server required", field="server")
        if not sender:
            raise MailValidationError("SMTP sender required", field="sender")
        if isinstance(recipients, str):
            recipients = [recipients] if recipients else []
        if not recipients:
            raise MailValidationError("Mail recipient(s) required", field="recipients")

        self._server = server
        self._port = port if port > 0 else DEFAULT_SMTP_PORT
        self._sender = sender
        self._recipients = tuple(recipients)
        self._use_tls = use_tls
        self._timeout = timeout

        now = datetime.now().astimezone().isoformat(sep=" ", timespec="seconds")
        self._subject = f"{DEFAULT_SUBJECT_PREFIX} - {now}"
        self._content_type = DEFAULT_CONTENT_TYPE
        self._body = bytearray()
        self._attachments: dict[str, Attachment] = {}

        self._buffer = b""
        self._built = False

    @classmethod
    def from_config(
        cls,
        sender: str,
        recipients: Sequence[str] | str,
        *,
        config: Mapping[str, Any] | None = None,
    ) -> MailMessage:
        """Create a message whose delivery settings come from configuration.

        Reads ``mail.smtp.host``, ``mail.smtp.port``, ``mail.smtp.use_tls``,
        ``mail.smtp.timeout`` and the optional ``mail.subject``.

        Args:
            sender: Envelope sender address.
            recipients: Envelope recipient addresses.
            config: Configuration mapping; defaults to
                :func:`smtpkit.config.get_config`.
        """
        if config is None:
            from smtpkit.config import get_config

            config = get_config()

        mail_section = config.get("mail") or {}
        smtp_section = mail_section.get("smtp") or {}
        message = cls(
            smtp_section.get("host") or "",
            int(smtp_section.get("port") or 0),
            sender,
            recipients,
            bool(smtp_section.get("use_tls", False)),
            timeout=smtp_section.get("timeout"),
        )
        subject = mail_section.get("subject")
        if subject:
            message.set_subject(subject)
        return message

    @property
    def server(self) -> str:
        """SMTP server as configured."""
        return self._server

    @property
    def port(self) -> int:
        """SMTP port after normalization."""
        return self._port

    @property
    def sender(self) -> str:
        """Envelope sender address."""
        return self._sender

    @property
    def recipients(self) -> tuple[str, ...]:
        """Envelope recipient addresses."""
        return self._recipients

    @property
    def use_tls(self) -> bool:
        """Whether a STARTTLS upgrade is attempted."""
        return self._use_tls

    @property
    def timeout(self) -> float | None:
        """Socket timeout forwarded to the default transport."""
        return self._timeout

    @property
    def subject(self) -> str:
        """Subject header value."""
        return self._subject

    @property
    def content_type(self) -> str:
        """Body content type, written with the utf-8 charset."""
        return self._content_type

    @property
    def body(self) -> bytes:
        """Raw (unencoded) body accumulated so far."""
        return bytes(self._body)

    @property
    def attachments(self) -> tuple[Attachment, ...]:
        """Attachments in insertion order."""
        return tuple(self._attachments.values())

    @property
    def built(self) -> bool:
        """Whether the message has already been serialized."""
        return self._built

    def _note_late_change(self, operation: str) -> None:
        if self._built:
            log.debug("Message already built, %s does not change the serialized output", operation)

    def set_body(self, text: str) -> MailMessage:
        """Append UTF-8 text to the body.

        Repeated calls accumulate; an empty string is ignored.
        """
        if text:
            self._note_late_change("set_body")
            self._body += text.encode("utf-8")
        return self

    def set_body_bytes(self, data: bytes) -> MailMessage:
        """Append raw bytes to the body; empty input is ignored."""
        if data:
            self._note_late_change("set_body_bytes")
            self._body += data
        return self

    def set_content_type(self, value: str) -> MailMessage:
        """Replace the body content type; an empty value restores ``text/plain``."""
        self._note_late_change("set_content_type")
        self._content_type = value or DEFAULT_CONTENT_TYPE
        return self

    def set_subject(self, value: str) -> MailMessage:
        """Replace the subject; an empty value keeps the current one."""
        if value:
            self._note_late_change("set_subject")
            self._subject = value
        return self

    def add_attachment(self, path: str | PathLike[str]) -> MailMessage:
        """Read a file and attach it base64-encoded.

        The attachment is named after the path's base name. Adding a second
        file with the same base name replaces the first one and gives it a
        new boundary token.

        Args:
            path: File to attach.

        Returns:
            The message, for chaining.

        Raises:
            MailValidationError: If ``path`` is empty.
            OSError: If the file cannot be read. Previously added
                attachments are kept.
        """
        if not path or not str(path):
            raise MailValidationError("No attachment specified", field="attachment")

        source = Path(path)
        raw = source.read_bytes()

        self._note_late_change("add_attachment")
        attachment = Attachment(
            name=source.name,
            content=base64.b64encode(raw),
            boundary=random_base36(),
        )
        if self._attachments.pop(attachment.name, None) is not None:
            log.debug("Replacing attachment %r", attachment.name)
        self._attachments[attachment.name] = attachment
        log.debug("Attached %s (%d bytes, %d encoded)", attachment.name, len(raw), attachment.size)
        return self

    def build(self) -> bytes:
        """Serialize the message, or return the cached bytes.

        Returns:
            The MIME document.

        Raises:
            MailValidationError: If the body is empty on the first call.
        """
        if self._built:
            return self._buffer

        if not self._body:
            raise MailValidationError("Message body is empty", field="body")

        self._buffer = self._serialize()
        self._built = True
        log.debug(
            "Built message for %d recipient(s) with %d attachment(s), %d bytes",
            len(self._recipients),
            len(self._attachments),
            len(self._buffer),
        )
        return self._buffer

    def __bytes__(self) -> bytes:
        return self.build()

    def _serialize(self) -> bytes:
        buf = bytearray()

        def line(text: str = "") -> None:
            buf.extend(text.encode("utf-8"))
            buf.extend(LINESEP)

        line(f"To: {', '.join(self._recipients)}")
        line(f"Subject: {self._subject}")

        # One multipart header per attachment, each opening its own part.
        for attachment in self._attachments.values():
            line(f'Content-Type: multipart/mixed; boundary="{attachment.boundary}"')
            line(f"--{attachment.boundary}")

        line("Content-Transfer-Encoding: base64")
        line("MIME-Version: 1.0;")
        line(f'Content-Type: {self._content_type}; charset="utf-8";')
        line()
        buf.extend(base64.b64encode(bytes(self._body)))

        for attachment in self._attachments.values():
            buf.extend(LINESEP * 2)
            line(f"--{attachment.boundary}")
            line(f'Content-Type: application/octet-stream; name="{attachment.name}"')
            line(f"Content-Description: {attachment.name}")
            line(f'Content-Disposition: attachment; filename="{attachment.name}"; size={attachment.size}')
            line("Content-Transfer-Encoding: base64")
            line()
            buf.extend(attachment.content)
            buf.extend(LINESEP)
            buf.extend(f"--{attachment.boundary}--".encode())

        return bytes(buf)

    def create_transport(self) -> SMTPTransport:
        """Return the SMTP transport matching this message's settings."""
        from smtpkit.mail.transports.smtp import SMTPSecurity, SMTPTransport

        return SMTPTransport(
            self._server,
            self._port,
            security=SMTPSecurity(use_starttls=self._use_tls),
            timeout=self._timeout,
        )

    def send(self, transport: MailTransport | None = None) -> bytes:
        """Build the message if needed and deliver it.

        Args:
            transport: Backend to use; defaults to :meth:`create_transport`.

        Returns:
            The serialized bytes that were delivered.

        Raises:
            MailValidationError: If the message cannot be built.
            smtplib.SMTPException: If the SMTP server rejects the message.
            OSError: If the server cannot be reached or the connection
                breaks. Other transports raise their own errors unchanged.
        """
        payload = self.build()
        backend = transport if transport is not None else self.create_transport()
        backend.send(Envelope(self._sender, self._recipients), payload)
        log.debug("Message handed to %s", type(backend).__name__)
        return payload

    def __repr__(self) -> str:
        return (
            f"MailMessage(server={self._server!r}, port={self._port}, sender={self._sender!r}, "
            f"recipients={list(self._recipients)!r}, attachments={len(self._attachments)}, built={self._built})"
        )


__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "DEFAULT_SMTP_PORT",
    "Attachment",
    "MailMessage",
]
