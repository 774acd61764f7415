"""SMTP transport built on :mod:`smtplib`.

The transport drives one SMTP session per :meth:`SMTPTransport.send` call::

    connect -> EHLO -> [STARTTLS -> EHLO] -> [AUTH] -> MAIL FROM
            -> RCPT TO (each recipient) -> DATA -> QUIT

Errors from ``smtplib`` and the socket layer reach the caller unchanged.
Any failure after the connection is established sends a best-effort
``RSET`` and ``QUIT`` before the error is re-raised. A STARTTLS handshake
failure aborts the send; there is no fallback to plaintext.

When the ``TRACE`` log level is enabled, the session is logged in detail:
dial address, TLS parameters, envelope and the raw ``smtplib`` debug output.

Examples:
    >>> from smtpkit.mail.transports.smtp import SMTPSecurity, SMTPTransport
    >>> transport = SMTPTransport("smtp.example.com", 587, security=SMTPSecurity(use_starttls=True))
    >>> transport.dial_address
    'smtp.example.com:587'
"""

from __future__ import annotations

import contextlib
import io
import logging
import re
import smtplib
import ssl
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, TypeVar

from smtpkit.logging import TRACE_LEVEL
from smtpkit.mail.exceptions import MailConfigurationError
from smtpkit.mail.transport import Envelope, MailTransport

__all__ = ["SMTPCredentials", "SMTPSecurity", "SMTPTransport"]

log = logging.getLogger(__name__)

T = TypeVar("T")

_EOL_PATTERN = re.compile(rb"\r\n|\r|\n")


@dataclass(frozen=True, slots=True)
class SMTPCredentials:
    """Username and password for SMTP AUTH."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class SMTPSecurity:
    """Transport encryption settings.

    Attributes:
        use_starttls: Upgrade a plaintext session with STARTTLS when the
            server advertises it. Ignored when ``use_ssl`` is set.
        use_ssl: Connect with implicit TLS (``SMTP_SSL``).
        verify_certificates: Verify the server certificate and host name.
            Disabled by default: the session is encrypted but the peer is
            not authenticated.
    """

    use_starttls: bool = True
    use_ssl: bool = False
    verify_certificates: bool = False


@contextlib.contextmanager
def _capture_smtp_debug(buffer: io.StringIO | None = None) -> Iterator[io.StringIO]:
    """Redirect stderr, where ``smtplib`` prints its debug output, to a buffer."""
    target = buffer if buffer is not None else io.StringIO()
    with contextlib.redirect_stderr(target):
        yield target


def _log_smtp_debug_output(buffer: io.StringIO) -> None:
    """Re-emit captured ``smtplib`` debug lines at TRACE level."""
    if not log.isEnabledFor(TRACE_LEVEL):
        return
    for raw_line in buffer.getvalue().splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith("send:"):
            log.log(TRACE_LEVEL, "[SMTP] >>> %s", line[5:].strip())
        elif line.startswith("reply:"):
            log.log(TRACE_LEVEL, "[SMTP] <<< %s", line[6:].strip())
        else:
            log.log(TRACE_LEVEL, "[SMTP] %s", line)


def _common_name(rdns: Any) -> str | None:
    """Return the ``commonName`` of a certificate subject or issuer, if any."""
    try:
        for rdn in rdns:
            for key, value in rdn:
                if key == "commonName":
                    return str(value)
    except (TypeError, ValueError):
        return None
    return None


def _extract_ssl_info(sock: ssl.SSLSocket | None) -> dict[str, Any]:
    """Collect protocol, cipher and certificate details from a TLS socket.

    Every lookup is independent: a failing one only leaves its keys out
    (``version`` falls back to ``"unknown"``).
    """
    if sock is None:
        return {}

    info: dict[str, Any] = {}
    try:
        info["version"] = sock.version() or "unknown"
    except (AttributeError, OSError, ValueError):
        info["version"] = "unknown"

    try:
        cipher = sock.cipher()
    except (AttributeError, OSError, ValueError):
        cipher = None
    if cipher:
        info["cipher_name"], info["cipher_protocol"], info["cipher_bits"] = cipher

    try:
        cert = sock.getpeercert()
    except (AttributeError, OSError, ValueError):
        cert = None
    if cert:
        subject_cn = _common_name(cert.get("subject", ()))
        if subject_cn is not None:
            info["peer_cn"] = subject_cn
        issuer_cn = _common_name(cert.get("issuer", ()))
        if issuer_cn is not None:
            info["issuer_cn"] = issuer_cn
        if "notBefore" in cert:
            info["valid_from"] = cert["notBefore"]
        if "notAfter" in cert:
            info["valid_until"] = cert["notAfter"]
    return info


def _normalize_line_endings(payload: bytes) -> bytes:
    """Convert bare LF and CR line endings to CRLF for the DATA stream."""
    return _EOL_PATTERN.sub(b"\r\n", payload)


class SMTPTransport(MailTransport):
    """Deliver messages through an SMTP server.

    Args:
        host: Server host name. A ``host:port`` value
            (``"mail.example.com:2525"``) overrides ``port``.
        port: Server port, used when ``host`` carries none.
        credentials: Optional AUTH credentials.
        security: Encryption settings (default: STARTTLS when offered).
        timeout: Socket timeout in seconds; ``None`` blocks until the OS
            gives up.

    Raises:
        MailConfigurationError: If ``host`` is empty, ``port`` is not
            positive or ``timeout`` is not positive.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        *,
        credentials: SMTPCredentials | None = None,
        security: SMTPSecurity | None = None,
        timeout: float | None = None,
    ) -> None:
        if not host:
            raise MailConfigurationError("SMTP host is required")
        if port <= 0:
            raise MailConfigurationError(f"SMTP port must be positive, got {port}")
        if timeout is not None and timeout <= 0:
            raise MailConfigurationError("Timeout must be greater than 0")

        self._host = host
        self._port = port
        self._credentials = credentials
        self._security = security or SMTPSecurity()
        self._timeout = timeout

    @property
    def host(self) -> str:
        """Server host as configured, including any ``:port`` suffix."""
        return self._host

    @property
    def port(self) -> int:
        """Port used when ``host`` carries none."""
        return self._port

    @property
    def security(self) -> SMTPSecurity:
        """Encryption settings applied to each session."""
        return self._security

    @property
    def dial_address(self) -> str:
        """Address the transport connects to."""
        if ":" in self._host:
            return self._host
        return f"{self._host}:{self._port}"

    def _create_ssl_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if not self._security.verify_certificates:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def _dial_target(self) -> tuple[str, int]:
        """Split the dial address into the host name and port given to smtplib.

        Only ``name:port`` and ``[address]:port`` are split; the bare host
        name is also the TLS server name. A bracketed address without a port
        loses its brackets. Any other value goes to smtplib unchanged, with
        the configured port when it holds several colons (an IPv6 literal).
        """
        host = self._host
        if host.startswith("["):
            address, sep, rest = host[1:].partition("]")
            if sep and not rest:
                return address, self._port
            if sep and rest.startswith(":") and rest[1:].isdigit():
                return address, int(rest[1:])
            return host, 0
        if host.count(":") == 1:
            name, _, port = host.partition(":")
            if port.isdigit():
                return name, int(port)
            return host, 0
        return host, self._port

    def _connect(self) -> smtplib.SMTP:
        host, port = self._dial_target()
        kwargs: dict[str, Any] = {"host": host, "port": port}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        if self._security.use_ssl:
            return smtplib.SMTP_SSL(context=self._create_ssl_context(), **kwargs)
        return smtplib.SMTP(**kwargs)

    @staticmethod
    def _traced(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run one SMTP command, routing its debug output to the TRACE log."""
        if not log.isEnabledFor(TRACE_LEVEL):
            return func(*args, **kwargs)
        buffer = io.StringIO()
        try:
            with _capture_smtp_debug(buffer):
                return func(*args, **kwargs)
        finally:
            _log_smtp_debug_output(buffer)

    @staticmethod
    def _log_tls_session(client: smtplib.SMTP, label: str) -> None:
        info = _extract_ssl_info(getattr(client, "sock", None))
        if not info:
            return
        log.log(
            TRACE_LEVEL,
            "[SMTP] %s: %s, cipher=%s (%s bits)",
            label,
            info.get("version"),
            info.get("cipher_name", "unknown"),
            info.get("cipher_bits", "?"),
        )
        if "peer_cn" in info:
            log.log(
                TRACE_LEVEL,
                "[SMTP] %s: peer=%s, issuer=%s",
                label,
                info["peer_cn"],
                info.get("issuer_cn", "unknown"),
            )

    def send(self, envelope: Envelope, payload: bytes) -> None:
        """Run one SMTP session delivering ``payload``.

        Args:
            envelope: Sender and recipient addresses.
            payload: Serialized message; line endings are normalized to CRLF.

        Raises:
            smtplib.SMTPException: If the server rejects a command, including
                a refused sender (``SMTPSenderRefused``) or recipient
                (``SMTPRecipientsRefused``).
            OSError: If connecting fails or the connection breaks, including
                a failed TLS handshake (``ssl.SSLError``).
        """
        trace_enabled = log.isEnabledFor(TRACE_LEVEL)
        if trace_enabled:
            log.log(
                TRACE_LEVEL,
                "[SMTP] Connecting to %s (ssl=%s, starttls=%s)",
                self.dial_address,
                self._security.use_ssl,
                self._security.use_starttls,
            )

        try:
            client = self._connect()
        except (smtplib.SMTPException, OSError) as e:
            log.debug("Unable to connect to %s: %s", self.dial_address, e)
            raise

        if trace_enabled:
            client.set_debuglevel(1)
            if self._security.use_ssl:
                self._log_tls_session(client, "SSL")

        try:
            self._run_session(client, envelope, payload, trace_enabled)
        except (smtplib.SMTPException, OSError) as e:
            if trace_enabled:
                log.log(TRACE_LEVEL, "[SMTP] %s: %s", type(e).__name__, e)
            self._abort(client)
            log.debug("SMTP delivery via %s failed: %s", self.dial_address, e)
            raise

        with contextlib.suppress(smtplib.SMTPException, OSError):
            self._traced(client.quit)
        client.close()
        log.debug("Email sent via SMTP to %d recipient(s)", len(envelope.recipients))

    def _run_session(self, client: smtplib.SMTP, envelope: Envelope, payload: bytes, trace_enabled: bool) -> None:
        self._traced(client.ehlo_or_helo_if_needed)

        if self._security.use_starttls and not self._security.use_ssl:
            if client.has_extn("starttls"):
                if trace_enabled:
                    log.log(TRACE_LEVEL, "[SMTP] Upgrading connection with STARTTLS")
                self._traced(client.starttls, context=self._create_ssl_context())
                self._traced(client.ehlo)
                if trace_enabled:
                    self._log_tls_session(client, "TLS")
            else:
                log.warning("%s does not advertise STARTTLS, sending unencrypted", self.dial_address)

        if self._credentials is not None:
            if trace_enabled:
                log.log(TRACE_LEVEL, "[SMTP] Authenticating as: %s", self._credentials.username)
            self._traced(client.login, self._credentials.username, self._credentials.password)
            if trace_enabled:
                log.log(TRACE_LEVEL, "[SMTP] Authentication successful")

        if trace_enabled:
            log.log(TRACE_LEVEL, "[SMTP] MAIL FROM: <%s>", envelope.sender)
        code, reply = self._traced(client.mail, envelope.sender)
        if code != 250:
            raise smtplib.SMTPSenderRefused(code, reply, envelope.sender)

        for recipient in envelope.recipients:
            if trace_enabled:
                log.log(TRACE_LEVEL, "[SMTP] RCPT TO: <%s>", recipient)
            code, reply = self._traced(client.rcpt, recipient)
            if code not in (250, 251):
                raise smtplib.SMTPRecipientsRefused({recipient: (code, reply)})

        self._traced(client.data, _normalize_line_endings(payload))
        if trace_enabled:
            log.log(TRACE_LEVEL, "[SMTP] Message sent successfully (%d bytes)", len(payload))

    def _abort(self, client: smtplib.SMTP) -> None:
        """Reset and close a failing session, ignoring secondary errors."""
        with contextlib.suppress(smtplib.SMTPException, OSError):
            self._traced(client.rset)
        with contextlib.suppress(smtplib.SMTPException, OSError):
            self._traced(client.quit)
        client.close()
