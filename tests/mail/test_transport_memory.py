"""Tests for the in-memory transport."""

from __future__ import annotations

import pytest

from smtpkit.mail import Envelope, InMemoryTransport, MailMessage, MailTransport


def test_is_a_mail_transport() -> None:
    assert isinstance(InMemoryTransport(), MailTransport)


def test_records_deliveries_in_order() -> None:
    transport = InMemoryTransport()
    first = Envelope("a@x.com", ("b@x.com",))
    second = Envelope("a@x.com", ("c@x.com",))

    transport.send(first, b"one")
    transport.send(second, b"two")

    assert transport.count == 2
    assert transport.sent == [(first, b"one"), (second, b"two")]
    assert transport.last() == (second, b"two")


def test_last_on_empty_outbox() -> None:
    assert InMemoryTransport().last() is None


def test_reset_clears_outbox() -> None:
    transport = InMemoryTransport()
    transport.send(Envelope("a@x.com", ("b@x.com",)), b"x")

    transport.reset()

    assert transport.count == 0


def test_captures_built_message() -> None:
    transport = InMemoryTransport()
    message = MailMessage("localhost", 25, "a@x.com", ["b@x.com", "c@x.com"]).set_body("hi")

    payload = message.send(transport)

    envelope, sent = transport.sent[0]
    assert envelope.sender == "a@x.com"
    assert envelope.recipients == ("b@x.com", "c@x.com")
    assert sent == payload
    assert sent.startswith(b"To: b@x.com, c@x.com\n")


def test_envelope_is_immutable() -> None:
    envelope = Envelope("a@x.com", ("b@x.com",))
    with pytest.raises(AttributeError):
        envelope.sender = "other@x.com"  # type: ignore[misc]
