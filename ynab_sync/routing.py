"""Inbound alert message handling: addresses, bodies and layout routing."""

import email
from dataclasses import dataclass
from email import policy
from email.message import EmailMessage
from email.utils import parseaddr

from loguru import logger

from ynab_sync.models import EmailAddress, SyncConfig
from ynab_sync.parser.layouts import Layout, select_layout


class MessageRejected(Exception):
    """Message is not something this sync handles."""

    pass


@dataclass
class AlertMessage:
    """An inbound alert email reduced to what the parser needs."""

    sender: str
    recipient: str
    html: str


def parse_email_address(addr: str) -> EmailAddress:
    """Split an address of the form "user+tag@domain".

    Display-name forms like "Chase <no.reply@chase.com>" are accepted.
    """
    _, bare = parseaddr(addr)
    bare = bare or addr.strip()
    front, _, domain = bare.rpartition("@")
    username, plus, tag = front.rpartition("+")
    if not plus:
        username, tag = front, ""
    return EmailAddress(username=username, tag=tag, domain=domain.lower())


def _html_body(message: EmailMessage, raw: bytes) -> str:
    part = message.get_body(preferencelist=("html",))
    if part is None:
        logger.debug("No text/html part, using raw message text")
        return raw.decode("utf-8", errors="replace")
    try:
        return part.get_content()
    except LookupError as e:
        logger.warning(f"Unknown charset in HTML part ({e}), decoding as UTF-8")
        return part.get_payload(decode=True).decode("utf-8", errors="replace")


def load_message(raw: bytes) -> AlertMessage:
    """Parse a raw RFC 822 message.

    Args:
        raw: Message bytes as received

    Returns:
        Sender, recipient and HTML body of the message
    """
    message = email.message_from_bytes(raw, policy=policy.default)
    return AlertMessage(
        sender=str(message.get("From", "")),
        recipient=str(message.get("To", "")),
        html=_html_body(message, raw),
    )


def should_ingest(recipient: str, username: str = "ingest") -> bool:
    """Check whether a message was sent to the ingest address."""
    return parse_email_address(recipient).username == username


def route(message: AlertMessage, config: SyncConfig) -> Layout:
    """Pick the alert layout for a message.

    Raises:
        MessageRejected: If the message is not addressed to the ingest
            address or comes from an unknown sender
    """
    logger.debug(f"Handle email: from {message.sender} to {message.recipient}")

    if not should_ingest(message.recipient, config.ingest_username):
        raise MessageRejected(f"Not addressed to ingest address: {message.recipient}")

    sender = parse_email_address(message.sender)
    layout = select_layout(sender.domain)
    if layout is None:
        raise MessageRejected(f"Unrecognized sender domain: {sender.domain}")

    logger.debug(f"Routed message from {sender.domain} to layout {layout.name}")
    return layout
