"""
WhatsApp Input Normalization

PURE CONVERSION - NO LOGIC, NO NETWORK CALLS

Converts WhatsApp webhook payloads into the canonical InboundMessage.
- TEXT: keep the raw body (command parsing trims and folds case later)
- MEDIA: keep the reference id and declared mime type, never download here

Payloads that carry no message (delivery/read status callbacks) normalize
to None. Anything else that does not match a known shape is rejected.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from .schemas import (
    DEFAULT_SENDER_NAME,
    MEDIA_KINDS,
    ChangeValue,
    InboundMessage,
    MessageObject,
    WhatsAppWebhookPayload,
)


class NormalizationError(Exception):
    """Input normalization failed."""
    pass


def normalize_message(
    payload: dict | WhatsAppWebhookPayload,
) -> Optional[InboundMessage]:
    """
    Convert a WhatsApp webhook payload into an InboundMessage.

    Only the first message of the first change of the first entry is
    considered; WhatsApp delivers at most one message per webhook call.

    Args:
        payload: Raw WhatsApp webhook payload

    Returns:
        InboundMessage, or None when the payload carries no message

    Raises:
        NormalizationError: Invalid payload or unsupported message type
    """

    if not isinstance(payload, WhatsAppWebhookPayload):
        try:
            payload = WhatsAppWebhookPayload.model_validate(payload)
        except ValidationError as e:
            raise NormalizationError(f"Invalid payload structure: {e}")

    try:
        value = payload.entry[0].changes[0].value
    except IndexError:
        return None

    if not value.messages:
        return None

    message = value.messages[0]
    sender_name = _extract_profile_name(value)
    timestamp = _parse_timestamp(message.timestamp)

    if message.type == "text":
        return _normalize_text_message(message, sender_name, timestamp)

    if message.type in MEDIA_KINDS:
        return _normalize_media_message(message, sender_name, timestamp)

    raise NormalizationError(f"Unsupported message type: {message.type}")


def _normalize_text_message(
    message: MessageObject,
    sender_name: str,
    timestamp: Optional[datetime],
) -> InboundMessage:
    """
    Normalize text message.

    A text message without a body normalizes to empty text, which the
    command interpreter treats as "no reply".
    """

    body = message.text.body if message.text else ""

    return InboundMessage(
        sender_id=message.from_,
        sender_name=sender_name,
        kind="text",
        text=body,
        message_id=message.id,
        timestamp=timestamp,
    )


def _normalize_media_message(
    message: MessageObject,
    sender_name: str,
    timestamp: Optional[datetime],
) -> InboundMessage:
    """
    Normalize image/video/audio/document/sticker message.

    The media object lives under a key equal to the message type. A missing
    id is kept as None; media intake skips such messages.
    """

    media = getattr(message, message.type)

    return InboundMessage(
        sender_id=message.from_,
        sender_name=sender_name,
        kind=message.type,
        text="",
        media_id=media.id if media else None,
        mime_type=media.mime_type if media else None,
        message_id=message.id,
        timestamp=timestamp,
    )


def _extract_profile_name(value: ChangeValue) -> str:
    if value.contacts and value.contacts[0].profile and value.contacts[0].profile.name:
        return value.contacts[0].profile.name
    return DEFAULT_SENDER_NAME


def _parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    try:
        return datetime.fromtimestamp(int(raw), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None
