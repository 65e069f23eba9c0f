"""
WhatsApp Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Only defines the contract between WhatsApp and the bot.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


MediaKind = Literal["image", "video", "audio", "document", "sticker"]
MessageKind = Literal["text", "image", "video", "audio", "document", "sticker"]

MEDIA_KINDS: tuple[str, ...] = ("image", "video", "audio", "document", "sticker")

DEFAULT_SENDER_NAME = "Friend"


# ============================================================================
# INBOUND MESSAGE (THE CONTRACT)
# ============================================================================

class InboundMessage(BaseModel):
    """
    Canonical inbound message the bot consumes.

    Tagged on `kind`: text messages carry `text`, media messages carry
    `media_id` (and usually `mime_type`). Never persisted.
    """

    sender_id: str = Field(..., description="WhatsApp id of the sender")
    sender_name: str = Field(
        DEFAULT_SENDER_NAME,
        description="Profile name reported with this event"
    )
    kind: MessageKind = Field(..., description="text or one of the media kinds")
    text: str = Field("", description="Raw text body. Empty for media.")
    media_id: Optional[str] = Field(None, description="Attachment reference id")
    mime_type: Optional[str] = Field(None, description="Declared attachment type")
    message_id: Optional[str] = Field(None, description="WhatsApp message id")
    timestamp: Optional[datetime] = Field(None, description="Provider timestamp")

    class Config:
        """Pydantic config."""
        frozen = True

    @property
    def is_media(self) -> bool:
        return self.kind in MEDIA_KINDS


# ============================================================================
# WHATSAPP WEBHOOK PAYLOAD SCHEMAS (INPUT)
# ============================================================================

class TextBody(BaseModel):
    """{"body": "..."}"""
    body: str = ""


class MediaObject(BaseModel):
    """Attachment handle shared by image/video/audio/document/sticker."""
    id: Optional[str] = None
    mime_type: Optional[str] = None
    filename: Optional[str] = None
    caption: Optional[str] = None

    class Config:
        extra = "allow"


class MessageObject(BaseModel):
    """A single WhatsApp message."""
    from_: str = Field(..., alias="from")
    id: Optional[str] = None
    timestamp: Optional[str] = None
    type: str

    text: Optional[TextBody] = None
    image: Optional[MediaObject] = None
    video: Optional[MediaObject] = None
    audio: Optional[MediaObject] = None
    document: Optional[MediaObject] = None
    sticker: Optional[MediaObject] = None

    class Config:
        populate_by_name = True
        extra = "allow"


class ContactProfile(BaseModel):
    name: Optional[str] = None


class ContactObject(BaseModel):
    """Contact info."""
    wa_id: Optional[str] = None
    profile: Optional[ContactProfile] = None


class ChangeValue(BaseModel):
    """`entry[].changes[].value` - messages, contacts, or statuses."""
    messaging_product: Optional[str] = None
    contacts: list[ContactObject] = Field(default_factory=list)
    messages: list[MessageObject] = Field(default_factory=list)
    statuses: list[dict] = Field(default_factory=list)

    class Config:
        extra = "allow"


class Change(BaseModel):
    field: Optional[str] = None
    value: ChangeValue


class Entry(BaseModel):
    id: Optional[str] = None
    changes: list[Change] = Field(default_factory=list)


class WhatsAppWebhookPayload(BaseModel):
    """
    Full WhatsApp webhook payload.

    ref: https://developers.facebook.com/docs/whatsapp/cloud-api/webhooks/payload-example
    """

    object: Optional[str] = Field(None, description="Always 'whatsapp_business_account'")
    entry: list[Entry] = Field(default_factory=list, description="Webhook entries")

    class Config:
        extra = "allow"  # WhatsApp may add fields


# ============================================================================
# WHATSAPP API RESPONSES (OUTPUT)
# ============================================================================

class WhatsAppMessageResponse(BaseModel):
    """Response from WhatsApp Cloud API when sending a message."""

    messaging_product: str = Field(default="whatsapp")
    contacts: list[dict[str, str]] = Field(default_factory=list)
    messages: list[dict[str, str]] = Field(default_factory=list)

    class Config:
        extra = "allow"


class MediaLocation(BaseModel):
    """Resolved media handle: short-lived download URL plus declared type."""

    url: str
    mime_type: Optional[str] = None
    file_size: Optional[int] = None
    sha256: Optional[str] = None

    class Config:
        extra = "allow"
