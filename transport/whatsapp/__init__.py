"""WhatsApp Transport Layer - Module Exports"""

from .normalize import (
    NormalizationError,
    normalize_message,
)
from .schemas import (
    DEFAULT_SENDER_NAME,
    MEDIA_KINDS,
    InboundMessage,
    MediaLocation,
    MessageObject,
    WhatsAppMessageResponse,
    WhatsAppWebhookPayload,
)
from .security import (
    compute_signature,
    verify_signature,
    verify_webhook_challenge,
)
from .sender import (
    FetchError,
    ProviderCallFailure,
    ResolutionError,
    SendError,
    WhatsAppClient,
)

__all__ = [
    # Schemas
    "InboundMessage",
    "MediaLocation",
    "MessageObject",
    "WhatsAppMessageResponse",
    "WhatsAppWebhookPayload",
    "DEFAULT_SENDER_NAME",
    "MEDIA_KINDS",
    # Normalization
    "normalize_message",
    "NormalizationError",
    # Security
    "compute_signature",
    "verify_signature",
    "verify_webhook_challenge",
    # Client
    "WhatsAppClient",
    "ProviderCallFailure",
    "SendError",
    "ResolutionError",
    "FetchError",
]
