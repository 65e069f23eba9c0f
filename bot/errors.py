"""
Bot error taxonomy.

Provider failures (send / resolve / fetch) live with the WhatsApp client in
transport.whatsapp.sender and are re-exported here so callers have one
place to import from.
"""

from transport.whatsapp.sender import (
    FetchError,
    ProviderCallFailure,
    ResolutionError,
    SendError,
)


class StorageUnavailable(Exception):
    """Registry storage is missing, unreadable or corrupt. Never surfaced."""
    pass


class AuthorizationFailure(Exception):
    """Admin key did not match."""
    pass


class ValidationFailure(Exception):
    """A required admin field is missing or empty."""
    pass


__all__ = [
    "StorageUnavailable",
    "ProviderCallFailure",
    "SendError",
    "ResolutionError",
    "FetchError",
    "AuthorizationFailure",
    "ValidationFailure",
]
