"""
Registry module exports.

Clean interface for bot code to import subscriber storage.
"""

from bot.registry.base import SubscriberStore
from bot.registry.memory import InMemorySubscriberStore
from bot.registry.json_file import JsonFileSubscriberStore
from bot.registry.types import (
    Registry,
    Subscriber,
    registry_from_document,
    registry_to_document,
    utc_now_iso,
)

__all__ = [
    "SubscriberStore",
    "InMemorySubscriberStore",
    "JsonFileSubscriberStore",
    "Registry",
    "Subscriber",
    "registry_from_document",
    "registry_to_document",
    "utc_now_iso",
]
