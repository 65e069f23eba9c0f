"""
Subscriber registry types.

Registry documents are stored in the same shape the bot has always written:

    {"contacts": {"<wa_id>": {"name": "Ann", "joinedAt": "<ISO-8601>"}}}
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict

logger = logging.getLogger(__name__)

REGISTRY_ROOT_KEY = "contacts"


@dataclass(frozen=True)
class Subscriber:
    """An opted-in chat identity. The id is the registry key."""

    name: str                         # last profile name seen at opt-in
    joined_at: str                    # ISO-8601, set once per subscription

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "joinedAt": self.joined_at}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subscriber":
        if not isinstance(data, dict):
            raise ValueError(f"Subscriber record must be an object, got {type(data).__name__}")
        return cls(
            name=str(data.get("name", "")),
            joined_at=str(data.get("joinedAt", "")),
        )


Registry = Dict[str, Subscriber]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def registry_to_document(registry: Registry) -> Dict[str, Any]:
    return {REGISTRY_ROOT_KEY: {wa_id: sub.to_dict() for wa_id, sub in registry.items()}}


def registry_from_document(document: Any) -> Registry:
    """
    Parse a stored registry document.

    A malformed record is skipped with a warning; the rest of the
    registry still loads.

    Raises:
        ValueError: document does not have the expected shape
    """
    if not isinstance(document, dict):
        raise ValueError("Registry document must be an object")
    contacts = document.get(REGISTRY_ROOT_KEY, {})
    if not isinstance(contacts, dict):
        raise ValueError(f"'{REGISTRY_ROOT_KEY}' must be an object")
    registry: Registry = {}
    for wa_id, data in contacts.items():
        try:
            registry[str(wa_id)] = Subscriber.from_dict(data)
        except ValueError as e:
            logger.warning(
                f"Skipping malformed subscriber record {wa_id}: {e}",
                extra={"wa_id": str(wa_id)},
            )
    return registry
