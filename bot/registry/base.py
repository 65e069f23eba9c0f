"""
Abstract subscriber store.

The registry is a service, not state: it is loaded fresh on every read and
written back in full on every mutation. Backends only implement load/save;
the subscription operations are built on top and run their
load-modify-save sequence under a per-store lock.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from bot.registry.types import Registry, Subscriber, utc_now_iso

logger = logging.getLogger(__name__)


class SubscriberStore(ABC):
    """
    Registry boundary. Bot code depends ONLY on this interface.

    Key properties:
    - load() never raises: unavailable storage reads as an empty registry
    - save() replaces the whole registry
    - subscribe/unsubscribe are atomic with respect to each other
    """

    def __init__(self, clock: Callable[[], str] = utc_now_iso):
        self._clock = clock
        self._lock = threading.RLock()

    @abstractmethod
    def load(self) -> Registry:
        """
        Read the full registry.

        Returns an empty registry if storage is absent, corrupt or unreadable.
        Never raises.
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, registry: Registry) -> None:
        """Overwrite the full registry."""
        raise NotImplementedError

    def subscribe(self, wa_id: str, name: str) -> Subscriber:
        """Upsert a subscriber; re-subscribing overwrites name and join time."""
        with self._lock:
            registry = self.load()
            subscriber = Subscriber(name=name, joined_at=self._clock())
            registry[wa_id] = subscriber
            self.save(registry)
        logger.info(f"Subscribed {wa_id}", extra={"wa_id": wa_id})
        return subscriber

    def unsubscribe(self, wa_id: str) -> bool:
        """Remove a subscriber. Returns False (and changes nothing) if absent."""
        with self._lock:
            registry = self.load()
            removed = registry.pop(wa_id, None) is not None
            self.save(registry)
        if removed:
            logger.info(f"Unsubscribed {wa_id}", extra={"wa_id": wa_id})
        return removed

    def count(self) -> int:
        return len(self.load())

    def all_ids(self) -> List[str]:
        """Snapshot of subscriber ids. Order is not meaningful."""
        return list(self.load().keys())

    def get(self, wa_id: str) -> Optional[Subscriber]:
        return self.load().get(wa_id)

    def is_subscribed(self, wa_id: str) -> bool:
        return wa_id in self.load()
