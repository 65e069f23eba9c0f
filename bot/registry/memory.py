"""
In-memory subscriber store for tests and local development.

Deterministic, no external dependencies, nothing survives a restart.
"""

from typing import Callable, Optional

from bot.registry.base import SubscriberStore
from bot.registry.types import Registry, utc_now_iso


class InMemorySubscriberStore(SubscriberStore):
    """
    Dict-backed store.

    load() hands out a copy so callers can never mutate stored state
    without going through save().
    """

    def __init__(
        self,
        initial: Optional[Registry] = None,
        clock: Callable[[], str] = utc_now_iso,
    ):
        super().__init__(clock=clock)
        self._registry: Registry = dict(initial or {})

    def load(self) -> Registry:
        return dict(self._registry)

    def save(self, registry: Registry) -> None:
        self._registry = dict(registry)
