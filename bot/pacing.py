"""
Outbound send pacing.

A Pacer hands out "go" signals no closer together than a fixed interval.
The clock and sleep function are injectable so tests can drive time
without real delays. Concurrent acquirers are serialized, so two
broadcasts running at once still share one outbound rate.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_PACING_SECONDS = 0.25


class Pacer:
    """Minimum-interval limiter for outbound sends."""

    def __init__(
        self,
        interval: float = DEFAULT_PACING_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if interval < 0:
            raise ValueError("Pacing interval must be >= 0")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None

    async def acquire(self) -> None:
        """Wait until at least `interval` seconds have passed since the last acquire."""
        # Created lazily so the lock binds to the running loop.
        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            if self._last is not None:
                wait = self._last + self.interval - self._clock()
                if wait > 0:
                    await self._sleep(wait)
            self._last = self._clock()
