"""
Broadcast dispatcher.

Operator-triggered fan-out of one message to every current subscriber:

1. Check the admin key (once, before anything else)
2. Snapshot subscriber ids; total is fixed here
3. Send to each id in turn through the pacer
4. Count a send only when it returns; failures are logged and skipped

No retries. No abort on partial failure.
"""

import hmac
import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional

from bot.errors import AuthorizationFailure, ProviderCallFailure, ValidationFailure
from bot.pacing import Pacer
from bot.registry.base import SubscriberStore
from transport.whatsapp.sender import WhatsAppClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BroadcastResult:
    sent: int
    total: int

    def to_dict(self) -> dict:
        return asdict(self)


class BroadcastDispatcher:
    """Paced, best-effort fan-out to the subscriber registry."""

    def __init__(
        self,
        store: SubscriberStore,
        client: WhatsAppClient,
        admin_key: str,
        pacer: Optional[Pacer] = None,
    ):
        self.store = store
        self.client = client
        self.admin_key = admin_key
        self.pacer = pacer or Pacer()

    def authorize(self, key: Any) -> None:
        """
        Raises:
            AuthorizationFailure: key missing, not a string, or not equal to the admin key
        """
        if not isinstance(key, str) or not self.admin_key or not hmac.compare_digest(
            key.encode("utf-8"), self.admin_key.encode("utf-8")
        ):
            raise AuthorizationFailure("Unauthorized")

    async def broadcast(self, key: Any, message: Any) -> BroadcastResult:
        """
        Authorize, validate, then dispatch.

        Raises:
            AuthorizationFailure: wrong key (nothing sent)
            ValidationFailure: message missing, empty or not a string (nothing sent)
        """
        self.authorize(key)
        if not isinstance(message, str) or not message:
            raise ValidationFailure("Message required")
        return await self.dispatch(message)

    async def dispatch(self, message: str) -> BroadcastResult:
        """Send `message` to every subscriber in the current snapshot."""
        recipients = self.store.all_ids()
        total = len(recipients)
        sent = 0

        logger.info(f"Broadcast started: {total} recipients", extra={"total": total})

        for wa_id in recipients:
            await self.pacer.acquire()
            try:
                await self.client.send_text(wa_id, message)
            except ProviderCallFailure as e:
                logger.warning(
                    f"Broadcast send to {wa_id} failed: {e}",
                    extra={"recipient_id": wa_id},
                )
                continue
            sent += 1

        logger.info(
            f"Broadcast finished: {sent}/{total} sent",
            extra={"sent": sent, "total": total},
        )
        return BroadcastResult(sent=sent, total=total)
