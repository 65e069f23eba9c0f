"""
Inbound message handler.

Glue between the webhook and the bot components:

    InboundMessage -> interpret -> registry mutation -> reply
                   -> media intake -> reply

Nothing here raises to the webhook. Every failure is logged and the
webhook still acknowledges the delivery.
"""

import logging
from typing import List

from bot.commands import CommandAction, CommandDecision, interpret
from bot.errors import ProviderCallFailure
from bot.media import MediaIntake
from bot.registry.base import SubscriberStore
from transport.whatsapp.schemas import InboundMessage
from transport.whatsapp.sender import WhatsAppClient

logger = logging.getLogger(__name__)


class MessageHandler:
    """Processes one inbound message end to end."""

    def __init__(
        self,
        store: SubscriberStore,
        client: WhatsAppClient,
        media: MediaIntake,
    ):
        self.store = store
        self.client = client
        self.media = media

    async def handle(self, message: InboundMessage) -> List[str]:
        """
        Run the command table, then media intake, for one message.

        Returns:
            Replies that were attempted, in order (for logging and tests)
        """
        replies: List[str] = []

        decision = self._decide_and_apply(message)
        if decision.reply:
            await self._reply(message.sender_id, decision.reply)
            replies.append(decision.reply)

        if message.is_media and message.media_id:
            media_reply = await self.media.save_and_reply(message.media_id, message.kind)
            await self._reply(message.sender_id, media_reply)
            replies.append(media_reply)

        return replies

    def _decide_and_apply(self, message: InboundMessage) -> CommandDecision:
        decision = interpret(
            message.text,
            message.sender_id,
            message.sender_name,
            self.store.load(),
        )

        if decision.action is CommandAction.SUBSCRIBE:
            self.store.subscribe(message.sender_id, message.sender_name)
        elif decision.action is CommandAction.UNSUBSCRIBE:
            self.store.unsubscribe(message.sender_id)

        logger.debug(
            f"Command decision: {decision.action.value}",
            extra={"sender_id": message.sender_id, "action": decision.action.value},
        )
        return decision

    async def _reply(self, to: str, body: str) -> bool:
        try:
            await self.client.send_text(to, body)
            return True
        except ProviderCallFailure as e:
            logger.error(
                f"Failed to send reply: {e}",
                exc_info=True,
                extra={"recipient_id": to},
            )
            return False
