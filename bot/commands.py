"""
Command interpreter.

PURE DECISION FUNCTION - NO I/O

Maps (inbound text, sender, current registry) to an action and a reply.
Every message is classified on its own; there is no multi-turn context.

    menu   -> help text
    yes    -> subscribe
    stop   -> unsubscribe
    count  -> subscriber count
    other  -> nudge (YES/MENU if not subscribed, MENU if subscribed)
    empty  -> no reply
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


class CommandAction(str, Enum):
    NONE = "none"
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"


MENU_KEYWORD = "menu"
SUBSCRIBE_KEYWORD = "yes"
UNSUBSCRIBE_KEYWORD = "stop"
COUNT_KEYWORD = "count"


@dataclass(frozen=True)
class CommandDecision:
    """What to do for one inbound message. reply=None means stay silent."""

    action: CommandAction
    reply: Optional[str] = None


def normalize_command(text: Optional[str]) -> str:
    """Trim and case-fold. No punctuation stripping."""
    return (text or "").strip().lower()


def menu_text(name: str) -> str:
    return (
        f"Hey {name}!\n"
        "• Reply *YES* to opt in\n"
        "• Reply *STOP* to opt out\n"
        "• Send media to save it\n"
        "• Type *COUNT* to see subscribers"
    )


def subscribed_text(name: str) -> str:
    return f"Thanks {name}! You are now subscribed ✅"


UNSUBSCRIBED_TEXT = "You have been unsubscribed."


def count_text(count: int) -> str:
    return f"Subscribers: {count}"


def not_subscribed_nudge(name: str) -> str:
    return f"Hi {name}! Reply *YES* to join, or type *MENU* for options."


SUBSCRIBED_NUDGE = "Got it! Type *MENU* for options."


def interpret(
    text: Optional[str],
    sender_id: str,
    sender_name: str,
    registry: Mapping[str, object],
) -> CommandDecision:
    """
    Classify one inbound message.

    Args:
        text: Raw message text (None or empty for media-only messages)
        sender_id: WhatsApp id of the sender
        sender_name: Profile name reported with this event
        registry: Current registry snapshot, keyed by WhatsApp id

    Returns:
        CommandDecision; the caller applies the action and sends the reply
    """
    command = normalize_command(text)

    if command == MENU_KEYWORD:
        return CommandDecision(CommandAction.NONE, menu_text(sender_name))

    if command == SUBSCRIBE_KEYWORD:
        return CommandDecision(CommandAction.SUBSCRIBE, subscribed_text(sender_name))

    if command == UNSUBSCRIBE_KEYWORD:
        return CommandDecision(CommandAction.UNSUBSCRIBE, UNSUBSCRIBED_TEXT)

    if command == COUNT_KEYWORD:
        return CommandDecision(CommandAction.NONE, count_text(len(registry)))

    if command:
        if sender_id in registry:
            return CommandDecision(CommandAction.NONE, SUBSCRIBED_NUDGE)
        return CommandDecision(CommandAction.NONE, not_subscribed_nudge(sender_name))

    return CommandDecision(CommandAction.NONE, None)
