"""
Infrastructure initialization and bootstrap.

Singleton pattern for wiring the store, WhatsApp client and bot services
from configuration.
"""

from typing import Optional

from bot.broadcast import BroadcastDispatcher
from bot.handler import MessageHandler
from bot.media import MediaIntake
from bot.pacing import Pacer
from bot.registry import SubscriberStore
from transport.whatsapp.sender import WhatsAppClient

from .config import BotConfig, get_config


class BotBootstrap:
    """
    Bootstrap bot services based on configuration.

    Singleton pattern - single instance per process. Components may be
    passed in explicitly (tests); anything omitted is built from config.
    """

    _instance: Optional["BotBootstrap"] = None

    def __init__(
        self,
        config: Optional[BotConfig] = None,
        store: Optional[SubscriberStore] = None,
        client: Optional[WhatsAppClient] = None,
        pacer: Optional[Pacer] = None,
    ):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        self.store = store or self.config.create_store()
        self.client = client or self.config.create_client()
        self.pacer = pacer or self.config.create_pacer()
        self.media = self.config.create_media_intake(self.client)
        self.handler = self.config.create_message_handler(self.store, self.client, self.media)
        self.dispatcher = self.config.create_dispatcher(self.store, self.client, self.pacer)

    @classmethod
    def get_instance(cls, config: Optional[BotConfig] = None) -> "BotBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton BotBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def get_message_handler(self) -> MessageHandler:
        return self.handler

    def get_media_intake(self) -> MediaIntake:
        return self.media

    def get_dispatcher(self) -> BroadcastDispatcher:
        return self.dispatcher

    def __repr__(self) -> str:
        """String representation showing configured backends."""
        return (
            f"BotBootstrap(registry={self.config.registry_backend}, "
            f"media_dir={self.config.media_dir}, "
            f"pacing_ms={self.config.broadcast_pacing_ms})"
        )


def bootstrap_bot(config: Optional[BotConfig] = None) -> BotBootstrap:
    """
    Bootstrap all bot services.

    Args:
        config: Optional custom configuration

    Returns:
        BotBootstrap instance with all services initialized
    """
    return BotBootstrap.get_instance(config)
