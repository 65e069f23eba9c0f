"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
Defaults match a single local process: JSON file registry, ./media for
attachments, 250 ms between broadcast sends.
"""

import os
from dataclasses import dataclass
from typing import Literal, Optional

from bot.broadcast import BroadcastDispatcher
from bot.handler import MessageHandler
from bot.media import MediaIntake
from bot.pacing import Pacer
from bot.registry import InMemorySubscriberStore, JsonFileSubscriberStore, SubscriberStore
from config import DEFAULT_ADMIN_KEY
from transport.whatsapp.sender import DEFAULT_API_VERSION, DEFAULT_GRAPH_URL, WhatsAppClient


RegistryBackendType = Literal["json", "memory"]


@dataclass
class BotConfig:
    """Bot configuration from environment."""

    # WhatsApp Cloud API
    access_token: str
    phone_number_id: str
    verify_token: str
    app_secret: Optional[str]
    api_version: str
    graph_url: str

    # Admin
    admin_key: str
    broadcast_pacing_ms: int

    # Storage
    registry_backend: RegistryBackendType
    contacts_file: str
    media_dir: str

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Load configuration from environment variables."""
        return cls(
            access_token=os.getenv("WHATSAPP_ACCESS_TOKEN", ""),
            phone_number_id=os.getenv("WHATSAPP_PHONE_NUMBER_ID", ""),
            verify_token=os.getenv("WHATSAPP_VERIFY_TOKEN", ""),
            app_secret=os.getenv("WHATSAPP_APP_SECRET") or None,
            api_version=os.getenv("WHATSAPP_API_VERSION", DEFAULT_API_VERSION),
            graph_url=os.getenv("WHATSAPP_GRAPH_URL", DEFAULT_GRAPH_URL),

            admin_key=os.getenv("ADMIN_KEY", DEFAULT_ADMIN_KEY),
            broadcast_pacing_ms=int(os.getenv("BROADCAST_PACING_MS", "250")),

            registry_backend=os.getenv("REGISTRY_BACKEND", "json"),  # type: ignore
            contacts_file=os.getenv("CONTACTS_FILE", os.path.join(os.getcwd(), "contacts.json")),
            media_dir=os.getenv("MEDIA_DIR", os.path.join(os.getcwd(), "media")),
        )

    def create_store(self) -> SubscriberStore:
        """Create registry backend based on configuration."""
        if self.registry_backend == "memory":
            return InMemorySubscriberStore()
        return JsonFileSubscriberStore(self.contacts_file)

    def create_client(self) -> WhatsAppClient:
        return WhatsAppClient(
            access_token=self.access_token,
            phone_number_id=self.phone_number_id,
            api_version=self.api_version,
            graph_url=self.graph_url,
        )

    def create_pacer(self) -> Pacer:
        return Pacer(interval=self.broadcast_pacing_ms / 1000.0)

    def create_media_intake(self, client: WhatsAppClient) -> MediaIntake:
        return MediaIntake(client, self.media_dir)

    def create_message_handler(
        self,
        store: SubscriberStore,
        client: WhatsAppClient,
        media: MediaIntake,
    ) -> MessageHandler:
        return MessageHandler(store, client, media)

    def create_dispatcher(
        self,
        store: SubscriberStore,
        client: WhatsAppClient,
        pacer: Pacer,
    ) -> BroadcastDispatcher:
        return BroadcastDispatcher(store, client, self.admin_key, pacer)


def get_config() -> BotConfig:
    """Get global bot configuration."""
    return BotConfig.from_env()
