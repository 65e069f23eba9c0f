"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from typing import Optional

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from bot.pacing import Pacer  # noqa: E402
from bot.registry import InMemorySubscriberStore  # noqa: E402
from infra.bootstrap import BotBootstrap  # noqa: E402
from infra.config import BotConfig  # noqa: E402
from transport.whatsapp.schemas import MediaLocation, WhatsAppMessageResponse  # noqa: E402
from transport.whatsapp.sender import FetchError, ResolutionError, SendError  # noqa: E402


class FakeWhatsAppClient:
    """Records sends and serves canned media instead of calling Meta."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []
        self.failing_recipients: set[str] = set()
        self.media: dict[str, tuple[bytes, Optional[str]]] = {}
        self.fail_download = False

    async def send_text(self, to: str, body: str) -> WhatsAppMessageResponse:
        self.sent.append((to, body))
        if to in self.failing_recipients:
            raise SendError(f"send to {to} failed")
        return WhatsAppMessageResponse(messages=[{"id": f"wamid.{len(self.sent)}"}])

    async def resolve_media(self, media_id: str) -> MediaLocation:
        if media_id not in self.media:
            raise ResolutionError(f"unknown media {media_id}")
        return MediaLocation(url=f"https://lookaside.example/{media_id}")

    async def download_media(self, url: str) -> tuple[bytes, Optional[str]]:
        if self.fail_download:
            raise FetchError("download failed")
        media_id = url.rsplit("/", 1)[-1]
        return self.media[media_id]

    def replies_to(self, wa_id: str) -> list[str]:
        return [body for to, body in self.sent if to == wa_id]


class FakeClock:
    """Monotonic clock that only moves when the pacer sleeps (or tests advance it)."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_config(tmp_path: Path, **overrides) -> BotConfig:
    values = dict(
        access_token="test-access-token",
        phone_number_id="123456",
        verify_token="verify-me",
        app_secret=None,
        api_version="v20.0",
        graph_url="https://graph.example",
        admin_key="s3cret",
        broadcast_pacing_ms=250,
        registry_backend="memory",
        contacts_file=str(tmp_path / "contacts.json"),
        media_dir=str(tmp_path / "media"),
    )
    values.update(overrides)
    return BotConfig(**values)


@pytest.fixture
def fake_client() -> FakeWhatsAppClient:
    return FakeWhatsAppClient()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemorySubscriberStore:
    return InMemorySubscriberStore()


@pytest.fixture
def bot_config(tmp_path) -> BotConfig:
    return make_config(tmp_path)


@pytest.fixture
def bot(bot_config, store, fake_client, fake_clock) -> BotBootstrap:
    pacer = Pacer(interval=0.25, clock=fake_clock, sleep=fake_clock.sleep)
    return BotBootstrap(config=bot_config, store=store, client=fake_client, pacer=pacer)


@pytest.fixture
def client(bot):
    """TestClient wired to the fake bot services."""
    from fastapi.testclient import TestClient

    from api.dependencies import get_bot
    from main import app

    app.dependency_overrides[get_bot] = lambda: bot
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def text_payload(
    sender: str,
    body: str,
    name: Optional[str] = "Ann",
    message_id: str = "wamid.1",
) -> dict:
    """WhatsApp Cloud API webhook payload carrying one text message."""
    value: dict = {
        "messaging_product": "whatsapp",
        "messages": [{
            "from": sender,
            "id": message_id,
            "timestamp": "1707500000",
            "type": "text",
            "text": {"body": body},
        }],
    }
    if name is not None:
        value["contacts"] = [{"wa_id": sender, "profile": {"name": name}}]
    return {
        "object": "whatsapp_business_account",
        "entry": [{"id": "WABA", "changes": [{"field": "messages", "value": value}]}],
    }


def media_payload(
    sender: str,
    kind: str,
    media_id: Optional[str],
    mime_type: str = "image/jpeg",
    name: Optional[str] = "Ann",
) -> dict:
    """WhatsApp Cloud API webhook payload carrying one media message."""
    media: dict = {"mime_type": mime_type}
    if media_id is not None:
        media["id"] = media_id
    value: dict = {
        "messaging_product": "whatsapp",
        "messages": [{
            "from": sender,
            "id": "wamid.media",
            "timestamp": "1707500000",
            "type": kind,
            kind: media,
        }],
    }
    if name is not None:
        value["contacts"] = [{"wa_id": sender, "profile": {"name": name}}]
    return {
        "object": "whatsapp_business_account",
        "entry": [{"changes": [{"field": "messages", "value": value}]}],
    }
