"""
WhatsApp Cloud API Client

Outbound calls to the messaging provider:
- send a text message to a WhatsApp id
- resolve a media reference id to a short-lived download URL
- download media bytes from that URL

No formatting intelligence. No retries. Every call may fail and raises a
ProviderCallFailure subclass when it does.
"""

import logging
from typing import Optional

import httpx

from .schemas import MediaLocation, WhatsAppMessageResponse

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_URL = "https://graph.facebook.com"
DEFAULT_API_VERSION = "v20.0"


class ProviderCallFailure(Exception):
    """An outbound call to the WhatsApp Cloud API failed."""
    pass


class SendError(ProviderCallFailure):
    """Sending a message failed."""
    pass


class ResolutionError(ProviderCallFailure):
    """A media reference id could not be resolved to a download URL."""
    pass


class FetchError(ProviderCallFailure):
    """Downloading media bytes failed."""
    pass


class WhatsAppClient:
    """
    Thin async client for the WhatsApp Cloud API.

    A fresh httpx.AsyncClient is opened per call. `transport` lets tests
    plug in an httpx.MockTransport.
    """

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        api_version: str = DEFAULT_API_VERSION,
        graph_url: str = DEFAULT_GRAPH_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token
        self.phone_number_id = phone_number_id
        self.api_version = api_version
        self.graph_url = graph_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _endpoint(self, path: str) -> str:
        return f"{self.graph_url}/{self.api_version}/{path}"

    async def send_text(self, to: str, body: str) -> WhatsAppMessageResponse:
        """
        Send a plain text message.

        Raises:
            SendError: transport failure or non-2xx response
        """

        if not self.access_token or not self.phone_number_id:
            raise SendError("WhatsApp access token or phone number id not configured")

        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": to,
            "type": "text",
            "text": {"body": body},
        }

        try:
            async with self._client() as client:
                response = await client.post(
                    self._endpoint(f"{self.phone_number_id}/messages"),
                    json=payload,
                    headers=self._headers,
                )
        except httpx.HTTPError as e:
            logger.error(
                f"HTTP request failed: {e}",
                extra={"recipient_id": to, "error": str(e)},
            )
            raise SendError(f"HTTP request failed: {e}")

        if not response.is_success:
            logger.error(
                f"WhatsApp API error: {response.status_code} - {response.text}",
                extra={
                    "recipient_id": to,
                    "status_code": response.status_code,
                    "error_body": response.text,
                },
            )
            raise SendError(f"WhatsApp API returned {response.status_code}")

        try:
            result = WhatsAppMessageResponse.model_validate(response.json())
        except ValueError:
            result = WhatsAppMessageResponse()

        logger.info(
            f"Message sent to {to}",
            extra={
                "recipient_id": to,
                "response_id": (result.messages or [{}])[0].get("id"),
            },
        )
        return result

    async def resolve_media(self, media_id: str) -> MediaLocation:
        """
        Look up the temporary download URL for a media reference id.

        Raises:
            ResolutionError: unknown id, provider error, or malformed reply
        """

        try:
            async with self._client() as client:
                response = await client.get(
                    self._endpoint(media_id),
                    headers=self._headers,
                )
        except httpx.HTTPError as e:
            raise ResolutionError(f"Media lookup for {media_id} failed: {e}")

        if not response.is_success:
            raise ResolutionError(
                f"Media lookup for {media_id} returned {response.status_code}"
            )

        try:
            return MediaLocation.model_validate(response.json())
        except ValueError as e:
            raise ResolutionError(f"Malformed media lookup reply for {media_id}: {e}")

    async def download_media(self, url: str) -> tuple[bytes, Optional[str]]:
        """
        Fetch media bytes. The download URL requires the same bearer token.

        Returns:
            (content, declared content type or None)

        Raises:
            FetchError: transport failure or non-2xx response
        """

        try:
            async with self._client() as client:
                response = await client.get(url, headers=self._headers)
        except httpx.HTTPError as e:
            raise FetchError(f"Media download failed: {e}")

        if not response.is_success:
            raise FetchError(f"Media download returned {response.status_code}")

        return response.content, response.headers.get("content-type")
