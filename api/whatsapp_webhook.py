"""
WhatsApp Webhook Handler

Handles the subscription handshake and incoming WhatsApp messages.

Flow:
  GET  /webhook  -> verify token -> echo challenge
  POST /webhook  -> (signature) -> normalize -> MessageHandler -> 200

The POST endpoint acknowledges every syntactically valid delivery with 200,
whatever happens during processing, so WhatsApp never retries it.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse

from infra.bootstrap import BotBootstrap
from transport.whatsapp.normalize import NormalizationError, normalize_message
from transport.whatsapp.security import verify_signature, verify_webhook_challenge

from .dependencies import get_bot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["WhatsApp"])


# ============================================================================
# WEBHOOK CHALLENGE (Setup only)
# ============================================================================

@router.get("", response_class=PlainTextResponse)
async def whatsapp_webhook_challenge(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    bot: BotBootstrap = Depends(get_bot),
) -> str:
    """
    Verify webhook subscription challenge from Meta.

    Returns:
        The challenge string (plain text)

    Raises:
        HTTPException(403): Invalid token
        HTTPException(400): Invalid mode
    """
    try:
        challenge = verify_webhook_challenge(
            hub_mode, hub_challenge, hub_verify_token, bot.config.verify_token
        )
    except HTTPException as e:
        logger.warning(f"Webhook verification rejected: {e.detail}")
        raise

    logger.info("Webhook verified")
    return challenge


# ============================================================================
# WEBHOOK RECEIVER (Message processing)
# ============================================================================

@router.post("")
async def whatsapp_webhook_receiver(
    request: Request,
    bot: BotBootstrap = Depends(get_bot),
) -> dict[str, str]:
    """
    Receive WhatsApp messages via webhook.

    Flow:
    1. Get raw payload (422 if not JSON)
    2. Verify signature when an app secret is configured (401/403)
    3. Normalize to InboundMessage
    4. Run the bot (commands, registry, media, replies)

    Returns:
        {"status": "ok"}
    """

    # Step 1: Get raw body
    body = await request.body()
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid JSON payload"
        )

    # Step 2: Verify signature (security boundary)
    if bot.config.app_secret:
        try:
            await verify_signature(request, body, bot.config.app_secret)
        except HTTPException as e:
            logger.warning(f"Signature verification failed: {e.detail}")
            raise

    # Step 3: Normalize
    try:
        message = normalize_message(payload)
    except NormalizationError as e:
        logger.info(f"Ignoring webhook payload: {e}")
        return {"status": "ok"}

    if message is None:
        logger.debug("Webhook payload carried no message (status update)")
        return {"status": "ok"}

    logger.info(
        "Message received",
        extra={
            "sender_id": message.sender_id,
            "message_id": message.message_id,
            "kind": message.kind,
        }
    )

    # Step 4: Run the bot
    # Always return 200 to acknowledge the webhook
    try:
        await bot.get_message_handler().handle(message)
    except Exception as e:
        logger.error(f"Webhook error: {e}", exc_info=True)

    return {"status": "ok"}
