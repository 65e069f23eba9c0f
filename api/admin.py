"""
Admin API

POST /admin/broadcast {"key": "...", "message": "..."}

The only boundary that surfaces failures to its caller:
  401 {"error": "Unauthorized"}      wrong key
  400 {"error": "Message required"}  missing message
  500 {"error": "server_error"}      anything unexpected
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from bot.errors import AuthorizationFailure, ValidationFailure
from infra.bootstrap import BotBootstrap

from .dependencies import get_bot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


class BroadcastRequest(BaseModel):
    # Any: wrong-typed keys go to the key check, not body validation
    key: Any = None
    message: Any = None


@router.post("/broadcast")
async def admin_broadcast(
    body: Optional[BroadcastRequest] = None,
    bot: BotBootstrap = Depends(get_bot),
):
    """Send one message to every subscriber, paced."""
    body = body or BroadcastRequest()

    try:
        result = await bot.get_dispatcher().broadcast(body.key, body.message)
    except AuthorizationFailure:
        logger.warning("Broadcast rejected: bad admin key")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Unauthorized"},
        )
    except ValidationFailure as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(e)},
        )
    except Exception as e:
        logger.error(f"Broadcast failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "server_error"},
        )

    return {"ok": True, **result.to_dict()}
