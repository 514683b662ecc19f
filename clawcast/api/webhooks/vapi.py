"""Vapi webhook endpoint."""
import json
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from clawcast.core.config import Settings
from clawcast.core.dependencies import get_event_router, get_settings
from clawcast.services.events.router import EventRouter

router = APIRouter()
logger = logging.getLogger(__name__)

SECRET_HEADER = "x-vapi-secret"


async def verify_vapi_secret(
    request: Request, settings: Settings = Depends(get_settings)
) -> None:
    """
    Reject requests that do not carry the configured shared secret.

    Runs before the body is read. An empty VAPI_SECRET disables the check.
    """
    if settings.vapi_secret and request.headers.get(SECRET_HEADER) != settings.vapi_secret:
        logger.error(
            f"[WEBHOOK] Invalid Vapi secret - "
            f"Client: {request.client.host if request.client else 'unknown'}"
        )
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.post("/webhook", dependencies=[Depends(verify_vapi_secret)])
@router.post("/", dependencies=[Depends(verify_vapi_secret)])
async def handle_vapi_event(
    request: Request,
    event_router: EventRouter = Depends(get_event_router),
):
    """
    Handle a Vapi server event.

    Always answers 200 with the event's outcome, except when the body is not
    valid JSON.
    """
    body = await request.body()
    try:
        event = json.loads(body)
    except ValueError as e:
        logger.error(f"[WEBHOOK] Webhook error - Invalid JSON body: {str(e)}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return await event_router.handle(event)
