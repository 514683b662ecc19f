"""Health check endpoint."""
import logging
from fastapi import APIRouter, Depends, Request

from clawcast.core.config import Settings
from clawcast.core.dependencies import get_settings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(request: Request, settings: Settings = Depends(get_settings)):
    """Report liveness and which backend is configured."""
    logger.debug(
        f"[HEALTH] Health check requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    return {"status": "ok", "model": settings.llm_model, "provider": settings.llm_provider}
