"""
Health and status endpoints
Used by Render + ops

- GET /              static liveness payload (both modes)
- GET /check-status  Green API account state + settings (polling mode only)
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.config import BotSettings
from app.outbound.factory import get_green_api_client
from app.outbound.green_api import GreenApiClient, GreenApiError
from app.services.factory import get_settings

logger = logging.getLogger("health")

router = APIRouter(tags=["health"])
status_router = APIRouter(tags=["status"])


@router.get("/")
def health_check(settings: BotSettings = Depends(get_settings)):
    return {
        "status": "active",
        "service": "WhatsApp GST Bot",
        "mode": settings.mode,
        "message": "Webhook is running successfully"
        if not settings.is_polling
        else "Polling is running successfully",
    }


def get_status_client(settings: BotSettings = Depends(get_settings)) -> GreenApiClient:
    return get_green_api_client(settings.outbound_timeout_seconds)


@status_router.get("/check-status")
def check_status(client: GreenApiClient = Depends(get_status_client)):
    try:
        state = client.get_state_instance()
        green_settings = client.get_settings()
    except GreenApiError as e:
        logger.exception("Green API status check failed")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return {"state": state, "settings": green_settings}
