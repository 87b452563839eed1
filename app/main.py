"""
File: app/main.py

Project: GST WhatsApp Relay

Purpose:
Application entry point.
Responsible only for:
- Logging set-up
- FastAPI app creation
- Router registration for the configured mode
- Starting / stopping the notification poller (polling mode)
- JSON 404 / 500 handlers

Design principles:
- No business logic in this file
- Webhook processing is delegated to app.webhooks
- Polling is delegated to app.services.notification_poller
"""

import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import BotSettings
from app.health import router as health_router, status_router
from app.services.factory import build_poller, get_pipeline, get_settings
from app.webhooks import router as webhooks_router

logger = logging.getLogger("main")


def _configure_logging(settings: BotSettings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _lifespan_for(settings: BotSettings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Build gateway + lookup up front so missing credentials fail at boot
        get_pipeline(settings)

        poller = None
        poller_task = None
        if settings.is_polling:
            poller = build_poller(settings)
            poller_task = asyncio.create_task(poller.run())

        logger.info(
            "WhatsApp GST Bot started: mode=%s replies=%s outbound=%s lookup=%s port=%s",
            settings.mode,
            settings.reply_style,
            settings.outbound_mode,
            settings.lookup_mode,
            settings.port,
        )

        try:
            yield
        finally:
            if poller is not None:
                poller.stop()
                await poller_task
            logger.info("Shutting down gracefully...")

    return lifespan


def create_app(settings: BotSettings | None = None) -> FastAPI:
    settings = settings or get_settings()
    _configure_logging(settings)

    app = FastAPI(title="WhatsApp GST Bot", lifespan=_lifespan_for(settings))
    app.dependency_overrides[get_settings] = lambda: settings

    # -------------------------------------------------------------------
    # Health (both modes)
    # -------------------------------------------------------------------
    app.include_router(health_router)

    # -------------------------------------------------------------------
    # Mode-specific routes
    # -------------------------------------------------------------------
    if settings.is_polling:
        app.include_router(status_router)
    else:
        app.include_router(webhooks_router)

    # -------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        if exc.status_code == 404 and detail == "Not Found":
            detail = "Route not found"
        return JSONResponse(status_code=exc.status_code, content={"error": detail})

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.exception("Server error")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
