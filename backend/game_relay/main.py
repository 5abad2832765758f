from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from game_relay.api.router import api_router
from game_relay.core.config import Settings, settings
from game_relay.core.logging import configure_logging
from game_relay.realtime.engine import RelayEngine
from game_relay.realtime.registry import RoomRegistry

configure_logging(settings.debug)

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build an application with its own, empty room registry."""

    config = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Relay ready, listening on %s:%s", config.host, config.port)
        yield
        relay: RelayEngine = app.state.relay
        logger.info(
            "Relay shutting down: %d open connections, %d rooms",
            relay.active_sessions,
            await relay.registry.room_count(),
        )

    app = FastAPI(title=config.project_name, debug=config.debug, lifespan=lifespan)
    app.state.settings = config
    app.state.relay = RelayEngine(RoomRegistry())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(api_router)

    # Any other HTTP path answers like the bare relay server does
    @app.get("/{path:path}", response_class=PlainTextResponse, tags=["health"])
    async def index(path: str) -> str:
        return "WebSocket server is running.\n"

    return app


app = create_app()
