"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from arcade_engine.api.dependencies import set_session_manager
from arcade_engine.api.routes import api_router
from arcade_engine.api.session_manager import ClockFactory, SessionManager
from arcade_engine.config import ServerConfig
from arcade_engine.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: ServerConfig | None = None, clock_factory: ClockFactory | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = ServerConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = SessionManager(_config, clock_factory=clock_factory)
        set_session_manager(manager)
        logger.info("API server started (max %d sessions).", _config.max_sessions)
        yield
        manager.shutdown()
        set_session_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Arcade Engine",
        description=(
            "Tick-driven simulation core hosting five arcade mini-games.\n\n"
            "## API Groups\n\n"
            "- **Variants**: the game catalogue and default configuration\n"
            "- **Sessions**: create a session, poll its snapshot and events, submit input\n"
            "- **Control**: session lifecycle (start, pause, resume, restart)\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Variants", "description": "Available games with their default world bounds, timing and actor counts."},
            {"name": "Sessions", "description": "Per-session state: immutable snapshots, the event feed and the intent entry point."},
            {"name": "Control", "description": "Lifecycle transitions. Illegal transitions are reported as no-ops."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
