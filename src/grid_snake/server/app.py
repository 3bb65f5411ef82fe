"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from grid_snake.server.routes import router
from grid_snake.server.session_manager import SessionManager
from grid_snake.server.websocket import ws_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    logger.info("Grid Snake API starting.")
    yield
    # Tick loops belong to the serving event loop; stop them with it.
    await app.state.session_manager.cleanup()


def create_app(
    manager: SessionManager | None = None,
    max_sessions: int | None = None,
) -> FastAPI:
    """Build the application around one :class:`SessionManager`.

    The manager is created here, not in the lifespan, so it is usable
    before startup (e.g. from test clients that skip lifespan events).
    """
    if manager is None:
        manager = (
            SessionManager(max_sessions=max_sessions)
            if max_sessions is not None else SessionManager()
        )
    app = FastAPI(
        title="Grid Snake API", version="0.1.0", lifespan=_lifespan,
    )
    app.state.session_manager = manager
    app.include_router(router)
    app.include_router(ws_router)
    return app
