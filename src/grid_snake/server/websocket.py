"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from grid_snake.server.session_manager import SessionManager
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_DIRECTION_MAP: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Send directions and controls, receive game state after every change.

    Accepted messages: ``{"direction": "up"}`` and
    ``{"action": "play_pause"}`` / ``{"action": "reset"}``. Anything else
    is ignored.
    """
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    manager.subscribe(session, websocket)
    logger.info("Client connected to session %s.", session_id)

    # Send initial state snapshot so the client gets immediate feedback.
    await websocket.send_text(
        json.dumps(session.engine.get_state(), separators=(",", ":")),
    )

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            try:
                await _dispatch(manager, session_id, msg)
            except KeyError:
                # Session closed underneath us.
                break
    except WebSocketDisconnect:
        logger.info("Client disconnected from session %s.", session_id)
    finally:
        manager.unsubscribe(session, websocket)


async def _dispatch(manager: SessionManager, session_id: str, msg: dict) -> None:
    action = msg.get("action")
    if action == "play_pause":
        await manager.play_pause(session_id)
        return
    if action == "reset":
        await manager.reset(session_id)
        return

    direction_str = msg.get("direction")
    if not isinstance(direction_str, str):
        return
    direction = _DIRECTION_MAP.get(direction_str.lower())
    if direction is not None:
        await manager.set_direction(session_id, direction)
