"""REST API route handlers for session controls."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from grid_snake.server.models import (
    CreateSessionRequest,
    DirectionRequest,
    ErrorResponse,
    SessionSummary,
)
from grid_snake.server.session_manager import SessionManager
from grid_snake.snake import Direction

router = APIRouter(
    prefix="/sessions",
    tags=["sessions"],
    responses={404: {"model": ErrorResponse}},
)


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _not_found(exc: KeyError) -> HTTPException:
    return HTTPException(status_code=404, detail=exc.args[0])


@router.post(
    "", status_code=201, responses={422: {"model": ErrorResponse}},
)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new idle game session."""
    manager = _get_manager(request)
    client_ip = request.client.host if request.client else "unknown"
    try:
        session = manager.create_session(
            grid_size=body.grid_size,
            tick_interval_ms=body.tick_interval_ms,
            input_mode=body.input_mode,
            seed=body.seed,
            client_ip=client_ip,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get session metadata and the full engine state."""
    session = _get_manager(request).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    result = session.summary().model_dump()
    result["state"] = session.engine.get_state()
    return result


@router.post("/{session_id}/play-pause")
async def play_pause(session_id: str, request: Request) -> dict:
    """Toggle play; the tick loop starts when play resumes."""
    try:
        return await _get_manager(request).play_pause(session_id)
    except KeyError as exc:
        raise _not_found(exc) from exc


@router.post("/{session_id}/reset")
async def reset(session_id: str, request: Request) -> dict:
    try:
        return await _get_manager(request).reset(session_id)
    except KeyError as exc:
        raise _not_found(exc) from exc


@router.post("/{session_id}/direction")
async def set_direction(
    session_id: str, body: DirectionRequest, request: Request,
) -> dict:
    """Queue a direction change; reversals are ignored by the engine."""
    direction = Direction[body.direction.upper()]
    try:
        return await _get_manager(request).set_direction(session_id, direction)
    except KeyError as exc:
        raise _not_found(exc) from exc


@router.delete("/{session_id}", status_code=204)
async def close_session(session_id: str, request: Request) -> Response:
    try:
        await _get_manager(request).close_session(session_id)
    except KeyError as exc:
        raise _not_found(exc) from exc
    return Response(status_code=204)
