"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    grid_size: int = Field(default=40, ge=1, le=200)
    tick_interval_ms: int = Field(default=200, ge=50, le=2000)
    input_mode: str = "buffered"
    seed: int | None = None


class DirectionRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/direction."""

    direction: Literal["up", "down", "left", "right"]


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    grid_size: int
    tick_interval_ms: int
    is_playing: bool
    score: int
    high_score: int


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
