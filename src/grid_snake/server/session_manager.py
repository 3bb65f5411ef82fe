"""In-memory session registry, serialized engine access, and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from grid_snake.config import EngineConfig
from grid_snake.engine import GameEngine
from grid_snake.server.models import SessionSummary
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

# Simple rate limit: max sessions created per IP within the window.
_RATE_LIMIT_WINDOW = 60.0  # seconds
_RATE_LIMIT_MAX = 10
_MAX_SESSIONS = 100


@dataclass
class GameSession:
    """One engine plus the sockets watching it.

    Every engine call goes through ``lock`` so the tick loop and input
    handlers never mutate the state concurrently.
    """

    session_id: str
    engine: GameEngine
    subscribers: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def tick_interval_ms(self) -> int:
        return self.engine.config.tick_interval_ms

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            grid_size=self.engine.grid.size,
            tick_interval_ms=self.tick_interval_ms,
            is_playing=self.engine.is_playing,
            score=self.engine.score,
            high_score=self.engine.high_score,
        )


class SessionManager:
    """Central registry managing all game sessions.

    Acts as the scheduler for each engine: a tick loop runs only while
    the engine is playing, and is started again on the next play.
    """

    def __init__(self, max_sessions: int = _MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self._sessions: dict[str, GameSession] = {}
        self._rate_limits: dict[str, list[float]] = {}
        self._max_sessions = max_sessions

    def _check_rate_limit(self, client_ip: str) -> bool:
        """Return True if the client is within rate limits."""
        now = time.monotonic()
        timestamps = [
            t for t in self._rate_limits.get(client_ip, [])
            if now - t < _RATE_LIMIT_WINDOW
        ]
        if timestamps:
            self._rate_limits[client_ip] = timestamps
        else:
            self._rate_limits.pop(client_ip, None)
        return len(timestamps) < _RATE_LIMIT_MAX

    def _record_creation(self, client_ip: str) -> None:
        self._rate_limits.setdefault(client_ip, []).append(time.monotonic())

    def create_session(
        self,
        grid_size: int = 40,
        tick_interval_ms: int = 200,
        input_mode: str = "buffered",
        seed: int | None = None,
        client_ip: str = "unknown",
    ) -> GameSession:
        """Create a new idle session and return it."""
        if not self._check_rate_limit(client_ip):
            raise ValueError("Rate limit exceeded. Try again later.")
        if len(self._sessions) >= self._max_sessions:
            raise ValueError("Session limit reached.")

        config = EngineConfig(
            grid_size=grid_size,
            tick_interval_ms=tick_interval_ms,
            input_mode=input_mode,
            seed=seed,
        )
        session_id = uuid.uuid4().hex[:12]
        session = GameSession(
            session_id=session_id, engine=GameEngine.from_config(config),
        )
        self._sessions[session_id] = session
        self._record_creation(client_ip)
        logger.info("Session %s created (grid=%d).", session_id, grid_size)
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def _require(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        return session

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    async def set_direction(self, session_id: str, direction: Direction) -> dict:
        """Forward a direction request to the engine."""
        session = self._require(session_id)
        async with session.lock:
            session.engine.set_direction(direction)
            state = session.engine.get_state()
        await self._broadcast(session, state)
        return state

    async def play_pause(self, session_id: str) -> dict:
        """Toggle play and start the tick loop when play resumes."""
        session = self._require(session_id)
        async with session.lock:
            if session.engine.play_pause():
                self._ensure_tick_loop(session)
            state = session.engine.get_state()
        await self._broadcast(session, state)
        return state

    async def reset(self, session_id: str) -> dict:
        session = self._require(session_id)
        async with session.lock:
            session.engine.reset()
            state = session.engine.get_state()
        await self._broadcast(session, state)
        return state

    async def close_session(self, session_id: str) -> None:
        """Stop the tick loop, close sockets, and forget the session."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        await self._stop_task(session)
        await self._close_connections(session)
        logger.info("Session %s closed.", session_id)

    def _ensure_tick_loop(self, session: GameSession) -> None:
        # A loop still sleeping out its last interval picks up the new
        # play state by itself.
        if session._task is None or session._task.done():
            session._task = asyncio.create_task(self._tick_loop(session))

    async def _tick_loop(self, session: GameSession) -> None:
        """Tick the engine at a fixed cadence until play stops.

        Play state is only read under the lock, so a game-over followed by
        a quick play keeps this loop running.
        """
        tick_interval = session.tick_interval_ms / 1000.0
        try:
            while True:
                await asyncio.sleep(tick_interval)
                async with session.lock:
                    if not session.engine.is_playing:
                        break
                    state = session.engine.tick()
                await self._broadcast(session, state)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception("Tick loop error in session %s.", session.session_id)
            async with session.lock:
                if session.engine.is_playing:
                    session.engine.play_pause()

    async def _stop_task(self, session: GameSession) -> None:
        task = session._task
        session._task = None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    def subscribe(self, session: GameSession, websocket: WebSocket) -> None:
        session.subscribers.append(websocket)

    def unsubscribe(self, session: GameSession, websocket: WebSocket) -> None:
        if websocket in session.subscribers:
            session.subscribers.remove(websocket)

    async def _close_connections(self, session: GameSession) -> None:
        for ws in list(session.subscribers):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session closed.")
            except Exception:
                logger.warning(
                    "Failed closing socket in session %s.", session.session_id,
                )
        session.subscribers.clear()

    async def _broadcast(self, session: GameSession, state: dict) -> None:
        """Send game state to every connected subscriber."""
        payload = json.dumps(state, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the
        # live list without affecting this send loop.
        for ws in list(session.subscribers):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            self.unsubscribe(session, ws)

    async def cleanup(self) -> None:
        """Cancel all running tick loops and release rate-limit state."""
        for session in list(self._sessions.values()):
            await self._stop_task(session)
        self._rate_limits.clear()
        logger.info("SessionManager cleanup complete.")
