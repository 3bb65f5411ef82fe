"""Engine configuration."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Layout of the classic 40×40 board.
CLASSIC_ORIGIN = (10, 10)
CLASSIC_FOOD = (15, 15)


class InputMode(enum.Enum):
    """How direction requests are applied between ticks."""

    # One pending slot, consumed at the start of the next tick.
    BUFFERED = "buffered"
    # Direction mutates on every call; fast input can skip a turn.
    IMMEDIATE = "immediate"


def default_origin(grid_size: int) -> tuple[int, int]:
    """Classic spawn cell, or the grid centre when the board is too small."""
    x, y = CLASSIC_ORIGIN
    if x < grid_size and y < grid_size:
        return CLASSIC_ORIGIN
    return grid_size // 2, grid_size // 2


def default_food(grid_size: int) -> tuple[int, int] | None:
    """Classic first food cell, or ``None`` (random) if it does not fit."""
    x, y = CLASSIC_FOOD
    if x < grid_size and y < grid_size:
        return CLASSIC_FOOD
    return None


@dataclass(frozen=True)
class EngineConfig:
    """Construction parameters for :class:`~grid_snake.engine.GameEngine`.

    ``origin`` and ``initial_food`` default to the classic layout when left
    as ``None``. Supports JSON serialization for reproducible runs.
    """

    grid_size: int = 40
    origin: tuple[int, int] | None = None
    initial_food: tuple[int, int] | None = None
    tick_interval_ms: int = 200
    input_mode: str = InputMode.BUFFERED.value
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.grid_size < 1:
            raise ValueError("grid_size must be at least 1.")
        if self.origin is not None and not self._fits(self.origin):
            raise ValueError(f"origin {self.origin} is outside the grid.")
        if self.initial_food is not None and not self._fits(self.initial_food):
            raise ValueError(
                f"initial_food {self.initial_food} is outside the grid.",
            )
        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be positive.")
        InputMode(self.input_mode)

    def _fits(self, pos: tuple[int, int]) -> bool:
        x, y = pos
        return 0 <= x < self.grid_size and 0 <= y < self.grid_size

    @property
    def mode(self) -> InputMode:
        return InputMode(self.input_mode)

    def resolved_origin(self) -> tuple[int, int]:
        return tuple(self.origin) if self.origin else default_origin(self.grid_size)

    def resolved_food(self) -> tuple[int, int] | None:
        if self.initial_food is not None:
            return tuple(self.initial_food)
        return default_food(self.grid_size)

    def to_dict(self) -> dict:
        """Serialize to a plain dict (tuples become lists)."""
        d = asdict(self)
        for key in ("origin", "initial_food"):
            if d[key] is not None:
                d[key] = list(d[key])
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, raw: dict) -> EngineConfig:
        raw = dict(raw)
        for key in ("origin", "initial_food"):
            if raw.get(key) is not None:
                raw[key] = tuple(raw[key])
        return cls(**raw)

    @classmethod
    def load(cls, path: str | Path) -> EngineConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
