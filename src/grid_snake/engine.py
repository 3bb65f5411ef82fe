"""Tick-based game engine composing grid, snake, and food logic."""

from __future__ import annotations

import enum
import logging

import numpy as np

from grid_snake.config import EngineConfig, InputMode
from grid_snake.food import FoodSpawner
from grid_snake.grid import Grid
from grid_snake.snake import Direction, Position, Snake

logger = logging.getLogger(__name__)


class CollisionKind(enum.Enum):
    """Reasons a tick can end the game."""

    WALL = "wall"
    SELF = "self"


class GameEngine:
    """Single-snake, tick-based game engine.

    The engine owns the whole game state: snake, food, direction, score
    and high score. It never schedules itself; an external driver calls
    :meth:`tick` at a fixed cadence while :attr:`is_playing` is set and
    forwards player input to :meth:`set_direction`. Calls must be
    serialized by the owner.

    Two behaviours of the classic game are kept on purpose even though
    they are not ideal: the self-collision check covers the whole body,
    including the tail cell that would be vacated this tick, and food may
    respawn underneath the snake.
    """

    def __init__(
        self,
        grid_size: int = 40,
        origin: Position | None = None,
        initial_food: Position | None = None,
        input_mode: InputMode | str = InputMode.BUFFERED,
        seed: int | None = None,
        tick_interval_ms: int = 200,
    ) -> None:
        self.config = EngineConfig(
            grid_size=grid_size,
            origin=tuple(origin) if origin is not None else None,
            initial_food=tuple(initial_food) if initial_food is not None else None,
            tick_interval_ms=tick_interval_ms,
            input_mode=InputMode(input_mode).value,
            seed=seed,
        )
        self.grid = Grid(size=grid_size)
        self.rng = np.random.default_rng(seed)
        self.origin: Position = self.config.resolved_origin()
        self.input_mode = self.config.mode

        self._snake = Snake.at(self.origin)
        self.food_spawner = FoodSpawner(
            self.grid, rng=self.rng, position=self.config.resolved_food(),
        )

        self._score = 0
        self._high_score = 0
        self._is_playing = False
        self._game_over = False
        self.last_collision: CollisionKind | None = None
        self.tick_count = 0
        self._pending_direction: Direction | None = None

    @classmethod
    def from_config(cls, config: EngineConfig) -> GameEngine:
        """Build an engine from a validated :class:`EngineConfig`."""
        return cls(
            grid_size=config.grid_size,
            origin=config.origin,
            initial_food=config.initial_food,
            input_mode=config.input_mode,
            seed=config.seed,
            tick_interval_ms=config.tick_interval_ms,
        )

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def snake(self) -> list[Position]:
        """Body segments from head to tail."""
        return list(self._snake.body)

    @property
    def food(self) -> Position:
        return self.food_spawner.position

    @property
    def direction(self) -> Direction:
        """Direction applied by the most recent tick."""
        return self._snake.direction

    @property
    def pending_direction(self) -> Direction | None:
        return self._pending_direction

    @property
    def score(self) -> int:
        return self._score

    @property
    def high_score(self) -> int:
        return self._high_score

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    def is_game_over(self) -> bool:
        """Return True if the last tick ended the game.

        The flag stays set until the next :meth:`play_pause` or
        :meth:`reset`; the rest of the state is already reinitialized.
        """
        return self._game_over

    # ------------------------------------------------------------------
    # Input and controls
    # ------------------------------------------------------------------

    def set_direction(self, direction: Direction) -> None:
        """Request a turn, silently ignoring 180° reversals.

        In buffered mode the request lands in a single pending slot that
        the next tick consumes; later valid requests overwrite earlier
        ones. Reversals are judged against the direction the snake is
        actually moving in, so two quick turns cannot fold the head back
        onto the neck. Immediate mode mutates the direction on the spot.
        """
        current = self._snake.direction
        if direction.is_reverse_of(current):
            return

        if self.input_mode is InputMode.IMMEDIATE:
            self._snake.direction = direction
        else:
            self._pending_direction = direction

    def play_pause(self) -> bool:
        """Toggle :attr:`is_playing` and return the new value."""
        self._is_playing = not self._is_playing
        self._game_over = False
        return self._is_playing

    def reset(self) -> None:
        """Stop play and put the snake back at the origin.

        High score and food position are left untouched.
        """
        self._is_playing = False
        self._game_over = False
        self.last_collision = None
        self._score = 0
        self._restart_snake()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self) -> dict:
        """Advance the game by one step.

        Returns the full game state as a serializable dict.
        """
        if self._pending_direction is not None:
            self._snake.direction = self._pending_direction
            self._pending_direction = None

        self.tick_count += 1
        new_head = self._snake.next_head()

        collision = self._check_collision(new_head)
        if collision is not None:
            self._end_game(collision)
            return self.get_state()

        self._snake.push_head(new_head)
        if new_head == self.food_spawner.position:
            self._score += 1
            food = self.food_spawner.respawn()
            if self._snake.occupies(*food):
                logger.debug("Food respawned under the snake at %s.", food)
        else:
            self._snake.pop_tail()

        return self.get_state()

    def _check_collision(self, new_head: Position) -> CollisionKind | None:
        """Classify what *new_head* would hit, if anything.

        The full pre-move body is checked, tail included, even when the
        tail is about to move out of the way.
        """
        if not self.grid.in_bounds(*new_head):
            return CollisionKind.WALL
        if self._snake.occupies(*new_head):
            return CollisionKind.SELF
        return None

    def _end_game(self, collision: CollisionKind) -> None:
        """Fold the score into the high score and reinitialize the snake.

        Food stays where it is.
        """
        self._is_playing = False
        self._game_over = True
        self.last_collision = collision
        final_score = self._score
        if self._score > self._high_score:
            self._high_score = self._score
        self._score = 0
        self._restart_snake()
        logger.info(
            "Game over (%s collision) at tick %d with score %d, high score %d.",
            collision.value, self.tick_count, final_score, self._high_score,
        )

    def _restart_snake(self) -> None:
        self._snake.reset(self.origin, Direction.RIGHT)
        self._pending_direction = None

    # ------------------------------------------------------------------
    # State snapshots
    # ------------------------------------------------------------------

    def restore(
        self,
        snake: list[Position],
        direction: Direction = Direction.RIGHT,
        food: Position | None = None,
        score: int = 0,
        high_score: int | None = None,
        is_playing: bool | None = None,
    ) -> None:
        """Load an explicit position, e.g. a saved game or a test fixture.

        Raises :class:`ValueError` if the snake or food is out of bounds
        or the snake overlaps itself; the engine is left unchanged.
        """
        body = [tuple(seg) for seg in snake]
        if not body:
            raise ValueError("Snake length must be at least 1.")
        if any(not self.grid.in_bounds(*seg) for seg in body):
            raise ValueError("Snake segments must lie inside the grid.")
        if len(set(body)) != len(body):
            raise ValueError("Snake segments must not overlap.")
        if food is not None and not self.grid.in_bounds(*food):
            raise ValueError(f"Food position {tuple(food)} is outside the grid.")
        if score < 0 or (high_score is not None and high_score < 0):
            raise ValueError("Scores must be non-negative.")

        self._snake = Snake(body, direction)
        self._pending_direction = None
        if food is not None:
            self.food_spawner.place(food)
        self._score = score
        if high_score is not None:
            self._high_score = high_score
        if is_playing is not None:
            self._is_playing = is_playing
        self._game_over = False
        self.last_collision = None

    def render(self) -> np.ndarray:
        """Return the board as a ``CellType`` array indexed ``[y, x]``."""
        return self.grid.render(self._snake.body, self.food)

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.tick_count,
            "score": self._score,
            "high_score": self._high_score,
            "is_playing": self._is_playing,
            "game_over": self._game_over,
            "last_collision": (
                self.last_collision.value if self.last_collision else None
            ),
            "grid": self.grid.to_dict(),
            "snake": self._snake.to_dict(),
            "pending_direction": (
                self._pending_direction.name.lower()
                if self._pending_direction else None
            ),
            "food": self.food_spawner.to_dict(),
        }
