"""Snake body representation and movement helpers."""

from __future__ import annotations

import enum
from collections import deque

Position = tuple[int, int]


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values.

    The y axis grows downwards, so ``UP`` decrements y.
    """

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    def is_reverse_of(self, other: Direction) -> bool:
        """Check whether turning from *other* to this direction is a 180° turn."""
        return _OPPOSITES[other] is self


_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake represented as an ordered deque of (x, y) body segments.

    The head is ``body[0]``; the tail is ``body[-1]``.
    """

    def __init__(
        self,
        body: list[Position] | None = None,
        direction: Direction = Direction.RIGHT,
    ) -> None:
        if not body:
            raise ValueError("Snake length must be at least 1.")
        self.body: deque[Position] = deque(tuple(seg) for seg in body)
        self.direction = direction

    @classmethod
    def at(cls, origin: Position, direction: Direction = Direction.RIGHT) -> Snake:
        """Build a single-segment snake at *origin*."""
        return cls([origin], direction)

    @property
    def head(self) -> Position:
        """Return the head coordinate."""
        return self.body[0]

    @property
    def tail(self) -> Position:
        return self.body[-1]

    def __len__(self) -> int:
        return len(self.body)

    def next_head(self) -> Position:
        """Compute the next head position without moving."""
        dx, dy = self.direction.value
        x, y = self.head
        return x + dx, y + dy

    def push_head(self, position: Position) -> None:
        self.body.appendleft(position)

    def pop_tail(self) -> Position:
        """Remove and return the tail segment."""
        return self.body.pop()

    def occupies(self, x: int, y: int) -> bool:
        """Check whether any segment, head included, sits on (x, y)."""
        return (x, y) in self.body

    def reset(self, origin: Position, direction: Direction = Direction.RIGHT) -> None:
        """Shrink back to a single segment at *origin*."""
        self.body.clear()
        self.body.append(origin)
        self.direction = direction

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.name.lower(),
        }
