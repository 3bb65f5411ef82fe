"""Square grid for the snake game."""

from __future__ import annotations

import enum
from collections.abc import Iterable

import numpy as np


class CellType(enum.IntEnum):
    """Integer codes stored in rendered grid arrays."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2


class Grid:
    """Bounded square board of ``size`` × ``size`` cells.

    Coordinates are (x, y) with ``0 <= x, y < size``; there is no
    wrap-around. Rendered arrays are indexed ``[y, x]`` to match NumPy's
    row-major layout.
    """

    def __init__(self, size: int = 40) -> None:
        if size < 1:
            raise ValueError("Grid size must be at least 1.")
        self.size = size

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= x < self.size and 0 <= y < self.size

    def random_position(self, rng: np.random.Generator) -> tuple[int, int]:
        """Draw a cell uniformly over the whole grid."""
        x, y = rng.integers(0, self.size, size=2).tolist()
        return x, y

    def render(
        self,
        snake: Iterable[tuple[int, int]],
        food: tuple[int, int] | None = None,
    ) -> np.ndarray:
        """Paint *snake* and *food* onto a fresh ``int8`` cell array.

        Snake segments are painted last, so food hidden under the body is
        not visible.
        """
        cells = np.zeros((self.size, self.size), dtype=np.int8)
        if food is not None and self.in_bounds(*food):
            cells[food[1], food[0]] = CellType.FOOD
        for x, y in snake:
            cells[y, x] = CellType.SNAKE
        return cells

    def to_dict(self) -> dict:
        """Serialize grid dimensions to a dictionary."""
        return {"width": self.size, "height": self.size}
