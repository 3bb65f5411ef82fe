"""Food placement logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from grid_snake.grid import Grid

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Holds the single food item and moves it around the grid.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    Respawning draws from every cell of the grid, including cells covered
    by the snake: this matches the classic game and is a known flaw, not
    a feature. Callers that care can check ``snake.occupies(*position)``.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
        position: tuple[int, int] | None = None,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.position: tuple[int, int] = (
            tuple(position) if position is not None
            else grid.random_position(self.rng)
        )

    def place(self, position: tuple[int, int]) -> None:
        """Put the food at an explicit cell."""
        if not self.grid.in_bounds(*position):
            raise ValueError(f"Food position {position} is outside the grid.")
        self.position = tuple(position)

    def respawn(self) -> tuple[int, int]:
        """Move the food to a uniformly random cell and return it."""
        self.position = self.grid.random_position(self.rng)
        logger.debug("Food respawned at %s.", self.position)
        return self.position

    def to_dict(self) -> dict:
        """Serialize food state to a dictionary."""
        return {"position": list(self.position)}
