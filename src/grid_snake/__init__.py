"""Grid Snake: tick-based snake game engine."""

from grid_snake.config import EngineConfig, InputMode
from grid_snake.engine import CollisionKind, GameEngine
from grid_snake.food import FoodSpawner
from grid_snake.grid import CellType, Grid
from grid_snake.snake import Direction, Position, Snake

__all__ = [
    "CellType",
    "CollisionKind",
    "Direction",
    "EngineConfig",
    "FoodSpawner",
    "GameEngine",
    "Grid",
    "InputMode",
    "Position",
    "Snake",
]
