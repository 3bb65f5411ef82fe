"""Throughput benchmarking for the game engine."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from grid_snake.engine import GameEngine
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

_DIRECTIONS = list(Direction)


@dataclass
class BenchmarkResult:
    """Results from a throughput benchmark run."""

    total_games: int
    total_ticks: int
    best_score: int
    wall_time_seconds: float
    games_per_second: float
    ticks_per_second: float

    def summary(self) -> str:
        return (
            f"Benchmark: {self.total_games} games, {self.total_ticks} ticks in "
            f"{self.wall_time_seconds:.2f}s | "
            f"{self.games_per_second:.1f} games/s, "
            f"{self.ticks_per_second:.1f} ticks/s | "
            f"best score {self.best_score}"
        )


def benchmark_throughput(
    *,
    num_games: int = 100,
    grid_size: int = 40,
    max_ticks: int = 500,
    seed: int = 42,
) -> BenchmarkResult:
    """Measure raw engine throughput with random input.

    Plays *num_games* games on one engine, each until game-over or
    *max_ticks*, and reports games/second and ticks/second.
    """
    rng = np.random.default_rng(seed)
    engine = GameEngine(grid_size=grid_size, seed=seed)

    total_ticks = 0
    best_score = 0
    start = time.perf_counter()

    for _ in range(num_games):
        engine.reset()
        engine.play_pause()
        for _ in range(max_ticks):
            engine.set_direction(_DIRECTIONS[int(rng.integers(4))])
            engine.tick()
            total_ticks += 1
            if not engine.is_playing:
                break
        best_score = max(best_score, engine.score, engine.high_score)

    elapsed = time.perf_counter() - start
    result = BenchmarkResult(
        total_games=num_games,
        total_ticks=total_ticks,
        best_score=best_score,
        wall_time_seconds=elapsed,
        games_per_second=num_games / max(elapsed, 1e-9),
        ticks_per_second=total_ticks / max(elapsed, 1e-9),
    )
    logger.info(result.summary())
    return result
