"""Tests for the GameEngine module."""

import json

import numpy as np
import pytest

from grid_snake.config import EngineConfig
from grid_snake.engine import CollisionKind, GameEngine
from grid_snake.grid import CellType
from grid_snake.snake import Direction


class TestEngineInit:
    def test_initial_state(self):
        engine = GameEngine(seed=0)
        assert engine.snake == [(10, 10)]
        assert engine.food == (15, 15)
        assert engine.direction == Direction.RIGHT
        assert engine.score == 0
        assert engine.high_score == 0
        assert not engine.is_playing
        assert not engine.is_game_over()

    def test_from_config(self):
        cfg = EngineConfig(grid_size=12, origin=(2, 2), initial_food=(5, 5))
        engine = GameEngine.from_config(cfg)
        assert engine.grid.size == 12
        assert engine.snake == [(2, 2)]
        assert engine.food == (5, 5)
        assert engine.config == cfg

    def test_small_grid_uses_centre(self):
        engine = GameEngine(grid_size=6, seed=1)
        assert engine.snake == [(3, 3)]
        assert engine.grid.in_bounds(*engine.food)


class TestEngineMovement:
    def test_non_growth_tick(self):
        engine = GameEngine(grid_size=40, seed=0)
        engine.tick()
        assert engine.snake == [(11, 10)]
        assert engine.score == 0
        assert engine.food == (15, 15)

    def test_growth_tick(self):
        engine = GameEngine(grid_size=40, seed=0)
        engine.restore([(10, 10)], Direction.RIGHT, food=(11, 10))
        engine.tick()
        assert engine.snake == [(11, 10), (10, 10)]
        assert engine.score == 1
        assert engine.grid.in_bounds(*engine.food)
        assert not engine.is_playing  # unchanged

    def test_each_direction(self):
        expected = {
            Direction.UP: (10, 9),
            Direction.DOWN: (10, 11),
            Direction.RIGHT: (11, 10),
        }
        for direction, head in expected.items():
            engine = GameEngine(seed=0)
            engine.set_direction(direction)
            engine.tick()
            assert engine.snake[0] == head

    def test_moving_left(self):
        engine = GameEngine(seed=0)
        engine.restore([(10, 10)], Direction.UP)
        engine.set_direction(Direction.LEFT)
        engine.tick()
        assert engine.snake == [(9, 10)]

    def test_tick_returns_state(self):
        engine = GameEngine(seed=0)
        state = engine.tick()
        assert state["tick"] == 1
        assert state["snake"]["body"] == [[11, 10]]


class TestDirectionIntake:
    def test_reversal_rejected(self):
        engine = GameEngine(seed=0)
        engine.set_direction(Direction.LEFT)
        assert engine.pending_direction is None
        engine.tick()
        assert engine.snake == [(11, 10)]

    def test_last_valid_request_wins(self):
        engine = GameEngine(seed=0)
        engine.set_direction(Direction.UP)
        engine.set_direction(Direction.DOWN)
        engine.tick()
        assert engine.snake == [(10, 11)]
        assert engine.direction == Direction.DOWN

    def test_reversal_judged_against_applied_direction(self):
        # UP is buffered, but LEFT is still a reversal of the applied RIGHT.
        engine = GameEngine(seed=0)
        engine.set_direction(Direction.UP)
        engine.set_direction(Direction.LEFT)
        assert engine.pending_direction == Direction.UP
        engine.tick()
        assert engine.snake == [(10, 9)]

    def test_buffered_request_does_not_change_direction(self):
        engine = GameEngine(seed=0)
        engine.set_direction(Direction.UP)
        assert engine.direction == Direction.RIGHT
        assert engine.pending_direction == Direction.UP

    def test_immediate_mode_can_skip_a_turn(self):
        """Two quick turns both apply before the tick, as in the classic game."""
        engine = GameEngine(seed=0, input_mode="immediate")
        engine.set_direction(Direction.UP)
        assert engine.direction == Direction.UP
        engine.set_direction(Direction.LEFT)
        engine.tick()
        assert engine.snake == [(9, 10)]

    def test_immediate_mode_neck_collision(self):
        engine = GameEngine(seed=0, input_mode="immediate")
        engine.restore([(10, 10), (9, 10), (8, 10)], Direction.RIGHT)
        engine.set_direction(Direction.UP)
        engine.set_direction(Direction.LEFT)
        engine.tick()
        assert engine.is_game_over()
        assert engine.last_collision == CollisionKind.SELF


class TestWallCollision:
    def test_left_wall(self):
        engine = GameEngine(seed=0)
        engine.restore([(0, 7)], Direction.LEFT, score=4, is_playing=True)
        engine.tick()
        assert engine.is_game_over()
        assert engine.last_collision == CollisionKind.WALL
        assert engine.snake == [(10, 10)]
        assert engine.direction == Direction.RIGHT
        assert not engine.is_playing
        assert engine.high_score == 4
        assert engine.score == 0

    def test_every_wall(self):
        cases = [
            ([(0, 5)], Direction.LEFT),
            ([(39, 5)], Direction.RIGHT),
            ([(5, 0)], Direction.UP),
            ([(5, 39)], Direction.DOWN),
        ]
        for body, direction in cases:
            engine = GameEngine(grid_size=40, seed=0)
            engine.restore(body, direction)
            engine.tick()
            assert engine.last_collision == CollisionKind.WALL

    def test_run_into_right_wall(self):
        engine = GameEngine(grid_size=40, seed=0)
        engine.play_pause()
        ticks = 0
        while engine.is_playing:
            engine.tick()
            ticks += 1
        # 29 moves from x=10 to x=39, then the 30th leaves the grid.
        assert ticks == 30
        assert engine.is_game_over()


class TestSelfCollision:
    def test_self_collision_scenario(self):
        engine = GameEngine(grid_size=40, seed=0)
        body = [(10, 10), (9, 10), (8, 10), (8, 11), (9, 11), (10, 11)]
        engine.restore(body, Direction.DOWN, score=3, is_playing=True)
        engine.tick()
        assert engine.is_game_over()
        assert engine.last_collision == CollisionKind.SELF
        assert not engine.is_playing
        assert engine.high_score == 3
        assert engine.score == 0
        assert engine.snake == [(10, 10)]
        assert engine.direction == Direction.RIGHT

    def test_tail_cell_is_fatal(self):
        """Matches the classic game; documented as non-ideal.

        The tail would be vacated this tick, but the full body is checked.
        """
        engine = GameEngine(grid_size=40, seed=0)
        engine.restore([(10, 10), (11, 10), (11, 11), (10, 11)], Direction.DOWN)
        engine.tick()
        assert engine.last_collision == CollisionKind.SELF


class TestGameOverTransition:
    def test_food_not_moved(self):
        engine = GameEngine(seed=0)
        engine.restore([(0, 0)], Direction.UP, food=(30, 30))
        engine.tick()
        assert engine.is_game_over()
        assert engine.food == (30, 30)

    def test_pending_direction_cleared(self):
        engine = GameEngine(seed=0)
        engine.restore([(0, 0)], Direction.UP)
        engine.tick()
        engine.set_direction(Direction.DOWN)
        engine.reset()
        assert engine.pending_direction is None

    def test_high_score_monotonic(self):
        engine = GameEngine(seed=0)
        for score, expected in [(5, 5), (2, 5), (7, 7), (0, 7)]:
            engine.restore([(0, 0)], Direction.LEFT, score=score)
            engine.tick()
            assert engine.high_score == expected
            engine.reset()
            assert engine.high_score == expected

    def test_game_over_flag_cleared_on_play(self):
        engine = GameEngine(seed=0)
        engine.restore([(0, 0)], Direction.LEFT, is_playing=True)
        engine.tick()
        assert engine.is_game_over()
        assert engine.play_pause() is True
        assert not engine.is_game_over()
        engine.tick()
        assert engine.snake == [(11, 10)]


class TestControls:
    def test_play_pause_toggles_only(self):
        engine = GameEngine(seed=0)
        engine.tick()
        before = engine.get_state()
        assert engine.play_pause() is True
        assert engine.is_playing
        assert engine.play_pause() is False
        after = engine.get_state()
        assert before == after

    def test_reset(self):
        engine = GameEngine(seed=0)
        engine.restore(
            [(20, 20), (19, 20)], Direction.UP, food=(3, 3),
            score=6, high_score=9, is_playing=True,
        )
        engine.reset()
        assert not engine.is_playing
        assert engine.score == 0
        assert engine.high_score == 9
        assert engine.snake == [(10, 10)]
        assert engine.direction == Direction.RIGHT
        assert engine.food == (3, 3)

    def test_reset_does_not_fold_score(self):
        engine = GameEngine(seed=0)
        engine.restore([(20, 20)], score=6)
        engine.reset()
        assert engine.high_score == 0

    def test_reset_idempotent(self):
        engine = GameEngine(seed=0)
        engine.restore([(20, 20), (19, 20)], Direction.DOWN, score=2, is_playing=True)
        engine.reset()
        once = engine.get_state()
        engine.reset()
        assert engine.get_state() == once


class TestFoodRespawn:
    def test_respawn_may_land_on_snake(self):
        """Matches the classic game; documented as non-ideal.

        The snake fills the whole 2×2 grid after eating, so the new food
        can only land on the body.
        """
        engine = GameEngine(grid_size=2, seed=0)
        engine.restore([(0, 0), (1, 0), (1, 1)], Direction.DOWN, food=(0, 1))
        engine.tick()
        assert engine.score == 1
        assert len(engine.snake) == 4
        assert engine.food in engine.snake

    def test_same_seed_same_food(self):
        foods = []
        for _ in range(2):
            engine = GameEngine(seed=123)
            engine.restore([(10, 10)], food=(11, 10))
            engine.tick()
            foods.append(engine.food)
        assert foods[0] == foods[1]


class TestInvariants:
    def test_random_play_keeps_invariants(self):
        rng = np.random.default_rng(5)
        directions = list(Direction)
        engine = GameEngine(grid_size=12, seed=5)
        engine.play_pause()
        prev_len = 1
        high = 0
        for _ in range(3000):
            if not engine.is_playing:
                engine.play_pause()
            # Steer toward the food half of the time so the snake grows.
            if rng.random() < 0.5:
                engine.set_direction(self._toward(engine))
            else:
                engine.set_direction(directions[int(rng.integers(4))])
            engine.tick()

            body = engine.snake
            assert len(set(body)) == len(body)
            assert all(engine.grid.in_bounds(*seg) for seg in body)
            if engine.is_game_over():
                assert body == [engine.origin]
            else:
                assert len(body) in (prev_len, prev_len + 1)
            assert engine.high_score >= high
            high = engine.high_score
            prev_len = len(body)

    @staticmethod
    def _toward(engine: GameEngine) -> Direction:
        hx, hy = engine.snake[0]
        fx, fy = engine.food
        if fx != hx:
            return Direction.RIGHT if fx > hx else Direction.LEFT
        return Direction.DOWN if fy > hy else Direction.UP


class TestEngineSnapshots:
    def test_restore_rejects_overlap(self):
        engine = GameEngine(seed=0)
        with pytest.raises(ValueError, match="overlap"):
            engine.restore([(1, 1), (1, 1)])

    def test_restore_rejects_out_of_bounds(self):
        engine = GameEngine(grid_size=10, seed=0)
        with pytest.raises(ValueError, match="inside the grid"):
            engine.restore([(10, 0)])

    def test_restore_bad_food_leaves_engine_unchanged(self):
        engine = GameEngine(seed=0)
        before = engine.get_state()
        with pytest.raises(ValueError, match="outside the grid"):
            engine.restore([(3, 3), (2, 3)], food=(99, 99), score=5)
        assert engine.snake == [(10, 10)]
        assert engine.score == 0
        assert engine.get_state() == before

    def test_render(self):
        engine = GameEngine(seed=0)
        cells = engine.render()
        assert cells.shape == (40, 40)
        assert cells[10, 10] == CellType.SNAKE
        assert cells[15, 15] == CellType.FOOD

    def test_state_is_json_serializable(self):
        engine = GameEngine(seed=42)
        engine.set_direction(Direction.UP)
        state = engine.get_state()
        assert state["pending_direction"] == "up"
        serialized = json.dumps(state)
        assert isinstance(serialized, str)

    def test_state_structure(self):
        state = GameEngine(seed=0).get_state()
        for key in (
            "tick", "score", "high_score", "is_playing", "game_over",
            "last_collision", "grid", "snake", "pending_direction", "food",
        ):
            assert key in state
        assert state["food"]["position"] == [15, 15]
