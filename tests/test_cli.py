"""Tests for the grid-snake CLI."""

import json

from grid_snake.cli import _build_parser, main
from grid_snake.config import EngineConfig


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_simulate_defaults(self):
        args = _build_parser().parse_args(["simulate"])
        assert args.command == "simulate"
        assert args.config is None
        assert args.grid_size is None
        assert args.moves == ""
        assert args.ticks is None

    def test_benchmark_defaults(self):
        args = _build_parser().parse_args(["benchmark"])
        assert args.command == "benchmark"
        assert args.num_games == 100
        assert args.grid_size == 40


class TestCLISimulate:
    def test_scripted_moves(self, capsys):
        assert main(["simulate", "--moves", "RRR"]) == 0
        state = json.loads(capsys.readouterr().out)
        assert state["snake"]["body"] == [[13, 10]]
        assert state["tick"] == 3
        assert state["is_playing"] is True

    def test_idle_ticks(self, capsys):
        assert main(["simulate", "--moves", "U", "--ticks", "4"]) == 0
        state = json.loads(capsys.readouterr().out)
        assert state["snake"]["body"] == [[10, 6]]

    def test_runs_into_wall(self, capsys):
        assert main(["simulate", "--moves", "U" * 15]) == 0
        state = json.loads(capsys.readouterr().out)
        assert state["game_over"] is True
        assert state["last_collision"] == "wall"
        assert state["tick"] == 11
        assert state["snake"]["body"] == [[10, 10]]

    def test_unknown_move_code(self):
        assert main(["simulate", "--moves", "RXZ"]) == 2

    def test_grid_override_conflicts_with_config(self, tmp_path):
        path = tmp_path / "engine.json"
        EngineConfig(grid_size=40, origin=(30, 30)).save(path)
        assert main(["simulate", "--config", str(path), "--grid-size", "10"]) == 2

    def test_unreadable_config(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        assert main(["simulate", "--config", str(path)]) == 2

    def test_config_file_with_override(self, tmp_path, capsys):
        path = tmp_path / "engine.json"
        EngineConfig(grid_size=12, origin=(1, 1), initial_food=(2, 1)).save(path)
        assert main(["simulate", "--config", str(path), "--moves", "R"]) == 0
        state = json.loads(capsys.readouterr().out)
        assert state["grid"]["width"] == 12
        assert state["score"] == 1
        assert state["snake"]["body"] == [[2, 1], [1, 1]]


class TestCLIBenchmark:
    def test_benchmark_short_run(self, capsys):
        assert main([
            "benchmark", "--num-games", "2", "--grid-size", "10",
            "--max-ticks", "20",
        ]) == 0
        assert "ticks/s" in capsys.readouterr().out
