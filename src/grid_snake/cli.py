"""Command-line tools for headless grid-snake runs."""

from __future__ import annotations

import argparse
import json
import logging
import sys

logger = logging.getLogger(__name__)

_MOVE_CODES = {"U": "UP", "D": "DOWN", "L": "LEFT", "R": "RIGHT"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-snake",
        description="Headless grid-snake simulation and benchmarking tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play a scripted game and print the final state.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON engine config (flags override it).",
    )
    sim_p.add_argument("--grid-size", type=int, default=None)
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument(
        "--input-mode", type=str, default=None,
        choices=["buffered", "immediate"],
    )
    sim_p.add_argument(
        "--moves", type=str, default="",
        help="One code per tick: U, D, L, R, or '.' for no input.",
    )
    sim_p.add_argument(
        "--ticks", type=int, default=None,
        help="Number of ticks to run (defaults to the length of --moves).",
    )

    # --- benchmark ---
    bench_p = sub.add_parser(
        "benchmark", help="Measure engine throughput.",
    )
    bench_p.add_argument("--num-games", type=int, default=100)
    bench_p.add_argument("--grid-size", type=int, default=40)
    bench_p.add_argument("--max-ticks", type=int, default=500)
    bench_p.add_argument("--seed", type=int, default=42)

    return parser


def _run_simulate(args: argparse.Namespace) -> int:
    from grid_snake.config import EngineConfig
    from grid_snake.engine import GameEngine
    from grid_snake.snake import Direction

    try:
        config = (
            EngineConfig.load(args.config) if args.config else EngineConfig()
        )
    except ValueError as exc:
        logger.error("Invalid config file %s: %s", args.config, exc)
        return 2

    overrides: dict = {}
    flag_map = {
        "grid_size": "grid_size",
        "seed": "seed",
        "input_mode": "input_mode",
    }
    for cli_name, cfg_name in flag_map.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            overrides[cfg_name] = val

    if overrides:
        d = config.to_dict()
        d.update(overrides)
        try:
            config = EngineConfig.from_dict(d)
        except ValueError as exc:
            logger.error("Invalid engine settings: %s", exc)
            return 2

    moves = args.moves.upper()
    unknown = set(moves) - set(_MOVE_CODES) - {"."}
    if unknown:
        logger.error("Unknown move codes: %s", "".join(sorted(unknown)))
        return 2

    ticks = args.ticks if args.ticks is not None else len(moves)
    engine = GameEngine.from_config(config)
    engine.play_pause()

    for i in range(ticks):
        code = moves[i] if i < len(moves) else "."
        if code != ".":
            engine.set_direction(Direction[_MOVE_CODES[code]])
        engine.tick()
        if engine.is_game_over():
            logger.info("Game ended after %d tick(s).", i + 1)
            break

    print(json.dumps(engine.get_state(), indent=2))  # noqa: T201
    return 0


def _run_benchmark(args: argparse.Namespace) -> int:
    from grid_snake.benchmark import benchmark_throughput

    result = benchmark_throughput(
        num_games=args.num_games,
        grid_size=args.grid_size,
        max_ticks=args.max_ticks,
        seed=args.seed,
    )
    print(result.summary())  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``grid-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "benchmark": _run_benchmark,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
