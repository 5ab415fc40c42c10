"""Headless runner: ``python -m lunar_colony``."""
from __future__ import annotations

import argparse
import logging
from dataclasses import asdict, replace

from lunar_colony.commands import PlaceBuilding
from lunar_colony.config import GameConfig
from lunar_colony.game import build_game

log = logging.getLogger("lunar_colony")

OPENING_BUILDS = (
    ("solar_panel", (20.0, 0.0, 20.0)),
    ("laboratory", (-20.0, 0.0, 20.0)),
)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run the lunar colony simulation without a renderer")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: random)")
    parser.add_argument("--seconds", type=float, default=60.0,
                        help="Simulated time to run (default: 60)")
    parser.add_argument("--fps", type=int, default=60, help="Frames per simulated second (default: 60)")
    parser.add_argument("--rocks", type=int, default=20, help="Rocks scattered at start (default: 20)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: INFO)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    config = replace(GameConfig(), fps=args.fps, seed=args.seed)
    engine = build_game(config, rock_count=args.rocks, stop_on_outcome=True)
    world = engine.world
    for key, position in OPENING_BUILDS:
        world.enqueue(PlaceBuilding(key, position))

    frames = int(args.seconds * args.fps)
    engine.run(frames)

    log.info("simulated %.1f s over %d frames", engine.clock.elapsed, engine.clock.tick_number)
    log.info("commands: %d accepted, %d refused", world.queue.accepted, world.queue.rejected)
    if world.outcome is not None:
        log.info("outcome: %s", world.outcome)
    for name, value in asdict(world.get_resource_stats()).items():
        print(f"{name:>20}: {value}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
