"""
main.py — Entry point.

Run with:
    python main.py [--leaderboard FILE] [--options FILE] [--base-tick SECONDS]

Requires:
    pip install pygame
"""

import argparse
import logging
import os
import sys

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from snake.config import BASE_TICK_SECONDS, LEADERBOARD_FILE, LOG_FILE, OPTIONS_FILE
from snake.controller import GameController


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Snake with a leaderboard.")
    parser.add_argument("--leaderboard", default=LEADERBOARD_FILE,
                        help="leaderboard file (default: %(default)s)")
    parser.add_argument("--options", default=OPTIONS_FILE,
                        help="options file (default: %(default)s)")
    parser.add_argument("--base-tick", type=float, default=BASE_TICK_SECONDS,
                        help="seconds per move on Easy (default: %(default)s)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=LOG_FILE,
                        help="where to write the log (default: %(default)s)")
    args = parser.parse_args(argv)
    if args.base_tick <= 0:
        parser.error("--base-tick must be positive")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        filename=args.log_file,
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    controller = GameController.create(args.leaderboard, args.options, args.base_tick)
    return controller.run()


if __name__ == "__main__":
    sys.exit(main())
