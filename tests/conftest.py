import os
import random

import pytest

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from snake.app import SnakeApp
from snake.leaderboard import Leaderboard
from snake.model import Cell, Snake
from snake.options import GameOptions, OptionsStore


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedInput:
    """InputSource that hands out a fixed list of keys, then None forever."""

    def __init__(self, keys, stop=None, stop_after=None):
        self.keys = list(keys)
        self.stop = stop
        self.stop_after = stop_after
        self.reads = 0

    def read_key(self):
        self.reads += 1
        if self.stop is not None and self.stop_after is not None and self.reads > self.stop_after:
            self.stop.set()
        if self.keys:
            return self.keys.pop(0)
        return None


def count_cells(grid, cell):
    return grid.cells.count(cell)


def on_border(grid, x, y):
    return x in (0, grid.width - 1) or y in (0, grid.height - 1)


def place_snake(engine, body, direction, food):
    """Replace the engine's round with a hand-built snake (head first) and food."""
    grid = engine.grid
    grid.clear_interior()
    engine.snake = Snake(body[0], direction)
    engine.snake.body.extend(body[1:])
    for pos in engine.snake.body:
        grid[pos] = Cell.SNAKE_BODY
    engine.food = food
    if food is not None:
        grid[food] = Cell.FOOD


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def options():
    return GameOptions()


@pytest.fixture
def leaderboard_path(tmp_path):
    return str(tmp_path / "leaderboard.txt")


@pytest.fixture
def options_path(tmp_path):
    return str(tmp_path / "options.txt")


@pytest.fixture
def leaderboard(leaderboard_path):
    return Leaderboard(leaderboard_path)


@pytest.fixture
def app(leaderboard, options_path, clock, rng):
    return SnakeApp(leaderboard, OptionsStore(options_path), clock=clock, rng=rng, base_tick=0.5)
