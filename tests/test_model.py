import random
from types import SimpleNamespace

import pytest

from conftest import FakeClock, count_cells, on_border, place_snake
from snake.errors import ValidationError
from snake.leaderboard import Leaderboard
from snake.model import (
    Cell, Difficulty, Direction, Elapsed, GameStatus, Grid, SnakeEngine,
)
from snake.options import GameOptions


def make_engine(difficulty=Difficulty.EASY, seed=7, clock=None, leaderboard=None, **flags):
    engine = SnakeEngine(
        GameOptions(**flags),
        leaderboard=leaderboard,
        player_name="tester",
        rng=random.Random(seed),
        clock=clock or FakeClock(),
    )
    engine.initialize(difficulty)
    engine.start()
    return engine


def serpentine(width, height):
    """Every interior cell of a width x height grid, walked row by row."""
    path = []
    for y in range(1, height - 1):
        xs = range(1, width - 1)
        path.extend((x, y) for x in (xs if y % 2 else reversed(xs)))
    return path


# ── Difficulty table ─────────────────────────────────────────────
def test_difficulty_presets():
    assert (Difficulty.EASY.width, Difficulty.EASY.height) == (10, 10)
    assert (Difficulty.NORMAL.width, Difficulty.NORMAL.height) == (15, 15)
    assert (Difficulty.HARD.width, Difficulty.HARD.height) == (20, 20)
    assert Difficulty.EASY.tick_seconds(1.0) == pytest.approx(1.0)
    assert Difficulty.NORMAL.tick_seconds(1.0) == pytest.approx(0.8)
    assert Difficulty.HARD.tick_seconds(1.0) == pytest.approx(0.6)


def test_difficulty_from_digit():
    assert Difficulty.from_digit("0") is Difficulty.EASY
    assert Difficulty.from_digit("1") is Difficulty.NORMAL
    assert Difficulty.from_digit("2") is Difficulty.HARD
    assert Difficulty.from_digit("3") is None


# ── Grid ─────────────────────────────────────────────────────────
@pytest.mark.parametrize("width,height", [(3, 10), (10, 3), (2, 2)])
def test_grid_rejects_small_sides(width, height):
    with pytest.raises(ValidationError):
        Grid(width, height)


def test_grid_is_row_major():
    grid = Grid(5, 4)
    grid[2, 1] = Cell.FOOD
    assert grid.cells[1 * 5 + 2] is Cell.FOOD
    assert grid.interior_capacity == 3 * 2


def test_grid_wrap_stays_inside():
    grid = Grid(10, 10)
    assert grid.wrap(0, 4) == (8, 4)
    assert grid.wrap(9, 4) == (1, 4)
    assert grid.wrap(4, 0) == (4, 8)
    assert grid.wrap(4, 9) == (4, 1)


def test_initialize_too_small_leaves_status():
    engine = SnakeEngine(GameOptions())
    with pytest.raises(ValidationError):
        engine.initialize(SimpleNamespace(width=3, height=3))
    assert engine.status is GameStatus.NOT_INITIALIZED


def test_start_requires_initialize():
    with pytest.raises(RuntimeError):
        SnakeEngine(GameOptions()).start()


# ── Start ────────────────────────────────────────────────────────
@pytest.mark.parametrize("difficulty", list(Difficulty))
@pytest.mark.parametrize("seed", range(5))
def test_start_layout(difficulty, seed):
    engine = make_engine(difficulty, seed=seed)
    grid = engine.grid

    for x in range(grid.width):
        for y in range(grid.height):
            if on_border(grid, x, y):
                assert grid[x, y] is Cell.WALL

    hx, hy = engine.snake.head
    assert grid.in_interior(hx, hy)
    assert grid[hx, hy] is Cell.SNAKE_BODY
    d = engine.snake.dir
    assert grid[hx + d.x, hy + d.y] is not Cell.WALL

    assert count_cells(grid, Cell.FOOD) == 1
    assert engine.food != engine.snake.head
    assert engine.score == 0
    assert engine.length == 1
    assert engine.status is GameStatus.ONGOING


# ── Tick ─────────────────────────────────────────────────────────
def test_empty_move_keeps_length():
    engine = make_engine()
    place_snake(engine, [(3, 3), (2, 3)], Direction.RIGHT, food=(7, 7))
    assert engine.tick() is GameStatus.ONGOING
    assert list(engine.snake.body) == [(4, 3), (3, 3)]
    assert engine.grid[2, 3] is Cell.EMPTY
    assert count_cells(engine.grid, Cell.SNAKE_BODY) == 2


def test_eating_grows_and_scores():
    engine = make_engine()
    place_snake(engine, [(3, 3)], Direction.RIGHT, food=(4, 3))
    engine.tick()
    assert engine.length == 2
    assert engine.score == 10
    assert engine.status is GameStatus.ONGOING
    assert count_cells(engine.grid, Cell.FOOD) == 1
    assert engine.food not in engine.snake.body


def test_wall_loses():
    engine = make_engine()
    place_snake(engine, [(1, 1)], Direction.LEFT, food=(5, 5))
    assert engine.tick() is GameStatus.LOST


def test_pass_border_wraps():
    engine = make_engine(snake_can_pass_border=True)
    place_snake(engine, [(1, 4)], Direction.LEFT, food=(5, 5))
    assert engine.tick() is GameStatus.ONGOING
    assert engine.snake.head == (8, 4)
    assert engine.grid[0, 4] is Cell.WALL


def test_self_collision_loses():
    engine = make_engine()
    body = [(3, 3), (4, 3), (4, 4), (3, 4), (2, 4)]
    place_snake(engine, body, Direction.LEFT, food=(7, 7))
    engine.set_pending_direction(Direction.DOWN)
    assert engine.tick() is GameStatus.LOST


def test_cut_itself_truncates_body():
    engine = make_engine(snake_can_cut_itself=True)
    body = [(3, 3), (4, 3), (4, 4), (3, 4), (2, 4)]
    place_snake(engine, body, Direction.LEFT, food=(7, 7))
    engine.set_pending_direction(Direction.DOWN)
    assert engine.tick() is GameStatus.ONGOING
    assert list(engine.snake.body) == [(3, 4), (3, 3), (4, 3), (4, 4)]
    assert engine.grid[2, 4] is Cell.EMPTY
    assert count_cells(engine.grid, Cell.SNAKE_BODY) == 4


def test_following_the_tail_is_allowed():
    engine = make_engine()
    body = [(3, 3), (4, 3), (4, 4), (3, 4)]
    place_snake(engine, body, Direction.LEFT, food=(7, 7))
    engine.set_pending_direction(Direction.DOWN)
    assert engine.tick() is GameStatus.ONGOING
    assert list(engine.snake.body) == [(3, 4), (3, 3), (4, 3), (4, 4)]
    assert count_cells(engine.grid, Cell.SNAKE_BODY) == 4


def test_reverse_is_ignored_by_default():
    engine = make_engine()
    place_snake(engine, [(3, 3)], Direction.RIGHT, food=(7, 7))
    assert engine.set_pending_direction(Direction.LEFT) is False
    engine.tick()
    assert engine.snake.dir is Direction.RIGHT
    assert engine.snake.head == (4, 3)


def test_reverse_allowed_when_cutting_enabled():
    engine = make_engine(snake_can_cut_itself=True)
    place_snake(engine, [(3, 3)], Direction.RIGHT, food=(7, 7))
    assert engine.set_pending_direction(Direction.LEFT) is True
    engine.tick()
    assert engine.snake.dir is Direction.LEFT
    assert engine.snake.head == (2, 3)


def test_last_pending_direction_wins():
    engine = make_engine()
    place_snake(engine, [(3, 3)], Direction.RIGHT, food=(7, 7))
    engine.set_pending_direction(Direction.UP)
    engine.set_pending_direction(Direction.DOWN)
    engine.tick()
    assert engine.snake.head == (3, 4)


def test_filling_the_interior_wins():
    engine = make_engine()
    path = serpentine(10, 10)
    assert len(path) == 64
    body = list(reversed(path[:-1]))
    place_snake(engine, body, Direction.LEFT, food=path[-1])
    engine.score = 630
    assert engine.tick() is GameStatus.WON
    assert engine.length == engine.grid.interior_capacity
    assert engine.score == 640
    assert count_cells(engine.grid, Cell.FOOD) == 0


@pytest.mark.parametrize("seed", range(10))
def test_exactly_one_food_while_ongoing(seed):
    engine = make_engine(seed=seed, snake_can_pass_border=True)
    rng = random.Random(seed)
    for _ in range(300):
        if engine.status is not GameStatus.ONGOING:
            break
        assert count_cells(engine.grid, Cell.FOOD) == 1
        engine.set_pending_direction(rng.choice(list(Direction)))
        engine.tick()


def test_tick_after_finish_is_noop():
    engine = make_engine()
    place_snake(engine, [(1, 1)], Direction.LEFT, food=(5, 5))
    engine.tick()
    head = engine.snake.head
    assert engine.tick() is GameStatus.LOST
    assert engine.snake.head == head


# ── Leaderboard submission ───────────────────────────────────────
def test_result_submitted_once(leaderboard_path):
    board = Leaderboard(leaderboard_path)
    engine = make_engine(leaderboard=board)
    place_snake(engine, [(2, 1)], Direction.RIGHT, food=(3, 1))
    engine.tick()
    engine.set_pending_direction(Direction.UP)
    engine.tick()
    engine.tick()

    assert engine.status is GameStatus.LOST
    assert [(e.name, e.score) for e in board.as_sequence()] == [("tester", 10)]
    assert engine.rank == 0
    with open(leaderboard_path, encoding="utf-8") as fh:
        assert fh.read() == "tester 10"


def test_restart_resets_round():
    engine = make_engine()
    place_snake(engine, [(1, 1)], Direction.LEFT, food=(5, 5))
    engine.score = 50
    engine.tick()
    engine.start()
    assert engine.status is GameStatus.ONGOING
    assert engine.score == 0
    assert engine.length == 1
    assert count_cells(engine.grid, Cell.SNAKE_BODY) == 1


# ── Elapsed ──────────────────────────────────────────────────────
@pytest.mark.parametrize("seconds,text", [
    (0, "0s"),
    (45, "45s"),
    (60, "1m 0s"),
    (125, "2m 5s"),
    (3600, "1h 0m 0s"),
    (3725, "1h 2m 5s"),
])
def test_elapsed_format(seconds, text):
    assert str(Elapsed.from_seconds(seconds)) == text


def test_elapsed_follows_clock_and_freezes():
    clock = FakeClock()
    engine = make_engine(clock=clock)
    clock.advance(125.4)
    assert engine.elapsed() == Elapsed(0, 2, 5)

    place_snake(engine, [(1, 1)], Direction.LEFT, food=(5, 5))
    engine.tick()
    clock.advance(100)
    assert str(engine.elapsed()) == "2m 5s"


def test_elapsed_before_start():
    assert SnakeEngine(GameOptions()).elapsed() == Elapsed(0, 0, 0)


# ── Rows ─────────────────────────────────────────────────────────
def test_rows_glyphs():
    engine = make_engine()
    place_snake(engine, [(3, 3), (2, 3)], Direction.RIGHT, food=(5, 5))
    rows = engine.rows()
    assert len(rows) == 10
    assert all(len(row) == 10 for row in rows)
    assert rows[0] == "#" * 10
    assert rows[3][3] == "@"
    assert rows[3][2] == "o"
    assert rows[5][5] == "*"
    assert rows[4][4] == " "
