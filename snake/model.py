"""
model.py — Model layer.

Owns the play-field and the snake rules. Zero rendering, zero input handling.
Exposes a clean API for the state machine to drive one tick at a time.

Classes:
    Direction   — closed set of unit moves
    Cell        — contents of one grid cell
    GameStatus  — lifecycle of one round
    Difficulty  — preset grid size and tick period
    Elapsed     — h/m/s split of the round's running time
    Grid        — row-major cell array with a wall ring
    Snake       — body, direction, buffered next direction
    SnakeEngine — top-level model; owns grid, snake, food, score
"""

import logging
import random
import time
from collections import deque
from enum import Enum
from typing import NamedTuple

from .config import (
    BASE_TICK_SECONDS, DIFFICULTIES, MIN_GRID_SIDE, SCORE_PER_FOOD,
    GLYPH_BODY, GLYPH_EMPTY, GLYPH_FOOD, GLYPH_HEAD, GLYPH_WALL,
)
from .errors import ValidationError

logger = logging.getLogger(__name__)


# ─────────────────────────── Direction ───────────────────────────
class Direction(Enum):
    """Unit step on the grid; y grows downwards."""
    UP    = (0, -1)
    LEFT  = (-1, 0)
    DOWN  = (0,  1)
    RIGHT = (1,  0)

    @property
    def x(self) -> int:
        return self.value[0]

    @property
    def y(self) -> int:
        return self.value[1]

    def is_opposite(self, other: "Direction") -> bool:
        return self.x == -other.x and self.y == -other.y


# ─────────────────────────── Enums ───────────────────────────────
class Cell(Enum):
    WALL       = "wall"
    EMPTY      = "empty"
    FOOD       = "food"
    SNAKE_BODY = "snake"


class GameStatus(Enum):
    NOT_INITIALIZED = "not_initialized"
    CAN_BEGIN       = "can_begin"
    ONGOING         = "ongoing"
    WON             = "won"
    LOST            = "lost"

    @property
    def finished(self) -> bool:
        return self in (GameStatus.WON, GameStatus.LOST)


class Difficulty(Enum):
    EASY   = "easy"
    NORMAL = "normal"
    HARD   = "hard"

    @property
    def label(self) -> str:
        return DIFFICULTIES[self.value][0]

    @property
    def width(self) -> int:
        return DIFFICULTIES[self.value][1]

    @property
    def height(self) -> int:
        return DIFFICULTIES[self.value][2]

    def tick_seconds(self, base: float = BASE_TICK_SECONDS) -> float:
        return DIFFICULTIES[self.value][3] * base

    @classmethod
    def from_digit(cls, ch: str) -> "Difficulty | None":
        return {"0": cls.EASY, "1": cls.NORMAL, "2": cls.HARD}.get(ch)


# ─────────────────────────── Elapsed ─────────────────────────────
class Elapsed(NamedTuple):
    hours: int
    minutes: int
    seconds: int

    @classmethod
    def from_seconds(cls, total: int) -> "Elapsed":
        total = max(0, int(total))
        if total >= 3600:
            hours, rest = divmod(total, 3600)
            minutes, seconds = divmod(rest, 60)
            return cls(hours, minutes, seconds)
        if total >= 60:
            minutes, seconds = divmod(total, 60)
            return cls(0, minutes, seconds)
        return cls(0, 0, total)

    def __str__(self) -> str:
        if self.hours:
            return f"{self.hours}h {self.minutes}m {self.seconds}s"
        if self.minutes:
            return f"{self.minutes}m {self.seconds}s"
        return f"{self.seconds}s"


# ──────────────────────────── Grid ───────────────────────────────
class Grid:
    """
    width x height cells, addressed row-major (y * width + x).
    The outer ring is stamped Wall on construction and never cleared.
    """

    def __init__(self, width: int, height: int):
        if width < MIN_GRID_SIDE or height < MIN_GRID_SIDE:
            raise ValidationError(
                f"play-field {width}x{height} is too small; "
                f"both sides must be at least {MIN_GRID_SIDE}"
            )
        self.width = width
        self.height = height
        self.cells: list[Cell] = [Cell.EMPTY] * (width * height)
        for x in range(width):
            self[x, 0] = Cell.WALL
            self[x, height - 1] = Cell.WALL
        for y in range(height):
            self[0, y] = Cell.WALL
            self[width - 1, y] = Cell.WALL

    def __getitem__(self, pos: tuple[int, int]) -> Cell:
        x, y = pos
        return self.cells[y * self.width + x]

    def __setitem__(self, pos: tuple[int, int], cell: Cell) -> None:
        x, y = pos
        self.cells[y * self.width + x] = cell

    @property
    def interior_capacity(self) -> int:
        return (self.width - 2) * (self.height - 2)

    def in_interior(self, x: int, y: int) -> bool:
        return 0 < x < self.width - 1 and 0 < y < self.height - 1

    def interior(self):
        for y in range(1, self.height - 1):
            for x in range(1, self.width - 1):
                yield x, y

    def wrap(self, x: int, y: int) -> tuple[int, int]:
        """Fold a position one step outside the interior back in on the far side."""
        return (
            (x - 1) % (self.width - 2) + 1,
            (y - 1) % (self.height - 2) + 1,
        )

    def clear_interior(self) -> None:
        for pos in self.interior():
            self[pos] = Cell.EMPTY


# ──────────────────────────── Snake ──────────────────────────────
class Snake:
    """
    Body segments head-first plus the direction queued for the next tick.
    No rendering. No grid bookkeeping.
    """

    def __init__(self, head: tuple[int, int], start_dir: Direction):
        self.body: deque[tuple[int, int]] = deque([head])
        self.dir: Direction = start_dir
        self._next_dir: Direction = start_dir

    @property
    def head(self) -> tuple[int, int]:
        return self.body[0]

    @property
    def tail(self) -> tuple[int, int]:
        return self.body[-1]

    @property
    def pending_direction(self) -> Direction:
        return self._next_dir

    def __len__(self) -> int:
        return len(self.body)

    def request_direction(self, new_dir: Direction, allow_reverse: bool = False) -> bool:
        """Queue a direction change; a reversal is refused unless allowed."""
        if not allow_reverse and new_dir.is_opposite(self.dir):
            return False
        self._next_dir = new_dir
        return True

    def apply_pending(self) -> Direction:
        self.dir = self._next_dir
        return self.dir

    def cut_at(self, pos: tuple[int, int]) -> list[tuple[int, int]]:
        """Drop the segment at `pos` and everything behind it; return what was dropped."""
        index = self.body.index(pos)
        dropped = []
        while len(self.body) > index:
            dropped.append(self.body.pop())
        return dropped


# ───────────────────────── SnakeEngine ───────────────────────────
class SnakeEngine:
    """
    One round of snake. The state machine calls tick() once per game tick.

    On the tick that ends the round the result is submitted to the
    leaderboard (if one was given) and written to disk. Storage failures
    propagate after the status has already been updated.
    """

    def __init__(
        self,
        options,
        leaderboard=None,
        player_name: str = "",
        rng: random.Random | None = None,
        clock=time.monotonic,
    ):
        self.options = options
        self.leaderboard = leaderboard
        self.player_name = player_name
        self.rng = rng or random.Random()
        self.clock = clock

        self.status: GameStatus = GameStatus.NOT_INITIALIZED
        self.difficulty = None
        self.grid: Grid | None = None
        self.snake: Snake | None = None
        self.food: tuple[int, int] | None = None
        self.score: int = 0
        self.rank: int | None = None
        self.started_at: float | None = None
        self.finished_at: float | None = None
        self._submitted = False

    # ── Public API ───────────────────────────────────────────────
    def initialize(self, difficulty) -> None:
        """Allocate a fresh grid for `difficulty`; raises ValidationError if too small."""
        self.grid = Grid(difficulty.width, difficulty.height)
        self.difficulty = difficulty
        self.snake = None
        self.food = None
        self.status = GameStatus.CAN_BEGIN
        logger.debug("grid %dx%d ready", self.grid.width, self.grid.height)

    def start(self) -> None:
        if self.grid is None:
            raise RuntimeError("initialize() must be called before start()")

        grid = self.grid
        grid.clear_interior()

        head = self.rng.choice(list(grid.interior()))
        hx, hy = head
        safe = [d for d in Direction if grid[hx + d.x, hy + d.y] is not Cell.WALL]
        self.snake = Snake(head, self.rng.choice(safe))
        grid[head] = Cell.SNAKE_BODY

        self.food = None
        self._spawn_food()
        self.score = 0
        self.rank = None
        self.started_at = self.clock()
        self.finished_at = None
        self._submitted = False
        self.status = GameStatus.ONGOING
        logger.debug("round started at %s heading %s", head, self.snake.dir.name)

    def set_pending_direction(self, direction: Direction) -> bool:
        if self.snake is None:
            return False
        return self.snake.request_direction(
            direction, allow_reverse=self.options.snake_can_cut_itself,
        )

    def tick(self) -> GameStatus:
        """Advance one cell. Returns the status after the move."""
        if self.status is not GameStatus.ONGOING:
            return self.status

        grid, snake = self.grid, self.snake
        d = snake.apply_pending()
        hx, hy = snake.head
        nx, ny = hx + d.x, hy + d.y
        if self.options.snake_can_pass_border and not grid.in_interior(nx, ny):
            nx, ny = grid.wrap(nx, ny)
        target = (nx, ny)
        cell = grid[target]

        if cell is Cell.FOOD:
            snake.body.appendleft(target)
            grid[target] = Cell.SNAKE_BODY
            self.food = None
            self.score += SCORE_PER_FOOD
            if len(snake) >= grid.interior_capacity:
                self._finish(GameStatus.WON)
                return self.status
            self._spawn_food()
        elif cell is Cell.WALL:
            self._finish(GameStatus.LOST)
        elif cell is Cell.SNAKE_BODY and target != snake.tail:
            if not self.options.snake_can_cut_itself:
                self._finish(GameStatus.LOST)
                return self.status
            for pos in snake.cut_at(target):
                grid[pos] = Cell.EMPTY
            snake.body.appendleft(target)
            grid[target] = Cell.SNAKE_BODY
        else:
            # the tail leaves before the head arrives, so following it is legal
            grid[snake.body.pop()] = Cell.EMPTY
            snake.body.appendleft(target)
            grid[target] = Cell.SNAKE_BODY
        return self.status

    def elapsed(self) -> Elapsed:
        if self.started_at is None:
            return Elapsed(0, 0, 0)
        end = self.finished_at if self.finished_at is not None else self.clock()
        return Elapsed.from_seconds(int(end - self.started_at))

    def rows(self) -> list[str]:
        """Glyph rows for the renderer: wall, empty, food, head, body."""
        if self.grid is None:
            return []
        glyphs = {
            Cell.WALL: GLYPH_WALL,
            Cell.EMPTY: GLYPH_EMPTY,
            Cell.FOOD: GLYPH_FOOD,
            Cell.SNAKE_BODY: GLYPH_BODY,
        }
        head = self.snake.head if self.snake else None
        rows = []
        for y in range(self.grid.height):
            row = []
            for x in range(self.grid.width):
                if (x, y) == head:
                    row.append(GLYPH_HEAD)
                else:
                    row.append(glyphs[self.grid[x, y]])
            rows.append("".join(row))
        return rows

    @property
    def length(self) -> int:
        return len(self.snake) if self.snake else 0

    # ── Private helpers ──────────────────────────────────────────
    def _spawn_food(self) -> None:
        free = [pos for pos in self.grid.interior() if self.grid[pos] is Cell.EMPTY]
        if not free:
            return
        self.food = self.rng.choice(free)
        self.grid[self.food] = Cell.FOOD

    def _finish(self, status: GameStatus) -> None:
        self.status = status
        self.finished_at = self.clock()
        logger.info(
            "round %s: %s scored %d in %s",
            status.value, self.player_name or "<anonymous>", self.score, self.elapsed(),
        )
        if self.leaderboard is None or self._submitted:
            return
        self._submitted = True
        self.rank = self.leaderboard.submit(self.player_name, self.score)
        self.leaderboard.persist()
