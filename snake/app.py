"""
app.py — Application state machine.

Responsibilities:
  - Own every piece of per-process state in one AppContext.
  - Turn decoded keys into transitions between the six screens.
  - Drive the SnakeEngine: create it per round, step it on game ticks.
  - Load/save options and read the leaderboard at the right moments.
  - Know nothing about pygame, windows or sleeping (the controller's job).

Storage and validation problems never leave this module as exceptions;
they become a short message on screen and the game carries on.
"""

import logging
import time
from enum import Enum

from .config import BASE_TICK_SECONDS, MAX_NAME_LEN, MESSAGE_SECONDS, POLL_INTERVAL
from .errors import StorageUnavailable, ValidationError
from .keys import Key
from .model import Difficulty, Direction, GameStatus, SnakeEngine

logger = logging.getLogger(__name__)


class AppState(Enum):
    MAIN_MENU        = "main_menu"
    ENTER_NAME       = "enter_name"
    ENTER_DIFFICULTY = "enter_difficulty"
    OPTIONS          = "options"
    SNAKE_GAME       = "snake_game"
    SCOREBOARD       = "scoreboard"


class MenuItem(Enum):
    NEW_GAME   = "New Game"
    OPTIONS    = "Options"
    SCOREBOARD = "Scoreboard"
    EXIT       = "Exit"


class OptionItem(Enum):
    CUT_ITSELF  = "Snake can cut itself"
    PASS_BORDER = "Snake can pass border"
    BACK        = "Back"


MENU_ITEMS   = list(MenuItem)
OPTION_ITEMS = list(OptionItem)

DIRECTION_KEYS = {
    Key.UP: Direction.UP, Key.LEFT: Direction.LEFT,
    Key.DOWN: Direction.DOWN, Key.RIGHT: Direction.RIGHT,
    "w": Direction.UP, "a": Direction.LEFT, "s": Direction.DOWN, "d": Direction.RIGHT,
    "W": Direction.UP, "A": Direction.LEFT, "S": Direction.DOWN, "D": Direction.RIGHT,
}

MENU_UP   = (Key.UP, "w", "W")
MENU_DOWN = (Key.DOWN, "s", "S")


class PlayerSession:
    """The name being played under and the score it has reached. The game HUD reads both."""

    def __init__(self, name: str):
        self.name = name
        self.score = 0


class AppContext:
    """All mutable application state, reset on well-defined transitions."""

    def __init__(self):
        self.state: AppState = AppState.MAIN_MENU
        self.running: bool = True
        self.fatal: str | None = None

        self.menu_index: int = 0
        self.options_index: int = 0
        self.options_dirty: bool = False

        self.name: str = ""
        self.session: PlayerSession | None = None
        self.difficulty = None
        self.engine: SnakeEngine | None = None
        self.last_step: float = 0.0

        self.message: str | None = None
        self.message_until: float = 0.0


class SnakeApp:
    """
    Top-level controller of the game's screens.
    The main loop calls handle_key() for each key, then update() once per poll.
    """

    def __init__(
        self,
        leaderboard,
        options_store,
        clock=time.monotonic,
        rng=None,
        base_tick: float = BASE_TICK_SECONDS,
    ):
        self.leaderboard = leaderboard
        self.options_store = options_store
        self.clock = clock
        self.rng = rng
        self.base_tick = base_tick
        self.ctx = AppContext()
        self._handlers = {
            AppState.MAIN_MENU:        self._handle_main_menu,
            AppState.ENTER_NAME:       self._handle_enter_name,
            AppState.ENTER_DIFFICULTY: self._handle_enter_difficulty,
            AppState.OPTIONS:          self._handle_options,
            AppState.SNAKE_GAME:       self._handle_snake_game,
            AppState.SCOREBOARD:       self._handle_scoreboard,
        }

    # ── Accessors ────────────────────────────────────────────────
    @property
    def state(self) -> AppState:
        return self.ctx.state

    @property
    def running(self) -> bool:
        return self.ctx.running

    @property
    def poll_interval(self) -> float:
        return POLL_INTERVAL

    @property
    def options(self):
        """Game options, read from disk on first access."""
        return self._load_options()

    def _load_options(self):
        try:
            return self.options_store.load()
        except StorageUnavailable as exc:
            self._flash(f"Options unavailable: {exc.reason}")
            return self.options_store.load()

    @property
    def message(self) -> str | None:
        if self.ctx.message and self.clock() < self.ctx.message_until:
            return self.ctx.message
        return None

    # ── Main loop hooks ──────────────────────────────────────────
    def handle_key(self, key) -> None:
        if key is None or not self.ctx.running:
            return
        self._handlers[self.ctx.state](key)

    def update(self) -> None:
        if self.ctx.message and self.clock() >= self.ctx.message_until:
            self.ctx.message = None
        if self.ctx.state is AppState.SNAKE_GAME and self.ctx.running:
            self._update_game()

    def start_game(self, difficulty) -> None:
        """Enter the game screen with a fresh, uninitialized engine."""
        ctx = self.ctx
        ctx.difficulty = difficulty
        ctx.engine = SnakeEngine(
            self.options,
            leaderboard=self.leaderboard,
            player_name=ctx.name,
            rng=self.rng,
            clock=self.clock,
        )
        if ctx.session is not None:
            ctx.session.score = 0
        self._set_state(AppState.SNAKE_GAME)

    # ── Per-state key handlers ────────────────────────────────────
    def _handle_main_menu(self, key) -> None:
        ctx = self.ctx
        if key in MENU_UP:
            ctx.menu_index = (ctx.menu_index - 1) % len(MENU_ITEMS)
        elif key in MENU_DOWN:
            ctx.menu_index = (ctx.menu_index + 1) % len(MENU_ITEMS)
        elif key is Key.ENTER:
            item = MENU_ITEMS[ctx.menu_index]
            if item is MenuItem.NEW_GAME:
                self._set_state(AppState.ENTER_NAME)
            elif item is MenuItem.OPTIONS:
                self._enter_options()
            elif item is MenuItem.SCOREBOARD:
                self._enter_scoreboard()
            elif item is MenuItem.EXIT:
                logger.info("exit selected")
                ctx.running = False

    def _handle_enter_name(self, key) -> None:
        ctx = self.ctx
        if key is Key.ESCAPE:
            self._go_main_menu()
        elif key is Key.BACKSPACE:
            ctx.name = ctx.name[:-1]
        elif key is Key.ENTER:
            if ctx.name:
                ctx.session = PlayerSession(ctx.name)
                self._set_state(AppState.ENTER_DIFFICULTY)
        elif isinstance(key, str) and key.isascii() and key.isalpha():
            if len(ctx.name) < MAX_NAME_LEN:
                ctx.name += key

    def _handle_enter_difficulty(self, key) -> None:
        if key is Key.ESCAPE:
            self._go_main_menu()
        elif isinstance(key, str):
            difficulty = Difficulty.from_digit(key)
            if difficulty is not None:
                self.start_game(difficulty)

    def _handle_options(self, key) -> None:
        ctx = self.ctx
        if key is Key.UP:
            ctx.options_index = (ctx.options_index - 1) % len(OPTION_ITEMS)
        elif key is Key.DOWN:
            ctx.options_index = (ctx.options_index + 1) % len(OPTION_ITEMS)
        elif key is Key.SPACE:
            item = OPTION_ITEMS[ctx.options_index]
            options = self.options
            if item is OptionItem.CUT_ITSELF:
                options.snake_can_cut_itself = not options.snake_can_cut_itself
                ctx.options_dirty = True
            elif item is OptionItem.PASS_BORDER:
                options.snake_can_pass_border = not options.snake_can_pass_border
                ctx.options_dirty = True
        elif key is Key.ENTER:
            if OPTION_ITEMS[ctx.options_index] is OptionItem.BACK:
                self._leave_options()
        elif key is Key.ESCAPE:
            self._leave_options()

    def _handle_snake_game(self, key) -> None:
        engine = self.ctx.engine
        if key is Key.ESCAPE:
            if engine is not None and engine.status is GameStatus.ONGOING:
                logger.info("round aborted by player")
            self._go_main_menu()
            return
        if engine is None:
            return

        if engine.status is GameStatus.ONGOING:
            direction = DIRECTION_KEYS.get(key)
            if direction is not None:
                engine.set_pending_direction(direction)
        elif engine.status is GameStatus.LOST:
            if key is Key.ENTER:
                self.start_game(self.ctx.difficulty)
            elif key is Key.SPACE:
                self.ctx.engine = None
                self._set_state(AppState.ENTER_DIFFICULTY)

    def _handle_scoreboard(self, key) -> None:
        if key is Key.ESCAPE:
            self._go_main_menu()

    # ── Game driving ─────────────────────────────────────────────
    def _update_game(self) -> None:
        ctx = self.ctx
        engine = ctx.engine
        if engine is None:
            return

        if engine.status is GameStatus.NOT_INITIALIZED:
            try:
                engine.initialize(ctx.difficulty)
            except ValidationError as exc:
                logger.warning("cannot start round: %s", exc)
                self._flash(str(exc))
                ctx.engine = None
                self._set_state(AppState.ENTER_DIFFICULTY)
                return
            except MemoryError:
                logger.critical("out of memory allocating the play-field")
                ctx.fatal = "could not allocate the play-field"
                ctx.running = False
                return

        if engine.status is GameStatus.CAN_BEGIN:
            engine.start()
            ctx.last_step = self.clock()
            return

        if engine.status is not GameStatus.ONGOING:
            return

        now = self.clock()
        if now - ctx.last_step < ctx.difficulty.tick_seconds(self.base_tick):
            return
        ctx.last_step = now
        try:
            engine.tick()
        except StorageUnavailable as exc:
            self._flash(f"Score not saved: {exc.reason}")
        if ctx.session is not None:
            ctx.session.score = engine.score

    # ── Transitions ──────────────────────────────────────────────
    def _set_state(self, state: AppState) -> None:
        logger.debug("state %s -> %s", self.ctx.state.value, state.value)
        self.ctx.state = state

    def _go_main_menu(self) -> None:
        ctx = self.ctx
        ctx.name = ""
        ctx.session = None
        ctx.engine = None
        ctx.difficulty = None
        self._set_state(AppState.MAIN_MENU)

    def _enter_options(self) -> None:
        self.ctx.options_index = 0
        self.ctx.options_dirty = False
        self._load_options()
        self._set_state(AppState.OPTIONS)

    def _leave_options(self) -> None:
        if self.ctx.options_dirty:
            try:
                self.options_store.save(self.options)
            except StorageUnavailable as exc:
                self._flash(f"Options not saved: {exc.reason}")
            self.ctx.options_dirty = False
        self._go_main_menu()

    def _enter_scoreboard(self) -> None:
        try:
            self.leaderboard.load()
        except StorageUnavailable as exc:
            self._flash(f"Scoreboard unavailable: {exc.reason}")
        self._set_state(AppState.SCOREBOARD)

    def _flash(self, text: str) -> None:
        self.ctx.message = text
        self.ctx.message_until = self.clock() + MESSAGE_SECONDS
