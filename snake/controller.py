"""
controller.py — Controller layer.

Responsibilities:
  - Own the pygame window and the main loop.
  - Read at most one decoded key per iteration and hand it to the SnakeApp.
  - Ask the view to draw the current Frame, then sleep for the poll interval.
  - Stop cleanly on SIGINT/SIGTERM or a window close, checked every iteration.
  - Know nothing about game rules (the model's and the app's job).

The controller is the only layer that imports pygame for the window.
"""

import logging
import signal
import threading
import time

import pygame

from .app import SnakeApp
from .config import WIDTH, HEIGHT
from .frame import build_frame
from .keys import PygameInput
from .leaderboard import Leaderboard
from .options import OptionsStore
from .view import GameView

logger = logging.getLogger(__name__)


class GameController:
    """
    Owns the main loop.
    Glues SnakeApp <-> GameView without them knowing about each other.
    """

    def __init__(self, app: SnakeApp, input_source, view=None, stop=None, sleep=time.sleep):
        self.app = app
        self.input = input_source
        self.view = view
        self.stop = stop if stop is not None else threading.Event()
        self.sleep = sleep

    @classmethod
    def create(cls, leaderboard_path: str, options_path: str, base_tick: float) -> "GameController":
        """Build the pygame-backed controller used by main.py."""
        pygame.init()
        screen = pygame.display.set_mode((WIDTH, HEIGHT))
        pygame.display.set_caption("SNAKE")
        stop = threading.Event()
        app = SnakeApp(
            Leaderboard(leaderboard_path),
            OptionsStore(options_path),
            base_tick=base_tick,
        )
        return cls(app, PygameInput(stop), view=GameView(screen), stop=stop)

    # ── Public entry point ────────────────────────────────────────
    def run(self) -> int:
        """Run until the player exits or a stop is requested. Returns an exit status."""
        previous = self._install_signal_handlers()
        try:
            while not self.stop.is_set():
                key = self.input.read_key()
                if self.stop.is_set():
                    break
                self.app.handle_key(key)
                self.app.update()
                if not self.app.running:
                    break
                if self.view is not None:
                    self.view.render(build_frame(self.app))
                self.sleep(self.app.poll_interval)
        finally:
            for signum, handler in previous.items():
                if handler is not None:
                    signal.signal(signum, handler)
            self._shutdown()

        if self.app.ctx.fatal:
            logger.critical("fatal: %s", self.app.ctx.fatal)
            return 1
        return 0

    # ── Signals ───────────────────────────────────────────────────
    def _install_signal_handlers(self) -> dict:
        """Route SIGINT/SIGTERM to the stop flag; returns the handlers replaced."""
        if threading.current_thread() is not threading.main_thread():
            return {}
        previous = {}
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous[signum] = signal.signal(signum, self._on_signal)
        return previous

    def _on_signal(self, signum, _frame) -> None:
        logger.info("received signal %d; stopping", signum)
        self.stop.set()

    # ── Utilities ─────────────────────────────────────────────────
    def _shutdown(self) -> None:
        if self.view is not None:
            pygame.quit()
