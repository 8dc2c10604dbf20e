"""
keys.py — Input boundary.

Raw pygame key events are decoded here into one symbolic value per
key-press. Game logic downstream only ever sees:

    Key     — closed enumeration for the non-printing keys
    str     — a single ASCII letter or digit, case preserved

Anything else is dropped before it reaches the state machine.
"""

import logging
import string
from collections import deque
from enum import Enum

import pygame

logger = logging.getLogger(__name__)

PRINTABLE = frozenset(string.ascii_letters + string.digits)


class Key(Enum):
    UP        = "up"
    DOWN      = "down"
    LEFT      = "left"
    RIGHT     = "right"
    ENTER     = "enter"
    ESCAPE    = "escape"
    SPACE     = "space"
    BACKSPACE = "backspace"


_SPECIAL_KEYS = {
    pygame.K_UP:        Key.UP,
    pygame.K_DOWN:      Key.DOWN,
    pygame.K_LEFT:      Key.LEFT,
    pygame.K_RIGHT:     Key.RIGHT,
    pygame.K_RETURN:    Key.ENTER,
    pygame.K_KP_ENTER:  Key.ENTER,
    pygame.K_ESCAPE:    Key.ESCAPE,
    pygame.K_SPACE:     Key.SPACE,
    pygame.K_BACKSPACE: Key.BACKSPACE,
}


def decode_key(keycode: int, text: str = "") -> Key | str | None:
    """
    Map a pygame keycode (plus the text it produced) to a key value.
    Returns None for keys the game has no use for.
    """
    special = _SPECIAL_KEYS.get(keycode)
    if special is not None:
        return special
    if len(text) == 1 and text in PRINTABLE:
        return text
    return None


class PygameInput:
    """
    Non-blocking key source backed by the pygame event queue.

    A window close request sets `stop` instead of being returned as a key.
    Several key-presses arriving in one frame are buffered and handed out
    one per call.
    """

    def __init__(self, stop):
        self.stop = stop
        self._pending: deque = deque()

    def read_key(self) -> Key | str | None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logger.info("window closed; stopping")
                self.stop.set()
            elif event.type == pygame.KEYDOWN:
                decoded = decode_key(event.key, getattr(event, "unicode", ""))
                if decoded is not None:
                    self._pending.append(decoded)
        if self._pending:
            return self._pending.popleft()
        return None
