"""
errors.py — Exceptions raised by the core.

Nothing in here is fatal to the game loop: callers catch these at the
state machine and turn them into a transient on-screen message.
"""


class SnakeError(Exception):
    """Base class for every error the game raises on purpose."""


class ValidationError(SnakeError):
    """Input that the core refuses to act on (e.g. a play-field too small)."""


class StorageUnavailable(SnakeError):
    """A leaderboard or options file could not be read or written."""

    def __init__(self, path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
