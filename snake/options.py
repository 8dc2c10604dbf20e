"""
options.py — Game options and their flat-file store.

File format, one setting per line:

    snake_can_cut_itself = false
    snake_can_pass_border = true

Unknown keys and unparsable lines are skipped; anything missing keeps
its default. The file is recreated on the first save.
"""

import logging
from dataclasses import dataclass, fields

from .errors import StorageUnavailable
from .storage import write_replace

logger = logging.getLogger(__name__)

_TRUE_TOKENS  = {"true", "yes", "on", "1"}
_FALSE_TOKENS = {"false", "no", "off", "0"}


@dataclass
class GameOptions:
    """Rule switches the player can flip from the Options menu."""
    snake_can_cut_itself: bool = False
    snake_can_pass_border: bool = False


def parse_bool(token: str) -> bool:
    value = token.strip().lower()
    if value in _TRUE_TOKENS:
        return True
    if value in _FALSE_TOKENS:
        return False
    raise ValueError(f"not a boolean: {token!r}")


def parse_options(text: str) -> GameOptions:
    options = GameOptions()
    known = {f.name for f in fields(GameOptions)}
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or key not in known:
            logger.debug("options line %d ignored: %r", lineno, line)
            continue
        try:
            setattr(options, key, parse_bool(value))
        except ValueError:
            logger.warning("options line %d has a bad value: %r", lineno, line)
    return options


def format_options(options: GameOptions) -> str:
    return "\n".join(
        f"{f.name} = {'true' if getattr(options, f.name) else 'false'}"
        for f in fields(GameOptions)
    )


class OptionsStore:
    """Loads the options file once per process and writes it back on demand."""

    def __init__(self, path: str):
        self.path = path
        self._options: GameOptions | None = None

    def load(self) -> GameOptions:
        if self._options is not None:
            return self._options

        self._options = GameOptions()
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                text = fh.read()
        except FileNotFoundError:
            logger.debug("no options file at %s; using defaults", self.path)
            return self._options
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("could not read options from %s: %s", self.path, exc)
            raise StorageUnavailable(self.path, "options unreadable; using defaults") from exc

        self._options = parse_options(text)
        return self._options

    def save(self, options: GameOptions) -> None:
        self._options = options
        try:
            write_replace(self.path, format_options(options))
        except OSError as exc:
            logger.warning("could not save options to %s: %s", self.path, exc)
            raise StorageUnavailable(self.path, "options not saved") from exc
        logger.debug("options saved to %s: %s", self.path, options)
