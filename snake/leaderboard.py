"""
leaderboard.py — Persistent top-10 ranking.

File format: one `<name> <score>` per line, best first, no newline after
the last entry. A missing file is an empty leaderboard; a broken one is
reported once and then treated as empty.
"""

import logging

from .config import LEADERBOARD_SIZE, MAX_NAME_LEN
from .errors import StorageUnavailable, ValidationError
from .storage import write_replace

logger = logging.getLogger(__name__)


class LeaderboardEntry:
    """One finished round: who played and what they scored."""

    __slots__ = ("name", "score")

    def __init__(self, name: str, score: int):
        self.name = name
        self.score = score

    def __eq__(self, other):
        return (
            isinstance(other, LeaderboardEntry)
            and self.name == other.name
            and self.score == other.score
        )

    def __repr__(self):
        return f"LeaderboardEntry({self.name!r}, {self.score})"


def parse_line(line: str) -> LeaderboardEntry:
    parts = line.split()
    if len(parts) != 2:
        raise ValueError(f"expected '<name> <score>', got {line!r}")
    name, score = parts
    return LeaderboardEntry(name[:MAX_NAME_LEN], int(score))


class Leaderboard:
    """
    Descending-by-score list of at most `capacity` entries, backed by a file.

    Equal scores keep insertion order: a new entry goes after every
    existing entry with the same score.
    """

    def __init__(self, path: str, capacity: int = LEADERBOARD_SIZE):
        self.path = path
        self.capacity = capacity
        self._entries: list[LeaderboardEntry] = []
        self._loaded = False

    # ── Accessors ────────────────────────────────────────────────
    def as_sequence(self) -> tuple[LeaderboardEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    # ── Commands ─────────────────────────────────────────────────
    def load(self) -> tuple[LeaderboardEntry, ...]:
        """
        Read the file the first time only; later calls return what is in
        memory. Raises StorageUnavailable once if the file is unreadable or
        malformed, leaving the board empty.
        """
        if self._loaded:
            return self.as_sequence()
        self._loaded = True
        self._entries = []

        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                entries = []
                for line in fh:
                    if not line.strip():
                        continue
                    entries.append(parse_line(line))
                    if len(entries) == self.capacity:
                        break
        except FileNotFoundError:
            logger.debug("no leaderboard at %s; starting empty", self.path)
            return self.as_sequence()
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            logger.warning("leaderboard %s unusable: %s", self.path, exc)
            raise StorageUnavailable(self.path, "leaderboard unreadable") from exc

        # sorted() is stable, so a hand-edited file keeps its tie order
        self._entries = sorted(entries, key=lambda e: e.score, reverse=True)
        logger.debug("loaded %d leaderboard entries", len(self._entries))
        return self.as_sequence()

    def submit(self, name: str, score: int) -> int:
        """
        Insert a result and evict the lowest entry on overflow.
        Returns the zero-based rank, or -1 if the entry was evicted at once.
        """
        if not name or any(ch.isspace() for ch in name):
            raise ValidationError(f"leaderboard names need at least one character and no spaces: {name!r}")
        if not self._loaded:
            try:
                self.load()
            except StorageUnavailable:
                # a broken file is replaced by the next persist()
                pass

        entry = LeaderboardEntry(name[:MAX_NAME_LEN], score)
        index = len(self._entries)
        for i, existing in enumerate(self._entries):
            if existing.score < score:
                index = i
                break
        self._entries.insert(index, entry)

        if len(self._entries) > self.capacity:
            evicted = self._entries.pop()
            logger.debug("evicted %r from leaderboard", evicted)
            if evicted is entry:
                return -1
        return index

    def persist(self) -> None:
        text = "\n".join(f"{e.name} {e.score}" for e in self._entries)
        try:
            write_replace(self.path, text)
        except OSError as exc:
            logger.warning("could not write leaderboard %s: %s", self.path, exc)
            raise StorageUnavailable(self.path, "leaderboard not saved") from exc
