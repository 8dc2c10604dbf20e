"""
storage.py — Whole-file writes shared by the leaderboard and options stores.
"""

import os
import tempfile


def write_replace(path: str, text: str) -> None:
    """Rewrite `path` in one step so an interrupted write never leaves half a file."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
