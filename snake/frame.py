"""
frame.py — What each screen shows, independent of how it is drawn.

build_frame() turns the state machine into a Frame: a title, header
fields, text lines, an optional glyph grid and a transient message.
Any Display that can print text and coloured cells can draw it.
"""

from typing import NamedTuple

from .app import AppState, MENU_ITEMS, OPTION_ITEMS, OptionItem
from .config import MAX_NAME_LEN
from .model import Difficulty, GameStatus


class Frame(NamedTuple):
    title: str
    header: tuple[tuple[str, str], ...] = ()
    lines: tuple[str, ...] = ()
    grid: tuple[str, ...] = ()
    message: str | None = None


def _menu_lines(labels, selected: int) -> tuple[str, ...]:
    return tuple(
        f"> {label} <" if i == selected else f"  {label}  "
        for i, label in enumerate(labels)
    )


def build_frame(app) -> Frame:
    builder = _BUILDERS[app.ctx.state]
    return builder(app)._replace(message=app.message)


def _main_menu(app) -> Frame:
    return Frame(
        title="SNAKE",
        lines=_menu_lines([item.value for item in MENU_ITEMS], app.ctx.menu_index)
        + ("", "UP/DOWN TO MOVE  ENTER TO SELECT"),
    )


def _enter_name(app) -> Frame:
    name = app.ctx.name
    return Frame(
        title="ENTER YOUR NAME",
        lines=(
            f"{name}_",
            f"{len(name)}/{MAX_NAME_LEN} LETTERS",
            "",
            "ENTER TO CONTINUE  ESC TO CANCEL",
        ),
    )


def _enter_difficulty(app) -> Frame:
    choices = tuple(
        f"{digit}  {difficulty.label}  ({difficulty.width}x{difficulty.height})"
        for digit, difficulty in zip("012", Difficulty)
    )
    return Frame(
        title="CHOOSE DIFFICULTY",
        header=(("PLAYER", app.ctx.name),),
        lines=choices + ("", "ESC TO CANCEL"),
    )


def _options(app) -> Frame:
    options = app.options
    flags = {
        OptionItem.CUT_ITSELF: options.snake_can_cut_itself,
        OptionItem.PASS_BORDER: options.snake_can_pass_border,
    }
    labels = []
    for item in OPTION_ITEMS:
        if item in flags:
            labels.append(f"[{'X' if flags[item] else ' '}] {item.value}")
        else:
            labels.append(item.value)
    return Frame(
        title="OPTIONS",
        lines=_menu_lines(labels, app.ctx.options_index)
        + ("", "SPACE TO TOGGLE  ENTER ON BACK  ESC TO LEAVE"),
    )


def _snake_game(app) -> Frame:
    ctx = app.ctx
    engine = ctx.engine
    if engine is None or engine.status in (GameStatus.NOT_INITIALIZED, GameStatus.CAN_BEGIN):
        return Frame(title="GET READY")

    session = ctx.session
    header = (
        ("DIFFICULTY", ctx.difficulty.label),
        ("SCORE", str(session.score if session else engine.score)),
        ("PLAYER", session.name if session else engine.player_name),
        ("TIME", str(engine.elapsed())),
    )
    if engine.status is GameStatus.WON:
        title = "YOU WIN!"
        lines = ("ESC FOR MENU",)
    elif engine.status is GameStatus.LOST:
        title = "GAME OVER"
        lines = ("ENTER TO RETRY  SPACE FOR DIFFICULTY  ESC FOR MENU",)
    else:
        title = "SNAKE"
        lines = ()
    if engine.status.finished and engine.score > 0 and engine.rank is not None and engine.rank >= 0:
        lines = (f"NEW HIGH SCORE  #{engine.rank + 1}",) + lines
    return Frame(title=title, header=header, lines=lines, grid=tuple(engine.rows()))


def _scoreboard(app) -> Frame:
    entries = app.leaderboard.as_sequence()
    if entries:
        lines = tuple(
            f"{i:>2}. {entry.name:<{MAX_NAME_LEN}} {entry.score:>6}"
            for i, entry in enumerate(entries, start=1)
        )
    else:
        lines = ("NO SCORES YET",)
    return Frame(title="SCOREBOARD", lines=lines + ("", "ESC FOR MENU"))


_BUILDERS = {
    AppState.MAIN_MENU:        _main_menu,
    AppState.ENTER_NAME:       _enter_name,
    AppState.ENTER_DIFFICULTY: _enter_difficulty,
    AppState.OPTIONS:          _options,
    AppState.SNAKE_GAME:       _snake_game,
    AppState.SCOREBOARD:       _scoreboard,
}
