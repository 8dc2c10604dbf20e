"""
config.py — Shared constants for the entire application.
No logic, no imports from internal modules.
"""

# ── Window & Grid ─────────────────────────────────────────────────
WIDTH, HEIGHT   = 620, 560
PANEL_H         = 60
CELL            = 18
OFFSET_Y        = PANEL_H + 10
FOOTER_H        = 24

# ── Colors ────────────────────────────────────────────────────────
BG          = (10,  10,  15)
GRID_COL    = (15,  20,  32)
SNAKE_COL   = (0,   255, 136)
SNAKE_DIM   = (0,   140, 80)
FOOD_COL    = (255, 228, 77)
WALL_COL    = (26,  26,  62)
UI_COL      = (120, 120, 170)
ACCENT_COL  = (255, 51,  102)
PANEL_BG    = (12,  12,  20)
BORDER_COL  = (26,  26,  62)

# ── Glyphs (render contract) ──────────────────────────────────────
GLYPH_WALL  = "#"
GLYPH_EMPTY = " "
GLYPH_FOOD  = "*"
GLYPH_HEAD  = "@"
GLYPH_BODY  = "o"

# ── Timing ────────────────────────────────────────────────────────
BASE_TICK_SECONDS = 0.3     # Easy moves once per base tick
POLL_INTERVAL     = 0.03    # input poll period in every state
MESSAGE_SECONDS   = 3.0     # transient message lifetime

# ── Gameplay ──────────────────────────────────────────────────────
SCORE_PER_FOOD   = 10
MIN_GRID_SIDE    = 4        # a side of 3 or less leaves no room to play
MAX_NAME_LEN     = 20
LEADERBOARD_SIZE = 10

# (label, width, height, tick factor)
DIFFICULTIES = {
    "easy":   ("EASY",   10, 10, 1.0),
    "normal": ("NORMAL", 15, 15, 0.8),
    "hard":   ("HARD",   20, 20, 0.6),
}

# ── Files ─────────────────────────────────────────────────────────
LEADERBOARD_FILE = "leaderboard.txt"
OPTIONS_FILE     = "options.txt"
LOG_FILE         = "snake.log"
