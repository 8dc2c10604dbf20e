"""
view.py — View layer.

Draws a Frame with pygame:
  - HUD panel with the frame's header fields
  - Glyph grid as coloured cells (walls, food, snake head and body)
  - Animated pulsing title and centred text lines
  - Transient message strip at the bottom

Public API:
    GameView(screen)    — bind to a pygame surface
    view.render(frame)  — draw one Frame and flip the display
"""

import math
import pygame

from .config import (
    WIDTH, HEIGHT, PANEL_H, CELL, OFFSET_Y, FOOTER_H,
    BG, GRID_COL, SNAKE_COL, SNAKE_DIM, FOOD_COL, WALL_COL,
    UI_COL, ACCENT_COL, PANEL_BG, BORDER_COL,
    GLYPH_WALL, GLYPH_FOOD, GLYPH_HEAD, GLYPH_BODY,
)
from .frame import Frame


# ─────────────────────── colour helpers ──────────────────────────
def _lerp_color(c1: tuple, c2: tuple, t: float) -> tuple:
    t = max(0.0, min(1.0, t))
    return tuple(int(c1[i] + (c2[i] - c1[i]) * t) for i in range(3))


def _with_alpha(color: tuple, alpha: int) -> tuple:
    return (*color[:3], max(0, min(255, alpha)))


def _brighten(color: tuple, factor: float) -> tuple:
    return tuple(min(255, int(c * factor)) for c in color[:3])


_GLYPH_COLORS = {
    GLYPH_WALL: WALL_COL,
    GLYPH_FOOD: FOOD_COL,
    GLYPH_HEAD: SNAKE_COL,
    GLYPH_BODY: SNAKE_DIM,
}


# ─────────────────────────── GameView ────────────────────────────
class GameView:
    """Renders the complete window from a Frame."""

    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        self._init_fonts()
        self._anim_tick: int = 0

    # ── Main entry ───────────────────────────────────────────────
    def render(self, frame: Frame) -> None:
        self._anim_tick += 1
        self.screen.fill(BG)
        self._draw_panel(frame)

        cy = OFFSET_Y + 8
        cy = self._draw_animated_title(frame.title, SNAKE_COL, cy, self.font_title)
        if frame.grid:
            cy = self._draw_grid(frame.grid, cy + 4)
        cy += 6
        for line in frame.lines:
            cy = self._draw_text_line(line, UI_COL, cy, self.font_med)

        if frame.message:
            self._draw_message(frame.message)
        pygame.display.flip()

    # ── Grid ─────────────────────────────────────────────────────
    def _draw_grid(self, rows: tuple[str, ...], top: int) -> int:
        width = max(len(row) for row in rows)
        cell = min(CELL, (HEIGHT - top - FOOTER_H - 60) // max(1, len(rows)))
        left = WIDTH // 2 - (width * cell) // 2

        for y, row in enumerate(rows):
            for x, glyph in enumerate(row):
                rect = pygame.Rect(left + x * cell, top + y * cell, cell, cell)
                color = _GLYPH_COLORS.get(glyph)
                if color is None:
                    pygame.draw.rect(self.screen, GRID_COL, rect, 1)
                elif glyph == GLYPH_FOOD:
                    pulse = 0.70 + 0.30 * math.sin(self._anim_tick * 0.10)
                    r = max(2, int((cell / 2) * pulse))
                    pygame.draw.circle(self.screen, FOOD_COL, rect.center, r)
                elif glyph == GLYPH_HEAD:
                    pygame.draw.rect(self.screen, color, rect,
                                     border_radius=max(1, cell // 2 - 1))
                    hi = pygame.Rect(rect.x + 2, rect.y + 2, max(1, rect.w - 4), max(2, rect.h // 3))
                    pygame.draw.rect(self.screen, _brighten(color, 1.6), hi, border_radius=2)
                else:
                    pygame.draw.rect(self.screen, color, rect.inflate(-2, -2),
                                     border_radius=max(1, cell // 4))
        return top + len(rows) * cell

    # ── HUD Panel ─────────────────────────────────────────────────
    def _draw_panel(self, frame: Frame) -> None:
        pygame.draw.rect(self.screen, PANEL_BG, (0, 0, WIDTH, PANEL_H))
        pygame.draw.line(self.screen, BORDER_COL,
                         (0, PANEL_H - 1), (WIDTH, PANEL_H - 1), 1)
        if not frame.header:
            return

        slot = WIDTH // len(frame.header)
        for i, (label, value) in enumerate(frame.header):
            cx = slot * i + slot // 2
            lab = self.font_small.render(label, True, UI_COL)
            val = self.font_big.render(value, True, SNAKE_COL)
            self.screen.blit(lab, lab.get_rect(center=(cx, 14)))
            self.screen.blit(val, val.get_rect(center=(cx, 38)))

    # ── Text helpers ──────────────────────────────────────────────
    def _draw_animated_title(self, title: str, color: tuple,
                             cy: int, font: pygame.font.Font) -> int:
        pulse = 0.82 + 0.18 * math.sin(self._anim_tick * 0.05)
        bright = _brighten(color, pulse)
        surf = font.render(title, True, bright)
        gw, gh = surf.get_width() + 50, surf.get_height() + 16
        glow = pygame.Surface((gw, gh), pygame.SRCALPHA)
        glow.fill(_with_alpha(color, int(35 * pulse)))
        self.screen.blit(glow, (WIDTH // 2 - gw // 2, cy - 8))
        self.screen.blit(surf, surf.get_rect(center=(WIDTH // 2, cy + surf.get_height() // 2)))
        return cy + surf.get_height() + 14

    def _draw_text_line(self, text: str, color: tuple,
                        cy: int, font: pygame.font.Font) -> int:
        if not text:
            return cy + 10
        if text.startswith(">"):
            color = _lerp_color(color, FOOD_COL, 0.8)
        surf = font.render(text, True, color)
        self.screen.blit(surf, surf.get_rect(center=(WIDTH // 2, cy)))
        return cy + surf.get_height() + 8

    def _draw_message(self, text: str) -> None:
        strip = pygame.Surface((WIDTH, FOOTER_H), pygame.SRCALPHA)
        strip.fill(_with_alpha(ACCENT_COL, 60))
        self.screen.blit(strip, (0, HEIGHT - FOOTER_H))
        surf = self.font_small.render(text, True, _brighten(ACCENT_COL, 1.3))
        self.screen.blit(surf, surf.get_rect(center=(WIDTH // 2, HEIGHT - FOOTER_H // 2)))

    # ── Font init ─────────────────────────────────────────────────
    def _init_fonts(self) -> None:
        specs = [
            ("font_title", "courier", 34, True),
            ("font_big",   "courier", 20, True),
            ("font_med",   "courier", 17, False),
            ("font_small", "courier", 13, True),
        ]
        for attr, name, size, bold in specs:
            try:
                setattr(self, attr, pygame.font.SysFont(name, size, bold=bold))
            except (pygame.error, OSError):
                setattr(self, attr, pygame.font.SysFont(None, size))
