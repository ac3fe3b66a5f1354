from __future__ import annotations

from typing import Optional, Tuple

import pygame

from number_stack_rl.game import GameMode, SessionState


Color = Tuple[int, int, int]

BACKGROUND: Color = (15, 16, 26)
EMPTY: Color = (30, 32, 46)
TILE: Color = (60, 64, 90)
SELECTED: Color = (122, 162, 247)
DANGER: Color = (247, 118, 142)
TEXT: Color = (230, 230, 240)
MUTED: Color = (130, 134, 160)
SUCCESS: Color = (158, 206, 106)
WARNING: Color = (224, 175, 104)


def _sum_color(current: int, target: int) -> Color:
    if current > target:
        return DANGER
    if current == target:
        return SUCCESS
    return TEXT


class Renderer:
    """Draws a ``SessionState`` snapshot. Holds layout only, no game rules."""

    def __init__(self, rows: int, cols: int, cell_size: int = 56, margin: int = 20, header: int = 70,
                 panel_width: int = 200) -> None:
        self.rows = rows
        self.cols = cols
        self.cell_size = cell_size
        self.margin = margin
        self.header = header
        self.panel_width = panel_width
        self._fonts: dict = {}

    @property
    def size(self) -> Tuple[int, int]:
        width = self.margin * 3 + self.cols * self.cell_size + self.panel_width
        height = self.margin * 2 + self.header + self.rows * self.cell_size
        return width, height

    def _font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            self._fonts[size] = pygame.font.SysFont(None, size)
        return self._fonts[size]

    def _board_origin(self) -> Tuple[int, int]:
        return self.margin, self.margin + self.header

    def cell_at(self, pixel: Tuple[int, int]) -> Optional[Tuple[int, int]]:
        """Map a screen pixel to a ``(row, col)`` cell, or None outside the board."""
        x0, y0 = self._board_origin()
        px, py = pixel
        if px < x0 or py < y0:
            return None
        row = (py - y0) // self.cell_size
        col = (px - x0) // self.cell_size
        if row >= self.rows or col >= self.cols:
            return None
        return int(row), int(col)

    def _draw_text(self, screen: pygame.Surface, text: str, pos: Tuple[int, int], size: int = 24,
                   color: Color = TEXT, center: bool = False) -> None:
        img = self._font(size).render(text, True, color)
        rect = img.get_rect(center=pos) if center else img.get_rect(topleft=pos)
        screen.blit(img, rect)

    def _draw_board(self, screen: pygame.Surface, state: SessionState) -> None:
        x0, y0 = self._board_origin()
        grid = state.grid
        danger = set(state.danger_cells())
        for r in range(grid.rows):
            for c in range(grid.cols):
                rect = pygame.Rect(x0 + c * self.cell_size, y0 + r * self.cell_size,
                                   self.cell_size - 4, self.cell_size - 4)
                tile = grid.cell(r, c)
                if tile is None:
                    pygame.draw.rect(screen, EMPTY, rect, border_radius=8)
                    continue
                color = SELECTED if state.is_selected((r, c)) else TILE
                pygame.draw.rect(screen, color, rect, border_radius=8)
                if (r, c) in danger:
                    pygame.draw.rect(screen, DANGER, rect, 2, border_radius=8)
                self._draw_text(screen, str(tile.value), rect.center, size=34, center=True)

    def _draw_header(self, screen: pygame.Surface, state: SessionState) -> None:
        x0 = self.margin
        self._draw_text(screen, "TARGET", (x0, self.margin), size=18, color=MUTED)
        self._draw_text(screen, str(state.target), (x0, self.margin + 18), size=44, color=SELECTED)
        self._draw_text(screen, "CURRENT", (x0 + 120, self.margin), size=18, color=MUTED)
        current = state.current_sum
        self._draw_text(screen, str(current), (x0 + 120, self.margin + 18), size=44,
                        color=_sum_color(current, state.target))

    def _draw_panel(self, screen: pygame.Surface, state: SessionState) -> None:
        x0 = self.margin * 2 + self.cols * self.cell_size
        y = self.margin + self.header
        lines = [
            ("SCORE", f"{state.score:,}", WARNING),
            ("LEVEL", str(state.level), TEXT),
            ("MODE", state.mode.value, TEXT),
        ]
        if state.mode is GameMode.TIMED:
            lines.append(("NEXT ROW", f"{state.time_left}s", DANGER if state.time_left <= 3 else TEXT))
        for label, value, color in lines:
            self._draw_text(screen, label, (x0, y), size=18, color=MUTED)
            self._draw_text(screen, value, (x0, y + 18), size=32, color=color)
            y += 64
        for hint in ("Click: select", "P: pause", "R: restart", "M: menu", "Esc: quit"):
            self._draw_text(screen, hint, (x0, y), size=20, color=MUTED)
            y += 22

    def _draw_overlay(self, screen: pygame.Surface, title: str, subtitle: str, color: Color) -> None:
        shade = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        shade.fill((10, 10, 16, 200))
        screen.blit(shade, (0, 0))
        cx, cy = screen.get_width() // 2, screen.get_height() // 2
        self._draw_text(screen, title, (cx, cy - 20), size=56, color=color, center=True)
        self._draw_text(screen, subtitle, (cx, cy + 30), size=24, center=True)

    def draw(self, screen: pygame.Surface, state: SessionState) -> None:
        screen.fill(BACKGROUND)
        self._draw_header(screen, state)
        self._draw_board(screen, state)
        self._draw_panel(screen, state)
        if state.game_over:
            self._draw_overlay(screen, "GAME OVER", f"Final score {state.score} - R to retry, M for menu", DANGER)
        elif state.paused:
            self._draw_overlay(screen, "PAUSED", "Press P to resume", TEXT)
        pygame.display.flip()

    def draw_menu(self, screen: pygame.Surface, tick_seconds: int) -> None:
        screen.fill(BACKGROUND)
        cx = screen.get_width() // 2
        self._draw_text(screen, "NUMBER STACK", (cx, 120), size=64, color=SELECTED, center=True)
        self._draw_text(screen, "Pick tiles that add up to the target.", (cx, 180), size=24, center=True)
        self._draw_text(screen, "1  Classic: a new row after every clear", (cx, 260), size=28, center=True)
        self._draw_text(screen, f"2  Timed: a new row every {tick_seconds}s", (cx, 300), size=28, center=True)
        self._draw_text(screen, "Esc  Quit", (cx, 360), size=22, color=MUTED, center=True)
        pygame.display.flip()
