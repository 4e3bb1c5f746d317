from __future__ import annotations

import time

import pygame

from settings import WINDOW_WIDTH, WINDOW_HEIGHT


class HUDRenderer:
    """Draws the countdown bar, score panel and round-over overlay.

    It reads needed state from the passed-in game instance to avoid tight coupling.
    """

    BAR_HEIGHT = 28

    def __init__(self, game):
        self.g = game

    def draw(self):
        self.g.display_surface.fill((18, 18, 24))
        self.draw_countdown()
        self.draw_scores()
        self.draw_controls()
        if self.g.state.round_over:
            self.draw_round_over()

    def draw_countdown(self):
        g = self.g
        st = g.state
        if st.window is None or st.deadline is None:
            return
        total = st.window.total_seconds
        remaining = max(0.0, st.deadline - time.monotonic())
        frac = (remaining / total) if total > 0 else 0.0

        bar_w = WINDOW_WIDTH - 80
        x = 40
        y = WINDOW_HEIGHT // 2 - self.BAR_HEIGHT // 2
        pygame.draw.rect(g.display_surface, (60, 60, 70), (x, y, bar_w, self.BAR_HEIGHT), border_radius=6)
        if st.answered:
            color = (90, 90, 100)
        elif frac > 0.25:
            color = (60, 180, 90)
        else:
            color = (220, 80, 60)
        fill_w = int(bar_w * frac)
        if fill_w > 0:
            pygame.draw.rect(g.display_surface, color, (x, y, fill_w, self.BAR_HEIGHT), border_radius=6)

        label = g.font.render(f"window {st.window}s  left {remaining:0.3f}s", True, (230, 230, 230))
        g.display_surface.blit(label, (x, y - label.get_height() - 8))

    def draw_scores(self):
        g = self.g
        text = f"score {g.state.score}   best {g.state.max_score}   rounds {g.state.rounds}"
        surf = g.large_font.render(text, True, (240, 220, 160))
        g.display_surface.blit(surf, ((WINDOW_WIDTH - surf.get_width()) // 2, 24))

    def draw_controls(self):
        g = self.g
        hint = "SPACE answer   R reconnect   ESC quit"
        if g.bot:
            hint = "bot playing   " + hint
        surf = g.font.render(hint, True, (150, 150, 160))
        g.display_surface.blit(surf, ((WINDOW_WIDTH - surf.get_width()) // 2, WINDOW_HEIGHT - surf.get_height() - 16))

    def draw_round_over(self):
        g = self.g
        overlay = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 160))
        g.display_surface.blit(overlay, (0, 0))
        msg = g.large_font.render(f"Round over at {g.state.score}", True, (255, 255, 255))
        g.display_surface.blit(msg, ((WINDOW_WIDTH - msg.get_width()) // 2, (WINDOW_HEIGHT - msg.get_height()) // 2))
