from __future__ import annotations

import pygame


class InputHandler:
    """Maps pygame events to client actions.

    Delegates to the Game instance for state and helper methods.
    """

    def __init__(self, game):
        self.g = game

    def handle_event(self, event):
        g = self.g
        if event.type == pygame.QUIT:
            g.running = False
            return
        if event.type != pygame.KEYDOWN:
            return
        if event.key == pygame.K_ESCAPE:
            g.running = False
        elif event.key == pygame.K_SPACE:
            if g.state.round_over:
                return
            g.answer()
        elif event.key == pygame.K_r:
            # only meaningful once the server has ended our round
            if g.state.round_over:
                g.reconnect()
