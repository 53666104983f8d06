"""Heads-up display: score, multiplier and high score, plus the game-over overlay."""

from __future__ import annotations

import pygame

from lanefall.models import GameState
from lanefall.renderer.colors import GAME_OVER, HUD_TEXT


def render_hud(surface: pygame.Surface, state: GameState, scale: int = 1) -> None:
    font = pygame.font.SysFont("monospace", 10 * scale)

    lines = [
        f"Score: {state.score}",
        f"Multiplier: {state.multiplier:.1f}x",
        f"High: {state.high_score}",
    ]

    y = 6 * scale
    for line in lines:
        text = font.render(line, True, HUD_TEXT)
        surface.blit(text, (6 * scale, y))
        y += 13 * scale


def render_game_over(surface: pygame.Surface, state: GameState | None, scale: int = 1) -> None:
    font = pygame.font.SysFont("monospace", 18 * scale, bold=True)
    text = font.render("Game Over", True, GAME_OVER)
    w, h = surface.get_size()
    surface.blit(text, ((w - text.get_width()) // 2, h // 2 - text.get_height()))
    if state is not None:
        small = pygame.font.SysFont("monospace", 10 * scale)
        final = small.render(f"Final score {state.score}", True, HUD_TEXT)
        surface.blit(final, ((w - final.get_width()) // 2, h // 2 + 4 * scale))
