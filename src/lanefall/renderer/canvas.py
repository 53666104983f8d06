"""Lane canvas: a pygame RenderGateway holding the positioned note shapes."""

from __future__ import annotations

from typing import Any

import pygame

from lanefall.config import CANVAS_HEIGHT, CANVAS_WIDTH, HIT_LINE_Y
from lanefall.models import Column, GameState, Shape, columns
from lanefall.renderer.colors import BG, HIT_LINE, LANE_COLORS, LANE_LINE
from lanefall.renderer.hud import render_game_over, render_hud


class CanvasRenderer:
    """Keeps a z-ordered shape table and draws it, scaled, every frame."""

    def __init__(self, scale: int = 1) -> None:
        self.scale = scale
        self._shapes: dict[str, Shape] = {}
        self._order: list[str] = []
        self._state = GameState()
        self._summary: GameState | None = None
        self.indicator_visible = False
        self._columns: list[Column] = columns()

    # RenderGateway

    def set_indicator(self, visible: bool) -> None:
        self.indicator_visible = visible

    def show_summary(self, state: GameState) -> None:
        self._summary = state

    def add_shape(self, shape_id: str, shape: Shape, behind: str | None = None) -> None:
        if shape_id in self._shapes:
            self._order.remove(shape_id)
        self._shapes[shape_id] = shape
        if behind is not None and behind in self._order:
            self._order.insert(self._order.index(behind), shape_id)
        else:
            self._order.append(shape_id)

    def update_shape(self, shape_id: str, **attrs: Any) -> None:
        shape = self._shapes.get(shape_id)
        if shape is None:
            return
        for key, val in attrs.items():
            if hasattr(shape, key):
                setattr(shape, key, val)

    def remove_shape(self, shape_id: str) -> None:
        if self._shapes.pop(shape_id, None) is not None:
            self._order.remove(shape_id)

    def update_scores(self, state: GameState) -> None:
        self._state = state

    # Drawing

    @property
    def size(self) -> tuple[int, int]:
        return CANVAS_WIDTH * self.scale, CANVAS_HEIGHT * self.scale

    def draw(self, surface: pygame.Surface) -> None:
        s = self.scale
        surface.fill(BG)

        for column in self._columns:
            x = int(column.x_fraction * CANVAS_WIDTH * s)
            pygame.draw.line(surface, LANE_LINE, (x, 0), (x, CANVAS_HEIGHT * s))
        pygame.draw.line(
            surface, HIT_LINE, (0, int(HIT_LINE_Y * s)), (CANVAS_WIDTH * s, int(HIT_LINE_Y * s)), 2
        )

        for shape_id in self._order:
            self._draw_shape(surface, self._shapes[shape_id])

        render_hud(surface, self._state, s)
        if self.indicator_visible:
            render_game_over(surface, self._summary, s)

    def _draw_shape(self, surface: pygame.Surface, shape: Shape) -> None:
        s = self.scale
        color = LANE_COLORS.get(shape.color, LANE_COLORS["white"])
        if shape.kind == "circle":
            pygame.draw.circle(surface, color, (int(shape.x * s), int(shape.y * s)), int(shape.width * s))
        elif shape.kind == "rect" and shape.height > 0:
            rect = pygame.Rect(int(shape.x * s), int(shape.y * s), int(shape.width * s), int(shape.height * s))
            overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
            overlay.fill((*color, int(255 * shape.alpha)))
            surface.blit(overlay, rect.topleft)
