"""Top-level application: initializes pygame, builds the session, and runs the game loop."""

from __future__ import annotations

import logging

import pygame

from lanefall.config import FPS, WINDOW_TITLE
from lanefall.models import Note
from lanefall.renderer.canvas import CanvasRenderer
from lanefall.session import GameSession
from lanefall.settings import Settings

logger = logging.getLogger(__name__)


class App:
    def __init__(self, notes: list[Note], song_title: str, settings: Settings) -> None:
        pygame.init()
        self.renderer = CanvasRenderer(scale=settings.window_scale)
        self.screen = pygame.display.set_mode(self.renderer.size)
        pygame.display.set_caption(f"{WINDOW_TITLE} - {song_title}")
        self.clock = pygame.time.Clock()

        # Optional subsystems gracefully degrade
        self.audio = self._try_audio(settings.soundfont_path)
        self.progress = self._try_progress(song_title)

        self._keys: dict[int, str] = {}
        for key_id, name in settings.key_bindings.items():
            try:
                self._keys[pygame.key.key_code(name)] = key_id
            except ValueError:
                logger.warning("Unknown key name %r for %s", name, key_id)

        self.session = GameSession(
            notes,
            renderer=self.renderer,
            audio=self.audio,
            persistence=self.progress,
            song_title=song_title,
        )

    def run(self) -> None:
        self.session.start()
        running = True
        while running:
            dt = self.clock.tick(FPS)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key in self._keys:
                    self.session.press(self._keys[event.key])
                elif event.type == pygame.KEYUP and event.key in self._keys:
                    self.session.release(self._keys[event.key])
            self.session.advance(dt)
            if self.audio:
                self.audio.flush_pending_offs()
            self.renderer.draw(self.screen)
            pygame.display.flip()

        self._cleanup()
        pygame.quit()

    def _cleanup(self) -> None:
        if self.audio:
            self.audio.shutdown()
        if self.progress:
            self.progress.close()

    @staticmethod
    def _try_audio(soundfont_path: str):
        try:
            from lanefall.audio import AudioEngine
            return AudioEngine(soundfont_path or None)
        except Exception as exc:
            logger.warning("Audio unavailable, playing silently: %s", exc)
            return None

    @staticmethod
    def _try_progress(song_title: str):
        try:
            from lanefall.progress import HighScoreStore
            return HighScoreStore(song_title)
        except Exception as exc:
            logger.warning("High scores will not be saved: %s", exc)
            return None
