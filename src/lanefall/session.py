"""GameSession: wires parser output, timers, input and scoring into one playable session."""

from __future__ import annotations

import logging
import random

from lanefall.background import BackgroundPlayer
from lanefall.evaluator import HitEvaluator
from lanefall.gateways import AudioGateway, PersistenceGateway, RenderGateway
from lanefall.input_router import InputRouter
from lanefall.lifecycle import LifecycleController, session_duration_ms
from lanefall.models import GameState, Note
from lanefall.scheduler import NoteScheduler
from lanefall.scoring import ScoreKeeper
from lanefall.timeline import Timeline

logger = logging.getLogger(__name__)


class GameSession:
    """One play-through of a note list on a single cooperative timeline."""

    def __init__(
        self,
        notes: list[Note],
        renderer: RenderGateway | None = None,
        audio: AudioGateway | None = None,
        persistence: PersistenceGateway | None = None,
        song_title: str = "",
        rng: random.Random | None = None,
    ) -> None:
        self.notes = list(notes)
        self.timeline = Timeline()
        self.router = InputRouter()

        high_score = 0
        if persistence is not None:
            try:
                high_score = persistence.load_high_score()
            except Exception as exc:
                logger.warning("Could not load high score: %s", exc)

        self.keeper = ScoreKeeper(GameState(high_score=high_score), renderer, persistence)
        self.evaluator = HitEvaluator(self.keeper, audio, rng)
        self.scheduler = NoteScheduler(self.timeline, self.router, self.evaluator.evaluate, renderer)
        self.background = BackgroundPlayer(self.timeline, audio)
        self.lifecycle = LifecycleController(
            self.timeline,
            self.keeper,
            session_duration_ms(self.notes),
            renderer=renderer,
            persistence=persistence,
            song_title=song_title,
        )
        self._renderer = renderer
        self._started = False

    @property
    def state(self) -> GameState:
        return self.keeper.state

    @property
    def now(self) -> float:
        return self.timeline.now

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        if self._renderer:
            self._renderer.update_scores(self.state)
            self._renderer.set_indicator(False)
        self.scheduler.start(self.notes)
        self.background.start(self.notes)
        self.lifecycle.start()

    def advance(self, dt_ms: float) -> None:
        self.timeline.advance(dt_ms)

    def press(self, key: str) -> bool:
        return self.router.press(key, self.timeline.now)

    def release(self, key: str) -> None:
        self.router.release(key, self.timeline.now)

    @property
    def finished(self) -> bool:
        return self.lifecycle.finished
