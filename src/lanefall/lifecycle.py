"""Session lifecycle: total duration, the end-of-session indicator and finalization."""

from __future__ import annotations

import logging
from typing import Callable

from lanefall.config import TICK_RATE_MS
from lanefall.gateways import PersistenceGateway, RenderGateway
from lanefall.models import Note, Outcome, SessionSummary
from lanefall.scoring import ScoreKeeper
from lanefall.timeline import Timeline, TimerHandle

logger = logging.getLogger(__name__)


def session_duration_ms(notes: list[Note]) -> float:
    """Length of a session: the latest note end, in milliseconds (0 for no notes)."""
    if not notes:
        return 0.0
    return max(note.end for note in notes) * 1000


class LifecycleController:
    """Owns the game-end flag and the end-of-session presentation.

    The periodic sampler only mirrors ``state.game_end`` onto the indicator;
    the flag itself is set solely by ``finalize`` when the duration elapses.
    Finalizing stops the sampler, leaving the indicator on.
    """

    def __init__(
        self,
        timeline: Timeline,
        keeper: ScoreKeeper,
        duration_ms: float,
        renderer: RenderGateway | None = None,
        persistence: PersistenceGateway | None = None,
        song_title: str = "",
    ) -> None:
        self._timeline = timeline
        self._keeper = keeper
        self.duration_ms = duration_ms
        self._renderer = renderer
        self._persistence = persistence
        self._song_title = song_title
        self._sampler: TimerHandle | None = None
        self._end_timer: TimerHandle | None = None
        self._callbacks: list[Callable[[SessionSummary], None]] = []
        self.finished = False
        self.summary: SessionSummary | None = None

    def on_finished(self, callback: Callable[[SessionSummary], None]) -> None:
        self._callbacks.append(callback)

    def start(self) -> None:
        self._sampler = self._timeline.schedule_repeating(TICK_RATE_MS, self._refresh_indicator)
        self._end_timer = self._timeline.schedule_once(self.duration_ms, self.finalize)
        logger.info("Session started: %.1f s", self.duration_ms / 1000)

    def _refresh_indicator(self) -> None:
        state = self._keeper.submit(None, Outcome.TICK)
        if self._renderer:
            self._renderer.set_indicator(state.game_end)

    def finalize(self) -> None:
        if self.finished:
            return
        self.finished = True
        state = self._keeper.submit(None, Outcome.END)
        if self._renderer:
            self._renderer.set_indicator(True)
            self._renderer.show_summary(state)
        for handle in (self._sampler, self._end_timer):
            if handle is not None:
                handle.cancel()

        self.summary = SessionSummary(
            song_title=self._song_title,
            score=state.score,
            high_score=state.high_score,
            hits=self._keeper.hits,
            misses=self._keeper.misses,
            max_streak=self._keeper.max_streak,
            multiplier=state.multiplier,
        )
        record = getattr(self._persistence, "record_session", None)
        if record is not None:
            try:
                record(self.summary)
            except Exception as exc:
                logger.warning("Could not record session: %s", exc)

        logger.info(
            "Session finished: score=%d high=%d hits=%d misses=%d",
            state.score, state.high_score, self.summary.hits, self.summary.misses,
        )
        for callback in self._callbacks:
            callback(self.summary)
