"""Scoring state machine: pure reducer plus the single-writer transition queue."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import replace

from lanefall.config import HIT_STREAK_FOR_MULTIPLIER, MULTIPLIER_STEP
from lanefall.gateways import PersistenceGateway, RenderGateway
from lanefall.models import GameState, Outcome, Transition

logger = logging.getLogger(__name__)


def reduce(state: GameState, outcome: Outcome) -> GameState:
    """Return the state that follows ``state`` after ``outcome``.

    A finished session (``game_end``) is terminal: every outcome leaves it as is.
    """
    if state.game_end:
        return state

    if outcome == Outcome.HIT:
        score = state.score + 1
        streak = state.hit_streak + 1
        multiplier = state.multiplier
        if streak == HIT_STREAK_FOR_MULTIPLIER:
            multiplier = round(multiplier + MULTIPLIER_STEP, 2)
            streak = 0
        return replace(
            state,
            score=score,
            hit_streak=streak,
            multiplier=multiplier,
            high_score=max(state.high_score, score),
        )
    if outcome == Outcome.MISS:
        return replace(state, score=max(state.score - 1, 0), hit_streak=0, multiplier=1.0)
    if outcome == Outcome.END:
        return replace(state, game_end=True)
    return state  # TICK


class ScoreKeeper:
    """Owns the session's GameState; every mutation goes through ``submit``.

    Submissions are queued under a lock and applied strictly in arrival order.
    A submit made while a drain is running (e.g. from a render callback) is
    picked up by that drain instead of recursing.
    """

    def __init__(
        self,
        initial: GameState | None = None,
        renderer: RenderGateway | None = None,
        persistence: PersistenceGateway | None = None,
    ) -> None:
        self._state = initial or GameState()
        self._renderer = renderer
        self._persistence = persistence
        self._queue: deque[Transition] = deque()
        self._lock = threading.Lock()
        self._draining = False
        self.history: list[Transition] = []
        self._run = 0
        self.max_streak = 0

    @property
    def state(self) -> GameState:
        return self._state

    def submit(self, note_id: int | None, outcome: Outcome) -> GameState:
        with self._lock:
            self._queue.append(Transition(note_id=note_id, outcome=outcome))
            if self._draining:
                return self._state
            self._draining = True
        try:
            self._drain()
        finally:
            with self._lock:
                self._draining = False
        return self._state

    def _drain(self) -> None:
        while True:
            with self._lock:
                if not self._queue:
                    return
                transition = self._queue.popleft()
            self._apply(transition)

    def _apply(self, transition: Transition) -> None:
        before = self._state
        after = reduce(before, transition.outcome)
        self._state = after
        if transition.outcome in (Outcome.HIT, Outcome.MISS) and not before.game_end:
            self.history.append(transition)
            self._track_streak(transition.outcome)
            logger.debug(
                "%s note=%s score=%d x%.1f streak=%d",
                transition.outcome.name, transition.note_id,
                after.score, after.multiplier, after.hit_streak,
            )
            if self._renderer:
                self._renderer.update_scores(after)
            if after.high_score > before.high_score and self._persistence:
                try:
                    self._persistence.save_high_score(after.high_score)
                except Exception as exc:
                    logger.warning("Could not save high score: %s", exc)

    def _track_streak(self, outcome: Outcome) -> None:
        if outcome == Outcome.HIT:
            self._run += 1
            self.max_streak = max(self.max_streak, self._run)
        else:
            self._run = 0

    @property
    def hits(self) -> int:
        return sum(1 for t in self.history if t.outcome == Outcome.HIT)

    @property
    def misses(self) -> int:
        return sum(1 for t in self.history if t.outcome == Outcome.MISS)
