"""Hit evaluation: decide hit / miss / nothing for a key press against an active note."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Sequence

from lanefall.config import (
    FILLER_DURATION_MAX,
    FILLER_PITCH_MAX,
    FILLER_PITCH_MIN,
    FILLER_VELOCITY_MAX,
    HIT_LINE_Y,
    HIT_WINDOW_EARLY,
    HIT_WINDOW_LATE,
)
from lanefall.gateways import AudioGateway
from lanefall.models import Note, Outcome
from lanefall.scoring import ScoreKeeper

if TYPE_CHECKING:
    from lanefall.scheduler import ActiveNote

logger = logging.getLogger(__name__)


def is_correct_timing(y: float, hit_line: float = HIT_LINE_Y) -> bool:
    """True if a note at vertical position y lies inside the (inclusive) hit window."""
    return hit_line - HIT_WINDOW_EARLY <= y <= hit_line + HIT_WINDOW_LATE


def classify_press(note: Note, y: float) -> Outcome | None:
    if not note.user_played:
        return None
    return Outcome.HIT if is_correct_timing(y) else Outcome.MISS


def random_filler_note(instruments: Sequence[str], rng: random.Random | None = None) -> Note | None:
    """A short, quiet random note played as feedback for a mistimed press."""
    if not instruments:
        return None
    rng = rng or random.Random()
    pitch = rng.randint(FILLER_PITCH_MIN, FILLER_PITCH_MAX)
    duration = rng.random() * FILLER_DURATION_MAX
    return Note.from_fields(
        user_played=False,
        instrument_name=rng.choice(list(instruments)),
        velocity=rng.random() * FILLER_VELOCITY_MAX,
        pitch=pitch,
        start=0.0,
        end=duration,
    )


def play_note(audio: AudioGateway | None, note: Note) -> None:
    if audio is not None:
        audio.play(note.instrument_name, note.pitch, note.duration, note.velocity)


class HitEvaluator:
    """Applies the outcome of a press: audio feedback, note teardown, score transition."""

    def __init__(
        self,
        keeper: ScoreKeeper,
        audio: AudioGateway | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._keeper = keeper
        self._audio = audio
        self._rng = rng or random.Random()

    def evaluate(self, active: ActiveNote, now_ms: float) -> Outcome | None:
        if self._keeper.state.game_end:
            return None
        y = active.position_at(now_ms)
        outcome = classify_press(active.note, y)

        if outcome == Outcome.HIT:
            play_note(self._audio, active.note)
            active.retire()
            self._keeper.submit(active.note_id, Outcome.HIT)
        elif outcome == Outcome.MISS:
            if self._audio is not None:
                filler = random_filler_note(self._audio.instrument_names(), self._rng)
                if filler is not None:
                    play_note(self._audio, filler)
            self._keeper.submit(active.note_id, Outcome.MISS)

        logger.debug(
            "press on note %d (column %d) at y=%.1f -> %s",
            active.note_id, active.note.column, y, outcome.name if outcome else "no-op",
        )
        return outcome
