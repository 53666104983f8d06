"""Background playback of the notes the player does not play."""

from __future__ import annotations

import logging
from functools import partial

from lanefall.evaluator import play_note
from lanefall.gateways import AudioGateway
from lanefall.models import Note
from lanefall.timeline import Timeline, TimerHandle

logger = logging.getLogger(__name__)


class BackgroundPlayer:
    """Fires one independent audio trigger per non-interactive note at its start time."""

    def __init__(self, timeline: Timeline, audio: AudioGateway | None) -> None:
        self._timeline = timeline
        self._audio = audio
        self.handles: list[TimerHandle] = []
        self.played = 0

    def start(self, notes: list[Note]) -> None:
        for note in notes:
            if note.user_played:
                continue
            delay = note.start * 1000 - self._timeline.now
            self.handles.append(self._timeline.schedule_once(delay, partial(self._fire, note)))
        logger.debug("scheduled %d background notes", len(self.handles))

    def _fire(self, note: Note) -> None:
        self.played += 1
        play_note(self._audio, note)
