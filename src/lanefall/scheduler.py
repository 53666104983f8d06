"""Note scheduler: gives every playable note its own appear / travel / expire timeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable

from lanefall.config import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    LEAD_TIME_MS,
    NOTE_DRAW_RADIUS,
    NOTE_RADIUS,
    SAMPLE_INTERVAL_MS,
    TAIL_LENGTH_DIVISOR,
    TAIL_WIDTH,
)
from lanefall.evaluator import is_correct_timing
from lanefall.gateways import RenderGateway
from lanefall.input_router import InputRouter, Subscription
from lanefall.models import Column, Note, Shape, columns
from lanefall.timeline import Timeline, TimerHandle

logger = logging.getLogger(__name__)

TOP_EDGE = -NOTE_RADIUS
BOTTOM_EDGE = CANVAS_HEIGHT + NOTE_RADIUS
SPEED = (BOTTOM_EDGE - TOP_EDGE) / LEAD_TIME_MS  # canvas units per ms


def appear_time_ms(note: Note) -> float:
    """Session time at which a note enters at the top edge (never before 0)."""
    return max(0.0, note.start * 1000 - LEAD_TIME_MS)


def tail_length(note: Note) -> float:
    return note.tail_duration / TAIL_LENGTH_DIVISOR if note.tail_duration else 0.0


def lifetime_ms(note: Note) -> float:
    """Time from appearance until the note (and its tail) has cleared the bottom edge."""
    # (tail_end_y - TOP_EDGE) / SPEED, kept exact for tail-less notes
    return LEAD_TIME_MS + tail_length(note) / SPEED


@dataclass
class ActiveNote:
    """Registry record for a note currently in play."""

    note_id: int
    note: Note
    column: Column
    appeared_at: float
    tail: float = 0.0
    circle_visible: bool = True
    tail_visible: bool = False
    sampler: TimerHandle | None = None
    expiry: TimerHandle | None = None
    subscription: Subscription | None = None
    _retire: Callable[[ActiveNote], None] | None = field(default=None, repr=False)

    @property
    def shape_id(self) -> str:
        return f"note-{self.note_id}"

    @property
    def tail_id(self) -> str:
        return f"tail-{self.note_id}"

    @property
    def x(self) -> float:
        return self.column.x_fraction * CANVAS_WIDTH

    def position_at(self, now_ms: float) -> float:
        return TOP_EDGE + SPEED * (now_ms - self.appeared_at)

    def tail_height_at(self, now_ms: float) -> float:
        if not self.tail:
            return 0.0
        return min(SPEED * (now_ms - self.appeared_at), self.tail)

    def retire(self) -> None:
        if self._retire is not None:
            self._retire(self)


class NoteScheduler:
    """Spawns one independent timeline per user-played note.

    A note's record lives in the id-keyed active registry from appearance until
    the earlier of a hit (``retire``) or expiry. Retiring cancels the note's
    sampler, expiry timer and input subscription together.
    """

    def __init__(
        self,
        timeline: Timeline,
        router: InputRouter,
        on_press: Callable[[ActiveNote, float], object],
        renderer: RenderGateway | None = None,
    ) -> None:
        self._timeline = timeline
        self._router = router
        self._on_press = on_press
        self._renderer = renderer
        self._columns = columns()
        self._active: dict[int, ActiveNote] = {}
        self._appearances: list[TimerHandle] = []
        self.appeared = 0
        self.expired = 0
        self.retired = 0

    def start(self, notes: list[Note]) -> None:
        for note_id, note in enumerate(notes):
            if not note.user_played:
                continue
            handle = self._timeline.schedule_once(
                appear_time_ms(note) - self._timeline.now, partial(self._appear, note_id, note)
            )
            self._appearances.append(handle)
        logger.debug("scheduled %d playable notes", len(self._appearances))

    @property
    def active_notes(self) -> dict[int, ActiveNote]:
        return dict(self._active)

    @property
    def finished(self) -> bool:
        return self.appeared == len(self._appearances) and not self._active

    def _appear(self, note_id: int, note: Note) -> None:
        now = self._timeline.now
        active = ActiveNote(
            note_id=note_id,
            note=note,
            column=self._columns[note.column],
            appeared_at=now,
            tail=tail_length(note),
            _retire=self.retire,
        )
        self._active[note_id] = active
        self.appeared += 1

        if self._renderer:
            self._renderer.add_shape(active.shape_id, Shape(
                kind="circle", x=active.x, y=TOP_EDGE, width=NOTE_DRAW_RADIUS,
                color=active.column.color,
            ))
            if active.tail:
                self._renderer.add_shape(active.tail_id, Shape(
                    kind="rect", x=active.x - TAIL_WIDTH / 2, y=TOP_EDGE, width=TAIL_WIDTH,
                    height=0.0, color=active.column.color, alpha=0.5,
                ), behind=active.shape_id)
                active.tail_visible = True

        active.subscription = self._router.subscribe(
            active.column.key,
            lambda now_ms: self._on_press(active, now_ms),
            in_window=lambda now_ms: is_correct_timing(active.position_at(now_ms)),
        )
        active.sampler = self._timeline.schedule_repeating(
            SAMPLE_INTERVAL_MS, partial(self._sample, active)
        )
        active.expiry = self._timeline.schedule_once(
            lifetime_ms(note), partial(self._expire, active)
        )

    def _sample(self, active: ActiveNote) -> None:
        now = self._timeline.now
        y = active.position_at(now)
        renderer = self._renderer
        if renderer is None:
            return
        if active.circle_visible:
            renderer.update_shape(active.shape_id, y=y)
        if active.tail_visible:
            height = active.tail_height_at(now)
            renderer.update_shape(active.tail_id, y=y - height, height=height)
        if active.circle_visible and y >= BOTTOM_EDGE:
            renderer.remove_shape(active.shape_id)
            active.circle_visible = False

    def _expire(self, active: ActiveNote) -> None:
        self.expired += 1
        logger.debug("note %d expired at %.0f ms", active.note_id, self._timeline.now)
        self.retire(active)

    def retire(self, active: ActiveNote) -> None:
        """Take a note out of play. Safe to call more than once."""
        if self._active.pop(active.note_id, None) is None:
            return
        self.retired += 1
        for handle in (active.sampler, active.expiry, active.subscription):
            if handle is not None:
                handle.cancel()
        if self._renderer:
            if active.circle_visible:
                self._renderer.remove_shape(active.shape_id)
            if active.tail_visible:
                self._renderer.remove_shape(active.tail_id)
        active.circle_visible = False
        active.tail_visible = False
