"""Core data models shared across the engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from lanefall.config import COLUMNS, TAIL_MIN_DURATION


class Outcome(Enum):
    HIT = auto()
    MISS = auto()
    TICK = auto()
    END = auto()


@dataclass(frozen=True)
class Note:
    """A single note of a song, as parsed from the note table."""

    user_played: bool
    instrument_name: str
    velocity: float  # 0.0-1.0
    pitch: int  # MIDI note number 0-127
    start: float  # seconds from session start
    end: float  # seconds from session start
    column: int  # 0-3, always pitch % 4
    tail_duration: float | None = None  # ms, only for sustained notes

    @classmethod
    def from_fields(
        cls,
        user_played: bool,
        instrument_name: str,
        velocity: float,
        pitch: int,
        start: float,
        end: float,
    ) -> Note:
        """Build a note, deriving its column and tail from pitch and duration."""
        held_ms = (end - start) * 1000
        return cls(
            user_played=user_played,
            instrument_name=instrument_name,
            velocity=velocity,
            pitch=pitch,
            start=start,
            end=end,
            column=pitch % len(COLUMNS),
            tail_duration=held_ms if held_ms > TAIL_MIN_DURATION else None,
        )

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class GameState:
    game_end: bool = False
    score: int = 0
    multiplier: float = 1.0
    hit_streak: int = 0
    high_score: int = 0


@dataclass(frozen=True)
class Transition:
    note_id: int | None
    outcome: Outcome


@dataclass(frozen=True)
class Column:
    key: str
    color: str
    x_fraction: float


@dataclass
class Shape:
    """A positioned visual primitive handed to the render gateway."""

    kind: str  # "circle" or "rect"
    x: float  # circle: center x; rect: left edge
    y: float  # circle: center y; rect: top edge
    width: float  # circle: radius
    height: float = 0.0
    color: str = "white"
    alpha: float = 1.0


def columns() -> list[Column]:
    return [Column(key=key, color=color, x_fraction=x) for key, color, x in COLUMNS]


@dataclass
class SessionSummary:
    song_title: str = ""
    score: int = 0
    high_score: int = 0
    hits: int = 0
    misses: int = 0
    max_streak: int = 0
    multiplier: float = 1.0
