"""Load note tables (CSV) and MIDI files into Note lists."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path

import mido

from lanefall.config import MIDI_VELOCITY_MAX
from lanefall.models import Note

logger = logging.getLogger(__name__)

_FIELD_COUNT = 6
_DRUM_CHANNEL = 9
_DEFAULT_TEMPO = 500_000  # 120 BPM


class SongLoadError(Exception):
    """Raised when a song file cannot be parsed."""


@dataclass(frozen=True)
class RowError:
    line: int  # 1-based line number in the source text
    message: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


class NoteParseError(SongLoadError):
    """Raised when one or more note rows are malformed; carries every failing row."""

    def __init__(self, errors: list[RowError]) -> None:
        self.errors = list(errors)
        summary = "; ".join(str(e) for e in self.errors[:5])
        if len(self.errors) > 5:
            summary += f"; ... ({len(self.errors) - 5} more)"
        super().__init__(f"{len(self.errors)} malformed note row(s): {summary}")


def parse_notes(raw: str) -> list[Note]:
    """Parse note table text (header row + one note per row) into Notes.

    Rows are ``user_played, instrument_name, velocity, pitch, start, end``.
    Either every row parses or NoteParseError is raised listing all bad rows.
    """
    notes: list[Note] = []
    errors: list[RowError] = []

    lines = raw.strip().splitlines()
    for line_no, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        try:
            notes.append(_parse_row(line))
        except ValueError as exc:
            errors.append(RowError(line=line_no, message=str(exc)))

    if errors:
        raise NoteParseError(errors)
    return notes


def _parse_row(line: str) -> Note:
    fields = [f.strip() for f in line.split(",")]
    if len(fields) < _FIELD_COUNT:
        raise ValueError(f"expected {_FIELD_COUNT} fields, got {len(fields)}")
    user_played, instrument_name, velocity, pitch, start, end = fields[:_FIELD_COUNT]

    vel = _number(velocity, "velocity")
    if not 0 <= vel <= MIDI_VELOCITY_MAX:
        raise ValueError(f"velocity {vel:g} outside 0-{MIDI_VELOCITY_MAX}")
    try:
        midi_pitch = int(pitch)
    except ValueError:
        raise ValueError(f"pitch {pitch!r} is not an integer") from None
    if not 0 <= midi_pitch <= 127:
        raise ValueError(f"pitch {midi_pitch} outside 0-127")
    start_s = _number(start, "start")
    end_s = _number(end, "end")
    if end_s < start_s:
        raise ValueError(f"end {end_s:g} is before start {start_s:g}")

    return Note.from_fields(
        user_played=user_played.lower() == "true",
        instrument_name=instrument_name,
        velocity=vel / MIDI_VELOCITY_MAX,
        pitch=midi_pitch,
        start=start_s,
        end=end_s,
    )


def _number(text: str, name: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f"{name} {text!r} is not a number") from None
    if not math.isfinite(value):
        raise ValueError(f"{name} {text!r} is not finite")
    return value


def load_song(file_path: str | Path, player_track: int = 1) -> list[Note]:
    """Load a note table (.csv/.txt) or a MIDI file and return its notes.

    Args:
        file_path: Path to a .csv, .txt, .mid or .midi file.
        player_track: For MIDI files, the track whose notes the player plays.

    Raises:
        SongLoadError: If the file cannot be read or parsed.
    """
    path = Path(file_path)
    try:
        if path.suffix in (".csv", ".txt"):
            notes = parse_notes(path.read_text(encoding="utf-8"))
        elif path.suffix in (".mid", ".midi"):
            notes = _load_midi(path, player_track)
        else:
            raise SongLoadError(f"Unsupported file format: {path.suffix}")
    except SongLoadError:
        raise
    except Exception as exc:
        raise SongLoadError(f"Failed to load {path.name}: {exc}") from exc

    played = sum(1 for n in notes if n.user_played)
    logger.info("Loaded %s: %d notes (%d playable)", path.name, len(notes), played)
    return notes


def instrument_for_program(program: int) -> str:
    """Map a General MIDI program number onto one of the known instruments."""
    if 32 <= program <= 39:
        return "bass-electric"
    if 40 <= program <= 47:
        return "violin"
    if program == 56:
        return "trumpet"
    if program == 57:
        return "trombone"
    if 64 <= program <= 67:
        return "saxophone"
    if 72 <= program <= 79:
        return "flute"
    return "piano"


def _tempo_map(mid: mido.MidiFile) -> list[tuple[int, int]]:
    """All set_tempo events as (absolute tick, tempo), in tick order."""
    changes: list[tuple[int, int]] = []
    for track in mid.tracks:
        tick = 0
        for msg in track:
            tick += msg.time
            if msg.type == "set_tempo":
                changes.append((tick, msg.tempo))
    changes.sort(key=lambda c: c[0])
    return changes


def _tick_to_seconds(tick: int, tempo_map: list[tuple[int, int]], ticks_per_beat: int) -> float:
    seconds = 0.0
    last_tick = 0
    tempo = _DEFAULT_TEMPO
    for change_tick, change_tempo in tempo_map:
        if change_tick >= tick:
            break
        seconds += mido.tick2second(change_tick - last_tick, ticks_per_beat, tempo)
        last_tick, tempo = change_tick, change_tempo
    return seconds + mido.tick2second(tick - last_tick, ticks_per_beat, tempo)


def _load_midi(path: Path, player_track: int) -> list[Note]:
    mid = mido.MidiFile(str(path))
    notes: list[Note] = []
    programs: dict[int, int] = {}
    tempo_map = _tempo_map(mid)

    for track_idx, track in enumerate(mid.tracks):
        abs_tick = 0
        pending: dict[tuple[int, int], tuple[float, int]] = {}  # (channel, pitch) -> (start, velocity)

        for msg in track:
            abs_tick += msg.time
            abs_time = _tick_to_seconds(abs_tick, tempo_map, mid.ticks_per_beat)

            if msg.type == "program_change":
                programs[msg.channel] = msg.program
            elif msg.type in ("note_on", "note_off"):
                if msg.channel == _DRUM_CHANNEL:
                    continue
                key = (msg.channel, msg.note)
                # A repeated note_on closes the sounding note first
                if key in pending:
                    start, vel = pending.pop(key)
                    notes.append(Note.from_fields(
                        user_played=track_idx == player_track,
                        instrument_name=instrument_for_program(programs.get(msg.channel, 0)),
                        velocity=vel / MIDI_VELOCITY_MAX,
                        pitch=msg.note,
                        start=start,
                        end=max(abs_time, start),
                    ))
                if msg.type == "note_on" and msg.velocity > 0:
                    pending[key] = (abs_time, msg.velocity)

    notes.sort(key=lambda n: n.start)
    return notes
