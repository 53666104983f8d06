"""Audio playback via FluidSynth + SoundFonts."""

from __future__ import annotations

import heapq
import logging
import sys
import time
from pathlib import Path

import fluidsynth

from lanefall.config import INSTRUMENTS, MIDI_VELOCITY_MAX

logger = logging.getLogger(__name__)

# General MIDI programs for the instrument names used in note tables
GM_PROGRAMS: dict[str, int] = {
    "piano": 0,
    "bass-electric": 33,
    "violin": 40,
    "trumpet": 56,
    "trombone": 57,
    "saxophone": 65,
    "flute": 73,
}

_DRUM_CHANNEL = 9
_AUDIO_DRIVERS = {"linux": "pulseaudio", "darwin": "coreaudio", "win32": "dsound"}


def audio_driver_for(platform: str = sys.platform) -> str:
    return _AUDIO_DRIVERS.get(platform, "alsa")


class AudioEngine:
    """AudioGateway over FluidSynth: one MIDI channel per known instrument."""

    def __init__(
        self,
        soundfont_path: str | Path | None = None,
        instruments: tuple[str, ...] = INSTRUMENTS,
    ) -> None:
        self.fs = fluidsynth.Synth(gain=0.8)
        self.fs.start(driver=audio_driver_for())
        self._sfid: int | None = None
        self._channels: dict[str, int] = {}
        self._pending_offs: list[tuple[float, int, int]] = []  # heap of (off_time, pitch, channel)

        free = (ch for ch in range(16) if ch != _DRUM_CHANNEL)
        for name in instruments:
            if name in GM_PROGRAMS:
                self._channels[name] = next(free)
        if soundfont_path:
            self.load_soundfont(soundfont_path)

    def load_soundfont(self, path: str | Path) -> None:
        self._sfid = self.fs.sfload(str(path))
        for name, channel in self._channels.items():
            self.fs.program_select(channel, self._sfid, 0, GM_PROGRAMS[name])
        logger.info("Loaded soundfont %s", path)

    def instrument_names(self) -> list[str]:
        return list(self._channels)

    def play(self, instrument_name: str, pitch: int, duration: float, velocity: float) -> None:
        channel = self._channels.get(instrument_name)
        if channel is None:
            return
        midi_velocity = max(1, min(MIDI_VELOCITY_MAX, int(velocity * MIDI_VELOCITY_MAX)))
        self.fs.noteon(channel, pitch, midi_velocity)
        heapq.heappush(self._pending_offs, (time.monotonic() + duration, pitch, channel))

    def flush_pending_offs(self, now: float | None = None) -> int:
        """Release every note whose duration has elapsed; returns how many were released."""
        now = time.monotonic() if now is None else now
        released = 0
        while self._pending_offs and self._pending_offs[0][0] <= now:
            _, pitch, channel = heapq.heappop(self._pending_offs)
            self.fs.noteoff(channel, pitch)
            released += 1
        return released

    def all_notes_off(self) -> None:
        for channel in self._channels.values():
            for pitch in range(128):
                self.fs.noteoff(channel, pitch)
        self._pending_offs.clear()

    def shutdown(self) -> None:
        self.all_notes_off()
        self.fs.delete()
        logger.debug("audio engine shut down")
