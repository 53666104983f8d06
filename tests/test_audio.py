"""Tests for the FluidSynth engine against a fake synth."""

import pytest

fluidsynth = pytest.importorskip("fluidsynth")

from lanefall import audio as audio_mod  # noqa: E402
from lanefall.audio import AudioEngine, audio_driver_for  # noqa: E402


class FakeSynth:
    def __init__(self, gain=0.2):
        self.calls = []

    def start(self, driver=None):
        self.calls.append(("start", driver))

    def sfload(self, path):
        return 1

    def program_select(self, channel, sfid, bank, program):
        self.calls.append(("program", channel, program))

    def noteon(self, channel, pitch, velocity):
        self.calls.append(("on", channel, pitch, velocity))

    def noteoff(self, channel, pitch):
        self.calls.append(("off", channel, pitch))

    def delete(self):
        self.calls.append(("delete",))


@pytest.fixture
def engine(monkeypatch):
    monkeypatch.setattr(audio_mod.fluidsynth, "Synth", FakeSynth)
    return AudioEngine(instruments=("piano", "violin", "kazoo"))


def test_driver_per_platform():
    assert audio_driver_for("darwin") == "coreaudio"
    assert audio_driver_for("sunos5") == "alsa"


def test_channels_skip_unknown_instruments(engine):
    assert engine.instrument_names() == ["piano", "violin"]


def test_play_unknown_instrument_is_silent(engine):
    engine.play("kazoo", 60, 0.5, 0.5)
    assert [c for c in engine.fs.calls if c[0] == "on"] == []


def test_flush_releases_only_elapsed_notes(engine, monkeypatch):
    monkeypatch.setattr(audio_mod.time, "monotonic", lambda: 100.0)
    engine.play("piano", 60, 0.5, 0.5)
    engine.play("violin", 40, 2.0, 1.0)
    assert ("on", 0, 60, 63) in engine.fs.calls
    assert ("on", 1, 40, 127) in engine.fs.calls

    assert engine.flush_pending_offs(now=100.4) == 0
    assert engine.flush_pending_offs(now=100.5) == 1
    assert engine.fs.calls[-1] == ("off", 0, 60)
    assert engine.flush_pending_offs(now=103.0) == 1
    assert engine.fs.calls[-1] == ("off", 1, 40)
