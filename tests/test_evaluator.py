"""Tests for hit evaluation logic."""

import random

from conftest import make_note

from lanefall.config import HIT_LINE_Y
from lanefall.evaluator import HitEvaluator, classify_press, is_correct_timing, random_filler_note
from lanefall.models import Column, Outcome
from lanefall.scheduler import ActiveNote
from lanefall.scoring import ScoreKeeper


def test_window_early_bound_inclusive():
    assert is_correct_timing(HIT_LINE_Y - 80) is True
    assert is_correct_timing(HIT_LINE_Y - 81) is False


def test_window_late_bound_inclusive():
    assert is_correct_timing(HIT_LINE_Y + 120) is True
    assert is_correct_timing(HIT_LINE_Y + 121) is False


def test_classify_user_note():
    note = make_note()
    assert classify_press(note, HIT_LINE_Y) == Outcome.HIT
    assert classify_press(note, 0.0) == Outcome.MISS


def test_classify_background_note_is_no_op():
    note = make_note(user_played=False)
    assert classify_press(note, HIT_LINE_Y) is None


def test_random_filler_note_ranges():
    rng = random.Random(7)
    for _ in range(50):
        note = random_filler_note(["piano", "flute"], rng)
        assert note.user_played is False
        assert note.instrument_name in ("piano", "flute")
        assert 21 <= note.pitch <= 108
        assert 0 <= note.velocity < 0.3
        assert 0 <= note.duration < 0.5


def test_random_filler_note_without_instruments():
    assert random_filler_note([]) is None


class _Retire:
    def __init__(self):
        self.calls = 0

    def __call__(self, active):
        self.calls += 1


def _active(note, appeared_at=0.0):
    retire = _Retire()
    active = ActiveNote(
        note_id=3,
        note=note,
        column=Column("KeyH", "green", 0.2),
        appeared_at=appeared_at,
        _retire=retire,
    )
    return active, retire


def test_hit_plays_note_retires_and_scores(audio):
    keeper = ScoreKeeper()
    evaluator = HitEvaluator(keeper, audio, random.Random(1))
    note = make_note(pitch=64)
    active, retire = _active(note)

    # a note reaches the hit line a little before it leaves the canvas
    outcome = evaluator.evaluate(active, 2900.0)

    assert outcome == Outcome.HIT
    assert retire.calls == 1
    assert audio.played == [("piano", 64, note.duration, note.velocity)]
    assert keeper.state.score == 1
    assert keeper.history[0].note_id == 3


def test_miss_plays_filler_and_keeps_note(audio):
    keeper = ScoreKeeper()
    evaluator = HitEvaluator(keeper, audio, random.Random(1))
    active, retire = _active(make_note(pitch=64))

    outcome = evaluator.evaluate(active, 100.0)

    assert outcome == Outcome.MISS
    assert retire.calls == 0
    assert len(audio.played) == 1
    assert audio.played[0][3] < 0.3  # filler velocity, not the note's 0.5
    assert keeper.state.score == 0
    assert keeper.misses == 1


def test_background_note_press_changes_nothing(audio):
    keeper = ScoreKeeper()
    evaluator = HitEvaluator(keeper, audio)
    active, retire = _active(make_note(user_played=False))

    assert evaluator.evaluate(active, 2900.0) is None
    assert audio.played == []
    assert keeper.history == []
    assert retire.calls == 0
