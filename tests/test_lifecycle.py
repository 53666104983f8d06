"""Tests for session duration and end-of-session handling."""

from conftest import make_note

from lanefall.lifecycle import LifecycleController, session_duration_ms
from lanefall.models import Outcome
from lanefall.scoring import ScoreKeeper
from lanefall.timeline import Timeline


def test_duration_is_latest_end():
    notes = [make_note(start=1.0, end=2.0), make_note(start=0.5, end=7.25), make_note(start=5.0, end=6.0)]
    assert session_duration_ms(notes) == 7250


def test_duration_of_empty_song():
    assert session_duration_ms([]) == 0


def _controller(renderer, store=None, duration=2000):
    tl = Timeline()
    keeper = ScoreKeeper(renderer=renderer, persistence=store)
    ctrl = LifecycleController(tl, keeper, duration, renderer=renderer, persistence=store, song_title="demo")
    return tl, keeper, ctrl


def test_sampler_only_mirrors_the_flag(renderer):
    tl, keeper, ctrl = _controller(renderer)
    ctrl.start()
    tl.advance(1999)
    assert renderer.indicator == [False] * 3
    assert keeper.state.game_end is False
    assert renderer.summaries == []


def test_game_end_forced_at_duration(renderer):
    tl, keeper, ctrl = _controller(renderer, duration=1234)
    ctrl.start()
    tl.advance(1234)
    assert keeper.state.game_end is True
    assert ctrl.finished
    assert renderer.indicator[-1] is True
    assert len(renderer.summaries) == 1


def test_finalize_stops_the_sampler(renderer):
    tl, keeper, ctrl = _controller(renderer, duration=1000)
    ctrl.start()
    tl.advance(3000)
    assert renderer.indicator == [False, True]
    assert tl.pending == 0


def test_early_finalize_cancels_end_timer(renderer, store):
    tl, keeper, ctrl = _controller(renderer, store, duration=5000)
    ctrl.start()
    tl.advance(600)
    ctrl.finalize()
    assert tl.pending == 0
    tl.advance(10_000)
    assert len(store.sessions) == 1
    assert renderer.indicator[-1] is True


def test_state_is_frozen_after_end(renderer):
    tl, keeper, ctrl = _controller(renderer, duration=1000)
    ctrl.start()
    keeper.submit(1, Outcome.HIT)
    tl.advance(1000)
    keeper.submit(2, Outcome.HIT)
    keeper.submit(3, Outcome.MISS)
    assert keeper.state.score == 1


def test_finalize_records_summary_once(renderer, store):
    tl, keeper, ctrl = _controller(renderer, store, duration=1000)
    finished = []
    ctrl.on_finished(finished.append)
    ctrl.start()
    for outcome in (Outcome.HIT, Outcome.HIT, Outcome.MISS, Outcome.HIT):
        keeper.submit(None, outcome)
    tl.advance(1000)
    ctrl.finalize()

    assert len(store.sessions) == 1
    summary = store.sessions[0]
    assert summary.song_title == "demo"
    assert summary.score == 2
    assert summary.high_score == 2
    assert summary.hits == 3
    assert summary.misses == 1
    assert summary.max_streak == 2
    assert finished == [summary]


def test_zero_length_session_ends_immediately(renderer):
    tl, keeper, ctrl = _controller(renderer, duration=0)
    ctrl.start()
    tl.advance(0)
    assert keeper.state.game_end is True
