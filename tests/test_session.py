"""End-to-end tests driving a full GameSession on its timeline."""

import random

from lanefall.session import GameSession
from lanefall.song_loader import parse_notes

SONG = """user_played,instrument_name,velocity,pitch,start,end
True,piano,100,60,4.0,4.2
True,piano,100,61,4.5,4.7
False,violin,80,40,0.0,6.0
True,piano,100,62,5.0,7.0
"""


def _session(renderer, audio, store):
    return GameSession(
        parse_notes(SONG),
        renderer=renderer,
        audio=audio,
        persistence=store,
        song_title="demo",
        rng=random.Random(3),
    )


def test_session_seeds_high_score(renderer, audio, store):
    store.high_score = 42
    session = _session(renderer, audio, store)
    assert session.state.high_score == 42


def test_full_session(renderer, audio, store):
    session = _session(renderer, audio, store)
    session.start()
    assert renderer.scores[-1].score == 0

    session.advance(3850)  # note 0 (KeyH) is in the hit window
    assert session.press("KeyH")
    assert session.state.score == 1
    session.press("KeyK")  # note 3 is still high on the canvas
    assert session.state.score == 0
    assert session.state.multiplier == 1.0

    session.advance(500)  # notes 1 (KeyJ) and 3 (KeyK) are in the hit window
    session.press("KeyJ")
    session.press("KeyK")
    assert session.state.score == 2
    assert store.saves == [1, 2]

    session.advance(10_000)
    assert session.finished
    assert session.state.game_end is True
    assert session.state.high_score == 2
    assert renderer.indicator[-1] is True
    assert len(renderer.summaries) == 1
    assert store.sessions[0].hits == 3
    assert store.sessions[0].misses == 1

    assert ("violin", 40, 6.0, 80 / 127) in audio.played
    assert session.scheduler.active_notes == {}


def test_presses_after_game_end_do_nothing(renderer, audio, store):
    session = _session(renderer, audio, store)
    session.start()
    session.advance(7000)
    assert session.finished
    before = session.state
    played = list(audio.played)
    session.press("KeyH")
    session.press("KeyJ")
    assert session.state == before
    assert audio.played == played


def test_start_is_idempotent(renderer, audio, store):
    session = _session(renderer, audio, store)
    session.start()
    pending = session.timeline.pending
    session.start()
    assert session.timeline.pending == pending


def test_release_does_not_score(renderer, audio, store):
    session = _session(renderer, audio, store)
    session.start()
    session.advance(3850)
    session.release("KeyH")
    assert session.state.score == 0
    assert session.router.releases == 1


def test_session_without_collaborators():
    session = GameSession(parse_notes(SONG))
    session.start()
    session.advance(3850)
    session.press("KeyH")
    session.advance(10_000)
    assert session.state.score == 1
    assert session.finished


def test_fakes_satisfy_gateway_protocols(renderer, audio, store):
    from lanefall.gateways import AudioGateway, PersistenceGateway, RenderGateway

    assert isinstance(renderer, RenderGateway)
    assert isinstance(audio, AudioGateway)
    assert isinstance(store, PersistenceGateway)
    assert not isinstance(audio, RenderGateway)
