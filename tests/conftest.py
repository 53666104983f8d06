import pytest

from lanefall.models import Note


class RecordingRenderer:
    """RenderGateway that keeps shapes and every call for assertions."""

    def __init__(self):
        self.shapes = {}
        self.removed = []
        self.scores = []
        self.indicator = []
        self.summaries = []

    def set_indicator(self, visible):
        self.indicator.append(visible)

    def show_summary(self, state):
        self.summaries.append(state)

    def add_shape(self, shape_id, shape, behind=None):
        self.shapes[shape_id] = shape

    def update_shape(self, shape_id, **attrs):
        shape = self.shapes.get(shape_id)
        if shape is None:
            return
        for key, val in attrs.items():
            setattr(shape, key, val)

    def remove_shape(self, shape_id):
        if self.shapes.pop(shape_id, None) is not None:
            self.removed.append(shape_id)

    def update_scores(self, state):
        self.scores.append(state)


class RecordingAudio:
    def __init__(self, instruments=("piano", "violin")):
        self._instruments = list(instruments)
        self.played = []

    def play(self, instrument_name, pitch, duration, velocity):
        if instrument_name in self._instruments:
            self.played.append((instrument_name, pitch, duration, velocity))

    def instrument_names(self):
        return list(self._instruments)


class MemoryStore:
    def __init__(self, high_score=0):
        self.high_score = high_score
        self.saves = []
        self.sessions = []

    def load_high_score(self):
        return self.high_score

    def save_high_score(self, score):
        self.high_score = score
        self.saves.append(score)

    def record_session(self, summary):
        self.sessions.append(summary)


def make_note(pitch=60, start=4.0, end=4.5, user_played=True, instrument="piano", velocity=0.5):
    return Note.from_fields(
        user_played=user_played,
        instrument_name=instrument,
        velocity=velocity,
        pitch=pitch,
        start=start,
        end=end,
    )


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def store():
    return MemoryStore()
