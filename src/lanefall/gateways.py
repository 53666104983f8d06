"""Gateway protocols for the collaborators the engine drives."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from lanefall.models import GameState, Shape


@runtime_checkable
class RenderGateway(Protocol):
    """Visual output. Calls against a missing target must be silent no-ops."""

    def set_indicator(self, visible: bool) -> None: ...
    def show_summary(self, state: GameState) -> None: ...
    def add_shape(self, shape_id: str, shape: Shape, behind: str | None = None) -> None: ...
    def update_shape(self, shape_id: str, **attrs: Any) -> None: ...
    def remove_shape(self, shape_id: str) -> None: ...
    def update_scores(self, state: GameState) -> None: ...


@runtime_checkable
class AudioGateway(Protocol):
    """Note playback. Unknown instrument names are skipped without error."""

    def play(self, instrument_name: str, pitch: int, duration: float, velocity: float) -> None: ...
    def instrument_names(self) -> list[str]: ...


@runtime_checkable
class PersistenceGateway(Protocol):
    def load_high_score(self) -> int: ...
    def save_high_score(self, score: int) -> None: ...
