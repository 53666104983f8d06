"""Column key input: per-key debounce and per-note subscriptions."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable

from lanefall.config import COLUMNS, DEBOUNCE_MS

logger = logging.getLogger(__name__)

KEYS: tuple[str, ...] = tuple(key for key, _, _ in COLUMNS)

PressHandler = Callable[[float], None]
WindowCheck = Callable[[float], bool]


class Subscription:
    """A live handler on one key; cancel() detaches it for good."""

    def __init__(
        self,
        router: InputRouter,
        key: str,
        handler: PressHandler,
        in_window: WindowCheck | None = None,
    ) -> None:
        self.key = key
        self.handler = handler
        self.in_window = in_window
        self.active = True
        self._router = router

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._router._detach(self)


class InputRouter:
    """Routes each key press to one subscription on that key.

    Each playable note subscribes to its column's key when it appears. A press
    goes to the earliest subscription whose ``in_window`` check accepts the
    press time; if none does, it goes to the front (earliest) subscription.
    """

    def __init__(self, debounce_ms: float = DEBOUNCE_MS) -> None:
        self._debounce_ms = debounce_ms
        self._subs: dict[str, list[Subscription]] = defaultdict(list)
        self._last_press: dict[str, float] = {}
        self.releases = 0

    def subscribe(
        self, key: str, handler: PressHandler, in_window: WindowCheck | None = None
    ) -> Subscription:
        if key not in KEYS:
            raise ValueError(f"Unknown key id: {key!r}")
        sub = Subscription(self, key, handler, in_window)
        self._subs[key].append(sub)
        return sub

    def subscriptions(self, key: str) -> list[Subscription]:
        return list(self._subs.get(key, []))

    def press(self, key: str, now_ms: float) -> bool:
        """Handle a key press. Returns False if it was debounced or the key is unknown."""
        if key not in KEYS:
            return False
        last = self._last_press.get(key)
        if last is not None and now_ms - last < self._debounce_ms:
            logger.debug("debounced %s at %.0f ms", key, now_ms)
            return False
        self._last_press[key] = now_ms

        subs = self._subs.get(key)
        if subs:
            target = next(
                (s for s in subs if s.in_window is not None and s.in_window(now_ms)), subs[0]
            )
            target.handler(now_ms)
        return True

    def release(self, key: str, now_ms: float) -> None:
        # Observable but not used by the game logic
        if key in KEYS:
            self.releases += 1

    def _detach(self, sub: Subscription) -> None:
        subs = self._subs.get(sub.key)
        if subs and sub in subs:
            subs.remove(sub)
