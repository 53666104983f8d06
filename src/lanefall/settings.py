"""User settings persisted as JSON."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from lanefall.config import WINDOW_SCALE

logger = logging.getLogger(__name__)

DEFAULT_KEY_BINDINGS = {"KeyH": "h", "KeyJ": "j", "KeyK": "k", "KeyL": "l"}


@dataclass
class Settings:
    soundfont_path: str = ""
    key_bindings: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_KEY_BINDINGS))
    window_scale: int = WINDOW_SCALE


_SETTINGS_PATH = Path.home() / ".lanefall" / "settings.json"


def load_settings(path: Path = _SETTINGS_PATH) -> Settings:
    """Load settings from disk, returning defaults if absent or unreadable."""
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text())
        settings = Settings(**{
            k: v for k, v in data.items()
            if k in Settings.__dataclass_fields__
        })
    except Exception as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return Settings()
    # Unbound columns fall back to their default key
    settings.key_bindings = {**DEFAULT_KEY_BINDINGS, **settings.key_bindings}
    return settings


def save_settings(settings: Settings, path: Path = _SETTINGS_PATH) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(settings), indent=2))
