"""High score and session history persistence with SQLite."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from lanefall.models import SessionSummary

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".lanefall" / "progress.db"


class HighScoreStore:
    """PersistenceGateway backed by SQLite; high scores are kept per song title."""

    def __init__(self, song_title: str = "", db_path: Path = DEFAULT_DB_PATH) -> None:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self.song_title = song_title
        self.conn = sqlite3.connect(str(db_path))
        self._init_db()

    def _init_db(self) -> None:
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS high_scores (
                song_title TEXT PRIMARY KEY,
                score INTEGER NOT NULL
            )
        """)
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS sessions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                song_title TEXT NOT NULL,
                score INTEGER,
                high_score INTEGER,
                hits INTEGER,
                misses INTEGER,
                max_streak INTEGER,
                multiplier REAL,
                played_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self.conn.commit()

    def load_high_score(self) -> int:
        row = self.conn.execute(
            "SELECT score FROM high_scores WHERE song_title = ?", (self.song_title,)
        ).fetchone()
        return int(row[0]) if row else 0

    def save_high_score(self, score: int) -> None:
        self.conn.execute(
            """INSERT INTO high_scores (song_title, score) VALUES (?, ?)
               ON CONFLICT(song_title) DO UPDATE SET score = excluded.score""",
            (self.song_title, int(score)),
        )
        self.conn.commit()

    def reset_high_score(self) -> None:
        self.save_high_score(0)
        logger.info("High score reset for %r", self.song_title)

    def record_session(self, summary: SessionSummary) -> None:
        self.conn.execute(
            """INSERT INTO sessions
               (song_title, score, high_score, hits, misses, max_streak, multiplier)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                summary.song_title,
                summary.score,
                summary.high_score,
                summary.hits,
                summary.misses,
                summary.max_streak,
                summary.multiplier,
            ),
        )
        self.conn.commit()

    def get_history(self, song_title: str | None = None, limit: int = 50) -> list[dict]:
        if song_title:
            cur = self.conn.execute(
                "SELECT * FROM sessions WHERE song_title = ? ORDER BY id DESC LIMIT ?",
                (song_title, limit),
            )
        else:
            cur = self.conn.execute(
                "SELECT * FROM sessions ORDER BY id DESC LIMIT ?", (limit,)
            )
        cols = [d[0] for d in cur.description]
        return [dict(zip(cols, row)) for row in cur.fetchall()]

    def close(self) -> None:
        self.conn.close()
