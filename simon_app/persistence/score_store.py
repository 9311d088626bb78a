"""High score persistence layer."""

import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..errors import PersistenceError
from ..logging.config import get_logger

DEFAULT_SCORE_KEY = "simonBirdHighScore"


class ScorePersistence(ABC):
    """Key-value storage for a single best score."""

    @abstractmethod
    def get(self) -> Optional[int]:
        """Return the stored score, or None if nothing was stored."""
        pass

    @abstractmethod
    def set(self, value: int) -> None:
        """Store a new score."""
        pass


class MemoryScoreStore(ScorePersistence):
    """In-process score storage; lost when the process exits."""

    def __init__(self, initial: Optional[int] = None):
        self._value = initial
        self.writes: list[int] = []

    def get(self) -> Optional[int]:
        return self._value

    def set(self, value: int) -> None:
        self._value = int(value)
        self.writes.append(self._value)


class SqliteScoreStore(ScorePersistence):
    """SQLite-based score storage, durable across restarts."""

    def __init__(self, db_path: str = "simon_scores.db", key: str = DEFAULT_SCORE_KEY):
        self.db_path = Path(db_path)
        self.key = key
        self.logger = get_logger("simon_app.persistence.score_store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        try:
            with self._get_connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS scores (
                        key TEXT PRIMARY KEY,
                        value INTEGER NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to initialize score database: {e}",
                operation="init",
                target=str(self.db_path)
            ) from e

    @contextmanager
    def _get_connection(self):
        """Get database connection with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", error=str(e), db_path=str(self.db_path))
            raise
        finally:
            if conn:
                conn.close()

    def get(self) -> Optional[int]:
        """
        Read the stored score.

        Returns:
            Stored score, or None if no score was ever stored

        Raises:
            PersistenceError: If the database cannot be read
        """
        with self._lock:
            try:
                with self._get_connection() as conn:
                    row = conn.execute(
                        "SELECT value FROM scores WHERE key = ?", (self.key,)
                    ).fetchone()
            except sqlite3.Error as e:
                raise PersistenceError(
                    f"Failed to read score: {e}",
                    operation="get",
                    target=self.key
                ) from e

        return None if row is None else int(row["value"])

    def set(self, value: int) -> None:
        """
        Store a score, replacing any previous value.

        Raises:
            PersistenceError: If the database cannot be written
        """
        with self._lock:
            try:
                with self._get_connection() as conn:
                    conn.execute("""
                        INSERT INTO scores (key, value, updated_at) VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET
                            value = excluded.value,
                            updated_at = excluded.updated_at
                    """, (self.key, int(value), datetime.now(timezone.utc).isoformat()))
                    conn.commit()
            except sqlite3.Error as e:
                raise PersistenceError(
                    f"Failed to store score: {e}",
                    operation="set",
                    target=self.key
                ) from e

        self.logger.info("High score stored", key=self.key, value=int(value))
