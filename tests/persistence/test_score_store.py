"""Tests for high score persistence."""

import sqlite3

import pytest

from simon_app.errors import PersistenceError
from simon_app.persistence.score_store import (
    DEFAULT_SCORE_KEY, MemoryScoreStore, SqliteScoreStore
)


class TestSqliteScoreStore:
    """Test SqliteScoreStore."""

    def setup_method(self):
        self.db_path = None

    def make_store(self, tmp_path, **kwargs):
        self.db_path = tmp_path / "scores.db"
        return SqliteScoreStore(str(self.db_path), **kwargs)

    def test_empty_store_returns_none(self, tmp_path):
        store = self.make_store(tmp_path)

        assert store.get() is None
        assert store.key == DEFAULT_SCORE_KEY

    def test_set_and_get(self, tmp_path):
        store = self.make_store(tmp_path)

        store.set(3)
        store.set(4)

        assert store.get() == 4

    def test_value_survives_reopen(self, tmp_path):
        """A new store on the same file sees the stored score."""
        self.make_store(tmp_path).set(5)

        reopened = SqliteScoreStore(str(self.db_path))

        assert reopened.get() == 5

    def test_keys_are_independent(self, tmp_path):
        first = self.make_store(tmp_path, key="first")
        second = SqliteScoreStore(str(self.db_path), key="second")

        first.set(2)

        assert first.get() == 2
        assert second.get() is None

    def test_single_row_per_key(self, tmp_path):
        store = self.make_store(tmp_path)
        for value in (1, 2, 3):
            store.set(value)

        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute("SELECT key, value FROM scores").fetchall()

        assert rows == [(DEFAULT_SCORE_KEY, 3)]

    def test_unusable_path_raises(self, tmp_path):
        """A directory cannot be opened as a database."""
        with pytest.raises(PersistenceError) as exc_info:
            SqliteScoreStore(str(tmp_path))

        assert exc_info.value.operation == "init"
        assert exc_info.value.recoverable is False

    def test_read_failure_wrapped(self, tmp_path):
        store = self.make_store(tmp_path)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DROP TABLE scores")

        with pytest.raises(PersistenceError) as exc_info:
            store.get()

        assert exc_info.value.operation == "get"
        assert exc_info.value.target == DEFAULT_SCORE_KEY

    def test_write_failure_wrapped(self, tmp_path):
        store = self.make_store(tmp_path)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DROP TABLE scores")

        with pytest.raises(PersistenceError) as exc_info:
            store.set(1)

        assert exc_info.value.operation == "set"


class TestMemoryScoreStore:
    """Test MemoryScoreStore."""

    def test_initial_value(self):
        assert MemoryScoreStore().get() is None
        assert MemoryScoreStore(initial=3).get() == 3

    def test_writes_recorded(self):
        store = MemoryScoreStore(initial=1)

        store.set(2)
        store.set(4)

        assert store.get() == 4
        assert store.writes == [2, 4]
