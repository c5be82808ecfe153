"""Jokes picked at random from a database, with the listener's name filled in."""

from __future__ import annotations

import sqlite3
import threading


class JokeBook:
    """An SQLite table of jokes; "%name" in a joke is replaced by a name."""

    def __init__(self, path):
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        with self._lock, self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS jokes "
                "(id INTEGER PRIMARY KEY NOT NULL, text TEXT)"
            )

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def count(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM jokes").fetchone()[0]

    def tell(self, name: str) -> str:
        """Return a random joke about the given name."""
        with self._lock:
            row = self._conn.execute(
                "SELECT text FROM jokes ORDER BY RANDOM() LIMIT 1"
            ).fetchone()
        if row is None:
            raise LookupError("no rows in result set")
        return row[0].replace("%name", name)

    def close(self) -> None:
        with self._lock:
            self._conn.close()