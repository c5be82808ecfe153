"""Essay ("小作文") storage and the chat commands built on it."""

from __future__ import annotations

import hashlib
import re
import sqlite3
import threading

HENTAI_ID = -3802576048116006195

_TEACH = re.compile(r"教你一篇小作文(.*)")


def essay_id(text: str) -> int:
    """Signed 64-bit id of an essay: the first 8 bytes of its MD5, little-endian."""
    digest = hashlib.md5(text.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "little", signed=True)


class EssayStore:
    """An SQLite table of essays keyed by their content hash."""

    def __init__(self, path):
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        with self._lock, self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS text "
                "(id INTEGER PRIMARY KEY NOT NULL, data TEXT)"
            )

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def add(self, text: str) -> int:
        """Store an essay, replacing any with the same id, and return its id."""
        ident = essay_id(text)
        with self._lock, self._conn:
            self._conn.execute(
                "REPLACE INTO text (id, data) VALUES (?, ?)", (ident, text)
            )
        return ident

    def _one(self, sql: str, params: tuple = ()) -> str:
        with self._lock:
            row = self._conn.execute(sql, params).fetchone()
        if row is None:
            raise LookupError("no rows in result set")
        return row[0]

    def random(self) -> str:
        """Return a random essay."""
        return self._one("SELECT data FROM text ORDER BY RANDOM() LIMIT 1")

    def hentai(self) -> str:
        """Return the special essay with the fixed id."""
        return self._one("SELECT data FROM text WHERE id = ?", (HENTAI_ID,))

    def count(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM text").fetchone()[0]

    def close(self) -> None:
        with self._lock:
            self._conn.close()


def _text_or_error(getter) -> str:
    try:
        return getter()
    except (LookupError, sqlite3.Error) as error:
        return str(error)


def handle(store: EssayStore, message: str, is_admin: bool) -> str | None:
    """Answer a chat message, or return None when it is not a command."""
    if message == "小作文":
        return _text_or_error(store.random)
    if message == "发大病":
        return _text_or_error(store.hentai)
    match = _TEACH.fullmatch(message)
    if match and is_admin:
        try:
            store.add(match.group(1))
        except sqlite3.Error as error:
            return f"ERROR: {error}"
        return "记住啦!"
    return None