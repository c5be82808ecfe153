import sqlite3

import pytest

from chatplugins.funny import JokeBook


def _seed(path, jokes):
    conn = sqlite3.connect(path)
    with conn:
        conn.execute("CREATE TABLE jokes (id INTEGER PRIMARY KEY NOT NULL, text TEXT)")
        conn.executemany("INSERT INTO jokes (id, text) VALUES (?, ?)", enumerate(jokes))
    conn.close()


def test_tell_replaces_name(tmp_path):
    path = tmp_path / "jokes.db"
    _seed(path, ["%name walked in, and %name left"])
    with JokeBook(path) as book:
        assert book.tell("Alice") == "Alice walked in, and Alice left"


def test_count(tmp_path):
    path = tmp_path / "jokes.db"
    _seed(path, ["a", "b", "c"])
    with JokeBook(path) as book:
        assert book.count() == 3
        assert book.tell("x") in {"a", "b", "c"}


def test_empty_book_raises(tmp_path):
    with JokeBook(tmp_path / "jokes.db") as book:
        assert book.count() == 0
        with pytest.raises(LookupError):
            book.tell("x")