import sqlite3

import pytest

from chatplugins.diana import HENTAI_ID, EssayStore, essay_id, handle


@pytest.fixture
def store(tmp_path):
    s = EssayStore(tmp_path / "text.db")
    yield s
    s.close()


def test_essay_id_is_deterministic_and_signed():
    assert essay_id("嘉然") == essay_id("嘉然")
    assert essay_id("a") != essay_id("b")
    assert -(2**63) <= essay_id("anything") < 2**63


def test_add_and_random_round_trip(store):
    ident = store.add("今天也想嘉然")
    assert ident == essay_id("今天也想嘉然")
    assert store.random() == "今天也想嘉然"
    assert store.count() == 1


def test_adding_same_text_replaces(store):
    store.add("same")
    store.add("same")
    assert store.count() == 1


def test_random_on_empty_raises(store):
    with pytest.raises(LookupError):
        store.random()


def test_hentai_missing_raises(store):
    store.add("not special")
    with pytest.raises(LookupError):
        store.hentai()


def test_hentai_finds_fixed_id(tmp_path):
    path = tmp_path / "text.db"
    EssayStore(path).close()
    conn = sqlite3.connect(path)
    with conn:
        conn.execute("INSERT INTO text (id, data) VALUES (?, ?)", (HENTAI_ID, "病"))
    conn.close()
    with EssayStore(path) as s:
        assert s.hentai() == "病"


def test_handle_teach_requires_admin(store):
    assert handle(store, "教你一篇小作文hello", False) is None
    assert store.count() == 0
    assert handle(store, "教你一篇小作文hello", True) == "记住啦!"
    assert handle(store, "小作文", False) == "hello"


def test_handle_reports_errors_as_text(store):
    assert handle(store, "发大病", False) == "no rows in result set"
    assert handle(store, "别的", True) is None