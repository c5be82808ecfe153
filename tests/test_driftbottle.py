from datetime import datetime

import pytest

from chatplugins.driftbottle import (
    Sea,
    crc64_iso,
    format_bottle,
    format_time,
    make_bottle,
    prepare_throw,
)


def test_crc64_iso_check_value():
    assert crc64_iso(b"123456789") == 0xB90956C775A41001


def test_crc64_empty_is_zero():
    assert crc64_iso(b"") == 0


def test_make_bottle_is_deterministic():
    a = make_bottle(1, 2, "2022-01-01 00:00:00", "n", "message text")
    b = make_bottle(1, 2, "2022-01-01 00:00:00", "n", "message text")
    assert a == b
    assert -(2**63) <= a.id < 2**63
    assert make_bottle(1, 3, a.time, "n", a.msg).id != a.id


def test_format_time_round_trip():
    ts = 1_600_000_000
    text = format_time(ts)
    assert datetime.strptime(text, "%Y-%m-%d %H:%M:%S").timestamp() == ts


def test_prepare_throw_rejects_short():
    with pytest.raises(ValueError):
        prepare_throw(1, 2, 0, "n", "短消息")


def test_prepare_throw_unescapes():
    bottle = prepare_throw(1, 2, 0, "n", "&#91;hello&#93; world!")
    assert bottle.msg == "[hello] world!"
    assert bottle.time == format_time(0)


def test_format_bottle_contains_fields():
    bottle = make_bottle(11, 22, "t", "alice", "body text here")
    text = format_bottle(bottle, "bot")
    assert text.startswith("bot试着帮你捞出来了这个~\nID:" + str(bottle.id))
    assert "\n投递人: alice(11)" in text
    assert text.endswith("\n内容: \nbody text here")


def test_sea_round_trip(tmp_path):
    with Sea(tmp_path / "sea.db") as sea:
        bottle = make_bottle(5, 6, "t", "bob", "a long enough message")
        sea.throw(bottle)
        assert sea.pick() == bottle


def test_sea_empty_pick_raises(tmp_path):
    with Sea(tmp_path / "sea.db") as sea:
        with pytest.raises(LookupError):
            sea.pick()