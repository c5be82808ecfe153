"""Drift bottles: messages thrown into a shared sea and picked up at random."""

from __future__ import annotations

import re
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime

_POLY_ISO = 0xD800000000000000
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _make_table() -> list[int]:
    table = []
    for i in range(256):
        crc = i
        for _ in range(8):
            crc = (crc >> 1) ^ _POLY_ISO if crc & 1 else crc >> 1
        table.append(crc)
    return table


_TABLE = _make_table()

_UNESCAPE = {"&#91;": "[", "&#93;": "]", "&amp;": "&"}
_UNESCAPE_RE = re.compile("|".join(map(re.escape, _UNESCAPE)))


def crc64_iso(data: bytes) -> int:
    """CRC-64 with the ISO polynomial, as an unsigned 64-bit integer."""
    crc = _MASK64
    for byte in data:
        crc = _TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ _MASK64


@dataclass
class Bottle:
    id: int
    qq: int
    name: str
    msg: str
    grp: int
    time: str


def make_bottle(qq: int, grp: int, time: str, name: str, msg: str) -> Bottle:
    """Build a bottle whose id hashes the group, sender, time, name and text."""
    key = f"{grp}_{qq}_{time}_{name}_{msg}".encode("utf-8")
    ident = int.from_bytes(crc64_iso(key).to_bytes(8, "big"), "big", signed=True)
    return Bottle(id=ident, qq=qq, name=name, msg=msg, grp=grp, time=time)


def format_time(timestamp: int) -> str:
    """Format a Unix timestamp in local time."""
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def prepare_throw(qq: int, grp: int, timestamp: int, name: str, raw: str) -> Bottle:
    """Unescape the raw message and build a bottle; short messages are refused."""
    msg = _UNESCAPE_RE.sub(lambda m: _UNESCAPE[m.group(0)], raw)
    if len(msg) < 10:
        raise ValueError("需要投递的内容过少( ")
    return make_bottle(qq, grp, format_time(timestamp), name, msg)


def format_bottle(bottle: Bottle, botname: str) -> str:
    return (
        f"{botname}试着帮你捞出来了这个~\nID:{bottle.id}"
        f"\n投递人: {bottle.name}({bottle.qq})"
        f"\n群号: {bottle.grp}"
        f"\n时间: {bottle.time}"
        f"\n内容: \n{bottle.msg}"
    )


class Sea:
    """The SQLite-backed store of thrown bottles."""

    def __init__(self, path):
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        with self._lock, self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS global ("
                "id INTEGER PRIMARY KEY NOT NULL, qq INTEGER, Name TEXT, "
                "msg TEXT, grp INTEGER, time TEXT)"
            )

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def throw(self, bottle: Bottle) -> None:
        with self._lock, self._conn:
            self._conn.execute(
                "REPLACE INTO global (id, qq, Name, msg, grp, time) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (bottle.id, bottle.qq, bottle.name, bottle.msg, bottle.grp, bottle.time),
            )

    def pick(self) -> Bottle:
        """Return a random bottle from the sea."""
        with self._lock:
            row = self._conn.execute(
                "SELECT id, qq, Name, msg, grp, time FROM global "
                "ORDER BY RANDOM() LIMIT 1"
            ).fetchone()
        if row is None:
            raise LookupError("no rows in result set")
        ident, qq, name, msg, grp, time = row
        return Bottle(id=ident, qq=qq, name=name, msg=msg, grp=grp, time=time)

    def close(self) -> None:
        with self._lock:
            self._conn.close()