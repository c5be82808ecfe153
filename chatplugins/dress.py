"""Dress-up picture albums: listing, choosing and building image links."""

from __future__ import annotations

import json
import random
import re
from typing import Callable

import requests

DRESS_URL = "http://www.yoooooooooo.com/gitdress"
MALE = "dress"
FEMALE = "girldress"
DRESS_LIST_URL = DRESS_URL + "/{sex}/album/list.json"
DRESS_DETAIL_URL = DRESS_URL + "/{sex}/album/{name}/info.json"
DRESS_IMAGE_URL = DRESS_URL + "/{sex}/album/{name}/{index}-m.webp"

_INT = re.compile(r"[+-]?[0-9]+")


def _fetch(url: str) -> bytes:
    response = requests.get(url, timeout=30)
    response.raise_for_status()
    return response.content


def sex_for(matched: str) -> str:
    """Album kind for the matched command word."""
    return FEMALE if matched == "男装" else MALE


def dress_list(sex: str, fetch: Callable[[str], bytes] | None = None) -> list[str]:
    """Names of all albums of the given kind."""
    data = json.loads((fetch or _fetch)(DRESS_LIST_URL.format(sex=sex)))
    if not isinstance(data, list):
        raise ValueError("album list is not an array")
    return [item if isinstance(item, str) else json.dumps(item) for item in data]


def detail(sex: str, name: str, fetch: Callable[[str], bytes] | None = None) -> int:
    """Number of images in one album."""
    data = json.loads((fetch or _fetch)(DRESS_DETAIL_URL.format(sex=sex, name=name)))
    return len(data) if isinstance(data, list) else 0


def image_urls(sex: str, name: str, count: int) -> list[str]:
    """Links to the images of an album, numbered from 1."""
    return [
        DRESS_IMAGE_URL.format(sex=sex, name=name, index=index)
        for index in range(1, count + 1)
    ]


def menu_text(matched: str, names) -> str:
    """The numbered menu shown to the user."""
    lines = "".join(f"{number}. {name}\n" for number, name in enumerate(names))
    return f"请输入{matched}序号\n{lines}"


def choose(names, text: str) -> str:
    """Return the album named by a menu number typed by the user."""
    names = list(names)
    if not _INT.fullmatch(text):
        raise ValueError("请输入数字!")
    number = int(text)
    if not 0 <= number < len(names):
        raise IndexError("序号非法!")
    return names[number]


def random_name(names, rng: random.Random | None = None) -> str:
    """Pick one album at random."""
    names = list(names)
    if not names:
        raise ValueError("no albums to choose from")
    return (rng or random).choice(names)