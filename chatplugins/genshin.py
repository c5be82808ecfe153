"""Simulated Genshin ten-pull gacha drawn from a picture archive."""

from __future__ import annotations

import io
import random
import re
import threading
import zipfile
from dataclasses import dataclass, field

from PIL import Image

_NAME = re.compile(r"_(.*)\.png")
_PREFIX_LEN = len("Genshin/")

CANVAS_SIZE = (1920, 1080)
CANVAS_COLOR = (50, 50, 50, 255)
FIRST_CARD_X = 230
CARD_STEP = 146
SHARE_ICON_POS = (1270, 945)

_STAR_ICONS = {
    "ThreeStar.png": 3,
    "FourStar.png": 4,
    "FiveStar.png": 5,
}


def is_five_star_mode(value: int) -> bool:
    """Whether a stored setting selects the five-star pool."""
    return value & 1 == 1


def set_mode(value: int, five_star: bool) -> int:
    """Return the setting with the five-star bit switched on or off."""
    return value | 1 if five_star else value & ~1


def item_name(filename: str) -> str:
    """Display name of an item picture such as "five/Fire_Diluc.png"."""
    match = _NAME.search(filename)
    if match is None:
        raise ValueError(f"not an item picture: {filename!r}")
    return match.group(1)


def reply(names, num: int, previous: str) -> str:
    """Text listing five-star characters (num 1) or weapons (num 2)."""
    if num == 1:
        header = "★五星角色★\n"
    elif num == 2 and previous:
        header = "\n★五星武器★\n"
    else:
        header = "★五星武器★\n"
    return header + "".join(f"{item_name(name)} * " for name in names)


@dataclass
class Pull:
    """Result of one roll.

    Each card is (background, item, star icon, element icon), all names of
    entries in the archive, in the order they are shown.
    """

    cards: list[tuple[str, str, str, str]] = field(default_factory=list)
    text: str = ""
    lucky: bool = False


class GachaArchive:
    """A zip of gacha pictures and the pull counter that goes with it."""

    def __init__(self, path):
        self._zip = zipfile.ZipFile(path)
        self._lock = threading.Lock()
        self._entries: dict[str, zipfile.ZipInfo] = {}
        self._tree: dict[str, list[str]] = {}
        self._stars: dict[int, str] = {}
        self.total = 0
        self.rng = random.Random()
        for info in self._zip.infolist():
            if info.is_dir():
                self._tree[info.filename] = []
                continue
            name = info.filename[_PREFIX_LEN:]
            self._entries[name] = info
            cut = name.rfind("/")
            if cut < 0:
                self._tree[name] = [name]
                continue
            folder = name[:cut]
            if not folder:
                continue
            self._tree.setdefault(folder, []).append(name)
            if folder == "gacha" and name[cut + 1:] in _STAR_ICONS:
                self._stars[_STAR_ICONS[name[cut + 1:]]] = name

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _pool(self, key: str) -> list[str]:
        pool = self._tree.get(key)
        if not pool:
            raise LookupError(f"missing entry in archive: {key}")
        return pool

    def _star(self, level: int) -> str:
        try:
            return self._stars[level]
        except KeyError:
            raise LookupError(f"missing star icon for {level} stars") from None

    def _icon(self, name: str) -> str:
        stem = name[name.rfind("/") + 1:name.find("_")]
        return self._pool(stem + ".png")[0]

    def roll(self, count: int, five_star_mode: bool) -> Pull:
        """Draw count items; every ninth default roll starts with a five-star."""
        rng = self.rng
        five_bg = self._pool("five_bg.jpg")[0]
        four_bg = self._pool("four_bg.jpg")[0]
        three_bg = self._pool("three_bg.jpg")[0]

        fives: list[str] = []
        five_arms: list[str] = []
        fours: list[str] = []
        four_arms: list[str] = []
        three_arms: list[str] = []

        def five_star():
            if rng.randrange(2) == 0:
                fives.append(rng.choice(self._pool("five")))
            else:
                five_arms.append(rng.choice(self._pool("five2")))

        def four_star():
            if rng.randrange(2) == 0:
                fours.append(rng.choice(self._pool("four")))
            else:
                four_arms.append(rng.choice(self._pool("four2")))

        with self._lock:
            if self.total % 9 == 0:
                five_star()
                count -= 1
            if five_star_mode:
                for _ in range(count):
                    five_star()
            else:
                for _ in range(count):
                    roll = rng.randrange(1000)
                    if roll <= 800:
                        three_arms.append(rng.choice(self._pool("Three")))
                    elif roll <= 885:
                        fours.append(rng.choice(self._pool("four")))
                    elif roll <= 970:
                        four_arms.append(rng.choice(self._pool("four2")))
                    elif roll <= 985:
                        fives.append(rng.choice(self._pool("five")))
                    else:
                        five_arms.append(rng.choice(self._pool("five2")))
                if not fours and not four_arms and three_arms:
                    three_arms.pop()
                    four_star()
                self.total += 1

        pull = Pull()

        def add(items, star_level, background):
            star = self._star(star_level)
            for item in items:
                pull.cards.append((background, item, star, self._icon(item)))

        if fives:
            add(fives, 5, five_bg)
            pull.text += reply(fives, 1, pull.text)
            pull.lucky = True
        if fours:
            add(fours, 4, four_bg)
        if five_arms:
            add(five_arms, 5, five_bg)
            pull.text += reply(five_arms, 2, pull.text)
            pull.lucky = True
        if four_arms:
            add(four_arms, 4, four_bg)
        if three_arms:
            add(three_arms, 3, three_bg)
        return pull

    def _open(self, name: str) -> Image.Image:
        with self._lock:
            data = self._zip.read(self._entries[name])
        image = Image.open(io.BytesIO(data))
        image.load()
        return image.convert("RGBA")

    @staticmethod
    def _over(canvas: Image.Image, picture: Image.Image, x: int, y: int) -> None:
        width = min(picture.width, canvas.width - x)
        height = min(picture.height, canvas.height - y)
        if width <= 0 or height <= 0:
            return
        canvas.alpha_composite(picture.crop((0, 0, width, height)), (x, y))

    def render(self, pull: Pull) -> Image.Image:
        """Draw the cards of a pull onto the result screen."""
        canvas = Image.new("RGBA", CANVAS_SIZE, CANVAS_COLOR)
        self._over(canvas, self._open(self._pool("bg0.jpg")[0]), 0, 0)
        for number, card in enumerate(pull.cards):
            x = FIRST_CARD_X + CARD_STEP * number
            for name in card:
                self._over(canvas, self._open(name), x, 0)
        share = self._open(self._pool("Reply.png")[0])
        self._over(canvas, share, *SHARE_ICON_POS)
        return canvas

    def close(self) -> None:
        with self._lock:
            self._zip.close()