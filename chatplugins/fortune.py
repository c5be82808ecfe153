"""Daily fortune slips drawn on a background picture."""

from __future__ import annotations

import datetime
import hashlib
import io
import math
import zipfile as _zipfile

from PIL import Image, ImageDraw, ImageFont

IMAGES = "data/Fortune/"
OMIKUJI_JSON = "data/Fortune/text.json"
FONT = "data/Font/sakura.ttf"
CACHE = IMAGES + "cache/"

TABLE = (
    "车万", "DC4", "爱因斯坦", "星空列车", "樱云之恋", "富婆妹", "李清歌", "公主连结",
    "原神", "明日方舟", "碧蓝航线", "碧蓝幻想", "战双", "阴阳师", "赛马娘", "东方归言录",
    "奇异恩典", "夏日口袋", "ASoul",
)
DEFAULT_STYLE = "车万"
_INDEX = {name: number for number, name in enumerate(TABLE)}


def style_index(name: str) -> int | None:
    """Index of a background style, or None if there is no such style."""
    return _INDEX.get(name)


def style_for(value: int) -> str:
    """Background style stored in a setting value; unknown values give the default."""
    number = value & 0xFF
    return TABLE[number] if number < len(TABLE) else DEFAULT_STYLE


def offset(total: int, now: int, distance: float) -> float:
    if total % 2 == 0:
        return (float(now - total // 2) - 1) * distance
    return (float(now - total // 2) - 1.5) * distance


def rows(total: int, div: int) -> int:
    """Number of columns of height div needed for total characters."""
    return math.ceil(total / div)


def text_positions(text: str, char_width: float, char_height: float):
    """Where each character of the slip text goes: (char, x, baseline y)."""
    count = len(text)
    columns = rows(count, 9)
    positions = []
    if columns == 2:
        div = rows(count, 2)
        for i, char in enumerate(text):
            column = rows(i + 1, div)
            height = min(count - (column - 1) * div, div)
            row = i % div + 1
            if column == 2:
                row += 9 - height
            x = -offset(columns, column, char_width) + 115
            positions.append((char, x, offset(9, row, char_height) + 320.0))
        return positions
    for i, char in enumerate(text):
        column = rows(i + 1, 9)
        height = min(count - (column - 1) * 9, 9)
        row = i % 9 + 1
        x = -offset(columns, column, char_width) + 115
        positions.append((char, x, offset(height, row, char_height) + 320.0))
    return positions


def pick_index(user_id: int, count: int, day: datetime.date | None = None) -> int:
    """An index that stays the same for one user during one day."""
    if count <= 0:
        raise ValueError("nothing to pick from")
    day = day or datetime.date.today()
    digest = hashlib.sha256(f"{user_id}|{day.isoformat()}".encode()).digest()
    return int.from_bytes(digest[:8], "big") % count


def random_background(zip_path, user_id: int, day: datetime.date | None = None):
    """Open the day's background picture for a user: (image, index in the archive)."""
    with _zipfile.ZipFile(zip_path) as archive:
        entries = archive.infolist()
        index = pick_index(user_id, len(entries), day)
        data = archive.read(entries[index])
    image = Image.open(io.BytesIO(data))
    image.load()
    return image, index


def cache_key(zipfile: str, index: int, title: str, text: str) -> str:
    """Cache file name of a drawn slip."""
    return hashlib.md5(f"{zipfile}{index}{title}{text}".encode()).hexdigest()


def _load_font(path, size: int):
    if path is None:
        try:
            return ImageFont.load_default(size=size)
        except TypeError:
            return ImageFont.load_default()
    return ImageFont.truetype(str(path), size)


def _metrics(font) -> tuple[int, int]:
    try:
        ascent, descent = font.getmetrics()
        return ascent, ascent + descent
    except AttributeError:
        box = font.getbbox("Ag")
        return box[3], box[3] - box[1]


def _width(font, text: str) -> float:
    try:
        return font.getlength(text)
    except UnicodeError:
        return font.getlength("M") * len(text)


def draw(background: Image.Image, title: str, text: str, font_path=FONT) -> Image.Image:
    """Draw the title and the vertical slip text over the background."""
    width, height = background.size
    canvas = Image.new("RGBA", (height, width))
    canvas.paste(background.convert("RGBA"), (0, 0))
    pen = ImageDraw.Draw(canvas)

    title_font = _load_font(font_path, 45)
    ascent, _ = _metrics(title_font)
    title_width = _width(title_font, title)
    pen.text((140 - title_width / 2, 112 - ascent), title, fill="white", font=title_font)

    body_font = _load_font(font_path, 23)
    ascent, line_height = _metrics(body_font)
    char_width = _width(body_font, "测") + 10
    char_height = line_height + 10
    for char, x, y in text_positions(text, char_width, char_height):
        pen.text((x, y - ascent), char, fill="black", font=body_font)
    return canvas