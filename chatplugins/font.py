"""Render arbitrary text to a picture in a chosen font."""

from __future__ import annotations

import base64
import io
import re

from PIL import Image, ImageDraw, ImageFont

_COMMAND = re.compile(r"(用.+)?渲染文字([\s\S]+)")

FONT_CHOICES = {
    "用终末体": "syumatu",
    "用终末变体": "nisi",
    "用紫罗兰体": "violet",
    "用樱酥体": "sakura",
    "用Consolas体": "consolas",
}
DEFAULT_FONT = "default"

_PADDING = 10


def parse_command(text: str) -> tuple[str, str] | None:
    """Split "(用<font>)渲染文字<text>" into (font choice, text), or None."""
    match = _COMMAND.fullmatch(text)
    if not match:
        return None
    return match.group(1) or "", match.group(2)


def resolve_font(choice: str, fonts) -> str:
    """Font file for a choice such as "用樱酥体"; unknown choices use the default."""
    return fonts[FONT_CHOICES.get(choice, DEFAULT_FONT)]


def _load_font(path, size: int):
    if path is None:
        try:
            return ImageFont.load_default(size=size)
        except TypeError:
            return ImageFont.load_default()
    return ImageFont.truetype(str(path), size)


def _line_height(font) -> int:
    try:
        ascent, descent = font.getmetrics()
        return ascent + descent
    except AttributeError:
        box = font.getbbox("Ag")
        return box[3] - box[1]


def _wrap(text: str, font, limit: float) -> list[str]:
    lines = []
    for paragraph in text.split("\n"):
        current = ""
        for char in paragraph:
            if current and font.getlength(current + char) > limit:
                lines.append(current)
                current = char
            else:
                current += char
        lines.append(current)
    return lines


def render_text(text: str, font_path, width: int, font_size: int) -> Image.Image:
    """Draw text, wrapped to the given width, in black on white."""
    font = _load_font(font_path, font_size)
    lines = _wrap(text, font, width - 2 * _PADDING)
    step = _line_height(font) + font_size // 4
    image = Image.new("RGB", (width, 2 * _PADDING + step * len(lines)), "white")
    draw = ImageDraw.Draw(image)
    for number, line in enumerate(lines):
        draw.text((_PADDING, _PADDING + number * step), line, fill="black", font=font)
    return image


def render_to_base64(text: str, font_path, width: int, font_size: int) -> str:
    """Render text and return the PNG as base64."""
    buffer = io.BytesIO()
    render_text(text, font_path, width, font_size).save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")