"""GitHub repository search answering ">github" chat commands."""

from __future__ import annotations

import json
import re
from typing import Callable
from urllib.parse import urlencode

import requests

SEARCH_API = "https://api.github.com/search/repositories"
OPENGRAPH = "https://opengraph.githubassets.com/0/"
HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/88.0.4324.182 Safari/537.36"
    )
}

_COMMAND = re.compile(r">github\s(-.{1,10}? )?(.*)", re.ASCII)


def notnull(text: str) -> str:
    """Return the text, or "None" when it is empty."""
    return text if text else "None"


def net_get(url: str, headers) -> bytes:
    """GET a URL; any status other than 200 is an error."""
    response = requests.get(url, headers=dict(headers), timeout=30)
    body = response.content
    if response.status_code != 200:
        raise OSError(f"code {response.status_code}")
    return body


def parse_command(text: str) -> tuple[str, str] | None:
    """Split ">github [-x ]query" into (flag, query), or None."""
    match = _COMMAND.fullmatch(text)
    if not match:
        return None
    return match.group(1) or "", match.group(2)


def search(query: str, fetch: Callable | None = None) -> dict:
    """Return the first repository found for a query."""
    url = f"{SEARCH_API}?{urlencode({'q': query})}"
    info = json.loads((fetch or net_get)(url, HEADERS))
    items = info.get("items") or []
    if not info.get("total_count") or not items:
        raise LookupError("没有找到这样的仓库")
    return items[0]


def _str(value) -> str:
    return value if isinstance(value, str) else ""


def _int(value) -> int:
    if isinstance(value, bool):
        return int(value)
    return int(value) if isinstance(value, (int, float)) else 0


def image_url(repo: dict) -> str:
    return OPENGRAPH + _str(repo.get("full_name"))


def format_repo(repo: dict) -> str:
    license_key = _str((repo.get("license") or {}).get("key"))
    return (
        f"{_str(repo.get('full_name'))}\n"
        f"Description: {_str(repo.get('description'))}\n"
        f"Star/Fork/Issue: {_int(repo.get('watchers'))}/{_int(repo.get('forks'))}"
        f"/{_int(repo.get('open_issues'))}\n"
        f"Language: {notnull(_str(repo.get('language')))}\n"
        f"License: {notnull(license_key.upper())}\n"
        f"Last pushed: {_str(repo.get('pushed_at'))}\n"
        f"Jump: {_str(repo.get('html_url'))}\n"
    )


def respond(text: str, fetch: Callable | None = None) -> list[tuple[str, str]] | None:
    """Answer a chat message as ("text"|"image", value) parts, or None."""
    command = parse_command(text)
    if command is None:
        return None
    flag, query = command
    try:
        repo = search(query, fetch)
    except (OSError, ValueError, LookupError) as error:
        return [("text", f"ERROR: {error}")]
    if flag == "-p ":
        return [("image", image_url(repo))]
    if flag == "-t ":
        return [("text", format_repo(repo))]
    return [("text", format_repo(repo)), ("image", image_url(repo))]