"""City epidemic statistics looked up in a published area tree."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable

import requests

TXURL = (
    "https://api.inews.qq.com/newsqa/v1/query/inner/publish/modules/list"
    "?modules=statisGradeCityDetail,diseaseh5Shelf"
)


@dataclass
class Area:
    """Statistics for one area and the areas below it."""

    name: str = ""
    today_confirm: int = 0
    today_wzz_add: Any = None
    now_confirm: int = 0
    confirm: int = 0
    dead: int = 0
    heal: int = 0
    grade: str = ""
    wzz: int = 0
    children: list[Area] = field(default_factory=list)


def _int(value, key: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} is not an integer: {value!r}")
    return value


def _str(value, key: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} is not a string: {value!r}")
    return value


def parse_area(data: dict) -> Area:
    """Build an Area from one node of the JSON area tree."""
    today = data.get("today") or {}
    total = data.get("total") or {}
    return Area(
        name=_str(data.get("name"), "name"),
        today_confirm=_int(today.get("confirm"), "confirm"),
        today_wzz_add=today.get("wzz_add"),
        now_confirm=_int(total.get("nowConfirm"), "nowConfirm"),
        confirm=_int(total.get("confirm"), "confirm"),
        dead=_int(total.get("dead"), "dead"),
        heal=_int(total.get("heal"), "heal"),
        grade=_str(total.get("grade"), "grade"),
        wzz=_int(total.get("wzz"), "wzz"),
        children=[parse_area(child) for child in data.get("children") or []],
    )


def parse_response(payload) -> tuple[list[Area], str]:
    """Return the area tree and the last update time from an API response."""
    if isinstance(payload, (bytes, bytearray, str)):
        payload = json.loads(payload)
    shelf = (payload.get("data") or {}).get("diseaseh5Shelf") or {}
    tree = [parse_area(node) for node in shelf.get("areaTree") or []]
    return tree, _str(shelf.get("lastUpdateTime"), "lastUpdateTime")


def find_city(area: Area | None, name: str) -> Area | None:
    """Depth-first search for the area with the given name."""
    if area is None:
        return None
    if area.name == name:
        return area
    for child in area.children:
        found = find_city(child, name)
        if found is not None:
            return found
    return None


def _fetch(url: str) -> bytes:
    response = requests.get(url, timeout=30)
    response.raise_for_status()
    return response.content


def query_epidemic(city: str, fetch: Callable[[str], bytes] | None = None):
    """Fetch the statistics and return (area or None, last update time)."""
    tree, update_time = parse_response((fetch or _fetch)(TXURL))
    if not tree:
        raise LookupError("empty area tree")
    return find_city(tree[0], city), update_time


def _show(value) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_report(area: Area, update_time: str) -> str:
    return (
        f"【{area.name}】疫情数据\n"
        f"新增人数：{area.today_confirm}\n"
        f"现有确诊：{area.now_confirm}\n"
        f"累计确诊：{area.confirm}\n"
        f"治愈人数：{area.heal}\n"
        f"死亡人数：{area.dead}\n"
        f"无症状人数：{area.wzz}\n"
        f"新增无症状：{_show(area.today_wzz_add)}\n"
        f"更新时间：\n『{update_time}』"
    )


def handle(city: str, fetch: Callable[[str], bytes] | None = None) -> str:
    """Answer a "<city>疫情" query."""
    if city == "":
        return "你还没有输入城市名字呢！"
    try:
        area, update_time = query_epidemic(city, fetch)
    except (OSError, ValueError, LookupError) as error:
        return f"ERROR: {error}"
    if area is None:
        return f"没有找到【{city}】城市的疫情数据."
    return format_report(area, update_time)