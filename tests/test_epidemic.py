import json

import pytest

from chatplugins.epidemic import (
    TXURL,
    Area,
    find_city,
    format_report,
    handle,
    parse_area,
    parse_response,
    query_epidemic,
)


def _node(name, confirm=1, children=(), wzz_add=2):
    return {
        "name": name,
        "today": {"confirm": confirm, "wzz_add": wzz_add},
        "total": {
            "nowConfirm": 10, "confirm": 20, "dead": 3,
            "heal": 7, "grade": "low", "wzz": 4,
        },
        "children": list(children),
    }


PAYLOAD = {
    "data": {
        "diseaseh5Shelf": {
            "lastUpdateTime": "2022-12-01 10:00:00",
            "areaTree": [
                _node("中国", children=[
                    _node("广东", children=[_node("广州", confirm=5), _node("深圳")]),
                    _node("北京"),
                ])
            ],
        }
    }
}


def _fetch(url):
    assert url == TXURL
    return json.dumps(PAYLOAD).encode("utf-8")


def test_parse_area_fields():
    area = parse_area(_node("广州", confirm=5))
    assert area.name == "广州"
    assert area.today_confirm == 5
    assert area.today_wzz_add == 2
    assert (area.now_confirm, area.confirm, area.dead, area.heal, area.wzz) == (10, 20, 3, 7, 4)
    assert area.grade == "low"
    assert area.children == []


def test_parse_area_missing_fields_default():
    area = parse_area({"name": "x"})
    assert area == Area(name="x")


def test_parse_area_rejects_bad_int():
    with pytest.raises(ValueError):
        parse_area({"name": "x", "total": {"confirm": "many"}})


def test_parse_response_roundtrip():
    tree, when = parse_response(json.dumps(PAYLOAD))
    assert when == "2022-12-01 10:00:00"
    assert [c.name for c in tree[0].children] == ["广东", "北京"]


def test_find_city_nested():
    tree, _ = parse_response(PAYLOAD)
    found = find_city(tree[0], "广州")
    assert found is not None and found.today_confirm == 5


def test_find_city_root_and_missing():
    tree, _ = parse_response(PAYLOAD)
    assert find_city(tree[0], "中国") is tree[0]
    assert find_city(tree[0], "上海") is None
    assert find_city(None, "中国") is None


def test_query_epidemic():
    area, when = query_epidemic("深圳", _fetch)
    assert area.name == "深圳"
    assert when == "2022-12-01 10:00:00"


def test_query_epidemic_empty_tree():
    with pytest.raises(LookupError):
        query_epidemic("x", lambda url: b'{"data": {"diseaseh5Shelf": {"areaTree": []}}}')


def test_format_report():
    area = parse_area(_node("广州", confirm=5))
    text = format_report(area, "T")
    assert text == (
        "【广州】疫情数据\n新增人数：5\n现有确诊：10\n累计确诊：20\n"
        "治愈人数：7\n死亡人数：3\n无症状人数：4\n新增无症状：2\n更新时间：\n『T』"
    )


def test_format_report_missing_wzz_add():
    area = parse_area({"name": "x"})
    assert "新增无症状：<nil>\n" in format_report(area, "T")


def test_handle_empty_city():
    assert handle("", _fetch) == "你还没有输入城市名字呢！"


def test_handle_not_found():
    assert handle("上海", _fetch) == "没有找到【上海】城市的疫情数据."


def test_handle_found():
    assert handle("北京", _fetch).startswith("【北京】疫情数据\n")


def test_handle_fetch_error():
    def broken(url):
        raise OSError("boom")

    assert handle("北京", broken) == "ERROR: boom"


def test_handle_bad_json():
    assert handle("北京", lambda url: b"not json").startswith("ERROR: ")