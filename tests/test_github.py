import json
from unittest import mock

import pytest

from chatplugins import github

REPO = {
    "full_name": "octo/demo",
    "description": "demo repo",
    "watchers": 5,
    "forks": 2,
    "open_issues": 1,
    "language": None,
    "license": {"key": "mit"},
    "pushed_at": "2022-01-01T00:00:00Z",
    "html_url": "https://example.com/octo/demo",
}


def _fetch_ok(url, headers):
    return json.dumps({"total_count": 1, "items": [REPO]}).encode()


def test_notnull():
    assert github.notnull("") == "None"
    assert github.notnull("Go") == "Go"


def test_parse_command():
    assert github.parse_command(">github -p foo") == ("-p ", "foo")
    assert github.parse_command(">github foo bar") == ("", "foo bar")
    assert github.parse_command("github foo") is None


def test_search_encodes_query_and_returns_first_item():
    seen = []

    def fetch(url, headers):
        seen.append((url, headers))
        return _fetch_ok(url, headers)

    assert github.search("hello world", fetch) == REPO
    url, headers = seen[0]
    assert url.startswith(github.SEARCH_API + "?")
    assert "q=hello+world" in url
    assert headers == github.HEADERS


def test_search_without_results():
    with pytest.raises(LookupError):
        github.search("x", lambda url, headers: b'{"total_count": 0, "items": []}')


def test_format_repo_fields():
    text = github.format_repo(REPO)
    lines = text.splitlines()
    assert lines[0] == "octo/demo"
    assert "Star/Fork/Issue: 5/2/1" in lines
    assert "Language: None" in lines
    assert "License: MIT" in lines
    assert text.endswith("Jump: https://example.com/octo/demo\n")


def test_image_url():
    assert github.image_url(REPO) == github.OPENGRAPH + "octo/demo"


def test_respond_modes():
    picture = github.respond(">github -p demo", _fetch_ok)
    assert picture == [("image", github.image_url(REPO))]
    text_only = github.respond(">github -t demo", _fetch_ok)
    assert text_only == [("text", github.format_repo(REPO))]
    both = github.respond(">github demo", _fetch_ok)
    assert [kind for kind, _ in both] == ["text", "image"]
    assert github.respond("hello", _fetch_ok) is None


def test_respond_reports_errors():
    def failing(url, headers):
        raise OSError("code 500")

    assert github.respond(">github demo", failing) == [("text", "ERROR: code 500")]
    empty = github.respond(">github demo", lambda u, h: b'{"total_count": 0}')
    assert empty == [("text", "ERROR: 没有找到这样的仓库")]


def test_net_get_raises_on_bad_status():
    response = mock.MagicMock(status_code=404, content=b"missing")
    with mock.patch("chatplugins.github.requests.get", return_value=response):
        with pytest.raises(OSError, match="code 404"):
            github.net_get("https://example.com", {})


def test_net_get_returns_body():
    response = mock.MagicMock(status_code=200, content=b"body")
    with mock.patch("chatplugins.github.requests.get", return_value=response):
        assert github.net_get("https://example.com", {}) == b"body"