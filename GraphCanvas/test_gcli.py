"""Command-line client against a stubbed server."""
import pytest
import requests

from gcli import server as gserver
from gcli.main import main


class FakeResponse:
    def __init__(self, status_code=200, text="", json_data=None, content=b"", headers=None):
        self.status_code = status_code
        self.text = text
        self._json = json_data
        self.content = content
        self.headers = headers or {}

    def json(self):
        return self._json


@pytest.fixture
def calls(monkeypatch):
    recorded = []
    replies = {}

    def fake(method):
        def _call(url, **kwargs):
            recorded.append((method, url, kwargs.get("json")))
            return replies.get(url.rsplit("/", 1)[1], FakeResponse(text="ok"))
        return _call

    monkeypatch.setattr(gserver.requests, "post", fake("POST"))
    monkeypatch.setattr(gserver.requests, "get", fake("GET"))
    return recorded, replies


def test_add_vertex(calls, capsys):
    recorded, replies = calls
    replies["addVertice"] = FakeResponse(text="Vertex added successfully from 127.0.0.1.")
    assert main(["add-vertex", "A", "--server", "http://srv:3000/"]) == 0
    assert recorded == [("POST", "http://srv:3000/addVertice", {"name": "A"})]
    assert "Vertex added successfully" in capsys.readouterr().out


def test_add_edge(calls):
    recorded, _ = calls
    assert main(["add-edge", "A", "B", "--server", "http://srv"]) == 0
    assert recorded == [("POST", "http://srv/addEdge", {"from": "A", "to": "B"})]


def test_wrong_arity_is_a_usage_error(calls, capsys):
    recorded, _ = calls
    assert main(["add-edge", "A"]) == 2
    assert recorded == []
    assert "takes 2 name argument(s)" in capsys.readouterr().err


def test_render_writes_png(calls, tmp_path, capsys):
    _, replies = calls
    replies["graph"] = FakeResponse(
        content=b"\x89PNGdata",
        headers={"content-type": "image/png", "x-image-path": "/storage/graph_1.png"},
    )
    out = tmp_path / "g.png"
    assert main(["render", "--server", "http://srv", "--out", str(out)]) == 0
    assert out.read_bytes() == b"\x89PNGdata"
    assert "/storage/graph_1.png" in capsys.readouterr().out


def test_render_cache_hit_prints_latest(calls, capsys):
    _, replies = calls
    replies["graph"] = FakeResponse(
        json_data={"imageUrl": "u", "imagePath": "/storage/graph_1.png", "lastUpdate": "Senin"},
        headers={"content-type": "application/json"},
    )
    assert main(["render", "--server", "http://srv"]) == 0
    out = capsys.readouterr().out
    assert "unchanged" in out
    assert "/storage/graph_1.png" in out


def test_latest_without_image(calls, capsys):
    _, replies = calls
    replies["latestImage"] = FakeResponse(json_data={"imageUrl": None, "imagePath": None, "lastUpdate": None})
    assert main(["latest", "--server", "http://srv"]) == 0
    assert "No image rendered yet." in capsys.readouterr().out


def test_http_error_exit_code(calls, capsys):
    _, replies = calls
    replies["addVertice"] = FakeResponse(status_code=429, text="Too many requests. Please try again later.")
    assert main(["add-vertex", "A", "--server", "http://srv"]) == 1
    assert "HTTP 429" in capsys.readouterr().err


def test_unreachable_server(monkeypatch, capsys):
    def boom(url, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(gserver.requests, "post", boom)
    assert main(["reset", "--server", "http://srv"]) == 2
    assert "refused" in capsys.readouterr().err
