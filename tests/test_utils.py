import io
import json

import pytest
import requests

from zigtype.codegen import TypeGraph
from zigtype.utils import (
    JSONLoaderError,
    load_json,
    load_json_from_stream,
    load_json_from_url,
    load_type_graph,
)


class FakeResponse:
    def __init__(self, payload, content_type="application/json", status_code=200):
        self.payload = payload
        self.headers = {"content-type": content_type}
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(response=self)

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


def test_load_type_graph_from_file(tmp_path, user_graph):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(user_graph), encoding="utf-8")

    source, graph = load_type_graph(file_path=path)

    assert source == str(path)
    assert isinstance(graph, TypeGraph)
    assert list(graph.top_levels) == ["Root"]


def test_invalid_json_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(JSONLoaderError, match="Invalid JSON"):
        load_json(file_path=path)


def test_load_json_needs_exactly_one_source(tmp_path):
    with pytest.raises(JSONLoaderError, match="Either"):
        load_json()
    with pytest.raises(JSONLoaderError, match="both"):
        load_json(file_path=tmp_path / "a.json", url="https://example.com/a.json")


def test_load_json_from_stream():
    assert load_json_from_stream(io.StringIO('{"a": 1}')) == ("<stdin>", {"a": 1})

    with pytest.raises(JSONLoaderError, match="<stdin>"):
        load_json_from_stream(io.StringIO("nope"))


def test_load_json_from_url(monkeypatch, user_graph):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse(user_graph)

    monkeypatch.setattr(requests, "get", fake_get)

    source, graph = load_type_graph(url="https://example.com/graph.json")

    assert source == "https://example.com/graph.json"
    assert calls == [("https://example.com/graph.json", 30)]
    assert "Root" in graph.top_levels


def test_url_must_be_http():
    with pytest.raises(JSONLoaderError, match="Invalid URL"):
        load_json_from_url("ftp://example.com/graph.json")


def test_url_http_error(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse({}, status_code=404))

    with pytest.raises(JSONLoaderError, match="HTTP error 404"):
        load_json_from_url("https://example.com/graph.json")


def test_url_timeout(monkeypatch):
    def fake_get(url, timeout):
        raise requests.exceptions.Timeout()

    monkeypatch.setattr(requests, "get", fake_get)

    with pytest.raises(JSONLoaderError, match="timeout"):
        load_json_from_url("https://example.com/graph.json")


def test_url_invalid_json_body(monkeypatch):
    error = requests.exceptions.JSONDecodeError("Expecting value", "oops", 0)
    monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse(error, "text/plain"))

    with pytest.raises(JSONLoaderError, match="Invalid JSON response"):
        load_json_from_url("https://example.com/graph")
