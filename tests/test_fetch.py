import pytest
import requests

from graduatoria import fetch
from graduatoria.fetch import FetchError, fetch_results, fetch_universities


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def test_fetch_results_ok(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse(payload=[{'etichetta': 'A'}])

    monkeypatch.setattr(fetch.requests, 'get', fake_get)
    assert fetch_results('http://example.test/data.json') == [{'etichetta': 'A'}]
    assert calls == [('http://example.test/data.json', 10)]


def test_non_200_raises(monkeypatch):
    monkeypatch.setattr(fetch.requests, 'get', lambda url, timeout: FakeResponse(503, []))
    with pytest.raises(FetchError):
        fetch_universities('http://example.test/u.json')


def test_network_error_raises(monkeypatch):
    def boom(url, timeout):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(fetch.requests, 'get', boom)
    with pytest.raises(FetchError):
        fetch_results('http://example.test/data.json')


def test_invalid_json_raises(monkeypatch):
    monkeypatch.setattr(fetch.requests, 'get', lambda url, timeout: FakeResponse(200, None))
    with pytest.raises(FetchError):
        fetch_results('http://example.test/data.json')
