# tests/test_http.py

from __future__ import annotations

import pytest
import requests

from taskpad.offline.http import BASIC, CORS, Request, RequestsFetcher

ORIGIN = "http://localhost:8000"


def _response(url: str, *, status: int = 200, body: bytes = b"ok", reason: str = "OK") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body
    resp.url = url
    resp.reason = reason
    resp.headers.update({"Content-Type": "text/plain"})
    return resp


class StubSession:
    """
    Stands in for requests.Session.

    - final_urls maps a requested URL to the URL the response ends up at (redirects)
    - calls captures (method, url, headers, timeout)
    """

    def __init__(self, final_urls: dict[str, str] | None = None, *, fail: bool = False) -> None:
        self.final_urls = dict(final_urls or {})
        self.fail = fail
        self.calls: list[tuple[str, str, dict | None, float | None]] = []
        self.closed = False

    def request(self, method, url, headers=None, timeout=None):
        self.calls.append((method, url, headers, timeout))
        if self.fail:
            raise requests.ConnectionError("network unreachable")
        return _response(self.final_urls.get(url, url), body=url.encode())

    def close(self) -> None:
        self.closed = True


def test_same_origin_response_is_basic() -> None:
    session = StubSession()
    fetcher = RequestsFetcher(ORIGIN + "/", timeout=2.5, session=session)

    resp = fetcher.fetch(Request(url=ORIGIN + "/taskpad/app.js"))

    assert resp.type == BASIC
    assert resp.status == 200
    assert resp.status_text == "OK"
    assert resp.body == (ORIGIN + "/taskpad/app.js").encode()
    assert resp.headers["Content-Type"] == "text/plain"
    assert session.calls == [("GET", ORIGIN + "/taskpad/app.js", None, 2.5)]


def test_cross_origin_response_is_cors() -> None:
    fetcher = RequestsFetcher(ORIGIN, session=StubSession())

    resp = fetcher.fetch(Request(url="https://cdn.example.com/lib.js"))

    assert resp.type == CORS


def test_redirect_to_other_origin_is_cors() -> None:
    start = ORIGIN + "/taskpad/logo.png"
    final = "https://images.example.com/logo.png"
    fetcher = RequestsFetcher(ORIGIN, session=StubSession({start: final}))

    resp = fetcher.fetch(Request(url=start))

    assert resp.type == CORS
    assert resp.url == final


def test_origin_comparison_ignores_host_case() -> None:
    fetcher = RequestsFetcher("http://LocalHost:8000", session=StubSession())

    assert fetcher.fetch(Request(url=ORIGIN + "/taskpad/")).type == BASIC


def test_transport_errors_propagate_and_close_closes_session() -> None:
    session = StubSession(fail=True)
    fetcher = RequestsFetcher(ORIGIN, session=session)

    with pytest.raises(requests.RequestException):
        fetcher.fetch(Request(url=ORIGIN + "/taskpad/"))

    fetcher.close()
    assert session.closed is True
