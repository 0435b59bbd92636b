# src/taskpad/offline/http.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from urllib.parse import urljoin, urlsplit

import requests

logger = logging.getLogger(__name__)

# Response types as the Fetch standard names them.
BASIC = "basic"  # same-origin
CORS = "cors"  # cross-origin
DEFAULT = "default"  # synthesized locally


def origin_of(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}".lower()


def resolve_url(base: str, url: str) -> str:
    """Resolve a path such as '/taskpad/app.js' against the site origin."""
    return urljoin(base.rstrip("/") + "/", url)


@dataclass(frozen=True, slots=True)
class Request:
    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Response:
    url: str
    status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)
    status_text: str = ""
    type: str = DEFAULT

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299

    def clone(self) -> Response:
        return replace(self, headers=dict(self.headers))

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")


class RequestsFetcher:
    """
    Network port of the cache worker on top of a requests.Session.

    Responses from the configured origin are typed 'basic', everything else
    'cors'. Transport errors (requests.RequestException) propagate.
    """

    def __init__(self, origin: str, *, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self._origin = origin_of(origin)
        self._timeout = timeout
        self._session = session or requests.Session()

    def fetch(self, request: Request) -> Response:
        resp = self._session.request(
            request.method,
            request.url,
            headers=request.headers or None,
            timeout=self._timeout,
        )
        rtype = BASIC if origin_of(resp.url or request.url) == self._origin else CORS
        logger.debug("fetch %s %s -> %s (%s)", request.method, request.url, resp.status_code, rtype)
        return Response(
            url=resp.url or request.url,
            status=resp.status_code,
            body=resp.content,
            headers=dict(resp.headers),
            status_text=resp.reason or "",
            type=rtype,
        )

    def close(self) -> None:
        self._session.close()
