# src/taskpad/offline/worker.py

from __future__ import annotations

"""
Offline cache worker.

Lifecycle, as a browser service worker has it:
- install:  open the versioned cache, pre-cache the static assets, skip waiting
- activate: drop caches left behind by previous versions, claim clients
- fetch:    once activated, cache-first; on a miss go to the network and
            keep a copy of successful same-origin (basic, 200) responses

The worker only ever touches the cache store, never the task list.
Failures are logged and fetch() returns None: offline support is an
enhancement, not something the task list depends on.
"""

import logging
from collections.abc import Iterable
from enum import StrEnum

from ..core.ports import Fetcher, Notification, WindowOpener
from .cache_storage import CacheStorage
from .http import BASIC, Request, Response, resolve_url

logger = logging.getLogger(__name__)


class WorkerState(StrEnum):
    PARSED = "parsed"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVATED = "activated"
    REDUNDANT = "redundant"


class OfflineCacheWorker:
    def __init__(
        self,
        *,
        cache_name: str,
        storage: CacheStorage,
        fetcher: Fetcher,
        origin: str,
        scope: str = "/",
        precache_urls: Iterable[str] = (),
    ) -> None:
        self.cache_name = cache_name
        self.origin = origin.rstrip("/")
        self.scope_url = resolve_url(self.origin, scope)
        self.precache_urls = [resolve_url(self.origin, u) for u in precache_urls]
        self.state = WorkerState.PARSED
        self.skip_waiting = False
        self.clients_claimed = False
        self._storage = storage
        self._fetcher = fetcher

    # ---- lifecycle ----

    def install(self) -> bool:
        """
        Pre-cache the static assets and activate immediately.

        Returns False (worker becomes redundant) if pre-caching failed.
        """
        logger.info("Offline worker %s: installing", self.cache_name)
        self.state = WorkerState.INSTALLING
        try:
            cache = self._storage.open(self.cache_name)
            n = cache.add_all(self.precache_urls, self._fetcher)
        except Exception:
            logger.exception("Offline worker %s: install failed", self.cache_name)
            self.state = WorkerState.REDUNDANT
            return False

        logger.info("Offline worker %s: %d files cached", self.cache_name, n)
        self.state = WorkerState.INSTALLED
        self.skip_waiting = True
        return True

    def activate(self) -> list[str]:
        """Delete caches from prior versions; returns the names removed."""
        if self.state == WorkerState.REDUNDANT:
            raise RuntimeError("cannot activate a worker whose install failed")

        logger.info("Offline worker %s: activating", self.cache_name)
        self.state = WorkerState.ACTIVATING
        removed: list[str] = []
        for name in self._storage.keys():
            if name != self.cache_name:
                logger.info("Offline worker %s: deleting old cache %s", self.cache_name, name)
                if self._storage.delete(name):
                    removed.append(name)

        self.state = WorkerState.ACTIVATED
        self.clients_claimed = True
        return removed

    # ---- fetch interception ----

    def fetch(self, request: Request | str) -> Response | None:
        """
        Serve a request the way a controlled page would see it.

        Until the worker is activated it does not control any client, so
        requests go straight to the network and nothing is cached.
        """
        if isinstance(request, str):
            request = Request(url=request)
        request = Request(
            url=resolve_url(self.origin, request.url),
            method=request.method.upper(),
            headers=request.headers,
        )

        try:
            if self.state != WorkerState.ACTIVATED or request.method != "GET":
                return self._fetcher.fetch(request)

            cached = self._storage.match(request.url)
            if cached is not None:
                logger.debug("cache hit %s", request.url)
                return cached

            response = self._fetcher.fetch(request)
            if response is None or response.status != 200 or response.type != BASIC:
                return response

            self._storage.open(self.cache_name).put(request.url, response.clone())
            logger.debug("cached %s", request.url)
            return response
        except Exception:
            logger.exception("Offline worker %s: failed to fetch %s", self.cache_name, request.url)
            return None

    # ---- notifications ----

    def handle_notification_click(self, notification: Notification, opener: WindowOpener) -> None:
        notification.close()
        opener.open_window(self.scope_url)
