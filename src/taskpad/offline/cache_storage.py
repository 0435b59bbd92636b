# src/taskpad/offline/cache_storage.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from collections.abc import Iterable
from pathlib import Path

from ..core.ports import Fetcher
from .http import Request, Response

logger = logging.getLogger(__name__)


class CacheAddError(RuntimeError):
    """add_all() could not fetch every URL; nothing was stored."""


class CacheStorage:
    """
    SQLite store of named response caches (the CacheStorage contract).

    One row per (cache name, url). Only GET responses are stored, keyed by URL.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "cache.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("CacheStorage ready db=%s caches=%s", self._db_path, self.keys())

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS caches (
                    name TEXT PRIMARY KEY,
                    created_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS entries (
                    cache_name TEXT NOT NULL REFERENCES caches(name) ON DELETE CASCADE,
                    url TEXT NOT NULL,
                    status INTEGER NOT NULL,
                    status_text TEXT NOT NULL DEFAULT '',
                    headers TEXT NOT NULL DEFAULT '{}',
                    body BLOB NOT NULL,
                    response_type TEXT NOT NULL DEFAULT 'default',
                    stored_at REAL NOT NULL,
                    PRIMARY KEY (cache_name, url)
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_response(row: sqlite3.Row) -> Response:
        try:
            headers = json.loads(row["headers"] or "{}")
        except json.JSONDecodeError:
            headers = {}
        return Response(
            url=str(row["url"]),
            status=int(row["status"]),
            body=bytes(row["body"] or b""),
            headers=headers if isinstance(headers, dict) else {},
            status_text=str(row["status_text"] or ""),
            type=str(row["response_type"] or "default"),
        )

    # ---- CacheStorage API ----

    def open(self, name: str) -> Cache:
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT OR IGNORE INTO caches(name, created_at) VALUES (?, ?)",
                (name, time.time()),
            )
            conn.commit()
        finally:
            conn.close()
        return Cache(self, name)

    def has(self, name: str) -> bool:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT 1 FROM caches WHERE name = ?", (name,)).fetchone()
            return row is not None
        finally:
            conn.close()

    def keys(self) -> list[str]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT name FROM caches ORDER BY created_at, name").fetchall()
            return [str(r["name"]) for r in rows]
        finally:
            conn.close()

    def delete(self, name: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM caches WHERE name = ?", (name,))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def match(self, url: str, *, cache_name: str | None = None) -> Response | None:
        """Look a URL up in one cache, or in every cache (oldest first)."""
        conn = self._get_conn()
        try:
            if cache_name is None:
                row = conn.execute(
                    """
                    SELECT e.*
                    FROM entries e JOIN caches c ON c.name = e.cache_name
                    WHERE e.url = ?
                    ORDER BY c.created_at ASC
                        LIMIT 1
                    """,
                    (url,),
                ).fetchone()
            else:
                row = conn.execute(
                    "SELECT * FROM entries WHERE cache_name = ? AND url = ?",
                    (cache_name, url),
                ).fetchone()
            return self._row_to_response(row) if row else None
        finally:
            conn.close()

    # ---- entry-level helpers used by Cache ----

    def _put(self, cache_name: str, url: str, response: Response) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO entries(
                    cache_name, url, status, status_text, headers, body, response_type, stored_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    cache_name,
                    url,
                    int(response.status),
                    response.status_text,
                    json.dumps(response.headers, ensure_ascii=False),
                    sqlite3.Binary(response.body),
                    response.type,
                    time.time(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def _delete_entry(self, cache_name: str, url: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "DELETE FROM entries WHERE cache_name = ? AND url = ?",
                (cache_name, url),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def _entry_urls(self, cache_name: str) -> list[str]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT url FROM entries WHERE cache_name = ? ORDER BY url",
                (cache_name,),
            ).fetchall()
            return [str(r["url"]) for r in rows]
        finally:
            conn.close()


class Cache:
    """Handle on one named cache inside a CacheStorage."""

    def __init__(self, storage: CacheStorage, name: str) -> None:
        self._storage = storage
        self.name = name

    def put(self, url: str, response: Response) -> None:
        self._storage._put(self.name, url, response)

    def match(self, url: str) -> Response | None:
        return self._storage.match(url, cache_name=self.name)

    def delete(self, url: str) -> bool:
        return self._storage._delete_entry(self.name, url)

    def keys(self) -> list[str]:
        return self._storage._entry_urls(self.name)

    def add_all(self, urls: Iterable[str], fetcher: Fetcher) -> int:
        """
        Fetch every URL and store the responses.

        All-or-nothing: if any fetch fails or is not ok, nothing is stored
        and CacheAddError is raised.
        """
        fetched: list[tuple[str, Response]] = []
        for url in urls:
            try:
                resp = fetcher.fetch(Request(url=url))
            except Exception as e:
                raise CacheAddError(f"failed to fetch {url}: {e}") from e
            if not resp.ok:
                raise CacheAddError(f"bad response for {url}: {resp.status}")
            fetched.append((url, resp))

        for url, resp in fetched:
            self.put(url, resp)
        logger.debug("Cache %s: stored %d entries", self.name, len(fetched))
        return len(fetched)
