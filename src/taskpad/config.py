# src/taskpad/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every value has a local default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

ENV_PREFIX = "TASKPAD"

DEFAULT_APP_SCOPE = "/taskpad/"
DEFAULT_STATIC_ASSETS = [
    "",
    "index.html",
    "styles.css",
    "app.js",
    "manifest.json",
    "icons/icon-192.png",
    "icons/icon-512.png",
]

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _normalize_scope(scope: str) -> str:
    scope = "/" + scope.strip().strip("/")
    return scope if scope == "/" else scope + "/"


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Switches ----
    console_enabled: bool
    notifications_enabled: bool
    offline_enabled: bool

    # ---- Offline cache ----
    cache_name: str
    site_origin: str
    app_scope: str
    precache_urls: List[str]
    fetch_timeout_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_db_path: Path
    cache_db_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpad").strip() or "taskpad"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        notifications_enabled = _env_bool(_k("NOTIFICATIONS_ENABLED"), True)
        offline_enabled = _env_bool(_k("OFFLINE_ENABLED"), False)

        cache_name = _env(_k("CACHE_NAME"), "taskpad-v2").strip() or "taskpad-v2"
        site_origin = _env(_k("SITE_ORIGIN"), "http://localhost:8000").strip().rstrip("/")
        app_scope = _normalize_scope(_env(_k("APP_SCOPE"), DEFAULT_APP_SCOPE))
        precache_urls = _env_list(
            _k("PRECACHE_URLS"),
            [app_scope + asset for asset in DEFAULT_STATIC_ASSETS],
        )
        fetch_timeout_seconds = max(0.5, _env_float(_k("FETCH_TIMEOUT_SECONDS"), 10.0))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpad"))
        storage_db_path = _env_path(_k("STORAGE_DB_PATH"), data_dir / "storage.sqlite3")
        cache_db_path = _env_path(_k("CACHE_DB_PATH"), data_dir / "cache.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            notifications_enabled=notifications_enabled,
            offline_enabled=offline_enabled,
            cache_name=cache_name,
            site_origin=site_origin,
            app_scope=app_scope,
            precache_urls=precache_urls,
            fetch_timeout_seconds=fetch_timeout_seconds,
            data_dir=data_dir,
            storage_db_path=storage_db_path,
            cache_db_path=cache_db_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
