# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/notifier/reminders/offline cache).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console_connector import BrowserWindowOpener, ConsoleNotifier
from ..core.state import AppState
from ..offline.cache_storage import CacheStorage
from ..offline.http import RequestsFetcher
from ..offline.worker import OfflineCacheWorker
from ..storage.local_storage import LocalStorage
from ..tasks.reminder_scheduler import ReminderScheduler

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.cache_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_cache_worker(settings) -> OfflineCacheWorker:
    return OfflineCacheWorker(
        cache_name=settings.cache_name,
        storage=CacheStorage(settings.cache_db_path),
        fetcher=RequestsFetcher(settings.site_origin, timeout=settings.fetch_timeout_seconds),
        origin=settings.site_origin,
        scope=settings.app_scope,
        precache_urls=settings.precache_urls,
    )


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    Tasks are not loaded here; see task_api.load_state().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    notifier = ConsoleNotifier(permitted=settings.notifications_enabled)

    state = AppState(
        settings=settings,
        storage=LocalStorage(settings.storage_db_path),
        notifier=notifier,
        reminders=ReminderScheduler(notifier),
        cache_worker=create_cache_worker(settings),
        window_opener=BrowserWindowOpener(),
    )
    return state
