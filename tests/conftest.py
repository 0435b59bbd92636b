# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.core.state import AppState
from taskpad.storage.local_storage import LocalStorage
from taskpad.tasks.reminder_scheduler import ReminderScheduler

from .fakes import FakeClock, FakeNotifier

ORIGIN = "http://localhost:8000"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        log_level="DEBUG",
        console_enabled=False,
        notifications_enabled=True,
        offline_enabled=False,
        cache_name="taskpad-v2",
        site_origin=ORIGIN,
        app_scope="/taskpad/",
        precache_urls=["/taskpad/", "/taskpad/index.html", "/taskpad/app.js"],
        fetch_timeout_seconds=1.0,
        data_dir=tmp_path,
        storage_db_path=tmp_path / "storage.sqlite3",
        cache_db_path=tmp_path / "cache.sqlite3",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def storage(settings: SimpleNamespace) -> LocalStorage:
    return LocalStorage(settings.storage_db_path)


@pytest.fixture()
def state(settings: SimpleNamespace, storage: LocalStorage, notifier: FakeNotifier, clock: FakeClock) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: We keep a real SQLite LocalStorage here because persistence is part
    of what we want to test.
    """
    return AppState(
        settings=settings,
        storage=storage,
        notifier=notifier,
        reminders=ReminderScheduler(notifier, clock=clock),
        clock=clock,
    )
